# tests/test_network.py

import json

import networkx as nx

from reference_tool.graph.network import CitationNetwork
from reference_tool.graph.schema import EdgeType, NodeType
from reference_tool.models.paper import Paper


def make_paper(paper_id: str, title: str = "", arxiv_id=None) -> Paper:
    return Paper(
        id=paper_id,
        title=title or f"Paper {paper_id}",
        authors=["Test Author"],
        arxiv_id=arxiv_id,
        categories=["hep-th"],
        year=2023,
    )


def assert_bidirectional(network: CitationNetwork) -> None:
    for u, targets in network.citations.items():
        for v in targets:
            assert u in network.reverse_citations.get(v, [])
    for v, sources in network.reverse_citations.items():
        for u in sources:
            assert v in network.citations.get(u, [])


def test_new_network_is_empty():
    network = CitationNetwork()

    assert network.papers == {}
    assert network.citations == {}
    assert network.reverse_citations == {}
    assert network.paper_count() == 0


def test_add_paper_twice_keeps_count_and_last_write_wins():
    network = CitationNetwork()
    network.add_paper(make_paper("123", "Stub title"))
    network.add_paper(make_paper("123", "Full title", arxiv_id="2301.12345"))

    assert network.paper_count() == 1
    assert network.papers["123"].title == "Full title"
    assert network.papers["123"].arxiv_id == "2301.12345"


def test_get_all_papers():
    network = CitationNetwork()
    network.add_paper(make_paper("123", "Paper 1"))
    network.add_paper(make_paper("456", "Paper 2"))

    titles = {p.title for p in network.get_all_papers()}

    assert titles == {"Paper 1", "Paper 2"}


def test_add_citation_updates_both_directions():
    network = CitationNetwork()
    network.add_citation("1", "2")
    network.add_citation("1", "3")
    network.add_citation("4", "2")

    assert network.citations == {"1": ["2", "3"], "4": ["2"]}
    assert network.reverse_citations == {"2": ["1", "4"], "3": ["1"]}
    assert_bidirectional(network)


def test_add_citations_replaces_outgoing_list():
    network = CitationNetwork()
    network.add_citations("1", ["2", "3"])
    network.add_citations("1", ["3", "4"])

    assert network.citations["1"] == ["3", "4"]
    assert "2" not in network.reverse_citations
    assert network.reverse_citations["3"] == ["1"]
    assert network.reverse_citations["4"] == ["1"]
    assert_bidirectional(network)


def test_add_citations_records_empty_list():
    network = CitationNetwork()
    network.add_citations("1", [])

    assert network.citations == {"1": []}
    assert network.reverse_citations == {}


def test_duplicate_edges_are_kept():
    network = CitationNetwork()
    network.add_citations("1", ["2", "2"])

    assert network.citations["1"] == ["2", "2"]
    assert network.reverse_citations["2"] == ["1", "1"]
    assert network.get_stats().total_citations == 2


def test_stats_and_neighbour_queries():
    network = CitationNetwork()
    network.add_paper(make_paper("1", "Root Paper"))
    network.add_paper(make_paper("2", "Referenced Paper"))
    network.add_citation("1", "2")

    stats = network.get_stats()
    assert stats.total_papers == 2
    assert stats.total_citations == 1
    assert stats.papers_with_references == 1
    assert stats.papers_being_cited == 1

    citing = network.get_citing_papers("2")
    assert [p.title for p in citing] == ["Root Paper"]

    cited = network.get_cited_papers("1")
    assert [p.title for p in cited] == ["Referenced Paper"]


def test_queries_skip_ids_without_paper_record():
    network = CitationNetwork()
    network.add_paper(make_paper("1"))
    network.add_citations("1", ["ghost", "1"])
    network.add_citation("ghost", "1")

    assert [p.id for p in network.get_cited_papers("1")] == ["1"]
    assert [p.id for p in network.get_citing_papers("1")] == ["1"]
    assert network.get_cited_papers("unknown") == []
    assert network.get_citing_papers("unknown") == []


def test_stats_ignore_empty_lists():
    network = CitationNetwork()
    network.add_paper(make_paper("1"))
    network.add_citations("1", [])

    stats = network.get_stats()

    assert stats.total_citations == 0
    assert stats.papers_with_references == 0
    assert stats.papers_being_cited == 0


def test_to_json_and_back():
    network = CitationNetwork()
    network.add_paper(make_paper("123", "Test Paper", arxiv_id="2301.12345"))
    network.add_paper(make_paper("456"))
    network.add_citations("123", ["456"])

    text = network.to_json()
    data = json.loads(text)

    assert set(data) == {"papers", "citations", "reverse_citations"}
    assert data["papers"]["123"]["title"] == "Test Paper"
    assert data["papers"]["123"]["arxiv_id"] == "2301.12345"
    assert data["citations"] == {"123": ["456"]}
    assert data["reverse_citations"] == {"456": ["123"]}

    restored = CitationNetwork.from_json(text)
    assert restored.papers == network.papers
    assert restored.citations == network.citations
    assert restored.reverse_citations == network.reverse_citations


def test_serializable_form_is_a_copy():
    network = CitationNetwork()
    network.add_citations("1", ["2"])

    form = network.to_serializable_form()
    form["citations"]["1"].append("3")

    assert network.citations["1"] == ["2"]


def test_to_networkx_projection():
    network = CitationNetwork()
    network.add_paper(make_paper("1", "Root"))
    network.add_paper(make_paper("2", "Ref"))
    network.add_citations("1", ["2", "2", "missing"])

    G = network.to_networkx()

    assert isinstance(G, nx.MultiDiGraph)
    assert set(G.nodes) == {"1", "2", "missing"}
    assert G.nodes["1"]["title"] == "Root"
    assert G.nodes["missing"]["type"] == NodeType.PAPER.value
    assert G.number_of_edges("1", "2") == 2
    for _, _, data in G.edges(data=True):
        assert data["type"] == EdgeType.CITES.value
