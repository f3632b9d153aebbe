import pickle

import networkx as nx
import pytest

from reference_tool.graph.io import load_network_graph, save_network_graph
from reference_tool.graph.network import CitationNetwork
from reference_tool.models.paper import Paper


def small_network() -> CitationNetwork:
    network = CitationNetwork()
    network.add_paper(Paper(id="1", title="Root", authors=["A. Author"], arxiv_id="2301.00001"))
    network.add_paper(Paper(id="2", title="Cited", year=2001))
    network.add_citations("1", ["2"])
    return network


def test_save_and_load_roundtrip(tmp_path):
    # no suffix: .gpickle is appended
    saved_path = save_network_graph(small_network(), tmp_path / "citations")

    assert saved_path.exists()
    assert saved_path.suffix == ".gpickle"

    G = load_network_graph(saved_path)

    assert isinstance(G, nx.MultiDiGraph)
    assert set(G.nodes) == {"1", "2"}
    assert G.nodes["1"]["title"] == "Root"
    assert G.nodes["1"]["arxiv_id"] == "2301.00001"
    assert G.nodes["2"]["year"] == 2001
    assert G.has_edge("1", "2")
    assert not G.has_edge("2", "1")


def test_save_creates_parent_directories(tmp_path):
    saved_path = save_network_graph(small_network(), tmp_path / "nested" / "dir" / "graph.pkl")

    assert saved_path == tmp_path / "nested" / "dir" / "graph.pkl"
    assert saved_path.exists()


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_network_graph(tmp_path / "does_not_exist.gpickle")


def test_save_no_overwrite(tmp_path):
    path = tmp_path / "graph.gpickle"
    save_network_graph(small_network(), path)

    with pytest.raises(FileExistsError):
        save_network_graph(CitationNetwork(), path, overwrite=False)

    # overwrite=True (default) replaces the file
    save_network_graph(CitationNetwork(), path)
    assert load_network_graph(path).number_of_nodes() == 0


def test_save_accepts_projected_graph(tmp_path):
    G = small_network().to_networkx()

    saved_path = save_network_graph(G, tmp_path / "projected")

    loaded = load_network_graph(saved_path)
    assert set(loaded.nodes) == {"1", "2"}
    assert loaded.number_of_edges() == 1


def test_save_rejects_other_objects(tmp_path):
    with pytest.raises(TypeError):
        save_network_graph({"1": ["2"]}, tmp_path / "graph.gpickle")

    assert not (tmp_path / "graph.gpickle").exists()


def test_load_rejects_non_graph_pickle(tmp_path):
    path = tmp_path / "other.gpickle"
    with path.open("wb") as fh:
        pickle.dump({"not": "a graph"}, fh)

    with pytest.raises(TypeError):
        load_network_graph(path)
