# tests/test_output.py

import io
import json

from reference_tool.graph.network import CitationNetwork
from reference_tool.models.paper import Paper
from reference_tool.models.reference import Reference
from reference_tool.output.bibtex import render_bibliography
from reference_tool.output.writer import (
    OutputFormat,
    OutputWriter,
    format_network_bibtex,
    format_references_json,
)


REFS = [
    Reference(
        title="First Reference",
        authors=["Ann Lee"],
        arxiv_id="2101.00001",
        inspire_id="11",
        categories=["hep-th"],
        year=2021,
    ),
    Reference(title="Second Reference"),
]


def test_output_format_extensions():
    assert OutputFormat.JSON.extension == "json"
    assert OutputFormat.BIBTEX.extension == "bib"
    assert OutputFormat("bibtex") is OutputFormat.BIBTEX


def test_references_json_is_array_of_records():
    data = json.loads(format_references_json(REFS))

    assert data[0] == {
        "title": "First Reference",
        "authors": ["Ann Lee"],
        "arxiv_id": "2101.00001",
        "inspire_id": "11",
        "categories": ["hep-th"],
        "year": 2021,
    }
    assert data[1]["inspire_id"] is None
    assert data[1]["authors"] == []


def test_empty_reference_list():
    assert json.loads(format_references_json([])) == []
    assert render_bibliography([]) == ""


def test_bibliography_entries_separated_by_blank_line():
    text = render_bibliography(REFS)

    assert text == REFS[0].to_bibtex() + "\n" + REFS[1].to_bibtex()
    assert text.count("@article{") == 2
    assert "}\n\n@article{" in text


def test_network_bibtex_has_one_entry_per_paper():
    network = CitationNetwork()
    network.add_paper(Paper(id="1", title="Root Paper", year=2020))
    network.add_paper(Paper(id="2", title="Other Paper"))
    network.add_citations("1", ["2"])

    text = format_network_bibtex(network)

    assert text.count("@article{") == 2
    assert "title = {Root Paper}" in text
    assert "title = {Other Paper}" in text


def test_writer_to_stream_adds_trailing_newline():
    stream = io.StringIO()
    writer = OutputWriter(OutputFormat.JSON, stream=stream)

    result = writer.write_references(REFS[:1])

    assert result is None
    text = stream.getvalue()
    assert text.endswith("]\n")
    assert json.loads(text)[0]["title"] == "First Reference"


def test_writer_to_file_creates_parents(tmp_path):
    target = tmp_path / "out" / "refs.bib"
    writer = OutputWriter(OutputFormat.BIBTEX, target)

    written = writer.write_references(REFS)

    assert written == target
    content = target.read_text(encoding="utf-8")
    assert content.startswith("@article{Lee2021FirstReference,")
    assert "title = {Second Reference}" in content


def test_writer_network_json_file(tmp_path):
    network = CitationNetwork()
    network.add_paper(Paper(id="1", title="Root Paper"))
    network.add_citations("1", ["2"])
    target = tmp_path / "network.json"

    OutputWriter(OutputFormat.JSON, target).write_network(network)

    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["papers"]["1"]["title"] == "Root Paper"
    assert data["citations"] == {"1": ["2"]}
    assert data["reverse_citations"] == {"2": ["1"]}
