# reference_tool/output/writer.py

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence, TextIO

from reference_tool.output.bibtex import render_bibliography

if TYPE_CHECKING:
    from reference_tool.graph.network import CitationNetwork
    from reference_tool.models.reference import Reference


logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    JSON = "json"
    BIBTEX = "bibtex"

    @property
    def extension(self) -> str:
        return "bib" if self is OutputFormat.BIBTEX else "json"


def format_references_json(references: Sequence["Reference"]) -> str:
    return json.dumps([asdict(r) for r in references], indent=2, ensure_ascii=False)


def format_references_bibtex(references: Sequence["Reference"]) -> str:
    return render_bibliography(references)


def format_network_json(network: "CitationNetwork") -> str:
    return network.to_json()


def format_network_bibtex(network: "CitationNetwork") -> str:
    """Every paper of the network as an @article entry."""
    return render_bibliography(network.get_all_papers())


class OutputWriter:
    """
    Render references or a citation network and write the text out.

    With `output_path=None` the content goes to `stream` (stdout by default).
    """

    def __init__(
        self,
        format: OutputFormat,
        output_path: Optional[Path] = None,
        *,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.format = format
        self.output_path = Path(output_path) if output_path is not None else None
        self.stream = stream

    def write_references(self, references: Sequence["Reference"]) -> Optional[Path]:
        if self.format is OutputFormat.BIBTEX:
            content = format_references_bibtex(references)
        else:
            content = format_references_json(references)
        return self.write_content(content)

    def write_network(self, network: "CitationNetwork") -> Optional[Path]:
        if self.format is OutputFormat.BIBTEX:
            content = format_network_bibtex(network)
        else:
            content = format_network_json(network)
        return self.write_content(content)

    def write_content(self, content: str) -> Optional[Path]:
        """
        Write to the output file (parents are created) and return its path,
        or write to the stream and return None.
        """
        if self.output_path is None:
            stream = self.stream if self.stream is not None else sys.stdout
            stream.write(content)
            if content and not content.endswith("\n"):
                stream.write("\n")
            return None

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(content, encoding="utf-8")
        logger.info("Output written to %s", self.output_path)
        return self.output_path
