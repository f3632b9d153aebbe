# reference_tool/models/paper.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from reference_tool.output.bibtex import render_bibtex_entry


@dataclass
class Paper:
    """
    A catalogued publication, i.e. a node of the citation network.

    `id` is the identifier assigned by the bibliographic source (the INSPIRE
    control number) and is unique within a network. `arxiv_id` is the
    external cross-reference used to look the paper up in the first place.
    """

    id: str
    title: str
    authors: List[str] = field(default_factory=list)
    arxiv_id: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    year: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paper":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            authors=list(data.get("authors") or []),
            arxiv_id=data.get("arxiv_id"),
            categories=list(data.get("categories") or []),
            year=data.get("year"),
        )

    def to_bibtex(self) -> str:
        return render_bibtex_entry(self)
