# reference_tool/models/reference.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from reference_tool.models.paper import Paper
from reference_tool.output.bibtex import render_bibtex_entry


@dataclass
class Reference:
    """
    One bibliography entry (a cited work) as parsed from a reference list.

    This is a transient parse result rather than a graph node:
    - `inspire_id` is the source identifier of the cited record, when the
      API managed to resolve the citation to a catalogued paper.
    - Only references with an `inspire_id` can become nodes (see `to_paper`).
    """

    title: str
    authors: List[str] = field(default_factory=list)
    arxiv_id: Optional[str] = None
    inspire_id: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    year: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return bool(self.inspire_id)

    def to_paper(self) -> Optional[Paper]:
        """
        Promote this reference to a Paper keyed by its `inspire_id`.

        Returns None for references the source could not resolve.
        """
        if not self.is_resolved:
            return None

        return Paper(
            id=self.inspire_id,
            title=self.title,
            authors=list(self.authors),
            arxiv_id=self.arxiv_id,
            categories=list(self.categories),
            year=self.year,
        )

    def to_bibtex(self) -> str:
        return render_bibtex_entry(self)
