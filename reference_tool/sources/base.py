# reference_tool/sources/base.py

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from reference_tool.models.paper import Paper
from reference_tool.models.reference import Reference


@runtime_checkable
class PaperSource(Protocol):
    """
    Where the network builder gets its data from.

    Both methods raise `reference_tool.errors.FetchError` (or a subclass)
    when the lookup fails; any retry policy lives inside the implementation.
    """

    def get_paper_by_external_id(self, external_id: str) -> Paper:
        """Resolve a paper from an external identifier such as an arXiv id."""
        ...

    def get_paper_references(self, paper_id: str) -> List[Reference]:
        """Return the outgoing references of the paper with this source id."""
        ...
