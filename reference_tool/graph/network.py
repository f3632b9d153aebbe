# reference_tool/graph/network.py

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import networkx as nx
from pydantic import BaseModel, Field

from reference_tool.graph.schema import EdgeType, NodeType
from reference_tool.models.paper import Paper


class NetworkStats(BaseModel):
    """
    Summary counts for a citation network.
    """
    total_papers: int = Field(..., description="Number of paper nodes.")
    total_citations: int = Field(
        ...,
        description="Sum of the lengths of all outgoing citation lists.",
    )
    papers_with_references: int = Field(
        ...,
        description="Papers with a non-empty outgoing citation list.",
    )
    papers_being_cited: int = Field(
        ...,
        description="Papers with a non-empty incoming citation list.",
    )


@dataclass
class CitationNetwork:
    """
    In-memory citation graph.

    papers:
        paper id -> Paper. The authoritative node set; re-adding an id
        replaces the stored record (last write wins).
    citations:
        citing paper id -> cited paper ids, in the order they were observed.
    reverse_citations:
        cited paper id -> citing paper ids. Written only by the same calls
        that write `citations`, so `u in reverse_citations[v]` holds exactly
        when `v in citations[u]`.

    Edge lists may mention ids that never made it into `papers` (for
    instance when only the citing side was resolved); query helpers skip
    those ids.
    """

    papers: Dict[str, Paper] = field(default_factory=dict)
    citations: Dict[str, List[str]] = field(default_factory=dict)
    reverse_citations: Dict[str, List[str]] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add_paper(self, paper: Paper) -> None:
        self.papers[paper.id] = paper

    def add_citation(self, citing_id: str, cited_id: str) -> None:
        """Append a single citing -> cited edge to both indexes."""
        self.citations.setdefault(citing_id, []).append(cited_id)
        self.reverse_citations.setdefault(cited_id, []).append(citing_id)

    def add_citations(self, citing_id: str, cited_ids: Iterable[str]) -> None:
        """
        Record the complete reference list of `citing_id`.

        The outgoing list is replaced, not extended. Reverse entries that
        belonged to a previous list are withdrawn before the new ones are
        appended, one occurrence per previous edge.
        """
        cited_ids = list(cited_ids)

        for old_target in self.citations.get(citing_id, []):
            citing = self.reverse_citations.get(old_target)
            if not citing:
                continue
            try:
                citing.remove(citing_id)
            except ValueError:
                continue
            if not citing:
                del self.reverse_citations[old_target]

        self.citations[citing_id] = cited_ids
        for cited_id in cited_ids:
            self.reverse_citations.setdefault(cited_id, []).append(citing_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def paper_count(self) -> int:
        return len(self.papers)

    def get_all_papers(self) -> List[Paper]:
        return list(self.papers.values())

    def get_paper(self, paper_id: str) -> Optional[Paper]:
        return self.papers.get(paper_id)

    def _resolve(self, paper_ids: Iterable[str]) -> List[Paper]:
        return [self.papers[pid] for pid in paper_ids if pid in self.papers]

    def get_citing_papers(self, paper_id: str) -> List[Paper]:
        """Papers that cite `paper_id`."""
        return self._resolve(self.reverse_citations.get(paper_id, []))

    def get_cited_papers(self, paper_id: str) -> List[Paper]:
        """Papers that `paper_id` cites."""
        return self._resolve(self.citations.get(paper_id, []))

    def get_stats(self) -> NetworkStats:
        return NetworkStats(
            total_papers=len(self.papers),
            total_citations=sum(len(v) for v in self.citations.values()),
            papers_with_references=sum(1 for v in self.citations.values() if v),
            papers_being_cited=sum(1 for v in self.reverse_citations.values() if v),
        )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def to_serializable_form(self) -> Dict[str, Any]:
        return {
            "papers": {pid: asdict(p) for pid, p in self.papers.items()},
            "citations": {k: list(v) for k, v in self.citations.items()},
            "reverse_citations": {k: list(v) for k, v in self.reverse_citations.items()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_serializable_form(), indent=2, ensure_ascii=False)

    @classmethod
    def from_serializable_form(cls, data: Dict[str, Any]) -> "CitationNetwork":
        """
        Rebuild a network from `to_serializable_form()` output.

        Both edge maps are taken verbatim, so whatever consistency the
        exported network had is preserved.
        """
        return cls(
            papers={
                str(pid): Paper.from_dict(p)
                for pid, p in (data.get("papers") or {}).items()
            },
            citations={
                str(k): [str(x) for x in v]
                for k, v in (data.get("citations") or {}).items()
            },
            reverse_citations={
                str(k): [str(x) for x in v]
                for k, v in (data.get("reverse_citations") or {}).items()
            },
        )

    @classmethod
    def from_json(cls, text: str) -> "CitationNetwork":
        return cls.from_serializable_form(json.loads(text))

    def to_networkx(self) -> nx.MultiDiGraph:
        """
        Project the network onto a NetworkX MultiDiGraph.

        Node ids are paper ids. Repeated edges stay parallel edges, and
        cited ids without a Paper record become bare paper nodes.
        """
        G = nx.MultiDiGraph()

        for paper in self.papers.values():
            G.add_node(
                paper.id,
                type=NodeType.PAPER.value,
                title=paper.title,
                authors=list(paper.authors),
                arxiv_id=paper.arxiv_id,
                categories=list(paper.categories),
                year=paper.year,
            )

        for citing_id, cited_ids in self.citations.items():
            for node_id in [citing_id, *cited_ids]:
                if node_id not in G:
                    G.add_node(node_id, type=NodeType.PAPER.value)
            for cited_id in cited_ids:
                G.add_edge(citing_id, cited_id, type=EdgeType.CITES.value)

        return G
