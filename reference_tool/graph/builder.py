# reference_tool/graph/builder.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Tuple

from reference_tool.errors import FetchError, ReferenceFetchFailed, RootResolutionFailed
from reference_tool.graph.network import CitationNetwork
from reference_tool.sources.base import PaperSource


logger = logging.getLogger(__name__)

# progress(paper_id, depth, expanded_so_far)
ProgressCallback = Callable[[str, int, int], None]


@dataclass
class BuildReport:
    """
    Outcome of a network build.

    root_id    : source id of the resolved root paper
    paper_count: number of papers in the network when the build finished
    expanded   : ids whose reference lists were requested, in request order
    failures   : non-fatal per-paper errors (reference fetch failures)
    """
    root_id: str
    paper_count: int = 0
    expanded: List[str] = field(default_factory=list)
    failures: List[ReferenceFetchFailed] = field(default_factory=list)


def build_network(
    network: CitationNetwork,
    source: PaperSource,
    root_external_id: str,
    max_depth: int,
    progress: Optional[ProgressCallback] = None,
) -> BuildReport:
    """
    Populate `network` by following references outwards from one root paper.

    The root is resolved through `source.get_paper_by_external_id`; if that
    fails, RootResolutionFailed is raised and `network` is left untouched.

    Exploration runs off an explicit LIFO stack of (paper_id, depth) pairs,
    so the most recently discovered paper is expanded next. A paper at depth
    `d` is expanded only when `d < max_depth`: its references become paper
    nodes at depth `d + 1` and its complete reference list is stored with
    `add_citations`, even when empty. Each paper is expanded at most once.

    A failure to fetch one paper's references is logged and recorded in the
    report; the build carries on with the rest of the stack.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    try:
        root = source.get_paper_by_external_id(root_external_id)
    except FetchError as exc:
        raise RootResolutionFailed(
            f"Could not resolve root paper {root_external_id!r}: {exc}",
            external_id=root_external_id,
        ) from exc

    logger.info("Starting network build from paper: %s", root.title)
    network.add_paper(root)

    report = BuildReport(root_id=root.id)
    stack: List[Tuple[str, int]] = [(root.id, 0)]
    visited: Set[str] = set()

    while stack:
        paper_id, depth = stack.pop()
        if paper_id in visited or depth >= max_depth:
            continue

        visited.add(paper_id)
        report.expanded.append(paper_id)
        logger.debug("Processing paper at depth %d: %s", depth, paper_id)
        if progress is not None:
            progress(paper_id, depth, len(report.expanded))

        try:
            references = source.get_paper_references(paper_id)
        except FetchError as exc:
            logger.warning("Failed to get references for %s: %s", paper_id, exc)
            failure = ReferenceFetchFailed(
                f"Failed to get references for {paper_id}: {exc}",
                paper_id=paper_id,
            )
            failure.__cause__ = exc
            report.failures.append(failure)
            continue

        next_depth = depth + 1
        targets: List[str] = []
        for reference in references:
            ref_paper = reference.to_paper()
            if ref_paper is None:
                continue

            network.add_paper(ref_paper)
            targets.append(ref_paper.id)

            if next_depth < max_depth:
                stack.append((ref_paper.id, next_depth))

        network.add_citations(paper_id, targets)

    report.paper_count = network.paper_count()
    logger.info("Network build complete. %d papers in network.", report.paper_count)
    return report
