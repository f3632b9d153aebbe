# reference_tool/graph/io.py

from __future__ import annotations

import pickle
from pathlib import Path
from typing import Union

import networkx as nx

from reference_tool.graph.network import CitationNetwork

PathLike = Union[str, Path]
GraphLike = Union[CitationNetwork, nx.MultiDiGraph]

GRAPH_SUFFIX = ".gpickle"


def _as_graph(graph: GraphLike) -> nx.MultiDiGraph:
    if isinstance(graph, CitationNetwork):
        return graph.to_networkx()
    if isinstance(graph, nx.MultiDiGraph):
        return graph
    raise TypeError(f"Expected CitationNetwork or MultiDiGraph, got {type(graph).__name__}")


def save_network_graph(
    graph: GraphLike,
    path: PathLike,
    overwrite: bool = True,
) -> Path:
    """
    Pickle a citation graph for use with NetworkX tooling.

    A CitationNetwork is projected with `to_networkx()` first. A bare
    filename gets the `.gpickle` suffix. Returns the path written.
    """
    target = Path(path)
    if not target.suffix:
        target = target.with_suffix(GRAPH_SUFFIX)

    if target.exists() and not overwrite:
        raise FileExistsError(f"Refusing to replace existing graph file: {target}")

    G = _as_graph(graph)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("wb") as fh:
        pickle.dump(G, fh, protocol=pickle.HIGHEST_PROTOCOL)
    return target


def load_network_graph(path: PathLike) -> nx.MultiDiGraph:
    with Path(path).open("rb") as fh:
        G = pickle.load(fh)
    if not isinstance(G, nx.MultiDiGraph):
        raise TypeError(f"{path} does not contain a citation graph ({type(G).__name__})")
    return G
