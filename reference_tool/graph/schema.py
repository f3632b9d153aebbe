# reference_tool/graph/schema.py

from enum import Enum


class NodeType(str, Enum):
    PAPER = "paper"


class EdgeType(str, Enum):
    # Citing paper -> cited paper
    CITES = "CITES"
