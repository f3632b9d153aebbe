# reference_tool/graph/__init__.py

"""
Citation network container, the reference-following builder, and
NetworkX export helpers.
"""

from .builder import BuildReport, build_network
from .network import CitationNetwork, NetworkStats

__all__ = ["BuildReport", "CitationNetwork", "NetworkStats", "build_network"]
