# reference_tool/sources/__init__.py

"""
Paper sources: the PaperSource protocol the network builder consumes and
the INSPIRE-HEP client implementing it.
"""

from .base import PaperSource
from .inspire import InspireClient, InspireClientConfig

__all__ = ["PaperSource", "InspireClient", "InspireClientConfig"]
