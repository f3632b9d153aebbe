# reference_tool/models/__init__.py

from .paper import Paper
from .reference import Reference

__all__ = ["Paper", "Reference"]
