# reference_tool/__init__.py

"""
Fetch paper references from the INSPIRE-HEP API, build bounded-depth
citation networks and export them as JSON or BibTeX.
"""

__version__ = "0.1.0"
