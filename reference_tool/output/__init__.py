# reference_tool/output/__init__.py

"""
Rendering of references and citation networks to JSON / BibTeX text,
and writing the result to a file or stdout.
"""
