# reference_tool/output/bibtex.py

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol


class BibliographicRecord(Protocol):
    """Anything with the fields a BibTeX entry needs (Paper or Reference)."""

    title: str
    authors: List[str]
    arxiv_id: Optional[str]
    categories: List[str]
    year: Optional[int]


def bibtex_key(record: BibliographicRecord) -> str:
    """
    Citation key: first author's last name + year + first two title words.

    Falls back to "Unknown" / "YYYY" when author or year is missing, and
    keeps only alphanumeric characters.
    """
    first_author = "Unknown"
    if record.authors:
        tokens = record.authors[0].split()
        if tokens:
            first_author = tokens[-1]

    year = str(record.year) if record.year is not None else "YYYY"
    title_part = "".join(record.title.split()[:2])

    raw = f"{first_author}{year}{title_part}"
    return "".join(ch for ch in raw if ch.isalnum())


def render_bibtex_entry(record: BibliographicRecord) -> str:
    lines = [
        f"@article{{{bibtex_key(record)},",
        f"  title = {{{record.title}}},",
    ]

    authors = " and ".join(record.authors)
    if authors:
        lines.append(f"  author = {{{authors}}},")

    if record.year is not None:
        lines.append(f"  year = {{{record.year}}},")

    if record.arxiv_id:
        lines.append(f"  eprint = {{{record.arxiv_id}}},")
        lines.append("  archivePrefix = {arXiv},")

    if record.categories:
        lines.append(f"  primaryClass = {{{record.categories[0]}}},")

    lines.append("}")
    return "\n".join(lines) + "\n"


def render_bibliography(records: Iterable[BibliographicRecord]) -> str:
    # Each entry ends with a newline, so joining on "\n" leaves a blank line.
    return "\n".join(render_bibtex_entry(r) for r in records)
