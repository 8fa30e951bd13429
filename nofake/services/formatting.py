from typing import Protocol


class CitationLike(Protocol):
    authors: list[str]
    title: str
    journal: str
    year: int
    doi: str


def format_apa7(citation: CitationLike) -> str:
    authors = ", ".join(citation.authors)
    return (
        f"{authors} ({citation.year}). {citation.title}. "
        f"*{citation.journal}*. https://doi.org/{citation.doi}"
    )


def _ieee_author(author: str) -> str:
    parts = author.split(", ")
    if len(parts) >= 2 and parts[1]:
        return f"{parts[1][0]}. {parts[0]}"
    return author


def format_ieee(citation: CitationLike, index: int) -> str:
    authors = ", ".join(_ieee_author(author) for author in citation.authors)
    return (
        f'[{index + 1}] {authors}, "{citation.title}", '
        f"*{citation.journal}*, {citation.year}. doi: {citation.doi}"
    )


def format_citation(citation: CitationLike, style: str, index: int = 0) -> str:
    if style == "ieee":
        return format_ieee(citation, index)
    return format_apa7(citation)
