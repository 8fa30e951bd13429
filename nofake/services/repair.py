import datetime as dt
import random
from typing import Any

from nofake.models import Citation
from nofake.services.formatting import format_citation
from nofake.services.parsing import as_int, as_text, as_text_list
from nofake.services.urls import normalize_url, scholar_search_url

NOT_AVAILABLE = "No disponible"

DEFAULT_AUTHORS = ["Autor desconocido"]
DEFAULT_TITLE = "Título no disponible"
DEFAULT_JOURNAL = "Revista no disponible"
DEFAULT_ABSTRACT = "Resumen no disponible"
DEFAULT_TYPE = "journal_article"
DEFAULT_RELEVANCE = "Relevancia no especificada"
DEFAULT_KEY_FINDINGS = ["Hallazgos no especificados"]

MIN_YEAR = 1800


def _current_year() -> int:
    return dt.datetime.now(dt.timezone.utc).year


def _repair_year(value: Any, current_year: int) -> int:
    year = as_int(value)
    if year is None or year < MIN_YEAR or year > current_year + 1:
        return current_year
    return year


def repair_citation(
    candidate: Any,
    style: str,
    index: int = 0,
    rng: random.Random | None = None,
    current_year: int | None = None,
) -> Citation:
    raw = candidate if isinstance(candidate, dict) else {}
    year_now = current_year if current_year is not None else _current_year()

    title = as_text(raw.get("title")) or DEFAULT_TITLE
    raw_url = as_text(raw.get("url"))
    url = normalize_url(raw_url, rng) if raw_url else scholar_search_url(title)

    citation = Citation(
        authors=as_text_list(raw.get("authors")) or list(DEFAULT_AUTHORS),
        title=title,
        journal=as_text(raw.get("journal")) or DEFAULT_JOURNAL,
        year=_repair_year(raw.get("year"), year_now),
        doi=as_text(raw.get("doi")) or NOT_AVAILABLE,
        url=url,
        abstract=as_text(raw.get("abstract")) or DEFAULT_ABSTRACT,
        type=as_text(raw.get("type")) or DEFAULT_TYPE,
        formatted=NOT_AVAILABLE,
        relevance=as_text(raw.get("relevance")) or DEFAULT_RELEVANCE,
        key_findings=as_text_list(raw.get("keyFindings")) or list(DEFAULT_KEY_FINDINGS),
    )
    citation.formatted = as_text(raw.get("formatted")) or format_citation(citation, style, index)
    return citation
