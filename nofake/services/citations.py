import datetime as dt
import logging
import random
from typing import Any

from nofake.config import Settings
from nofake.models import Citation, CitationsResult
from nofake.services.oracle import TextOracle
from nofake.services.parsing import ParseResult, as_text, parse_json_object
from nofake.services.repair import repair_citation
from nofake.services.urls import scholar_search_url, url_is_reachable

logger = logging.getLogger(__name__)

ANALYZED_TEXT_LIMIT = 200
PROMPT_TEXT_LIMIT = 2000
DEFAULT_PREFIX_LIMIT = 50
SEARCH_QUERY_WORDS = 10
MAX_CITATIONS = 6

STYLE_NAMES = {"apa7": "APA 7ª edición", "ieee": "IEEE"}

SYSTEM_PROMPT = (
    "Eres un asistente de investigación académica. Respondes únicamente con un objeto "
    "JSON válido, sin texto adicional ni bloques de código."
)


def build_prompt(topic: str, analyzed_text: str, style: str) -> str:
    return f"""
Genera entre 4 y 6 citas académicas específicamente relevantes para el siguiente texto.

Tema: "{topic}"
Texto analizado: "{analyzed_text[:PROMPT_TEXT_LIMIT]}"

Para cada cita, proporciona:
1. Autores (formato "Apellido, N.")
2. Título del artículo o estudio
3. Revista o fuente académica
4. Año de publicación
5. DOI y URL académica (doi.org, pubmed, nature.com, sciencedirect.com, ieee.org...)
6. Resumen breve (2-3 líneas)
7. Relevancia respecto al texto analizado
8. Hallazgos clave
9. La cita completa formateada en estilo {STYLE_NAMES.get(style, style)}

Responde SOLO en formato JSON:
{{
  "searchQuery": "consulta usada para buscar las fuentes",
  "citations": [
    {{
      "authors": ["Apellido, N.", "Apellido2, M."],
      "title": "Título del artículo",
      "journal": "Nombre de la revista",
      "year": 2023,
      "doi": "10.1000/ejemplo",
      "url": "https://doi.org/10.1000/ejemplo",
      "abstract": "Resumen breve del estudio...",
      "type": "journal_article",
      "relevance": "Por qué esta fuente es relevante",
      "keyFindings": ["Hallazgo 1", "Hallazgo 2"],
      "formatted": "Cita formateada"
    }}
  ]
}}
"""


def truncate_analyzed_text(text: str) -> str:
    if len(text) <= ANALYZED_TEXT_LIMIT:
        return text
    return text[:ANALYZED_TEXT_LIMIT] + "..."


def synthesize_search_query(topic: str, analyzed_text: str) -> str:
    words = analyzed_text.split()[:SEARCH_QUERY_WORDS]
    return " ".join(words) or topic


def default_citations(analyzed_text: str, current_year: int) -> list[dict[str, Any]]:
    prefix = analyzed_text[:DEFAULT_PREFIX_LIMIT].strip()
    return [
        {
            "authors": ["Investigador, A."],
            "title": f"Análisis académico sobre: {prefix}...",
            "journal": "Revista de Investigación Académica",
            "year": current_year,
            "doi": "10.1000/analisis-academico",
            "url": scholar_search_url(prefix),
            "abstract": f"Revisión de la literatura académica relacionada con: {prefix}...",
            "type": "journal_article",
            "relevance": "Referencia genérica generada localmente; verifique las fuentes manualmente.",
            "keyFindings": ["No fue posible obtener citas específicas para este texto."],
        }
    ]


def mock_citations(topic: str, current_year: int) -> list[dict[str, Any]]:
    return [
        {
            "authors": ["Smith, J. A.", "Johnson, M. B."],
            "title": f"Recent Advances in {topic} Research: A Comprehensive Review",
            "journal": "Journal of Applied Sciences",
            "year": current_year - 1,
            "doi": "10.1016/j.jas.2023.001",
            "url": scholar_search_url(f"{topic} research"),
            "abstract": (
                f"This comprehensive review examines recent developments in {topic} "
                "research, highlighting key findings and methodological approaches."
            ),
            "type": "journal_article",
            "relevance": f"Revisión general del estado del arte sobre {topic}.",
            "keyFindings": ["Síntesis de desarrollos recientes", "Comparación de metodologías"],
        },
        {
            "authors": ["García, L. M.", "Rodriguez, C. P.", "Martinez, A. R."],
            "title": f"Empirical Analysis of {topic}: Evidence from Multiple Studies",
            "journal": "International Review of Scientific Research",
            "year": current_year - 2,
            "doi": "10.1007/s12345-022-0123",
            "url": scholar_search_url(f"{topic} empirical analysis"),
            "abstract": (
                f"An empirical investigation into {topic} using data from multiple "
                "longitudinal studies across different populations."
            ),
            "type": "journal_article",
            "relevance": f"Evidencia empírica sobre {topic}.",
            "keyFindings": ["Datos longitudinales de varias poblaciones"],
        },
        {
            "authors": ["Chen, W.", "Liu, X. Y."],
            "title": f"Meta-Analysis of {topic}: Systematic Review and Future Directions",
            "journal": "Nature Scientific Reports",
            "year": current_year,
            "doi": "10.1038/s41598-024-12345",
            "url": scholar_search_url(f"{topic} meta-analysis"),
            "abstract": (
                "A systematic meta-analysis examining the current state of knowledge "
                f"regarding {topic} and identifying areas for future research."
            ),
            "type": "journal_article",
            "relevance": f"Metaanálisis que resume el conocimiento actual sobre {topic}.",
            "keyFindings": ["Estado actual del conocimiento", "Líneas de investigación futuras"],
        },
    ]


def _candidates_from(parsed: ParseResult) -> list[Any] | None:
    if not parsed.ok:
        return None
    citations = parsed.data.get("citations")
    if not isinstance(citations, list) or not citations:
        return None
    return citations


def _request_candidates(
    topic: str, analyzed_text: str, style: str, oracle: TextOracle, current_year: int
) -> tuple[list[Any], str | None]:
    try:
        raw = oracle.generate(build_prompt(topic, analyzed_text, style), system_prompt=SYSTEM_PROMPT)
    except Exception:
        logger.exception("Oracle citation generation failed, using default citation")
        return default_citations(analyzed_text, current_year), None

    if raw is None:
        return mock_citations(topic, current_year), None

    parsed = parse_json_object(raw)
    candidates = _candidates_from(parsed)
    if candidates is None:
        logger.warning(f"Invalid oracle citation response ({parsed.error or 'no citations'})")
        return default_citations(analyzed_text, current_year), None
    return candidates[:MAX_CITATIONS], as_text(parsed.data.get("searchQuery"))


def _check_urls(citations: list[Citation], timeout: float) -> None:
    for citation in citations:
        if not url_is_reachable(citation.url, timeout=timeout):
            logger.debug(f"Citation URL unreachable, replacing with search: {citation.url}")
            citation.url = scholar_search_url(citation.title)


def generate_citations(
    topic: str,
    style: str,
    analyzed_text: str | None,
    oracle: TextOracle,
    settings: Settings,
    rng: random.Random | None = None,
    now: dt.datetime | None = None,
) -> CitationsResult:
    now = now or dt.datetime.now(dt.timezone.utc)
    text = (analyzed_text or "").strip() or topic

    candidates, search_query = _request_candidates(topic, text, style, oracle, now.year)
    citations = [
        repair_citation(candidate, style, index, rng=rng, current_year=now.year)
        for index, candidate in enumerate(candidates)
    ]
    if settings.verify_citation_urls:
        _check_urls(citations, settings.url_check_timeout_seconds)

    return CitationsResult(
        citations=citations,
        format=style,
        topic=topic,
        analyzed_text=truncate_analyzed_text(text),
        search_query=search_query or synthesize_search_query(topic, text),
        generated_at=now.isoformat(),
    )
