import logging
import math
import time
import urllib.parse

from nofake.models import AnalysisResult, ContentAnalysis, CrossReferenceSource, OracleAnalysis
from nofake.services.oracle import TextOracle
from nofake.services.parsing import as_int, as_text, parse_json_object
from nofake.services.scoring import pattern_score, status_for_score

logger = logging.getLogger(__name__)

PROMPT_CONTENT_LIMIT = 1500
SOURCE_QUERY_LIMIT = 50
LOW_PATTERN_SCORE = 40

FALLBACK_BIAS_SCORE = 30
FALLBACK_WARNING = "Análisis básico - IA no disponible"
FALLBACK_REASONING = "Análisis basado únicamente en patrones de texto locales"
PATTERN_WARNING = "Patrones de texto sospechosos detectados"
SENTIMENTS = {"positive", "negative", "neutral"}

SYSTEM_PROMPT = (
    "Eres un verificador de noticias. Respondes únicamente con un objeto JSON válido, "
    "sin texto adicional ni bloques de código."
)

CROSS_REFERENCE_SITES = (
    # name, host, score threshold, status above threshold, status otherwise
    ("Snopes", "snopes.com", 60, "verified", "disputed"),
    ("FactCheck.org", "factcheck.org", 50, "fact-checked", "disputed"),
    ("PolitiFact", "politifact.com", 55, "verified", "needs-verification"),
)


def build_prompt(content: str, provided_url: str | None = None) -> str:
    origin = f"\nURL de origen declarada: {provided_url}\n" if provided_url else ""
    return f"""
Analiza el siguiente contenido de noticias y determina su credibilidad.
{origin}
Contenido: {content[:PROMPT_CONTENT_LIMIT]}

Evalúa:
1. Credibilidad general (0-100)
2. Nivel de sesgo (0-100, donde 0 es neutral)
3. Sentimiento (positive/negative/neutral)
4. Número de afirmaciones factuales
5. Advertencias específicas

Responde SOLO en formato JSON válido:
{{
  "credibilityScore": 75,
  "status": "verified",
  "biasScore": 20,
  "sentiment": "neutral",
  "factualClaims": 8,
  "verifiedClaims": 6,
  "warnings": ["ejemplo de advertencia"],
  "reasoning": "breve explicación"
}}
"""


def _clamp(value: float, min_val: float = 0, max_val: float = 100) -> float:
    return max(min_val, min(max_val, value))


def _claim_counts(content: str) -> tuple[int, int]:
    segments = len(content.split("."))
    return segments // 2, segments // 3


def basic_analysis(content: str) -> OracleAnalysis:
    score = pattern_score(content)
    factual, verified = _claim_counts(content)
    return OracleAnalysis(
        credibility_score=score,
        sentiment="neutral",
        bias_score=FALLBACK_BIAS_SCORE,
        factual_claims=factual,
        verified_claims=verified,
        warnings=[FALLBACK_WARNING],
        reasoning=FALLBACK_REASONING,
    )


def _oracle_score(data: dict) -> float | None:
    raw = data.get("credibilityScore")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if not math.isfinite(raw):
        return None
    return float(raw)


def repair_oracle_analysis(data: dict, content: str) -> OracleAnalysis | None:
    score = _oracle_score(data)
    if score is None:
        return None

    fallback_factual, fallback_verified = _claim_counts(content)
    factual = as_int(data.get("factualClaims"))
    factual = fallback_factual if factual is None else max(0, factual)
    verified = as_int(data.get("verifiedClaims"))
    verified = fallback_verified if verified is None else max(0, verified)

    sentiment = as_text(data.get("sentiment"))
    sentiment = sentiment.lower() if sentiment else "neutral"
    bias = as_int(data.get("biasScore"))
    warnings = data.get("warnings")

    return OracleAnalysis(
        credibility_score=_clamp(score),
        sentiment=sentiment if sentiment in SENTIMENTS else "neutral",
        bias_score=FALLBACK_BIAS_SCORE if bias is None else _clamp(bias),
        factual_claims=factual,
        verified_claims=min(verified, factual),
        warnings=[w for w in warnings if isinstance(w, str) and w.strip()]
        if isinstance(warnings, list)
        else [],
        reasoning=as_text(data.get("reasoning")) or "",
    )


def analyze_with_oracle(
    content: str, oracle: TextOracle, provided_url: str | None = None
) -> OracleAnalysis:
    try:
        raw = oracle.generate(build_prompt(content, provided_url), system_prompt=SYSTEM_PROMPT)
    except Exception:
        logger.exception("Oracle credibility analysis failed, using basic analysis")
        return basic_analysis(content)

    if raw is None:
        return basic_analysis(content)

    parsed = parse_json_object(raw)
    if not parsed.ok:
        logger.warning(f"Invalid oracle credibility response ({parsed.error}), using basic analysis")
        return basic_analysis(content)

    analysis = repair_oracle_analysis(parsed.data, content)
    if analysis is None:
        logger.warning("Oracle credibility response has no numeric credibilityScore")
        return basic_analysis(content)
    return analysis


def cross_reference_sources(content: str, score: int) -> list[CrossReferenceSource]:
    query = urllib.parse.quote(content[:SOURCE_QUERY_LIMIT], safe="")
    return [
        CrossReferenceSource(
            name=name,
            status=above if score > threshold else below,
            url=f"https://{host}/search/?q={query}",
        )
        for name, host, threshold, above, below in CROSS_REFERENCE_SITES
    ]


def analyze_content(
    content: str, oracle: TextOracle, provided_url: str | None = None
) -> AnalysisResult:
    started = time.perf_counter()
    oracle_analysis = analyze_with_oracle(content, oracle, provided_url)
    local_score = pattern_score(content)

    # Half-up rounding of the mean.
    final_score = math.floor((oracle_analysis.credibility_score + local_score) / 2 + 0.5)

    warnings = list(oracle_analysis.warnings)
    if local_score < LOW_PATTERN_SCORE:
        warnings.append(PATTERN_WARNING)

    return AnalysisResult(
        credibility_score=final_score,
        status=status_for_score(final_score),
        sources=cross_reference_sources(content, final_score),
        analysis=ContentAnalysis(
            sentiment=oracle_analysis.sentiment,
            bias_score=oracle_analysis.bias_score,
            factual_claims=oracle_analysis.factual_claims,
            verified_claims=oracle_analysis.verified_claims,
            reasoning=oracle_analysis.reasoning,
        ),
        warnings=warnings,
        processing_time=int((time.perf_counter() - started) * 1000),
    )
