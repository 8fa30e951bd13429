import re

SUSPICIOUS_KEYWORDS = (
    "URGENTE",
    "EXCLUSIVO",
    "BOMBAZO",
    "INCREÍBLE",
    "NO CREERÁS",
    "MÉDICOS ODIAN",
    "GOBIERNO OCULTA",
    "CONSPIRACIÓN",
    "SECRETO",
    "MILAGRO",
    "CURA DEFINITIVA",
    "ÉLITE",
    "ILLUMINATI",
)

BASE_SCORE = 70
KEYWORD_PENALTY = 15
CAPS_RATIO_LIMIT = 0.10
CAPS_PENALTY = 20
EXCLAMATION_LIMIT = 5
EXCLAMATION_PENALTY = 10
QUESTION_LIMIT = 3
QUESTION_PENALTY = 5

_UPPERCASE_RE = re.compile(r"[A-Z]")


def _clamp(value: int, min_val: int = 0, max_val: int = 100) -> int:
    return max(min_val, min(max_val, value))


def suspicious_keyword_hits(text: str) -> int:
    upper = text.upper()
    return sum(1 for keyword in SUSPICIOUS_KEYWORDS if keyword in upper)


def _caps_ratio(text: str) -> float:
    if not text:
        return 0.0
    return len(_UPPERCASE_RE.findall(text)) / len(text)


def pattern_score(text: str) -> int:
    text = text or ""
    score = BASE_SCORE
    score -= suspicious_keyword_hits(text) * KEYWORD_PENALTY
    if _caps_ratio(text) > CAPS_RATIO_LIMIT:
        score -= CAPS_PENALTY
    if text.count("!") > EXCLAMATION_LIMIT:
        score -= EXCLAMATION_PENALTY
    if text.count("?") > QUESTION_LIMIT:
        score -= QUESTION_PENALTY
    return _clamp(score)


def status_for_score(score: int) -> str:
    if score >= 70:
        return "verified"
    if score <= 40:
        return "fake"
    return "suspicious"
