"""Best-effort extraction of a JSON object from free-form oracle text.

The oracle is asked for JSON but may wrap it in markdown code fences or
prose, truncate it, or answer with something else entirely. Every function
here is total: failures are reported through ``ParseResult`` rather than
raised, and callers decide which local fallback to use.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

_FENCE_OPEN_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```\s*$")
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ParseResult:
    ok: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str = ""

    @classmethod
    def success(cls, data: dict[str, Any]) -> "ParseResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(ok=False, error=error)


def strip_code_fences(text: str) -> str:
    cleaned = _FENCE_OPEN_RE.sub("", text or "", count=1)
    return _FENCE_CLOSE_RE.sub("", cleaned, count=1).strip()


def parse_json_object(text: str | None) -> ParseResult:
    if not text or not text.strip():
        return ParseResult.failure("empty response")

    match = _JSON_OBJECT_RE.search(strip_code_fences(text))
    if match is None:
        return ParseResult.failure("no JSON object found")

    try:
        parsed = json.loads(match.group(0))
    except ValueError as exc:
        return ParseResult.failure(f"invalid JSON: {exc}")

    if not isinstance(parsed, dict):
        return ParseResult.failure("top-level JSON value is not an object")
    return ParseResult.success(parsed)


def as_int(value: Any) -> int | None:
    """Coerce JSON numbers (and numeric strings) to int; reject booleans."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(round(value))
    if isinstance(value, str):
        try:
            return int(round(float(value.strip())))
        except (ValueError, OverflowError):
            return None
    return None


def as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def as_text_list(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items or None
