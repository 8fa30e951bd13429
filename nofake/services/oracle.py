"""
Client for the generative-text oracle (Google Gemini ``generateContent``).

The oracle is treated as an unreliable black box: it returns raw text that
callers must parse defensively. No retries are performed here; every
handler owns its own fallback when ``generate`` raises ``OracleError``.
When no API key is configured ``generate`` returns ``None`` and callers
switch to their local fallback.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from nofake.config import Settings, get_settings

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """Oracle call failed (transport, HTTP status or response envelope)."""


class TextOracle(Protocol):
    def generate(self, prompt: str, system_prompt: str | None = None) -> str | None:
        ...


@dataclass
class OracleConfig:
    api_key: str
    model: str
    base_url: str
    timeout: float
    temperature: float
    max_output_tokens: int

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "OracleConfig":
        settings = settings or get_settings()
        return cls(
            api_key=settings.oracle_api_key,
            model=settings.oracle_model,
            base_url=settings.oracle_base_url,
            timeout=settings.oracle_timeout_seconds,
            temperature=settings.oracle_temperature,
            max_output_tokens=settings.oracle_max_output_tokens,
        )


def _extract_text(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise OracleError("Oracle response is not a JSON object")
    candidates = payload.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        feedback = payload.get("promptFeedback") or {}
        raise OracleError(f"Oracle returned no candidates: {feedback}")
    content = candidates[0].get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise OracleError("Oracle candidate has no content parts")
    text = "".join(
        str(part.get("text", "") or "") for part in parts if isinstance(part, dict)
    ).strip()
    if not text:
        raise OracleError("Oracle returned empty text")
    return text


class GeminiOracle:
    def __init__(self, config: OracleConfig | None = None):
        self.config = config or OracleConfig.from_settings()

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/models/{self.config.model}:generateContent"

    def generate(self, prompt: str, system_prompt: str | None = None) -> str | None:
        """
        Send a prompt and return the raw generated text.

        Returns:
            Model text, or ``None`` when no API key is configured.

        Raises:
            OracleError: on any transport, HTTP or envelope failure.
        """
        if not self.configured:
            logger.warning("Oracle API key not configured, using local fallback")
            return None

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        logger.debug(f"Oracle call: model={self.config.model}, prompt_chars={len(prompt)}")

        try:
            response = requests.post(
                self.endpoint,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.config.api_key,
                },
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            raise OracleError(f"Oracle request failed: {exc}") from exc
        except ValueError as exc:
            raise OracleError(f"Oracle returned non-JSON body: {exc}") from exc

        return _extract_text(body)
