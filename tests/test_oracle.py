from __future__ import annotations

import pytest
import requests

import nofake.services.oracle as oracle_module
from nofake.config import Settings
from nofake.services.oracle import GeminiOracle, OracleConfig, OracleError


class _FakeResponse:
    def __init__(self, *, status_code: int = 200, payload: dict | None = None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> dict:
        return dict(self._payload)


def _oracle(api_key: str = "test-key") -> GeminiOracle:
    settings = Settings(oracle_api_key=api_key, oracle_model="gemini-test", _env_file=None)
    return GeminiOracle(OracleConfig.from_settings(settings))


def test_generate_without_api_key_returns_none(monkeypatch):
    def _unexpected_post(*args, **kwargs):  # noqa: ANN002, ANN003
        raise AssertionError("no request expected without credentials")

    monkeypatch.setattr(oracle_module.requests, "post", _unexpected_post)

    assert _oracle(api_key="").generate("prompt") is None


def test_generate_posts_prompt_and_returns_candidate_text(monkeypatch):
    calls: list[dict] = []

    def _fake_post(url, headers=None, json=None, timeout=None):  # noqa: ANN001
        calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        return _FakeResponse(
            payload={"candidates": [{"content": {"parts": [{"text": '{"a": '}, {"text": "1}"}]}}]}
        )

    monkeypatch.setattr(oracle_module.requests, "post", _fake_post)

    out = _oracle().generate("analiza esto", system_prompt="solo JSON")

    assert out == '{"a": 1}'
    assert calls[0]["url"].endswith("/models/gemini-test:generateContent")
    assert calls[0]["headers"]["x-goog-api-key"] == "test-key"
    assert calls[0]["json"]["contents"][0]["parts"][0]["text"] == "analiza esto"
    assert calls[0]["json"]["systemInstruction"]["parts"][0]["text"] == "solo JSON"
    assert calls[0]["timeout"] == 30.0


def test_generate_raises_oracle_error_on_http_failure(monkeypatch):
    monkeypatch.setattr(
        oracle_module.requests, "post", lambda *a, **kw: _FakeResponse(status_code=503)
    )
    with pytest.raises(OracleError):
        _oracle().generate("prompt")


def test_generate_raises_oracle_error_on_connection_failure(monkeypatch):
    def _fake_post(*args, **kwargs):  # noqa: ANN002, ANN003
        raise requests.exceptions.ConnectionError("unreachable")

    monkeypatch.setattr(oracle_module.requests, "post", _fake_post)
    with pytest.raises(OracleError):
        _oracle().generate("prompt")


def test_generate_raises_oracle_error_when_no_candidates(monkeypatch):
    monkeypatch.setattr(
        oracle_module.requests,
        "post",
        lambda *a, **kw: _FakeResponse(payload={"promptFeedback": {"blockReason": "SAFETY"}}),
    )
    with pytest.raises(OracleError):
        _oracle().generate("prompt")
