from __future__ import annotations

import random

import pytest
from fastapi.testclient import TestClient

from nofake.config import Settings, get_settings
from nofake.main import app, get_oracle, get_rng
from nofake.services.oracle import OracleError


class FakeOracle:
    """Stands in for the Gemini client; replies with canned text or raises."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str, system_prompt: str | None = None) -> str | None:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(oracle_api_key="", verify_citation_urls=False, _env_file=None)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def failing_oracle() -> FakeOracle:
    return FakeOracle(error=OracleError("oracle down"))


@pytest.fixture
def make_client(settings):
    clients: list[TestClient] = []

    def _make(oracle: FakeOracle | None = None) -> TestClient:
        fake = oracle or FakeOracle(reply=None)
        app.dependency_overrides[get_oracle] = lambda: fake
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_rng] = lambda: random.Random(7)
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def fake_oracle():
    return FakeOracle
