from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from spot_the_ai.actions import GameSession
from spot_the_ai.players import PlayerRegistry
from spot_the_ai.rounds import RoundCoordinator


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs.

    This makes OLLAMA_URL / OLLAMA_MODEL available to the env-gated integration
    tests without exporting them by hand.

    In CI we don't auto-load `.env`, so tests that need a live Ollama stay skipped
    unless explicitly opted-in with SPOT_THE_AI_LOAD_DOTENV_FOR_TESTS=1.
    """

    if os.environ.get("CI") and os.environ.get("SPOT_THE_AI_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


class StubResponder:
    """Deterministic stand-in for the LLM-backed responder."""

    def __init__(self, text: str = "Probably a big bowl of ramen.") -> None:
        self.text = text
        self.prompts: list[str] = []

    async def get_response(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


@pytest.fixture()
def responder() -> StubResponder:
    return StubResponder()


@pytest.fixture()
def registry() -> PlayerRegistry:
    return PlayerRegistry()


@pytest.fixture()
def coordinator(registry: PlayerRegistry, responder: StubResponder) -> RoundCoordinator:
    return RoundCoordinator(registry=registry, responder=responder)


@pytest.fixture()
def session(responder: StubResponder) -> GameSession:
    return GameSession(responder=responder)


@pytest.fixture()
def client(session: GameSession) -> Generator[TestClient, None, None]:
    """TestClient whose routes all see the test's GameSession."""

    from spot_the_ai.api.deps import get_game_session
    from spot_the_ai.main import app
    from spot_the_ai.singleton import reset_session_for_tests

    app.dependency_overrides[get_game_session] = lambda: session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_session_for_tests()
