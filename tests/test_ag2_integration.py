from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from spot_the_ai.agents import ag2_backend
from spot_the_ai.agents.ag2_backend import Ag2ChatBackend, _last_reply, build_llm_config
from spot_the_ai.agents.base import AIBackendError


def _ollama_healthy(base_url: str) -> bool:
    # base_url might be http://127.0.0.1:11434/v1
    root = base_url.removesuffix("/v1")
    try:
        r = httpx.get(f"{root}/api/tags", timeout=1.0)
        return r.status_code == 200
    except Exception:
        return False


@dataclass
class _FakeRunResult:
    messages: list[Any] = field(default_factory=list)
    summary: str | None = None
    processed: bool = False

    def process(self) -> None:
        self.processed = True


class _FakeAgent:
    result = _FakeRunResult()
    prompts: list[str] = []

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def run(self, *, message: str, max_turns: int) -> _FakeRunResult:
        assert max_turns == 1
        _FakeAgent.prompts.append(message)
        return _FakeAgent.result


@pytest.fixture
def fake_agent(monkeypatch: pytest.MonkeyPatch) -> type[_FakeAgent]:
    _FakeAgent.result = _FakeRunResult()
    _FakeAgent.prompts = []
    monkeypatch.setattr(ag2_backend, "ConversableAgent", _FakeAgent)
    return _FakeAgent


def test_last_reply_skips_empty_messages() -> None:
    messages = [
        {"role": "user", "content": "Favorite food?"},
        {"role": "assistant", "content": "  Ramen, easily.  "},
        {"role": "assistant", "content": ""},
        "not a message",
    ]
    assert _last_reply(messages) == "Ramen, easily."
    assert _last_reply(None) == ""


def test_build_llm_config_requires_key_or_base_url() -> None:
    with pytest.raises(AIBackendError):
        build_llm_config(model="gpt-4o-mini", base_url=None, api_key=None)


@pytest.mark.asyncio
async def test_ag2_backend_returns_last_assistant_message(fake_agent: type[_FakeAgent]) -> None:
    fake_agent.result = _FakeRunResult(messages=[{"role": "assistant", "content": "pizza, no question"}])
    backend = Ag2ChatBackend(model="llama3.2", base_url="http://127.0.0.1:11434/v1")

    assert await backend.generate(prompt="Favorite food?") == "pizza, no question"
    assert fake_agent.prompts == ["Favorite food?"]
    assert fake_agent.result.processed


@pytest.mark.asyncio
async def test_ag2_backend_falls_back_to_summary(fake_agent: type[_FakeAgent]) -> None:
    fake_agent.result = _FakeRunResult(messages=[], summary="  tacos  ")
    backend = Ag2ChatBackend(model="llama3.2", base_url="http://127.0.0.1:11434/v1")

    assert await backend.generate(prompt="Favorite food?") == "tacos"


@pytest.mark.asyncio
async def test_ag2_backend_raises_when_agent_says_nothing(fake_agent: type[_FakeAgent]) -> None:
    fake_agent.result = _FakeRunResult(messages=[{"role": "assistant", "content": "   "}], summary=None)
    backend = Ag2ChatBackend(model="gpt-4o-mini", api_key="sk-test")

    with pytest.raises(AIBackendError):
        await backend.generate(prompt="Favorite food?")


@pytest.mark.asyncio
async def test_ag2_backend_answers_env_gated() -> None:
    base_url = os.environ.get("OPENAI_BASE_URL")
    api_key = os.environ.get("OPENAI_API_KEY")

    if not (api_key or base_url):
        pytest.skip("Set OPENAI_API_KEY or OPENAI_BASE_URL")

    if base_url and not _ollama_healthy(base_url):
        pytest.skip("Ollama not reachable at OPENAI_BASE_URL")

    backend = Ag2ChatBackend(
        model=os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
        base_url=base_url,
        api_key=api_key,
    )
    text = await backend.generate(prompt="In a few words, what's your favorite food?")
    assert text.strip()
