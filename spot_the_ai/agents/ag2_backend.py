from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from autogen import ConversableAgent, LLMConfig

from spot_the_ai.agents.base import AIBackendError

AI_PLAYER_SYSTEM_MESSAGE = (
    "You are secretly playing a party game against humans. "
    "Answer like a regular person would: casual, brief, no lists, never mention being an AI."
)


def build_llm_config(*, model: str, base_url: str | None, api_key: str | None) -> LLMConfig:
    """AG2 config for a single OpenAI-compatible endpoint."""

    # Local OpenAI-compatible servers ignore the key, but the client insists on one.
    key = api_key or ("ollama" if base_url else None)
    if not key:
        raise AIBackendError("AG2 backend needs OPENAI_API_KEY, or OPENAI_BASE_URL for a local server")

    entry: dict[str, Any] = {"model": model, "api_key": key}
    if base_url:
        entry["base_url"] = base_url
    return LLMConfig(config_list=[entry])


def _last_reply(messages: object) -> str:
    if not isinstance(messages, list):
        return ""

    for msg in reversed(messages):
        if isinstance(msg, dict):
            content = msg.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()
    return ""


@dataclass(slots=True)
class Ag2ChatBackend:
    """One-turn AG2 (`autogen`) chat against an OpenAI-compatible server.

    For Ollama, point `base_url` at e.g. http://127.0.0.1:11434/v1.
    """

    model: str
    base_url: str | None = None
    api_key: str | None = None
    system_message: str = AI_PLAYER_SYSTEM_MESSAGE
    name: str = "ag2"

    async def generate(self, *, prompt: str) -> str:
        # run() blocks; keep it off the event loop.
        text = await asyncio.to_thread(self._run_once, prompt)
        if not text:
            raise AIBackendError("AG2 agent returned no content")
        return text

    def _run_once(self, prompt: str) -> str:
        agent = ConversableAgent(
            name="ai_player",
            system_message=self.system_message,
            llm_config=build_llm_config(model=self.model, base_url=self.base_url, api_key=self.api_key),
            human_input_mode="NEVER",
        )

        result = agent.run(message=prompt, max_turns=1)
        result.process()

        text = _last_reply(list(result.messages))
        if not text and isinstance(result.summary, str):
            text = result.summary.strip()
        return text
