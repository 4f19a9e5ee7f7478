from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from spot_the_ai.agents.base import AIBackendError

DEFAULT_OLLAMA_URL = "http://127.0.0.1:11434/api/generate"
DEFAULT_OLLAMA_MODEL = "llama3.1"


def build_generate_payload(*, model: str, prompt: str) -> dict[str, Any]:
    return {"model": model, "prompt": prompt, "stream": False}


def parse_generate_response(data: object) -> str:
    """Pull the generated text out of an Ollama /api/generate reply."""

    if not isinstance(data, dict):
        raise AIBackendError("Ollama reply is not a JSON object")
    text = data.get("response")
    if not isinstance(text, str) or not text.strip():
        raise AIBackendError("Ollama reply has no response text")
    return text.strip()


@dataclass(slots=True)
class OllamaBackend:
    """Single non-streaming call to Ollama's native generate endpoint.

    `transport` is only set by tests (httpx.MockTransport).
    """

    url: str = DEFAULT_OLLAMA_URL
    model: str = DEFAULT_OLLAMA_MODEL
    timeout_s: float = 30.0
    transport: httpx.AsyncBaseTransport | None = None
    name: str = "ollama"

    async def generate(self, *, prompt: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
            resp = await client.post(self.url, json=build_generate_payload(model=self.model, prompt=prompt))
            resp.raise_for_status()
            try:
                data = resp.json()
            except ValueError as e:
                raise AIBackendError("Ollama reply is not valid JSON") from e
        return parse_generate_response(data)
