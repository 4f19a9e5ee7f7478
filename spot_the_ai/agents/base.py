from __future__ import annotations

from typing import Protocol


class AIBackendError(RuntimeError):
    """The LLM backend answered, but not with something usable."""


class ResponseBackend(Protocol):
    """A raw LLM transport. May raise; callers are expected to absorb failures."""

    name: str

    async def generate(self, *, prompt: str) -> str:  # pragma: no cover
        ...


class ResponseProvider(Protocol):
    """Turns a round prompt into the AI player's answer. Never raises."""

    async def get_response(self, prompt: str) -> str:  # pragma: no cover
        ...
