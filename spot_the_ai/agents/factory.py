from __future__ import annotations

from spot_the_ai.agents.base import ResponseBackend
from spot_the_ai.agents.ollama_backend import OllamaBackend
from spot_the_ai.agents.responder import AIResponder
from spot_the_ai.prompts import load_prompt
from spot_the_ai.settings import Settings


def create_backend(settings: Settings) -> ResponseBackend:
    if settings.ai_backend == "ag2":
        # Imported lazily: autogen is heavy and only needed for this backend.
        from spot_the_ai.agents.ag2_backend import Ag2ChatBackend

        return Ag2ChatBackend(
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            api_key=settings.openai_api_key,
        )

    return OllamaBackend(url=settings.ollama_url, model=settings.ollama_model, timeout_s=settings.ai_timeout_s)


def create_default_responder(settings: Settings) -> AIResponder:
    """Create the AI player's responder from settings."""

    return AIResponder(
        backend=create_backend(settings),
        template=load_prompt("ai_player.txt"),
        fallback=settings.ai_fallback_response,
        timeout_s=settings.ai_timeout_s,
    )
