from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from spot_the_ai.agents.base import ResponseBackend
from spot_the_ai.prompts import render_prompt

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_RESPONSE = "I love pizza with extra cheese and crispy crust."


@dataclass(slots=True)
class AIResponder:
    """The AI player's voice.

    Wraps a backend with the instruction template, a hard deadline and a fixed
    fallback answer. `get_response` never raises (cancellation aside), so a
    flaky LLM can't stall or abort round start.
    """

    backend: ResponseBackend
    template: str
    fallback: str = DEFAULT_FALLBACK_RESPONSE
    timeout_s: float = 30.0

    async def get_response(self, prompt: str) -> str:
        rendered = render_prompt(self.template, prompt=prompt)
        try:
            return await asyncio.wait_for(self.backend.generate(prompt=rendered), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.warning("AI backend %s timed out after %.1fs; using fallback", self.backend.name, self.timeout_s)
        except Exception:
            logger.exception("Error getting AI response from %s; using fallback", self.backend.name)
        return self.fallback
