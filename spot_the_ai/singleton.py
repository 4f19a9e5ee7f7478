from __future__ import annotations

from spot_the_ai.actions import GameSession
from spot_the_ai.agents.base import ResponseProvider
from spot_the_ai.agents.factory import create_default_responder
from spot_the_ai.settings import Settings


_SESSION: GameSession | None = None


def init_session(*, settings: Settings, responder: ResponseProvider | None = None) -> GameSession:
    """Create the process-wide game session once.

    Safe to call multiple times; subsequent calls return the existing session.
    """

    global _SESSION
    if _SESSION is None:
        _SESSION = GameSession(
            responder=responder or create_default_responder(settings),
            capacity=settings.max_real_players,
        )
    return _SESSION


def reset_session_for_tests() -> None:
    global _SESSION
    _SESSION = None


def get_session() -> GameSession:
    if _SESSION is None:
        raise RuntimeError("Game session not initialized. Call init_session() at startup.")
    return _SESSION
