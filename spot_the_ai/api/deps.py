from __future__ import annotations

from spot_the_ai.actions import GameSession
from spot_the_ai.singleton import get_session


def get_game_session() -> GameSession:
    return get_session()
