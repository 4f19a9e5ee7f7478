from __future__ import annotations

import logging

from spot_the_ai.api.models import GameStatus, Player
from spot_the_ai.errors import CapacityExceeded, InvalidState

logger = logging.getLogger(__name__)

MAX_REAL_PLAYERS = 16

AI_PLAYER_ID = "ai-player"
AI_PLAYER_NAME = "AI Player"


class PlayerRegistry:
    """Connected players, in join order, plus the single AI player.

    The AI player does not count against capacity and is never removed once
    created; it persists across rounds.
    """

    def __init__(self, *, capacity: int = MAX_REAL_PLAYERS) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._players: dict[str, Player] = {}
        self._ai_player: Player | None = None

    def can_admit(self) -> bool:
        return self.real_player_count() < self.capacity

    def register(self, player_id: str, name: str) -> Player:
        if player_id in self._players:
            raise InvalidState(f"Player already registered: {player_id}")
        if not self.can_admit():
            raise CapacityExceeded()

        display_name = name.strip()
        if not display_name:
            raise InvalidState("Player name must not be empty")

        player = Player(id=player_id, name=display_name, is_ai=False, is_ready=False, connected=True)
        self._players[player_id] = player
        logger.info("Registered player %s (%s)", display_name, player_id)
        return player

    def ensure_ai_player(self) -> Player:
        if self._ai_player is None:
            self._ai_player = Player(id=AI_PLAYER_ID, name=AI_PLAYER_NAME, is_ai=True, is_ready=True, connected=True)
            self._players[AI_PLAYER_ID] = self._ai_player
            logger.info("AI player joined")
        return self._ai_player

    def remove(self, player_id: str) -> None:
        player = self._players.get(player_id)
        if player is None or player.is_ai:
            return
        del self._players[player_id]
        logger.info("Removed player %s (%s)", player.name, player_id)

    def get(self, player_id: str) -> Player | None:
        return self._players.get(player_id)

    def all(self) -> list[Player]:
        return list(self._players.values())

    def real_player_count(self) -> int:
        return sum(1 for p in self._players.values() if not p.is_ai)

    @property
    def ai_player(self) -> Player | None:
        return self._ai_player

    def has_ai_player(self) -> bool:
        return self._ai_player is not None

    def set_ready(self, player_id: str, is_ready: bool) -> None:
        player = self._players.get(player_id)
        if player is not None:
            player.is_ready = is_ready

    def status(self) -> GameStatus:
        return GameStatus(
            total_players=len(self._players),
            max_real_players=self.capacity,
            has_ai_player=self.has_ai_player(),
            available_slots=max(0, self.capacity - self.real_player_count()),
        )
