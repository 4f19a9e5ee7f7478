from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

EventType = Literal[
    "connection_rejected",
    "registration_successful",
    "ai_player_joined",
    "players_update",
    "round_started",
    "response_received",
    "responses_revealed",
    "game_complete",
    "player_left",
    "error",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    """Outbound event.

    `target` is a connection id for direct replies; None means broadcast to everyone.
    """

    type: EventType
    payload: dict[str, Any]
    target: str | None = None
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def broadcast(*, type: EventType, payload: dict[str, Any]) -> "GameEvent":
        return GameEvent(type=type, payload=payload)

    @staticmethod
    def reply(*, to: str, type: EventType, payload: dict[str, Any]) -> "GameEvent":
        return GameEvent(type=type, payload=payload, target=to)

    def to_message(self) -> dict[str, Any]:
        return {"type": self.type, **self.payload}
