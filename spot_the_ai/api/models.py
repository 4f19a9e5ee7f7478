from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for everything sent to or received from the browser client.

    Python attributes stay snake_case; the wire format is camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Player(WireModel):
    id: str
    name: str
    is_ai: bool = Field(False, alias="isAI")
    is_ready: bool = False
    connected: bool = True


class PlayerResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    player_name: str
    response: str
    timestamp: datetime
    is_ai: bool = Field(False, alias="isAI")


class PlayerVote(WireModel):
    model_config = ConfigDict(frozen=True)

    voter_id: str
    voted_player_id: str
    is_ai_guess: bool = Field(..., alias="isAIGuess")


class VoteResults(WireModel):
    correct: int
    total: int
    # Display name of the AI player.
    ai_player: str


class RoundSummary(WireModel):
    round_id: str
    prompt: str
    responses: list[PlayerResponse]
    vote_results: VoteResults


class RoundPhase(StrEnum):
    no_round = "no_round"
    awaiting_responses = "awaiting_responses"
    awaiting_votes = "awaiting_votes"
    complete = "complete"


class GameStatus(WireModel):
    total_players: int
    max_real_players: int
    has_ai_player: bool = Field(..., alias="hasAIPlayer")
    available_slots: int


class CurrentRoundStatus(WireModel):
    round_id: str
    prompt: str
    phase: RoundPhase
    response_count: int
    vote_count: int
    is_complete: bool


# Inbound WebSocket messages.


class RegisterPlayerMessage(WireModel):
    name: str = Field(..., min_length=1, max_length=40)


class StartRoundMessage(WireModel):
    prompt: str = Field(..., min_length=1, max_length=500)


class SubmitResponseMessage(WireModel):
    response: str = Field(..., min_length=1, max_length=1000)


class SubmitVoteMessage(WireModel):
    voted_player_id: str
    is_ai_guess: bool = Field(..., alias="isAIGuess")


class SetReadyMessage(WireModel):
    is_ready: bool
