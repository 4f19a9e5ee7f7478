from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from statemachine.exceptions import TransitionNotAllowed

from spot_the_ai.agents.base import ResponseProvider
from spot_the_ai.api.models import (
    CurrentRoundStatus,
    PlayerResponse,
    PlayerVote,
    RoundPhase,
    RoundSummary,
    VoteResults,
)
from spot_the_ai.errors import InvalidState, NoActiveRound, NoAIPlayer
from spot_the_ai.fsm import RoundFSM
from spot_the_ai.players import PlayerRegistry

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True)
class GameRound:
    round_id: str
    prompt: str
    start_time: datetime
    # Keyed by submitter: a resubmission replaces the earlier entry.
    responses: dict[str, PlayerResponse] = field(default_factory=dict)
    votes: dict[str, PlayerVote] = field(default_factory=dict)


def tally_votes(*, votes: list[PlayerVote], ai_player_id: str) -> int:
    """Count votes whose AI/human guess matches the truth about the voted-for player."""

    return sum(1 for v in votes if (v.voted_player_id == ai_player_id) == v.is_ai_guess)


class RoundCoordinator:
    """Owns the single round slot and drives it through its phases.

    Phase transitions go through RoundFSM; the round data lives in `_round`,
    which is set exactly when the FSM is out of `no_round`.
    """

    def __init__(self, *, registry: PlayerRegistry, responder: ResponseProvider) -> None:
        self._registry = registry
        self._responder = responder
        self._fsm = RoundFSM()
        self._round: GameRound | None = None
        self._start_lock = asyncio.Lock()

    @property
    def phase(self) -> RoundPhase:
        return self._fsm.phase

    @property
    def current_round(self) -> GameRound | None:
        return self._round

    def _require_round(self) -> GameRound:
        if self._round is None:
            raise NoActiveRound()
        return self._round

    async def start_round(self, prompt: str) -> str:
        """Start a round and return its id.

        If the AI player exists its answer is fetched before the round becomes
        visible, so no human submission can land in a round without it.
        """

        text = prompt.strip()
        if not text:
            raise InvalidState("Prompt must not be empty")

        async with self._start_lock:
            if self.phase in (RoundPhase.awaiting_responses, RoundPhase.awaiting_votes):
                raise InvalidState("A round is already in progress")

            game_round = GameRound(round_id=str(uuid4()), prompt=text, start_time=_now())

            ai_player = self._registry.ai_player
            if ai_player is not None:
                ai_text = await self._responder.get_response(text)
                game_round.responses[ai_player.id] = PlayerResponse(
                    player_id=ai_player.id,
                    player_name=ai_player.name,
                    response=ai_text,
                    timestamp=_now(),
                    is_ai=True,
                )

            self._fsm.begin()
            self._round = game_round

        logger.info("Round %s started: %r", game_round.round_id, text)
        return game_round.round_id

    def submit_response(self, player_id: str, text: str) -> PlayerResponse:
        if self._round is None or self.phase == RoundPhase.complete:
            raise NoActiveRound("No active round or round is complete")
        if self.phase != RoundPhase.awaiting_responses:
            raise InvalidState("Responses are closed; voting has started")

        player = self._registry.get(player_id)
        if player is None:
            raise InvalidState(f"Unknown player: {player_id}")

        response = PlayerResponse(
            player_id=player.id,
            player_name=player.name,
            response=text,
            timestamp=_now(),
            is_ai=player.is_ai,
        )
        self._round.responses[player.id] = response
        return response

    def is_response_phase_complete(self) -> bool:
        if self._round is None:
            return False
        return len(self._round.responses) >= len(self._registry.all())

    def reveal_responses(self) -> list[PlayerResponse]:
        """Close response collection and open voting."""

        game_round = self._require_round()
        if self.phase != RoundPhase.awaiting_responses:
            raise InvalidState("Responses have already been revealed")
        if not self.is_response_phase_complete():
            raise InvalidState("Not every player has responded yet")

        self._fsm.reveal()
        logger.info("Round %s: revealing %d responses", game_round.round_id, len(game_round.responses))
        return list(game_round.responses.values())

    def submit_vote(self, voter_id: str, voted_player_id: str, is_ai_guess: bool) -> PlayerVote:
        game_round = self._require_round()
        if self.phase == RoundPhase.awaiting_responses:
            raise InvalidState("Voting has not started yet")
        if self.phase == RoundPhase.complete:
            raise InvalidState("Round is complete")

        voter = self._registry.get(voter_id)
        if voter is None or voter.is_ai:
            raise InvalidState(f"Unknown voter: {voter_id}")
        if voted_player_id not in game_round.responses:
            raise InvalidState(f"No response from player: {voted_player_id}")

        vote = PlayerVote(voter_id=voter_id, voted_player_id=voted_player_id, is_ai_guess=is_ai_guess)
        game_round.votes[voter_id] = vote
        return vote

    def is_voting_phase_complete(self) -> bool:
        if self._round is None:
            return False
        return len(self._round.votes) >= self._registry.real_player_count()

    def compute_vote_results(self) -> VoteResults:
        game_round = self._require_round()

        ai_player = self._registry.ai_player
        if ai_player is None:
            raise NoAIPlayer()

        votes = list(game_round.votes.values())
        return VoteResults(
            correct=tally_votes(votes=votes, ai_player_id=ai_player.id),
            total=len(votes),
            ai_player=ai_player.name,
        )

    def complete_round(self) -> RoundSummary | None:
        if self._round is None:
            return None

        vote_results = self.compute_vote_results()
        try:
            self._fsm.finish()
        except TransitionNotAllowed as e:
            raise InvalidState("Round cannot complete before voting has started") from e

        summary = RoundSummary(
            round_id=self._round.round_id,
            prompt=self._round.prompt,
            responses=list(self._round.responses.values()),
            vote_results=vote_results,
        )
        logger.info(
            "Round %s complete: %d/%d correct",
            summary.round_id,
            summary.vote_results.correct,
            summary.vote_results.total,
        )
        return summary

    def forget_player(self, player_id: str) -> None:
        """Drop a departed player's pending submission.

        Unrevealed responses and votes are removed so they can't stand in for a
        remaining player's. Revealed responses stay; others may already be voting on them.
        """

        if self._round is None:
            return
        if self.phase == RoundPhase.awaiting_responses:
            self._round.responses.pop(player_id, None)
        elif self.phase == RoundPhase.awaiting_votes:
            self._round.votes.pop(player_id, None)

    def reset_round(self) -> None:
        self._fsm.clear_round()
        self._round = None

    def status(self) -> CurrentRoundStatus | None:
        if self._round is None:
            return None
        return CurrentRoundStatus(
            round_id=self._round.round_id,
            prompt=self._round.prompt,
            phase=self.phase,
            response_count=len(self._round.responses),
            vote_count=len(self._round.votes),
            is_complete=self.phase == RoundPhase.complete,
        )
