from __future__ import annotations

import logging
from typing import Any, Literal, get_args

from spot_the_ai.agents.base import ResponseProvider
from spot_the_ai.api.models import (
    Player,
    RegisterPlayerMessage,
    RoundPhase,
    SetReadyMessage,
    StartRoundMessage,
    SubmitResponseMessage,
    SubmitVoteMessage,
)
from spot_the_ai.core.events import GameEvent
from spot_the_ai.errors import InvalidState
from spot_the_ai.players import MAX_REAL_PLAYERS, PlayerRegistry
from spot_the_ai.rounds import RoundCoordinator

logger = logging.getLogger(__name__)

ActionName = Literal["register_player", "start_round", "submit_response", "submit_vote", "set_ready"]

ACTION_NAMES: frozenset[str] = frozenset(get_args(ActionName))


class GameSession:
    """The one game this process hosts: registry + coordinator + action dispatch.

    Every entry point returns the events to publish instead of sending them, so the
    WebSocket route stays a thin relay and the flow is testable without sockets.
    """

    def __init__(self, *, responder: ResponseProvider, capacity: int = MAX_REAL_PLAYERS) -> None:
        self.registry = PlayerRegistry(capacity=capacity)
        self.coordinator = RoundCoordinator(registry=self.registry, responder=responder)

    def _players_update(self) -> GameEvent:
        return GameEvent.broadcast(
            type="players_update",
            payload={"players": [p.to_wire() for p in self.registry.all()]},
        )

    def admit(self, connection_id: str) -> list[GameEvent]:
        """Gate a new connection. Returns a rejection event if the game is full."""

        if self.registry.can_admit() or self.registry.get(connection_id) is not None:
            return []
        logger.info("Rejecting connection %s: server is full", connection_id)
        return [GameEvent.reply(to=connection_id, type="connection_rejected", payload={"reason": "Server is full"})]

    async def dispatch(self, connection_id: str, message: dict[str, Any]) -> list[GameEvent]:
        """Apply one inbound client message.

        Game-rule violations and malformed payloads come back as an `error` event
        addressed to the sender; they never propagate.
        """

        action = message.get("type")
        try:
            if not isinstance(action, str) or action not in ACTION_NAMES:
                raise ValueError(f"Unknown action: {action}")
            if action == "register_player":
                return self._register_player(connection_id, RegisterPlayerMessage.model_validate(message))
            if action == "start_round":
                return await self._start_round(connection_id, StartRoundMessage.model_validate(message))
            if action == "submit_response":
                return self._submit_response(connection_id, SubmitResponseMessage.model_validate(message))
            if action == "submit_vote":
                return self._submit_vote(connection_id, SubmitVoteMessage.model_validate(message))
            return self._set_ready(connection_id, SetReadyMessage.model_validate(message))
        except ValueError as e:
            logger.info("Rejected %s from %s: %s", action, connection_id, e)
            return [GameEvent.reply(to=connection_id, type="error", payload={"message": str(e)})]

    def disconnect(self, connection_id: str) -> list[GameEvent]:
        player = self.registry.get(connection_id)
        if player is None or player.is_ai:
            return []

        self.registry.remove(connection_id)
        self.coordinator.forget_player(connection_id)
        events = [
            GameEvent.broadcast(type="player_left", payload={"id": connection_id}),
            self._players_update(),
        ]
        # Fewer players lowers both thresholds; the round may now be able to move on.
        if self.registry.real_player_count() > 0:
            events.extend(self._advance_round())
        return events

    def _require_player(self, connection_id: str) -> Player:
        player = self.registry.get(connection_id)
        if player is None:
            raise InvalidState("Register before joining the game")
        return player

    def _register_player(self, connection_id: str, msg: RegisterPlayerMessage) -> list[GameEvent]:
        if self.registry.get(connection_id) is not None:
            return []

        player = self.registry.register(connection_id, msg.name)

        events: list[GameEvent] = []
        if not self.registry.has_ai_player():
            ai_player = self.registry.ensure_ai_player()
            events.append(GameEvent.broadcast(type="ai_player_joined", payload={"player": ai_player.to_wire()}))

        events.append(self._players_update())
        events.append(
            GameEvent.reply(
                to=connection_id,
                type="registration_successful",
                payload={"id": player.id, "name": player.name},
            )
        )
        return events

    async def _start_round(self, connection_id: str, msg: StartRoundMessage) -> list[GameEvent]:
        self._require_player(connection_id)
        round_id = await self.coordinator.start_round(msg.prompt)
        game_round = self.coordinator.current_round
        prompt = game_round.prompt if game_round is not None else msg.prompt
        return [GameEvent.broadcast(type="round_started", payload={"roundId": round_id, "prompt": prompt})]

    def _submit_response(self, connection_id: str, msg: SubmitResponseMessage) -> list[GameEvent]:
        player = self._require_player(connection_id)
        self.coordinator.submit_response(player.id, msg.response)

        events = [
            GameEvent.broadcast(
                type="response_received",
                payload={"playerId": player.id, "playerName": player.name},
            )
        ]
        events.extend(self._advance_round())
        return events

    def _submit_vote(self, connection_id: str, msg: SubmitVoteMessage) -> list[GameEvent]:
        self._require_player(connection_id)
        self.coordinator.submit_vote(connection_id, msg.voted_player_id, msg.is_ai_guess)
        return self._advance_round()

    def _set_ready(self, connection_id: str, msg: SetReadyMessage) -> list[GameEvent]:
        self._require_player(connection_id)
        self.registry.set_ready(connection_id, msg.is_ready)
        return [self._players_update()]

    def _advance_round(self) -> list[GameEvent]:
        """Reveal responses / finish the round when the current phase's threshold is met."""

        coordinator = self.coordinator
        if coordinator.phase == RoundPhase.awaiting_responses and coordinator.is_response_phase_complete():
            responses = coordinator.reveal_responses()
            return [
                GameEvent.broadcast(
                    type="responses_revealed",
                    payload={"responses": [r.to_wire() for r in responses]},
                )
            ]

        if coordinator.phase == RoundPhase.awaiting_votes and coordinator.is_voting_phase_complete():
            summary = coordinator.complete_round()
            coordinator.reset_round()
            if summary is None:
                return []
            return [GameEvent.broadcast(type="game_complete", payload=summary.to_wire())]

        return []

