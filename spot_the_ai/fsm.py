from __future__ import annotations

from statemachine import State, StateMachine

from spot_the_ai.api.models import RoundPhase


class RoundFSM(StateMachine):
    """Phase guard for the single round slot.

    - phases: no round -> awaiting responses -> awaiting votes -> complete -> (reset) -> no round
    - a complete round may be replaced directly by a new one.
    - the coordinator mutates round data; the FSM only guards transitions.
    """

    no_round = State(RoundPhase.no_round.value, value=RoundPhase.no_round.value, initial=True)
    awaiting_responses = State(RoundPhase.awaiting_responses.value, value=RoundPhase.awaiting_responses.value)
    awaiting_votes = State(RoundPhase.awaiting_votes.value, value=RoundPhase.awaiting_votes.value)
    complete = State(RoundPhase.complete.value, value=RoundPhase.complete.value)

    begin = no_round.to(awaiting_responses) | complete.to(awaiting_responses)
    reveal = awaiting_responses.to(awaiting_votes)
    finish = awaiting_votes.to(complete) | complete.to.itself()
    clear_round = (
        no_round.to.itself()
        | awaiting_responses.to(no_round)
        | awaiting_votes.to(no_round)
        | complete.to(no_round)
    )

    @property
    def phase(self) -> RoundPhase:
        return RoundPhase(str(self.current_state.value))
