from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from spot_the_ai.players import AI_PLAYER_ID


def _receive_until(ws, msg_type: str) -> dict[str, Any]:  # type: ignore[no-untyped-def]
    while True:
        msg = ws.receive_json()
        if msg["type"] == msg_type:
            return msg


def test_ws_single_player_round(client: TestClient, responder) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "register_player", "name": "Alice"})
        assert ws.receive_json()["type"] == "ai_player_joined"
        roster = ws.receive_json()
        assert roster["type"] == "players_update"
        assert len(roster["players"]) == 2
        registered = ws.receive_json()
        assert registered["type"] == "registration_successful"
        assert registered["name"] == "Alice"
        my_id = registered["id"]

        ws.send_json({"type": "start_round", "prompt": "What's your favorite food?"})
        started = ws.receive_json()
        assert started["type"] == "round_started"
        assert started["prompt"] == "What's your favorite food?"

        ws.send_json({"type": "submit_response", "response": "Pad thai"})
        received = ws.receive_json()
        assert received == {"type": "response_received", "playerId": my_id, "playerName": "Alice"}
        revealed = ws.receive_json()
        assert revealed["type"] == "responses_revealed"
        texts = {r["playerId"]: r["response"] for r in revealed["responses"]}
        assert texts == {AI_PLAYER_ID: responder.text, my_id: "Pad thai"}

        ws.send_json({"type": "submit_vote", "votedPlayerId": AI_PLAYER_ID, "isAIGuess": True})
        done = ws.receive_json()
        assert done["type"] == "game_complete"
        assert done["roundId"] == started["roundId"]
        assert done["voteResults"] == {"correct": 1, "total": 1, "aiPlayer": "AI Player"}

        # The round is cleared once the summary is out.
        assert client.get("/round").status_code == 404


def test_ws_two_players_see_each_other(client: TestClient) -> None:
    with client.websocket_connect("/ws") as alice:
        alice.send_json({"type": "register_player", "name": "Alice"})
        alice_id = _receive_until(alice, "registration_successful")["id"]

        with client.websocket_connect("/ws") as bob:
            bob.send_json({"type": "register_player", "name": "Bob"})
            bob_id = _receive_until(bob, "registration_successful")["id"]

            roster = _receive_until(alice, "players_update")
            assert [p["name"] for p in roster["players"]] == ["Alice", "AI Player", "Bob"]

            bob.send_json({"type": "start_round", "prompt": "Best pizza topping?"})
            assert _receive_until(alice, "round_started")["prompt"] == "Best pizza topping?"

            alice.send_json({"type": "submit_response", "response": "Mushrooms"})
            assert _receive_until(bob, "response_received")["playerId"] == alice_id

            bob.send_json({"type": "submit_response", "response": "Pineapple"})
            revealed = _receive_until(alice, "responses_revealed")
            assert {r["playerId"] for r in revealed["responses"]} == {AI_PLAYER_ID, alice_id, bob_id}


def test_ws_errors_are_sent_to_caller(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.send_text("this is not json")
        assert ws.receive_json() == {"type": "error", "message": "Invalid message format"}

        ws.send_json(["register_player"])
        assert ws.receive_json() == {"type": "error", "message": "Invalid message format"}

        ws.send_json({"type": "submit_vote", "votedPlayerId": AI_PLAYER_ID, "isAIGuess": True})
        err = ws.receive_json()
        assert err["type"] == "error"
        assert "Register" in err["message"]

        # Socket stays usable after an error.
        ws.send_json({"type": "register_player", "name": "Alice"})
        assert _receive_until(ws, "registration_successful")["name"] == "Alice"


def test_ws_rejects_connection_when_full(responder) -> None:
    from spot_the_ai.actions import GameSession
    from spot_the_ai.api.deps import get_game_session
    from spot_the_ai.main import app
    from spot_the_ai.singleton import reset_session_for_tests

    session = GameSession(responder=responder, capacity=1)
    app.dependency_overrides[get_game_session] = lambda: session
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as first:
                first.send_json({"type": "register_player", "name": "Alice"})
                _receive_until(first, "registration_successful")

                with client.websocket_connect("/ws") as second:
                    assert second.receive_json() == {"type": "connection_rejected", "reason": "Server is full"}
    finally:
        app.dependency_overrides.clear()
        reset_session_for_tests()
