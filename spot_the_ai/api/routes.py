from __future__ import annotations

import json
import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from spot_the_ai.actions import GameSession
from spot_the_ai.api.deps import get_game_session
from spot_the_ai.api.models import CurrentRoundStatus, GameStatus, Player
from spot_the_ai.websocket_hub import hub

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def game_ws(websocket: WebSocket, session: GameSession = Depends(get_game_session)) -> None:
    connection_id = str(uuid4())
    await hub.connect(connection_id, websocket)
    logger.info("New connection: %s", connection_id)

    rejected = session.admit(connection_id)
    if rejected:
        await hub.publish(rejected)
        await hub.disconnect(connection_id)
        await websocket.close()
        return

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await hub.send(connection_id, {"type": "error", "message": "Invalid message format"})
                continue
            if not isinstance(message, dict):
                await hub.send(connection_id, {"type": "error", "message": "Invalid message format"})
                continue

            await hub.publish(await session.dispatch(connection_id, message))
    except WebSocketDisconnect:
        logger.info("Disconnected: %s", connection_id)
    finally:
        # Registry cleanup first: the awaits below may be cancelled on shutdown.
        departed = session.disconnect(connection_id)
        await hub.disconnect(connection_id)
        await hub.publish(departed)


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/status", response_model=GameStatus)
async def game_status_route(session: GameSession = Depends(get_game_session)) -> GameStatus:
    return session.registry.status()


@router.get("/players", response_model=list[Player])
async def list_players_route(session: GameSession = Depends(get_game_session)) -> list[Player]:
    return session.registry.all()


@router.get("/round", response_model=CurrentRoundStatus)
async def current_round_route(session: GameSession = Depends(get_game_session)) -> CurrentRoundStatus:
    current = session.coordinator.status()
    if current is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active round")
    return current
