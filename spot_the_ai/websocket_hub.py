from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket

from spot_the_ai.core.events import GameEvent

logger = logging.getLogger(__name__)


class GameWebSocketHub:
    """In-process WebSocket fan-out keyed by connection id.

    Contract:
      - register an accepted socket with `connect(connection_id, websocket)`.
      - `broadcast(payload)` reaches every socket, `send(connection_id, payload)` just one.

    Payloads should be JSON-serializable dicts.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, WebSocket] = {}
        self._lock = asyncio.Lock()

    async def connect(self, connection_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._by_id[connection_id] = websocket

    async def disconnect(self, connection_id: str) -> None:
        async with self._lock:
            self._by_id.pop(connection_id, None)

    async def send(self, connection_id: str, payload: dict[str, object]) -> None:
        async with self._lock:
            ws = self._by_id.get(connection_id)
        if ws is None:
            return
        try:
            await ws.send_json(payload)
        except Exception:
            logger.debug("Dropping dead connection %s", connection_id)
            await self.disconnect(connection_id)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._by_id.items())

        dead: list[str] = []
        for cid, ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(cid)

        if dead:
            async with self._lock:
                for cid in dead:
                    self._by_id.pop(cid, None)

    async def publish(self, events: list[GameEvent]) -> None:
        for event in events:
            if event.target is None:
                await self.broadcast(event.to_message())
            else:
                await self.send(event.target, event.to_message())


hub = GameWebSocketHub()
