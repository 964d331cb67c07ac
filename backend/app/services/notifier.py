"""
Notifier — fan-out of named events to connected WebSocket subscribers.

Every message is {"event": <name>, "data": <payload>}. Delivery is
best-effort to whoever is connected right now: no acknowledgement, no
replay, and a subscriber whose send fails is dropped.
Version: 1.0.0
"""
import asyncio
import logging
from typing import Any, Optional, Protocol, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def emit(self, event: str, data: Any = None) -> None: ...


class WebSocketNotifier:
    def __init__(self) -> None:
        self._subscribers: Set[WebSocket] = set()
        self._pending: Set[asyncio.Task] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._subscribers.add(websocket)
        logger.info(f"Subscriber connected (total={len(self._subscribers)})")

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._subscribers:
            self._subscribers.discard(websocket)
            logger.info(f"Subscriber disconnected (total={len(self._subscribers)})")

    def emit(self, event: str, data: Any = None) -> None:
        """
        Schedule a broadcast without waiting for it.

        Safe to call from sync code (timer callbacks) as long as an event
        loop is running; outside a loop the event is dropped.
        """
        if not self._subscribers:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running loop, dropping event {event}")
            return
        task = loop.create_task(self.broadcast(event, data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def broadcast(self, event: str, data: Any = None) -> int:
        """Send one event to every subscriber; returns how many received it."""
        message = {"event": event, "data": jsonable_encoder(data)}
        delivered = 0
        for websocket in list(self._subscribers):
            if await self._send(websocket, message):
                delivered += 1
        logger.debug(f"Broadcast {event} to {delivered} subscriber(s)")
        return delivered

    async def send_to(self, websocket: WebSocket, event: str, data: Optional[Any] = None) -> None:
        await self._send(websocket, {"event": event, "data": jsonable_encoder(data)})

    async def _send(self, websocket: WebSocket, message: dict) -> bool:
        try:
            await websocket.send_json(message)
            return True
        except Exception as e:
            logger.info(f"Dropping subscriber after failed send: {e}")
            self.disconnect(websocket)
            return False
