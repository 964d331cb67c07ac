"""
Upstream bridge — reconnecting client for the external checker's event feed.

State machine:
    disconnected -> connecting -> connected -> disconnected (-> connecting ...)

- connect() is a no-op unless the bridge is disconnected and not stopped,
  so there is never more than one connection or connection attempt.
- A dropped or failed connection schedules exactly one reconnect after
  `reconnect_delay` seconds.
- stop() cancels the reconnect timer, closes the connection and disables
  reconnecting until start() is called again.

Feed messages are {"type": "blocked_domain", "domain", "status", "blockedId"?}.
Messages that do not match are logged and dropped; the connection stays up.
Version: 1.0.0
"""
import asyncio
import json
import logging
from enum import Enum
from typing import Any, Dict, Optional, Protocol

import websockets
from websockets.exceptions import WebSocketException

from app.core.constants.status import FEED_MESSAGE_TYPE
from app.core.exceptions import (
    DashboardException,
    UpstreamProtocolError,
    UpstreamTransportError,
    ValidationError,
)
from app.services.status_service import StatusService
from app.utils.domain_normalize import normalize_domain
from app.utils.timers import LoopTimerFactory, TimerFactory, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 5.0


class BridgeState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class FeedConnection(Protocol):
    async def recv(self) -> Any: ...

    async def close(self) -> None: ...


class FeedTransport(Protocol):
    async def open(self, url: str) -> FeedConnection: ...


class WebsocketsConnection:
    """Wraps a websockets client connection, raising UpstreamTransportError on close."""

    def __init__(self, connection) -> None:
        self._connection = connection

    async def recv(self) -> Any:
        try:
            return await self._connection.recv()
        except WebSocketException as e:
            raise UpstreamTransportError(f"Checker feed closed: {e}") from e

    async def close(self) -> None:
        await self._connection.close()


class WebsocketsTransport:
    def __init__(self, open_timeout: float = 10.0) -> None:
        self._open_timeout = open_timeout

    async def open(self, url: str) -> WebsocketsConnection:
        try:
            connection = await websockets.connect(url, open_timeout=self._open_timeout)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            raise UpstreamTransportError(f"Could not connect to checker feed: {e}") from e
        return WebsocketsConnection(connection)


# ---------------------------------------------------------------------------
# Message parsing
# ---------------------------------------------------------------------------

def parse_feed_message(raw: Any) -> Dict[str, Optional[str]]:
    """
    Validate one feed message and return {domain, status, marker}.

    Raises:
        UpstreamProtocolError: not JSON, wrong type, or missing fields
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise UpstreamProtocolError("Feed message is not valid JSON") from e

    if not isinstance(data, dict):
        raise UpstreamProtocolError("Feed message is not an object")
    if data.get("type") != FEED_MESSAGE_TYPE:
        raise UpstreamProtocolError(f"Unexpected feed message type: {data.get('type')!r}")

    domain = data.get("domain")
    status = data.get("status")
    if not isinstance(domain, str) or not isinstance(status, str):
        raise UpstreamProtocolError("Feed message needs string 'domain' and 'status'")

    try:
        key = normalize_domain(domain)
    except ValidationError as e:
        raise UpstreamProtocolError(f"Feed message domain {domain!r}: {e.message}") from e

    marker = data.get("blockedId")
    return {
        "domain": key,
        "status": status,
        "marker": str(marker) if marker not in (None, "") else None,
    }


# ---------------------------------------------------------------------------
# Bridge
# ---------------------------------------------------------------------------

class UpstreamBridge:
    def __init__(
        self,
        url: str,
        status_service: StatusService,
        transport: Optional[FeedTransport] = None,
        timer_factory: Optional[TimerFactory] = None,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
    ) -> None:
        self._url = url
        self._status = status_service
        self._transport = transport or WebsocketsTransport()
        self._timer_factory = timer_factory or LoopTimerFactory()
        self._reconnect_delay = reconnect_delay

        self._state = BridgeState.DISCONNECTED
        self._stopped = True
        self._connection: Optional[FeedConnection] = None
        self._task: Optional[asyncio.Task] = None
        self._reconnect_timer: Optional[TimerHandle] = None

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_timer is not None

    def start(self) -> Optional[asyncio.Task]:
        self._stopped = False
        logger.info(f"Checker bridge starting url={self._url}")
        return self.connect()

    def connect(self) -> Optional[asyncio.Task]:
        """Begin a connection attempt unless one is already running."""
        if self._stopped or self._state != BridgeState.DISCONNECTED or self._task is not None:
            return None
        self._cancel_reconnect()
        self._set_state(BridgeState.CONNECTING)
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def stop(self) -> None:
        self._stopped = True
        self._cancel_reconnect()

        connection, self._connection = self._connection, None
        if connection is not None:
            await self._close_connection(connection)

        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._set_state(BridgeState.DISCONNECTED)
        logger.info("Checker bridge stopped")

    async def handle_message(self, raw: Any) -> Optional[Dict[str, Any]]:
        """Route one feed message to the status service; never raises."""
        try:
            message = parse_feed_message(raw)
        except UpstreamProtocolError as e:
            logger.warning(f"Dropping malformed checker message: {e.message}")
            return None

        try:
            return await self._status.apply_by_key(
                message["domain"], message["status"], message["marker"]
            )
        except DashboardException as e:
            logger.warning(f"Could not apply checker update for {message['domain']}: {e.message}")
            return None
        except Exception:
            logger.exception(f"Unexpected error applying checker update for {message['domain']}")
            return None

    async def _run(self) -> None:
        try:
            connection = await self._transport.open(self._url)
        except UpstreamTransportError as e:
            logger.warning(f"Checker feed connection failed: {e.message}")
            self._on_disconnect()
            return

        if self._stopped:
            if self._task is asyncio.current_task():
                self._task = None
                self._set_state(BridgeState.DISCONNECTED)
            await connection.close()
            return

        self._connection = connection
        self._set_state(BridgeState.CONNECTED)
        try:
            while True:
                raw = await connection.recv()
                await self.handle_message(raw)
        except (UpstreamTransportError, OSError) as e:
            logger.warning(f"Checker feed disconnected: {e}")
        except Exception:
            logger.exception("Checker feed receive loop failed")
            await self._close_connection(connection)
        finally:
            if self._connection is connection:
                self._connection = None
        if not self._stopped:
            self._on_disconnect()

    async def _close_connection(self, connection: FeedConnection) -> None:
        try:
            await connection.close()
        except (OSError, WebSocketException, UpstreamTransportError) as e:
            logger.info(f"Error closing checker feed: {e}")

    def _on_disconnect(self) -> None:
        self._task = None
        self._set_state(BridgeState.DISCONNECTED)
        self.schedule_reconnect()

    def schedule_reconnect(self) -> None:
        if self._stopped or self._reconnect_timer is not None:
            return
        logger.info(f"Checker feed reconnect in {self._reconnect_delay:g}s")
        self._reconnect_timer = self._timer_factory(self._reconnect_delay, self._on_reconnect_timer)

    def _on_reconnect_timer(self) -> None:
        self._reconnect_timer = None
        self.connect()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

    def _set_state(self, state: BridgeState) -> None:
        if state != self._state:
            logger.info(f"Checker bridge {self._state.value} -> {state.value}")
            self._state = state
