"""
WebSocket JSON-RPC client for the Godot documentation plugin.

Keeps one persistent connection to the plugin running inside the Godot Editor,
reconnects with a fixed delay whenever it closes, and correlates replies with
requests by a monotonically increasing id.
"""

from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config import get_config

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = (
    "Not connected to Godot. Please ensure Godot Editor is running with the plugin enabled."
)

# Opens a WebSocket connection for a URL. Swappable for tests.
Connector = Callable[[str], Awaitable[Any]]


class ConnectionState(str, Enum):
    """Lifecycle of the single connection to the Godot plugin."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


class GodotClientError(Exception):
    """Base error for Godot plugin communication."""

    pass


class GodotConnectionError(GodotClientError):
    """Opening the WebSocket connection failed."""

    pass


class GodotNotConnectedError(GodotClientError):
    """A request was attempted while no connection is open."""

    pass


class GodotTimeoutError(GodotClientError):
    """No reply arrived within the request timeout."""

    pass


class GodotRPCError(GodotClientError):
    """The plugin answered with a JSON-RPC error."""

    pass


async def _websocket_connector(url: str) -> Any:
    return await websockets.connect(url)


class GodotClient:
    """JSON-RPC over WebSocket client for the Godot documentation plugin.

    Owns the connection handle, the reconnect timer, the request id counter and
    the table of pending requests. All of it is touched from a single event
    loop, so no locking is needed.
    """

    def __init__(
        self,
        url: str | None = None,
        reconnect_delay: float | None = None,
        request_timeout: float | None = None,
        connector: Connector | None = None,
    ):
        """Initialize the client.

        Args:
            url: WebSocket URL of the plugin (default from config)
            reconnect_delay: Seconds between reconnect attempts (default from config)
            request_timeout: Seconds to wait for each reply (default from config)
            connector: Coroutine function opening a connection for a URL
        """
        config = get_config()
        self.url = url or config.godot_ws_url
        self.reconnect_delay = (
            config.reconnect_delay if reconnect_delay is None else reconnect_delay
        )
        self.request_timeout = (
            config.request_timeout if request_timeout is None else request_timeout
        )
        self._connector = connector or _websocket_connector

        self._ws: Any = None
        self._state = ConnectionState.DISCONNECTED
        self._reader_task: asyncio.Task | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._request_id = 0
        self._pending: dict[int, asyncio.Future] = {}
        self._shutdown = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and self._state is ConnectionState.OPEN

    @property
    def pending_count(self) -> int:
        """Number of requests still waiting for a reply."""
        return len(self._pending)

    @property
    def reconnect_pending(self) -> bool:
        """Whether a reconnect attempt is currently armed."""
        return self._reconnect_task is not None and not self._reconnect_task.done()

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def connect(self) -> None:
        """Open the WebSocket connection.

        An explicit connect also reopens a client that was closed earlier.

        Raises:
            GodotConnectionError: If the connection cannot be opened
        """
        self._shutdown = False
        await self._open()

    async def _open(self) -> None:
        if self._shutdown:
            raise GodotConnectionError("Client is closed")
        if self.is_connected:
            return

        logger.info("Connecting to Godot at %s...", self.url)
        self._state = ConnectionState.CONNECTING
        try:
            ws = await self._connector(self.url)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            self._state = ConnectionState.DISCONNECTED
            logger.error("WebSocket error: %s", e)
            raise GodotConnectionError(f"Cannot connect to Godot at {self.url}: {e}") from e
        except BaseException:
            self._state = ConnectionState.DISCONNECTED
            raise

        if self._shutdown:
            await ws.close()
            raise GodotConnectionError("Client is closed")

        self._ws = ws
        self._state = ConnectionState.OPEN
        logger.info("Connected to Godot Documentation Server")
        self._cancel_reconnect()
        self._reader_task = asyncio.create_task(self._read_loop(ws))

    def schedule_reconnect(self) -> None:
        """Arm a single reconnect attempt after the fixed delay.

        Does nothing if an attempt is already armed or the client is closed.
        A failed attempt re-arms itself, so retries continue at a constant
        interval until one succeeds.
        """
        if self._shutdown or self.reconnect_pending:
            return
        self._reconnect_task = asyncio.create_task(self._reconnect_after_delay())

    async def close(self) -> None:
        """Shut the client down.

        Unlike a dropped connection, a deliberate close never schedules a
        reconnect. Only a later explicit `connect()` opens it again.
        """
        self._shutdown = True
        self._cancel_reconnect()

        ws = self._ws
        if ws is None:
            self._state = ConnectionState.DISCONNECTED
            return

        self._state = ConnectionState.CLOSING
        try:
            await ws.close()
        finally:
            reader = self._reader_task
            self._reader_task = None
            if reader is not None:
                await asyncio.gather(reader, return_exceptions=True)
            self._ws = None
            self._state = ConnectionState.DISCONNECTED
            logger.info("Godot client closed")

    async def _reconnect_after_delay(self) -> None:
        await asyncio.sleep(self.reconnect_delay)
        logger.info("Attempting to reconnect to Godot...")
        try:
            await self._open()
        except Exception as e:
            if self._shutdown:
                return
            logger.error("Reconnection failed: %s", e)
            # This task is still running, so clear it before re-arming
            self._reconnect_task = None
            self.schedule_reconnect()

    def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                self._handle_message(raw)
        except ConnectionClosed as e:
            logger.warning("Connection to Godot lost: %s", e)
        finally:
            if self._ws is ws:
                self._ws = None
                if self._state is ConnectionState.OPEN:
                    self._state = ConnectionState.DISCONNECTED
            self._on_closed()

    def _on_closed(self) -> None:
        if self._shutdown:
            logger.info("Connection to Godot closed")
            return
        logger.warning("Connection to Godot closed. Attempting to reconnect...")
        self.schedule_reconnect()

    # =========================================================================
    # Request / reply correlation
    # =========================================================================

    def _handle_message(self, raw: str | bytes) -> None:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8", errors="replace")

        try:
            response = json.loads(raw)
        except ValueError as e:
            logger.error("Error parsing WebSocket message: %s", e)
            return

        if not isinstance(response, dict):
            logger.debug("Ignoring non-object frame from Godot")
            return

        request_id = response.get("id")
        # bool is an int subclass and True would collide with id 1
        if isinstance(request_id, bool) or not isinstance(request_id, (int, float)):
            return

        future = self._pending.pop(request_id, None)
        if future is None or future.done():
            # Unknown id, or a late reply to a request that already timed out
            return

        error = response.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            future.set_exception(GodotRPCError(message or "RPC error"))
        else:
            future.set_result(response.get("result"))

    async def send_rpc_request(self, method: str, params: dict | None = None) -> Any:
        """Send a JSON-RPC request and wait for its reply.

        Args:
            method: RPC method name
            params: Request parameters

        Returns:
            The ``result`` field of the reply

        Raises:
            GodotNotConnectedError: If no connection is open (nothing is sent)
            GodotTimeoutError: If no reply arrives within the request timeout
            GodotRPCError: If the plugin replies with an error
        """
        ws = self._ws
        if ws is None or self._state is not ConnectionState.OPEN:
            raise GodotNotConnectedError(NOT_CONNECTED_MESSAGE)

        self._request_id += 1
        request_id = self._request_id
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        request = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params if params is not None else {},
            "id": request_id,
        }
        logger.debug("RPC -> %s (id=%d)", method, request_id)

        try:
            await ws.send(json.dumps(request))
            return await asyncio.wait_for(future, timeout=self.request_timeout)
        except asyncio.TimeoutError:
            logger.warning("RPC %s (id=%d) timed out", method, request_id)
            raise GodotTimeoutError("Request timeout") from None
        except ConnectionClosed as e:
            raise GodotNotConnectedError(NOT_CONNECTED_MESSAGE) from e
        finally:
            self._pending.pop(request_id, None)


# Global client instance
_client: GodotClient | None = None


def get_client() -> GodotClient:
    """Get the global client instance."""
    global _client
    if _client is None:
        _client = GodotClient()
    return _client


def set_client(client: GodotClient | None) -> None:
    """Set the global client instance."""
    global _client
    _client = client
