"""Shared fixtures: an in-memory WebSocket and a scripted RPC client."""

import asyncio
import json

import pytest

from godot_docs_mcp import server
from godot_docs_mcp.config import reset_config
from godot_docs_mcp.godot_client import set_client
from godot_docs_mcp.tools.classdb import set_dispatcher

_CLOSED = object()


class FakeWebSocket:
    """Stands in for a websockets connection: records sends, replays fed frames."""

    def __init__(self, responder=None):
        self.sent: list[dict] = []
        self.responder = responder
        self.closed = False
        self._incoming: asyncio.Queue = asyncio.Queue()

    async def send(self, data: str) -> None:
        request = json.loads(data)
        self.sent.append(request)
        if self.responder is not None:
            result = self.responder(request["method"], request["params"])
            self.feed({"id": request["id"], "result": result})

    def feed(self, frame) -> None:
        """Queue an inbound frame (dicts are JSON-encoded)."""
        if isinstance(frame, dict):
            frame = json.dumps(frame)
        self._incoming.put_nowait(frame)

    def drop(self) -> None:
        """Simulate the remote side closing the connection."""
        self._incoming.put_nowait(_CLOSED)

    async def close(self) -> None:
        self.closed = True
        self._incoming.put_nowait(_CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self):
        frame = await self._incoming.get()
        if frame is _CLOSED:
            raise StopAsyncIteration
        return frame


class FakeConnector:
    """Hands out FakeWebSockets; fails the first `failures` attempts with `error`."""

    def __init__(self, failures: int = 0, error: type = ConnectionRefusedError, responder=None):
        self.failures = failures
        self.error = error
        self.responder = responder
        self.attempts = 0
        self.sockets: list[FakeWebSocket] = []

    async def __call__(self, url: str) -> FakeWebSocket:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise self.error(f"refused: {url}")
        ws = FakeWebSocket(self.responder)
        self.sockets.append(ws)
        return ws

    @property
    def last(self) -> FakeWebSocket:
        return self.sockets[-1]


class ScriptedClient:
    """RPC client returning canned replies per method and recording calls."""

    def __init__(self, replies: dict | None = None, error: Exception | None = None):
        self.replies = replies or {}
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    async def send_rpc_request(self, method: str, params: dict | None = None):
        self.calls.append((method, params))
        if self.error is not None:
            raise self.error
        return self.replies.get(method, {})


async def wait_until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture(autouse=True)
def _reset_globals(monkeypatch):
    monkeypatch.delenv("GODOT_WS_URL", raising=False)
    reset_config()
    set_client(None)
    set_dispatcher(None)
    server._active_sessions = 0
    yield
    reset_config()
    set_client(None)
    set_dispatcher(None)
