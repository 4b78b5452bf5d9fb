"""Shared fixtures: in-memory transports for the client and server."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import pytest

from cendoj_mcp.protocols.errors import ConnectionClosedError
from cendoj_mcp.protocols.mcp.server import MCPServer
from cendoj_mcp.store.store import SentenceStore
from cendoj_mcp.tools import build_registry


class QueueTransport:
    """Client transport backed by a queue the test feeds.

    ``feed`` delivers a frame, ``drop`` simulates a remote close, and
    ``fail`` makes the next ``receive`` raise.
    """

    def __init__(
        self,
        *,
        connect_error: Exception | None = None,
        close_error: Exception | None = None,
    ) -> None:
        self.inbox: asyncio.Queue[Any] = asyncio.Queue()
        self.sent: list[dict[str, Any]] = []
        self.connected = False
        self.closed = False
        self._connect_error = connect_error
        self._close_error = close_error

    async def connect(self) -> None:
        if self._connect_error is not None:
            raise self._connect_error
        self.connected = True

    async def send(self, text: str) -> None:
        if self.closed:
            raise ConnectionClosedError("transport closed")
        self.sent.append(json.loads(text))

    async def receive(self) -> str:
        item = await self.inbox.get()
        if item is None:
            raise ConnectionClosedError("remote closed")
        if isinstance(item, Exception):
            raise item
        return item  # type: ignore[no-any-return]

    async def close(self) -> None:
        self.closed = True
        if self._close_error is not None:
            raise self._close_error
        self.inbox.put_nowait(None)

    def feed(self, message: dict[str, Any] | str) -> None:
        self.inbox.put_nowait(message if isinstance(message, str) else json.dumps(message))

    def drop(self) -> None:
        self.inbox.put_nowait(None)

    def fail(self, exc: Exception) -> None:
        self.inbox.put_nowait(exc)


class FakeWebSocket:
    """Server-side connection that yields scripted messages and records sends."""

    def __init__(self, messages: list[str], *, error: Exception | None = None) -> None:
        self._messages = messages
        self._error = error
        self.sent: list[dict[str, Any]] = []
        self.remote_address = ("127.0.0.1", 50000)

    async def send(self, text: str) -> None:
        self.sent.append(json.loads(text))

    async def __aiter__(self) -> AsyncIterator[str]:
        for message in self._messages:
            yield message
        if self._error is not None:
            raise self._error


@pytest.fixture
def transport() -> QueueTransport:
    return QueueTransport()


@pytest.fixture
def store() -> SentenceStore:
    return SentenceStore()


@pytest.fixture
def server(store: SentenceStore) -> MCPServer:
    return MCPServer(build_registry(store))


@pytest.fixture
def fake_websocket_cls() -> type[FakeWebSocket]:
    return FakeWebSocket


@pytest.fixture
def queue_transport_cls() -> type[QueueTransport]:
    return QueueTransport
