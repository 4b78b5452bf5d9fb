"""MCP transports — message-framed duplex channels.

Each transport satisfies the :class:`MCPTransport` protocol, providing
``connect``, ``send``, ``receive``, and ``close`` methods.  Messages are
raw text frames; parsing them is the caller's job so that malformed
input can be handled by protocol rules rather than by the transport.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import websockets

from cendoj_mcp.protocols.errors import ConnectionClosedError


@runtime_checkable
class MCPTransport(Protocol):
    """Abstract transport for MCP JSON-RPC communication.

    ``receive`` raises :class:`ConnectionClosedError` once the channel is
    closed by either side.
    """

    async def connect(self) -> None: ...
    async def send(self, text: str) -> None: ...
    async def receive(self) -> str: ...
    async def close(self) -> None: ...


class WebSocketTransport:
    """Communicates with an MCP server over WebSocket."""

    def __init__(self, url: str, *, open_timeout: float | None = 10.0) -> None:
        self._url = url
        self._open_timeout = open_timeout
        self._ws: Any = None  # websockets.asyncio.client.ClientConnection

    @property
    def url(self) -> str:
        return self._url

    async def connect(self) -> None:
        """Open the WebSocket connection."""
        self._ws = await websockets.connect(self._url, open_timeout=self._open_timeout)

    async def send(self, text: str) -> None:
        """Send one text frame."""
        if self._ws is None:
            raise ConnectionClosedError("transport not connected")
        try:
            await self._ws.send(text)
        except websockets.ConnectionClosed as exc:
            raise ConnectionClosedError(str(exc)) from exc

    async def receive(self) -> str:
        """Wait for the next frame; binary frames are decoded as UTF-8."""
        if self._ws is None:
            raise ConnectionClosedError("transport not connected")
        try:
            raw = await self._ws.recv()
        except websockets.ConnectionClosed as exc:
            raise ConnectionClosedError(str(exc)) from exc
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="replace")
        return raw  # type: ignore[no-any-return]

    async def close(self) -> None:
        """Close the WebSocket connection."""
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
