"""MCPClient — multiplexes concurrent JSON-RPC calls over one connection.

Every call gets a fresh integer id and a pending future; a background
reader settles futures as replies arrive, in whatever order the server
sends them.  Closing the connection, locally or remotely, rejects every
call still pending.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Any, cast

from pydantic import ValidationError

from cendoj_mcp.protocols.errors import ConnectionClosedError, ConnectionError, RpcError
from cendoj_mcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse, MCPToolDef
from cendoj_mcp.protocols.mcp.transport import MCPTransport, WebSocketTransport

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


class MCPClient:
    """Async context manager that connects to an MCP server.

    Usage::

        async with MCPClient("ws://localhost:8080/mcp") as client:
            await client.initialize()
            tools = await client.list_tools()
            payload = await client.call_tool("get_sentence", {"id": 2})
    """

    def __init__(self, url: str, *, transport: MCPTransport | None = None) -> None:
        self._url = url
        self._transport: MCPTransport | None = transport
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._next_id = 1
        self._reader: asyncio.Task[None] | None = None
        self._connected = False
        self.server_hello: dict[str, Any] | None = None

    async def __aenter__(self) -> MCPClient:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def connect(self) -> None:
        """Open the transport and start the reader before returning.

        The reader is running by the time ``connect`` resolves, so the
        server's handshake push is never missed.
        """
        if self._transport is None:
            self._transport = self._create_transport()
        try:
            await self._transport.connect()
        except Exception as exc:
            raise ConnectionError(str(exc)) from exc
        self._connected = True
        self._reader = asyncio.create_task(self._read_loop())
        logger.debug("Connected to %s", self._url)

    async def close(self) -> None:
        """Close the transport and reject all outstanding calls."""
        transport, self._transport = self._transport, None
        self._connected = False
        try:
            if transport is not None:
                await transport.close()
        finally:
            if self._reader is not None:
                if not self._reader.done():
                    self._reader.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._reader
                self._reader = None
            self._reject_all("closed by client")

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Send a request and wait for its reply.

        Raises:
            RpcError: The server answered with an error envelope.
            ConnectionClosedError: The connection closed before the reply.
        """
        if not self._connected or self._transport is None:
            raise ConnectionClosedError("client not connected")

        request_id = self._next_id
        self._next_id += 1

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        request = JsonRpcRequest(method=method, id=request_id, params=params or {})
        try:
            await self._transport.send(request.to_wire())
            return await future
        finally:
            self._pending.pop(request_id, None)

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        """Send a notification (no id, no reply)."""
        if not self._connected or self._transport is None:
            raise ConnectionClosedError("client not connected")
        await self._transport.send(JsonRpcRequest(method=method, params=params or {}).to_wire())

    # ------------------------------------------------------------------
    # MCP conveniences
    # ------------------------------------------------------------------

    async def initialize(
        self,
        client_name: str = "cendoj-mcp",
        client_version: str = "0.1.0",
    ) -> dict[str, Any]:
        """Perform the MCP initialize handshake."""
        result = await self.call(
            "initialize",
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": {"name": client_name, "version": client_version},
            },
        )
        await self.notify("notifications/initialized")
        return cast("dict[str, Any]", result or {})

    async def list_tools(self) -> list[MCPToolDef]:
        """Send ``tools/list``."""
        result = await self.call("tools/list")
        raw_tools = cast("list[dict[str, Any]]", (result or {}).get("tools", []))
        return [MCPToolDef.model_validate(raw) for raw in raw_tools]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Send ``tools/call`` and decode the JSON text payload.

        An unknown tool or a failed lookup comes back as a normal payload
        carrying an ``error`` key, not as an exception.
        """
        result = await self.call("tools/call", {"name": name, "arguments": arguments or {}})
        return decode_tool_result(result)

    # ------------------------------------------------------------------
    # Inbound path
    # ------------------------------------------------------------------

    def _create_transport(self) -> MCPTransport:
        return WebSocketTransport(self._url)

    async def _read_loop(self) -> None:
        transport = self._transport
        if transport is None:
            return
        try:
            while True:
                raw = await transport.receive()
                self._handle_message(raw)
        except ConnectionClosedError:
            logger.debug("Connection to %s closed", self._url)
        except Exception as exc:
            logger.warning("Transport error on %s: %s", self._url, exc)
        finally:
            self._connected = False
            self._reject_all("connection lost")

    def _handle_message(self, raw: str | bytes) -> None:
        """Settle the pending call named by an inbound reply.

        Malformed, stale and unknown replies are dropped.
        """
        try:
            response = JsonRpcResponse.model_validate_json(raw)
        except ValidationError:
            logger.debug("Dropping malformed message from %s", self._url)
            return

        if response.is_handshake:
            self.server_hello = response.result if isinstance(response.result, dict) else None
            logger.debug("Handshake received from %s", self._url)
            return

        if not isinstance(response.id, int):
            logger.debug("Dropping reply with non-integer id %r", response.id)
            return

        future = self._pending.pop(response.id, None)
        if future is None or future.done():
            logger.debug("Dropping reply for unknown id %s", response.id)
            return

        if response.error is not None:
            err = response.error
            future.set_exception(RpcError(err.code, err.message, err.data))
        else:
            future.set_result(response.result)

    def _reject_all(self, detail: str) -> None:
        pending, self._pending = self._pending, {}
        for future in pending.values():
            if not future.done():
                future.set_exception(ConnectionClosedError(detail))


def decode_tool_result(result: Any) -> Any:
    """Decode the text payload of a ``tools/call`` result.

    Returns the parsed JSON of the first text item, or the raw text when it
    is not JSON.
    """
    if not isinstance(result, dict):
        return result
    content = cast("list[dict[str, Any]]", result.get("content", []))
    for item in content:
        if item.get("type") == "text":
            text = str(item.get("text", ""))
            try:
                return json.loads(text)
            except json.JSONDecodeError:
                return text
    return result
