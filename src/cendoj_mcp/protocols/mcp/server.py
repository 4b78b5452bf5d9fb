"""MCPServer — dispatches JSON-RPC requests received over WebSocket.

Each accepted connection first receives an unsolicited handshake envelope
(id ``0``).  Every inbound message is then answered on the same
connection: parse errors with ``-32700`` and a null id, unknown methods
with ``-32601``, everything else with a reply echoing the request id.
Notifications (no id) are consumed without a reply.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from http import HTTPStatus
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import websockets
from opentelemetry import trace
from pydantic import ValidationError

from cendoj_mcp.config import ServerSettings
from cendoj_mcp.protocols.errors import RpcError
from cendoj_mcp.protocols.mcp.models import (
    HANDSHAKE_ID,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolCallParams,
    text_content,
)
from cendoj_mcp.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_METHOD,
    ATTR_REQUEST_ID,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from websockets.asyncio.server import ServerConnection
    from websockets.http11 import Request, Response

    from cendoj_mcp.protocols.mcp.tools import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

HEALTH_PATH = "/health"


class Method(str, Enum):
    """Top-level methods the server answers."""

    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"


MethodHandler = Callable[[dict[str, Any]], Any]


class MCPServer:
    """Serves a :class:`ToolRegistry` to MCP clients.

    Usage::

        server = MCPServer(registry, settings)
        await server.serve_forever()

    ``handle_message`` is transport-free and can be driven directly.
    """

    def __init__(self, registry: ToolRegistry, settings: ServerSettings | None = None) -> None:
        self._registry = registry
        self._settings = settings or ServerSettings()
        self._methods: dict[Method, MethodHandler] = {
            Method.INITIALIZE: self._initialize,
            Method.TOOLS_LIST: self._list_tools,
            Method.TOOLS_CALL: self._call_tool,
        }

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Protocol
    # ------------------------------------------------------------------

    def handshake(self) -> JsonRpcResponse:
        """The envelope pushed to every client on connect."""
        return JsonRpcResponse.success(HANDSHAKE_ID, self._server_description())

    def handle_message(self, raw: str | bytes) -> str | None:
        """Answer one inbound message; ``None`` means no reply is due."""
        try:
            request = JsonRpcRequest.model_validate_json(raw)
        except ValidationError:
            logger.warning("Parse error on inbound message")
            return JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire()

        response = self.dispatch(request)
        return response.to_wire() if response is not None else None

    def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Route a parsed request to its method handler."""
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_METHOD, request.method)

            if request.is_notification:
                logger.debug("Notification %s", request.method)
                return None

            span.set_attribute(ATTR_REQUEST_ID, str(request.id))
            logger.debug("Request %s: %s", request.id, request.method)

            try:
                method = Method(request.method)
            except ValueError:
                logger.warning("Unknown method: %s", request.method)
                span.set_attribute(ATTR_ERROR_CODE, METHOD_NOT_FOUND)
                return JsonRpcResponse.failure(
                    request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}"
                )

            try:
                result = self._methods[method](request.params)
            except RpcError as exc:
                span.set_attribute(ATTR_ERROR_CODE, exc.code)
                return JsonRpcResponse.failure(request.id, exc.code, exc.message, exc.data)
            except Exception:
                logger.exception("Error handling %s", request.method)
                span.set_attribute(ATTR_ERROR_CODE, INTERNAL_ERROR)
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error")

            return JsonRpcResponse.success(request.id, result)

    def _server_description(self) -> dict[str, Any]:
        return {
            "protocolVersion": self._settings.protocol_version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": self._settings.server_info,
        }

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client_info = params.get("clientInfo") or {}
        logger.info(
            "Initialize from %s %s (protocol %s)",
            client_info.get("name", "?"),
            client_info.get("version", "?"),
            params.get("protocolVersion", "?"),
        )
        return self._server_description()

    def _list_tools(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in self._registry.definitions()]}

    def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            call = ToolCallParams.model_validate(params)
        except ValidationError as exc:
            raise RpcError(INVALID_PARAMS, "Invalid params: expected {name, arguments}") from exc

        trace.get_current_span().set_attribute(ATTR_TOOL_NAME, call.name)
        return text_content(self._registry.call(call.name, call.arguments))

    # ------------------------------------------------------------------
    # WebSocket
    # ------------------------------------------------------------------

    async def handle_connection(self, websocket: ServerConnection) -> None:
        """Push the handshake, then answer each message in arrival order."""
        remote = websocket.remote_address
        logger.info("Client connected: %s", remote)
        try:
            await websocket.send(self.handshake().to_wire())
            async for message in websocket:
                reply = self.handle_message(message)
                if reply is not None:
                    await websocket.send(reply)
        except websockets.ConnectionClosed as exc:
            logger.debug("Connection from %s closed: %s", remote, exc)
        finally:
            logger.info("Client disconnected: %s", remote)

    def process_request(self, connection: ServerConnection, request: Request) -> Response | None:
        """Answer plain HTTP before the upgrade: health check and unknown paths."""
        path = urlsplit(request.path).path
        if path == HEALTH_PATH:
            body = json.dumps(
                {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
            )
            response = connection.respond(HTTPStatus.OK, body)
            del response.headers["Content-Type"]
            response.headers["Content-Type"] = "application/json"
            return response
        if self._settings.path and path != self._settings.path:
            logger.warning("Rejecting connection on unknown path %s", path)
            return connection.respond(HTTPStatus.NOT_FOUND, "Not Found\n")
        return None

    def listen(self, host: str | None = None, port: int | None = None) -> Any:
        """Create the WebSocket listener; use as ``async with server.listen() as ws_server``."""
        return websockets.serve(
            self.handle_connection,
            host if host is not None else self._settings.host,
            port if port is not None else self._settings.port,
            process_request=self.process_request,
        )

    async def serve_forever(self) -> None:
        """Listen on the configured address until cancelled."""
        async with self.listen() as ws_server:
            logger.info(
                "Cendoj MCP server listening on ws://%s:%s%s",
                self._settings.host,
                self._settings.port,
                self._settings.path,
            )
            await ws_server.serve_forever()
