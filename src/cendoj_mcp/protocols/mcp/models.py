"""MCP models — JSON-RPC 2.0 envelopes and tool definitions.

Implements the message format exchanged over the websocket: requests,
replies (``result`` or ``error``), the unsolicited handshake push that
carries the reserved id ``0``, and the tool descriptors advertised by
``tools/list``.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

# ---------------------------------------------------------------------------
# Reserved values
# ---------------------------------------------------------------------------

#: Id of the handshake envelope pushed by the server on connect.
HANDSHAKE_ID = 0

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

#: Strict: JSON booleans and floats are not ids.
RequestId = StrictInt | StrictStr


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    A request without an ``id`` member is a notification and gets no reply.
    An explicit ``"id": null`` is a request and is answered with a null id.
    """

    jsonrpc: Literal["2.0"] = "2.0"
    method: str
    id: RequestId | None = None
    params: dict[str, Any] = {}

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set

    def to_wire(self) -> str:
        payload = self.model_dump()
        if self.is_notification:
            payload.pop("id")
        return json.dumps(payload, ensure_ascii=False)


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 reply: exactly one of ``result`` or ``error`` goes on the wire.

    Unknown members are rejected, so a request echoed back (it carries
    ``method``) never passes for a reply.
    """

    model_config = ConfigDict(extra="forbid")

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: RequestId | None, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: RequestId | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    @property
    def is_handshake(self) -> bool:
        return self.id == HANDSHAKE_ID and self.error is None

    def to_wire(self) -> str:
        """Serialise with ``result`` or ``error`` (never both); ``id`` is always present."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        payload["id"] = self.id
        return json.dumps(payload, ensure_ascii=False)


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``.

    Purely declarative: ``input_schema`` is advertised, never enforced.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ToolCallParams(BaseModel):
    """``params`` of a ``tools/call`` request."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


def object_schema(
    properties: dict[str, dict[str, Any]] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    """Build a JSON-schema ``object`` declaration for a tool's input."""
    return {
        "type": "object",
        "properties": dict(properties or {}),
        "required": list(required or []),
    }


def text_content(payload: Any) -> dict[str, Any]:
    """Wrap a tool result as ``tools/call`` content.

    The payload is JSON-encoded into the ``text`` item; callers decode it again.
    """
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return {"content": [{"type": "text", "text": text}]}
