"""Protocol layer — JSON-RPC envelopes, transports, client and server."""

from cendoj_mcp.protocols.errors import (
    ConnectionClosedError,
    ConnectionError,
    ProtocolError,
    RpcError,
    ToolNotFoundError,
)

__all__ = [
    "ConnectionClosedError",
    "ConnectionError",
    "ProtocolError",
    "RpcError",
    "ToolNotFoundError",
]
