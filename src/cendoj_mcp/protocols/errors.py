"""Shared error types for the protocol layer."""

from __future__ import annotations

from typing import Any


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class ConnectionError(ProtocolError):
    """Failed to connect to the remote endpoint."""


class ConnectionClosedError(ProtocolError):
    """The connection closed before a reply arrived, or was already closed."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Connection closed" + (f": {detail}" if detail else ""))


class RpcError(ProtocolError):
    """The peer answered with a JSON-RPC error envelope."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"[{code}] {message}")


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")
