"""MCP protocol — Model Context Protocol client and server."""

from cendoj_mcp.protocols.mcp.client import MCPClient, decode_tool_result
from cendoj_mcp.protocols.mcp.models import (
    HANDSHAKE_ID,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
)
from cendoj_mcp.protocols.mcp.server import MCPServer, Method
from cendoj_mcp.protocols.mcp.tools import Tool, ToolRegistry
from cendoj_mcp.protocols.mcp.transport import MCPTransport, WebSocketTransport

__all__ = [
    "HANDSHAKE_ID",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPClient",
    "MCPServer",
    "MCPToolDef",
    "MCPTransport",
    "Method",
    "Tool",
    "ToolRegistry",
    "WebSocketTransport",
    "decode_tool_result",
]
