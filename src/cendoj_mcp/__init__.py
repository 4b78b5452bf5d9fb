"""Cendoj MCP — JSON-RPC tool server and client for CENDOJ court rulings."""

from __future__ import annotations

__version__ = "0.1.0"
