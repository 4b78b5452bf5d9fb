"""ToolRegistry — routes ``tools/call`` requests to tool handlers by name."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from cendoj_mcp.protocols.errors import ToolNotFoundError
from cendoj_mcp.protocols.mcp.models import MCPToolDef

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class Tool:
    """A tool descriptor bound to the function that implements it."""

    definition: MCPToolDef
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.definition.name


class ToolRegistry:
    """Fixed, ordered name-to-tool table.

    Built once; ``call`` never raises.  Unknown tools and handler failures
    come back as ``{"error": ...}`` results so the reply path stays uniform.

    Usage::

        registry = ToolRegistry(tools)
        registry.definitions()               # advertised by tools/list
        registry.call("get_sentence", {"id": 2})
    """

    def __init__(self, tools: Iterable[Tool]) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                msg = f"Duplicate tool name: {tool.name}"
                raise ValueError(msg)
            self._tools[tool.name] = tool
        self._definitions = tuple(tool.definition for tool in self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def definitions(self) -> tuple[MCPToolDef, ...]:
        """Tool descriptors in registration order."""
        return self._definitions

    def get(self, name: str) -> Tool:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def call(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Run the named tool and return its result object."""
        try:
            tool = self.get(name)
        except ToolNotFoundError as exc:
            logger.warning("Unknown tool requested: %s", name)
            return {"error": str(exc)}

        try:
            return tool.handler(arguments)
        except Exception as exc:
            logger.exception("Tool %s failed", name)
            return {"error": str(exc) or exc.__class__.__name__}
