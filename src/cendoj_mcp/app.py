"""Wires settings, the sentence store, and the tool registry into a server."""

from __future__ import annotations

import logging

from cendoj_mcp.config import ServerSettings
from cendoj_mcp.protocols.mcp.server import MCPServer
from cendoj_mcp.store.store import SentenceStore
from cendoj_mcp.tools import build_registry

logger = logging.getLogger(__name__)


def build_server(settings: ServerSettings | None = None) -> MCPServer:
    """Create an :class:`MCPServer` over the configured records.

    Raises:
        RecordLoadError: If ``settings.data_file`` cannot be loaded.
    """
    settings = settings or ServerSettings()
    if settings.data_file is not None:
        store = SentenceStore.from_file(settings.data_file)
        logger.info("Loaded %d sentences from %s", len(store), settings.data_file)
    else:
        store = SentenceStore()
    return MCPServer(build_registry(store), settings)
