"""Record store — the sentences served by the MCP tools."""

from cendoj_mcp.store.models import Sentence
from cendoj_mcp.store.store import DEFAULT_SENTENCES, SentenceStore

__all__ = [
    "DEFAULT_SENTENCES",
    "Sentence",
    "SentenceStore",
]
