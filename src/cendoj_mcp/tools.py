"""Sentence tools — the MCP tools served over a :class:`SentenceStore`.

Every handler takes the ``arguments`` object of a ``tools/call`` request
and returns either ``{"data": ...}`` (plus ``count``/``query`` for lists)
or ``{"error": <message>}``.  Messages are in Spanish, like the data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cendoj_mcp.protocols.mcp.models import MCPToolDef, object_schema
from cendoj_mcp.protocols.mcp.tools import Tool, ToolRegistry

if TYPE_CHECKING:
    from cendoj_mcp.store.models import Sentence
    from cendoj_mcp.store.store import SentenceStore

_STRING = {"type": "string"}


class _MissingArgument(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Parámetro '{name}' requerido")


def _require_text(arguments: dict[str, Any], name: str) -> str:
    value = arguments.get(name)
    if value is None or value == "":
        raise _MissingArgument(name)
    return str(value)


def _as_int(value: Any) -> int | None:
    """Integer ids arrive as ints, integral floats, or numeric strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _dump(sentences: list[Sentence]) -> list[dict[str, Any]]:
    return [s.model_dump() for s in sentences]


class SentenceTools:
    """Binds the tool handlers to one store."""

    def __init__(self, store: SentenceStore) -> None:
        self._store = store

    def list_sentences(self, arguments: dict[str, Any]) -> dict[str, Any]:
        sentences = self._store.all()
        return {"count": len(sentences), "data": _dump(sentences)}

    def search_by_sala(self, arguments: dict[str, Any]) -> dict[str, Any]:
        return self._search("sala", arguments)

    def search_by_judge(self, arguments: dict[str, Any]) -> dict[str, Any]:
        return self._search("juez", arguments)

    def get_sentence(self, arguments: dict[str, Any]) -> dict[str, Any]:
        if arguments.get("id") is None:
            return {"error": "Parámetro 'id' requerido"}
        raw = arguments["id"]
        sentence_id = _as_int(raw)
        if sentence_id is None:
            return {"error": f"Parámetro 'id' inválido: {raw}"}

        sentence = self._store.get(sentence_id)
        if sentence is None:
            return {"error": f"Sentencia {sentence_id} no encontrada"}
        return {"data": sentence.model_dump()}

    def filter_by_field(self, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            field = _require_text(arguments, "field")
        except _MissingArgument as exc:
            return {"error": str(exc)}
        if "value" not in arguments:
            return {"error": "Parámetro 'value' requerido"}
        if field not in self._store.fields():
            return {"error": f"Campo desconocido: {field}"}
        sentences = self._store.filter_by(field, arguments["value"])
        return {"count": len(sentences), "data": _dump(sentences)}

    def count_by_column(self, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            column = _require_text(arguments, "column")
        except _MissingArgument as exc:
            return {"error": str(exc)}
        return {"data": self._store.count_by(column)}

    def _search(self, field: str, arguments: dict[str, Any]) -> dict[str, Any]:
        try:
            query = _require_text(arguments, field)
        except _MissingArgument as exc:
            return {"error": str(exc)}
        sentences = self._store.search(field, query)
        return {"count": len(sentences), "query": query, "data": _dump(sentences)}

    def as_tools(self) -> list[Tool]:
        """Tool descriptors paired with their handlers, in listing order."""
        return [
            Tool(
                MCPToolDef(
                    name="list_sentences",
                    description="Lista todas las sentencias disponibles.",
                    input_schema=object_schema(),
                ),
                self.list_sentences,
            ),
            Tool(
                MCPToolDef(
                    name="search_by_sala",
                    description="Busca sentencias cuya sala contenga el texto indicado.",
                    input_schema=object_schema({"sala": _STRING}, ["sala"]),
                ),
                self.search_by_sala,
            ),
            Tool(
                MCPToolDef(
                    name="search_by_judge",
                    description="Busca sentencias cuyo juez contenga el texto indicado.",
                    input_schema=object_schema({"juez": _STRING}, ["juez"]),
                ),
                self.search_by_judge,
            ),
            Tool(
                MCPToolDef(
                    name="get_sentence",
                    description="Obtiene una sentencia por su identificador.",
                    input_schema=object_schema({"id": {"type": "integer"}}, ["id"]),
                ),
                self.get_sentence,
            ),
            Tool(
                MCPToolDef(
                    name="filter_by_field",
                    description="Filtra sentencias cuyo campo sea exactamente el valor dado.",
                    input_schema=object_schema(
                        {"field": _STRING, "value": _STRING}, ["field", "value"]
                    ),
                ),
                self.filter_by_field,
            ),
            Tool(
                MCPToolDef(
                    name="count_by_column",
                    description="Cuenta sentencias agrupadas por el valor de una columna.",
                    input_schema=object_schema({"column": _STRING}, ["column"]),
                ),
                self.count_by_column,
            ),
        ]


def build_registry(store: SentenceStore) -> ToolRegistry:
    """Registry of all sentence tools over *store*."""
    return ToolRegistry(SentenceTools(store).as_tools())
