"""Shared CLI output formatters."""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from cendoj_mcp.protocols.mcp.models import MCPToolDef  # noqa: TC001

console = Console()

_RULE = "─" * 62


def configure_logging(level: int) -> None:
    """Route ``logging`` through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False, default=str))


def print_tools_table(tools: list[MCPToolDef]) -> None:
    """Pretty-print tool descriptors as a table."""
    table = Table(title="Herramientas")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for tool in tools:
        table.add_row(tool.name, _truncate(tool.description))

    console.print(table)


def print_sentences(payload: dict[str, Any], title: str) -> None:
    """Print a list result (``{count, query?, data}``)."""
    _header(title)
    if payload.get("error"):
        console.print(f"  [red]Error:[/red] {escape(str(payload['error']))}")
        console.print(_RULE)
        return

    console.print(f"  Total: {payload.get('count', 0)} sentencia(s)")
    if payload.get("query"):
        console.print(f'  Búsqueda: "{escape(str(payload["query"]))}"')
    console.print(_RULE)

    sentences = payload.get("data") or []
    if not sentences:
        console.print("  No se encontraron sentencias.")
    for index, sentence in enumerate(sentences, start=1):
        console.print(f"\n  [bold]{escape(f'[{index}]')}[/bold]")
        _print_fields(sentence, indent="    ")
    console.print(f"\n{_RULE}")


def print_sentence(payload: dict[str, Any], title: str) -> None:
    """Print a single-record result (``{data}`` or ``{error}``)."""
    _header(title)
    if payload.get("error"):
        console.print(f"  [red]Error:[/red] {escape(str(payload['error']))}")
    else:
        console.print()
        _print_fields(payload.get("data") or {}, indent="  ")
    console.print(f"\n{_RULE}")


def _header(title: str) -> None:
    console.print(f"\n{_RULE}")
    console.print(f"  [bold]{escape(title)}[/bold]")
    console.print(_RULE)


def _print_fields(sentence: dict[str, Any], *, indent: str) -> None:
    labels = (
        ("ID", "id"),
        ("Sala", "sala"),
        ("Juez", "juez"),
        ("CENDOJ ID", "cendoj_id"),
        ("Resolución", "resolucion"),
    )
    for label, key in labels:
        value = escape(str(sentence.get(key, "")))
        console.print(f"{indent}{label + ':':<12}{value}")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
