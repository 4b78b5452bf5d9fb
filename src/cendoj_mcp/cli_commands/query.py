"""``cendoj query`` — fetch rulings from a running MCP server."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

import click

from cendoj_mcp import __version__
from cendoj_mcp.cli_commands._output import (
    configure_logging,
    console,
    print_json,
    print_sentence,
    print_sentences,
)

DEFAULT_URL = "ws://localhost:8080/mcp"


def _tool_for(mode: str, value: str | None) -> tuple[str, dict[str, Any], str]:
    """Map a CLI mode to ``(tool name, arguments, title)``.

    A search mode without a VALUE lists every sentence.
    """
    if mode == "list" or not value:
        return "list_sentences", {}, "Jurisprudencia CENDOJ — Todas las sentencias"
    if mode == "sala":
        return "search_by_sala", {"sala": value}, f'Jurisprudencia — Sala: "{value}"'
    if mode == "juez":
        return "search_by_judge", {"juez": value}, f'Jurisprudencia — Juez: "{value}"'
    try:
        sentence_id = int(value)
    except ValueError:
        raise click.BadParameter(f'"{value}" is not a numeric id.', param_hint="VALUE") from None
    return "get_sentence", {"id": sentence_id}, f"Jurisprudencia — Sentencia ID: {sentence_id}"


@click.command()
@click.argument("mode", type=click.Choice(["list", "sala", "juez", "id"]), default="list")
@click.argument("value", required=False)
@click.option("--url", default=DEFAULT_URL, show_default=True, help="MCP server WebSocket URL.")
@click.option("--json", "as_json", is_flag=True, help="Print the raw tool payload as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def query(mode: str, value: str | None, url: str, as_json: bool, verbose: bool) -> None:
    """Query sentences: all, by SALA, by JUEZ, or by ID.

    \b
    Examples:
      cendoj query
      cendoj query sala "Sala de lo Social"
      cendoj query juez García
      cendoj query id 2
    """
    from cendoj_mcp.protocols.errors import ProtocolError
    from cendoj_mcp.protocols.mcp.client import MCPClient

    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    tool_name, arguments, title = _tool_for(mode, value)

    async def _run() -> tuple[dict[str, Any], list[str], Any]:
        async with MCPClient(url) as client:
            init = await client.initialize(client_name="cendoj-cli", client_version=__version__)
            tools = await client.list_tools()
            payload = await client.call_tool(tool_name, arguments)
        return init, [t.name for t in tools], payload

    try:
        init, tool_names, payload = asyncio.run(_run())
    except ProtocolError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if as_json:
        print_json(payload)
        return

    server_info = init.get("serverInfo", {})
    console.print(f"Servidor: {url}")
    console.print(
        f"  → {server_info.get('name', '?')} v{server_info.get('version', '?')}"
        f"  (MCP {init.get('protocolVersion', '?')})"
    )
    console.print(f"  → {', '.join(tool_names)}")

    if not isinstance(payload, dict):
        print_json(payload)
    elif tool_name == "get_sentence":
        print_sentence(payload, title)
    else:
        print_sentences(payload, title)
