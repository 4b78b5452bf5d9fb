"""``cendoj tools`` — list the tools a running server exposes."""

from __future__ import annotations

import asyncio

import click

from cendoj_mcp.cli_commands._output import console, print_tools_table
from cendoj_mcp.cli_commands.query import DEFAULT_URL


@click.command()
@click.option("--url", default=DEFAULT_URL, show_default=True, help="MCP server WebSocket URL.")
def tools(url: str) -> None:
    """Discover tools from an MCP server."""
    from cendoj_mcp.protocols.errors import ProtocolError
    from cendoj_mcp.protocols.mcp.client import MCPClient
    from cendoj_mcp.protocols.mcp.models import MCPToolDef

    async def _discover() -> list[MCPToolDef]:
        async with MCPClient(url) as client:
            await client.initialize()
            return await client.list_tools()

    try:
        found = asyncio.run(_discover())
    except ProtocolError as exc:
        console.print(f"[red]Discovery error:[/red] {exc}")
        raise SystemExit(1) from exc

    if not found:
        console.print("[yellow]No tools discovered.[/yellow]")
        return

    print_tools_table(found)
