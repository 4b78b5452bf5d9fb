"""Cendoj CLI entrypoint."""

from __future__ import annotations

import click

from cendoj_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="cendoj")
def main() -> None:
    """Cendoj MCP — serve and query CENDOJ rulings over JSON-RPC."""


# Register subcommands
from cendoj_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
