"""``cendoj serve`` — run the MCP server over WebSocket."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from cendoj_mcp.cli_commands._output import configure_logging, console


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Settings YAML file.",
)
@click.option("--host", default=None, help="Interface to bind.")
@click.option("--port", type=int, default=None, help="Port to listen on (default: $PORT or 8080).")
@click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML/JSON file with the sentences to serve.",
)
@click.option("--telemetry", is_flag=True, help="Export tracing spans to the console.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    data_file: Path | None,
    telemetry: bool,
    verbose: bool,
) -> None:
    """Serve the sentence tools to MCP clients."""
    from cendoj_mcp.app import build_server
    from cendoj_mcp.config import load_settings
    from cendoj_mcp.errors import ConfigError, RecordLoadError

    configure_logging(logging.DEBUG if verbose else logging.INFO)

    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if data_file is not None:
        overrides["data_file"] = data_file
    if overrides:
        settings = settings.model_copy(update=overrides)

    if telemetry or settings.telemetry.enabled:
        from cendoj_mcp.utils.telemetry import configure_telemetry

        configure_telemetry(
            service_name=settings.server_name,
            otlp_endpoint=settings.telemetry.otlp_endpoint,
        )

    try:
        server = build_server(settings)
    except RecordLoadError as exc:
        console.print(f"[red]Data error:[/red] {exc}")
        sys.exit(1)

    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        console.print("[yellow]Server stopped.[/yellow]")
    except OSError as exc:
        console.print(f"[red]Server error:[/red] {exc}")
        sys.exit(1)
