"""Server configuration — listen address, identity, data source, telemetry."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from cendoj_mcp.errors import ConfigError


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Settings for ``cendoj serve``.

    Example YAML::

        host: 0.0.0.0
        port: ${PORT}
        path: /mcp
        data_file: sentencias.yaml
        telemetry:
          enabled: true
    """

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)
    path: str = "/mcp"
    server_name: str = "cendoj-mcp-server"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    data_file: Path | None = None
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    @property
    def server_info(self) -> dict[str, str]:
        return {"name": self.server_name, "version": self.server_version}


def load_settings(path: Path | None = None) -> ServerSettings:
    """Read YAML settings, interpolate env vars, and validate.

    Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
    using :func:`os.path.expandvars` before YAML parsing.  ``PORT`` from
    the environment overrides the file.  A relative ``data_file`` is
    resolved against the settings file's directory.

    Raises:
        ConfigError: On read, parse, or validation failures.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc

        try:
            loaded: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError("Settings YAML must be a mapping")
        data = loaded or {}

    env_port = os.environ.get("PORT")
    if env_port:
        data["port"] = env_port

    try:
        settings = ServerSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    if path is not None and settings.data_file is not None and not settings.data_file.is_absolute():
        settings = settings.model_copy(update={"data_file": path.parent / settings.data_file})
    return settings
