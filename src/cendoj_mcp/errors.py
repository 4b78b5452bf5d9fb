"""Error types for configuration and record loading."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when a settings file fails reading, parsing, or validation."""


class RecordLoadError(Exception):
    """Raised when a records file cannot be loaded into the store."""
