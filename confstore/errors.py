"""Errors raised while loading a configuration document."""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for recoverable configuration load errors."""


class ConfigNotFoundError(ConfigError, FileNotFoundError):
    """No candidate location holds the configuration file."""

    def __init__(self, filename: str, searched: list[str] | None = None) -> None:
        self.filename = filename
        self.searched = list(searched or [])
        message = f"failed to find a configuration file: {filename}"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message)


class ConfigParseError(ConfigError, ValueError):
    """The configuration content is not a JSON object."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"failed to read configuration file {path}: {message}"
        super().__init__(message)
