"""Locate and parse the configuration file.

The loader never touches a store: it returns the parsed document and lets
the caller decide how to install it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .errors import ConfigNotFoundError, ConfigParseError
from .settings import get_settings


def resolve_filename(environ: Mapping[str, str] | None = None) -> str:
    """Return the configuration filename for the current environment.

    ``config.json`` by default, ``config.<env>.json`` when the environment
    variable named in defaults.json (``ENVIRONMENT``) is set and non-empty.
    """
    settings = get_settings()
    if environ is None:
        environ = os.environ
    environment = environ.get(settings["environment_variable"], "")
    if environment:
        return settings["filename_pattern"].format(environment=environment)
    return settings["default_filename"]


def default_search_dirs() -> list[Path]:
    """Directory of the running program, then the current working directory."""
    dirs = []
    if sys.argv and sys.argv[0]:
        dirs.append(Path(sys.argv[0]).resolve().parent)
    cwd = Path.cwd()
    if cwd not in dirs:
        dirs.append(cwd)
    return dirs


def find_config(filename: str, search_dirs: Iterable[str | Path] | None = None) -> Path:
    """Return the first ``dir/filename`` that exists, in search order."""
    if search_dirs is None:
        search_dirs = default_search_dirs()
    searched = []
    for directory in search_dirs:
        candidate = Path(directory) / filename
        searched.append(str(candidate))
        if candidate.is_file():
            logging.debug(f"Found configuration file {candidate}")
            return candidate
    logging.error(f"Configuration file {filename} not found in: {', '.join(searched)}")
    raise ConfigNotFoundError(filename, searched)


def read_from(data: bytes | str, path: str | None = None) -> dict[str, Any]:
    """Parse an in-memory buffer into a configuration document.

    Args:
        data: JSON text, as bytes (UTF-8) or str.
        path: Source path, only used in error messages.

    Returns:
        The parsed root object.

    Raises:
        ConfigParseError: if the buffer is not valid JSON, contains NaN or
            Infinity literals, is nested beyond the interpreter's recursion
            limit, or its root value is not an object.
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logging.error(f"Configuration is not valid UTF-8: {e}")
            raise ConfigParseError(f"invalid UTF-8: {e}", path) from e

    try:
        document = json.loads(data, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        logging.error(f"Configuration is not valid JSON: {e}")
        raise ConfigParseError(f"invalid JSON: {e}", path) from e
    except RecursionError as e:
        logging.error(f"Configuration is nested too deeply: {e}")
        raise ConfigParseError("nesting too deep", path) from e
    except ValueError as e:
        logging.error(f"Configuration contains an unsupported literal: {e}")
        raise ConfigParseError(str(e), path) from e

    if not isinstance(document, dict):
        kind = type(document).__name__
        logging.error(f"Configuration root must be a JSON object, got {kind}")
        raise ConfigParseError(f"root value must be a JSON object, got {kind}", path)
    return document


def read_file(path: str | Path) -> dict[str, Any]:
    """Read and parse one explicit configuration file."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        logging.error(f"Configuration file {path} does not exist")
        raise ConfigNotFoundError(path.name, [str(path)]) from e
    logging.info(f"Loaded configuration file {path}")
    return read_from(data, str(path))


def load(
    filename: str | None = None,
    search_dirs: Iterable[str | Path] | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[Path, dict[str, Any]]:
    """Find, read and parse the configuration file.

    Returns:
        (path, document): where the file was found and its parsed content.
    """
    if filename is None:
        filename = resolve_filename(environ)
    path = find_config(filename, search_dirs)
    return path, read_file(path)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"unsupported JSON literal: {name}")
