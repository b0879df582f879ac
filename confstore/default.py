"""Process-wide default configuration store.

The default store is created on first use and loads ``config.json`` (or
``config.<ENVIRONMENT>.json``) from the program's directory or the current
working directory. A missing or unreadable file is logged and tolerated:
the store stays empty and every plain accessor reports not found. Only the
``required`` accessors turn that into a fatal error.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from .errors import ConfigError
from .store import ConfigStore, RequiredAccessors

_store: ConfigStore | None = None
_filename: str | None = None
_lock = threading.Lock()


def get_store() -> ConfigStore:
    """Return the default store, loading it from disk on first call."""
    global _store
    with _lock:
        if _store is None:
            store = ConfigStore(filename=_filename)
            try:
                store.load()
            except ConfigError as e:
                logging.warning(f"No configuration loaded: {e}")
            _store = store
        return _store


def set_filename(filename: str | None) -> None:
    """Use ``filename`` for the default store; None restores environment resolution."""
    global _filename
    _filename = filename
    _reset()


def _reset() -> None:
    """Drop the default store (for testing only)."""
    global _store
    with _lock:
        _store = None


class _DefaultRequired(RequiredAccessors):
    """Required accessors bound lazily to whatever the default store is."""

    def __init__(self) -> None:
        pass

    @property
    def _store(self) -> ConfigStore:  # type: ignore[override]
        return get_store()


required = _DefaultRequired()


def reload() -> None:
    get_store().reload()


def set_config(mapping: Mapping[str, Any]) -> None:
    get_store().set_config(mapping)


def keys() -> list[str]:
    return get_store().keys()


def group_keys(group: str) -> list[str]:
    return get_store().group_keys(group)


def get_bool(key: str) -> tuple[bool, bool]:
    return get_store().get_bool(key)


def get_string(key: str) -> tuple[str, bool]:
    return get_store().get_string(key)


def get_int(key: str) -> tuple[int, bool]:
    return get_store().get_int(key)


def get_float(key: str) -> tuple[float, bool]:
    return get_store().get_float(key)


def get_value(key: str) -> tuple[Any, bool]:
    return get_store().get_value(key)


def get_group_bool(group: str, key: str) -> tuple[bool, bool]:
    return get_store().get_group_bool(group, key)


def get_group_string(group: str, key: str) -> tuple[str, bool]:
    return get_store().get_group_string(group, key)


def get_group_int(group: str, key: str) -> tuple[int, bool]:
    return get_store().get_group_int(group, key)


def get_group_float(group: str, key: str) -> tuple[float, bool]:
    return get_store().get_group_float(group, key)


def get_group_value(group: str, key: str) -> tuple[Any, bool]:
    return get_store().get_group_value(group, key)


def set_bool(key: str, value: bool) -> bool:
    return get_store().set_bool(key, value)


def set_string(key: str, value: str) -> bool:
    return get_store().set_string(key, value)


def set_int(key: str, value: int) -> bool:
    return get_store().set_int(key, value)


def set_float(key: str, value: float) -> bool:
    return get_store().set_float(key, value)


def set_group_bool(group: str, key: str, value: bool) -> bool:
    return get_store().set_group_bool(group, key, value)


def set_group_string(group: str, key: str, value: str) -> bool:
    return get_store().set_group_string(group, key, value)


def set_group_int(group: str, key: str, value: int) -> bool:
    return get_store().set_group_int(group, key, value)


def set_group_float(group: str, key: str, value: float) -> bool:
    return get_store().set_group_float(group, key, value)
