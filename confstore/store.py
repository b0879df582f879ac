"""In-memory configuration store.

A ConfigStore holds one parsed JSON document behind a lock. Readers get
``(value, found)`` pairs and never an exception for a missing key. The
``required`` accessors are the exception to that: a missing key there
terminates the process.

Typical use::

    store = ConfigStore()
    store.load()
    host, ok = store.get_string("host")
    if not ok:
        host = "localhost"
    port = store.required.get_int("port")
"""

from __future__ import annotations

import copy
import logging
import os
import sys
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Callable, NoReturn

from . import loader
from .settings import get_settings
from .values import (
    ValueKind,
    as_bool,
    as_float,
    as_int,
    as_string,
    as_value,
    kind_of,
    lookup,
    lookup_group,
)


class ConfigStore:
    """A JSON configuration document with typed, lock-protected access.

    Args:
        filename: Name of the file to load. Resolved from the
            ``ENVIRONMENT`` variable at load time when omitted.
        search_dirs: Directories searched in order. Defaults to the
            program's directory, then the current working directory.
        environ: Environment mapping used for filename resolution.
    """

    def __init__(
        self,
        filename: str | None = None,
        search_dirs: Iterable[str | Path] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.filename = filename
        self.search_dirs = list(search_dirs) if search_dirs is not None else None
        self.environ = environ
        self._lock = threading.RLock()
        self._document: dict[str, Any] = {}
        self._loaded = False
        self._path: Path | None = None
        self.required = RequiredAccessors(self)

    def __repr__(self) -> str:
        return f"ConfigStore(filename={self.filename!r}, loaded={self._loaded}, path={self._path!r})"

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def path(self) -> Path | None:
        """File the current document was loaded from, None for in-memory documents."""
        return self._path

    # -- loading ---------------------------------------------------------------

    def load(self) -> None:
        """Load the configuration file unless a document is already loaded."""
        if self._loaded:
            return
        self.reload()

    def reload(self) -> None:
        """Re-read the configuration file, discarding in-memory changes.

        On failure the error propagates and the current document is kept.
        """
        try:
            path, document = loader.load(self.filename, self.search_dirs, self.environ)
        except Exception:
            logging.warning("Reload failed; keeping the previous configuration")
            raise
        with self._lock:
            self._install(document, path)
        logging.info(f"Configuration loaded from {path} ({len(document)} keys)")

    def read_from(self, data: bytes | str) -> None:
        """Parse ``data`` and install it as the current document."""
        document = loader.read_from(data)
        with self._lock:
            self._install(document, None)

    def set_config(self, mapping: Mapping[str, Any]) -> None:
        """Replace the whole document with a copy of ``mapping``.

        Raises:
            TypeError: if ``mapping`` is not a mapping of JSON-compatible values.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"configuration must be a mapping, got {type(mapping).__name__}")
        document = copy.deepcopy(dict(mapping))
        _check_json_values(document)
        with self._lock:
            self._install(document, None)
        logging.debug(f"Configuration replaced ({len(document)} keys)")

    def _install(self, document: dict[str, Any], path: Path | None) -> None:
        self._document = document
        self._path = path
        self._loaded = True

    # -- accessors -------------------------------------------------------------

    def _get(self, key: str, narrow: Callable[[Any, bool], tuple[Any, bool]]) -> tuple[Any, bool]:
        with self._lock:
            value, found = lookup(key, self._document)
            return narrow(value, found)

    def _get_group(
        self, group: str, key: str, narrow: Callable[[Any, bool], tuple[Any, bool]]
    ) -> tuple[Any, bool]:
        with self._lock:
            value, found = lookup(key, lookup_group(self._document, group))
            return narrow(value, found)

    def get_bool(self, key: str) -> tuple[bool, bool]:
        """Boolean at the root. Returns ``(value, found)``."""
        return self._get(key, as_bool)

    def get_string(self, key: str) -> tuple[str, bool]:
        """String at the root. Returns ``(value, found)``."""
        return self._get(key, as_string)

    def get_int(self, key: str) -> tuple[int, bool]:
        """Number at the root, truncated to an int. Returns ``(value, found)``."""
        return self._get(key, as_int)

    def get_float(self, key: str) -> tuple[float, bool]:
        """Number at the root as a float. Returns ``(value, found)``."""
        return self._get(key, as_float)

    def get_value(self, key: str) -> tuple[Any, bool]:
        """Raw value at the root, whatever its type. Returns ``(value, found)``.

        Objects and arrays are returned as copies; change them with the setters.
        """
        return self._get(key, _detached_value)

    def get_group_bool(self, group: str, key: str) -> tuple[bool, bool]:
        return self._get_group(group, key, as_bool)

    def get_group_string(self, group: str, key: str) -> tuple[str, bool]:
        return self._get_group(group, key, as_string)

    def get_group_int(self, group: str, key: str) -> tuple[int, bool]:
        return self._get_group(group, key, as_int)

    def get_group_float(self, group: str, key: str) -> tuple[float, bool]:
        return self._get_group(group, key, as_float)

    def get_group_value(self, group: str, key: str) -> tuple[Any, bool]:
        return self._get_group(group, key, _detached_value)

    def keys(self) -> list[str]:
        """Root keys, in no particular order."""
        with self._lock:
            return list(self._document)

    def group_keys(self, group: str) -> list[str]:
        """Keys of ``group``; empty if the group is absent or not an object."""
        with self._lock:
            return list(lookup_group(self._document, group) or ())

    # -- mutation --------------------------------------------------------------
    # A setter only overwrites a key already readable as the same type.
    # Anything else, including a missing key, is a silent no-op.

    def _set(self, key: str, value: Any, narrow: Callable[[Any, bool], tuple[Any, bool]]) -> bool:
        with self._lock:
            if not self._get(key, narrow)[1]:
                return False
            self._document[key] = value
            return True

    def _set_group(
        self, group: str, key: str, value: Any, narrow: Callable[[Any, bool], tuple[Any, bool]]
    ) -> bool:
        with self._lock:
            if not self._get_group(group, key, narrow)[1]:
                return False
            self._document[group][key] = value
            return True

    def set_bool(self, key: str, value: bool) -> bool:
        return self._set(key, _checked(value, ValueKind.BOOL), as_bool)

    def set_string(self, key: str, value: str) -> bool:
        return self._set(key, _checked(value, ValueKind.STRING), as_string)

    def set_int(self, key: str, value: int) -> bool:
        return self._set(key, _checked_int(value), as_int)

    def set_float(self, key: str, value: float) -> bool:
        return self._set(key, float(_checked(value, ValueKind.NUMBER)), as_float)

    def set_group_bool(self, group: str, key: str, value: bool) -> bool:
        return self._set_group(group, key, _checked(value, ValueKind.BOOL), as_bool)

    def set_group_string(self, group: str, key: str, value: str) -> bool:
        return self._set_group(group, key, _checked(value, ValueKind.STRING), as_string)

    def set_group_int(self, group: str, key: str, value: int) -> bool:
        return self._set_group(group, key, _checked_int(value), as_int)

    def set_group_float(self, group: str, key: str, value: float) -> bool:
        return self._set_group(group, key, float(_checked(value, ValueKind.NUMBER)), as_float)


class RequiredAccessors:
    """Accessors that terminate the process when a key is missing.

    Meant for configuration a program cannot start without. There is no
    way to recover from a miss: use the plain ``ConfigStore`` accessors for
    anything optional.
    """

    def __init__(self, store: ConfigStore) -> None:
        self._store = store

    def _require(self, result: tuple[Any, bool], what: str, key: str, group: str | None = None) -> Any:
        value, found = result
        if not found:
            if group is None:
                fail(f"failed to retrieve '{key}' {what} from config")
            fail(f"failed to retrieve '{key}' {what} from group '{group}' in config")
        return value

    def get_bool(self, key: str) -> bool:
        return self._require(self._store.get_bool(key), "bool", key)

    def get_string(self, key: str) -> str:
        return self._require(self._store.get_string(key), "string", key)

    def get_int(self, key: str) -> int:
        return self._require(self._store.get_int(key), "int", key)

    def get_float(self, key: str) -> float:
        return self._require(self._store.get_float(key), "float", key)

    def get_value(self, key: str) -> Any:
        return self._require(self._store.get_value(key), "value", key)

    def get_group_bool(self, group: str, key: str) -> bool:
        return self._require(self._store.get_group_bool(group, key), "bool", key, group)

    def get_group_string(self, group: str, key: str) -> str:
        return self._require(self._store.get_group_string(group, key), "string", key, group)

    def get_group_int(self, group: str, key: str) -> int:
        return self._require(self._store.get_group_int(group, key), "int", key, group)

    def get_group_float(self, group: str, key: str) -> float:
        return self._require(self._store.get_group_float(group, key), "float", key, group)

    def get_group_value(self, group: str, key: str) -> Any:
        return self._require(self._store.get_group_value(group, key), "value", key, group)


def fail(message: str) -> NoReturn:
    """Terminate the process with ``message``.

    On the main thread this is ``sys.exit``, so ``atexit`` handlers still
    run. On any other thread ``SystemExit`` would only end that thread, so
    the process is stopped with ``os._exit`` instead.
    """
    status = get_settings()["required_exit_status"]
    # an unconfigured root logger would echo to stderr a second time
    if logging.getLogger().hasHandlers():
        logging.critical(message)
    if not _logs_to_stderr():
        print(message, file=sys.stderr, flush=True)
    if threading.current_thread() is threading.main_thread():
        sys.exit(status)
    logging.shutdown()
    os._exit(status)


def _logs_to_stderr() -> bool:
    return any(
        isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr
        for handler in logging.getLogger().handlers
    )


def _detached_value(value: Any, found: bool = True) -> tuple[Any, bool]:
    value, found = as_value(value, found)
    if found and kind_of(value) in (ValueKind.OBJECT, ValueKind.ARRAY):
        value = copy.deepcopy(value)
    return value, found


def _checked(value: Any, kind: ValueKind) -> Any:
    if _kind_or_none(value) is not kind:
        raise TypeError(f"expected a {kind.value} value, got {type(value).__name__}")
    return value


def _checked_int(value: Any) -> int:
    if _kind_or_none(value) is not ValueKind.NUMBER or not isinstance(value, int):
        raise TypeError(f"expected an int value, got {type(value).__name__}")
    return value


def _kind_or_none(value: Any) -> ValueKind | None:
    try:
        return kind_of(value)
    except TypeError:
        return None


def _check_json_values(value: Any) -> None:
    kind = kind_of(value)
    if kind is ValueKind.OBJECT:
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"configuration keys must be strings, got {type(key).__name__}")
            _check_json_values(item)
    elif kind is ValueKind.ARRAY:
        for item in value:
            _check_json_values(item)
