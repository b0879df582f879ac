"""JSON value kinds and the narrowing rules used by the typed accessors.

A parsed document holds plain Python values (dict, list, str, int, float,
bool, None). ``kind_of`` maps each one onto the JSON type it came from, so
the accessors match on a ``ValueKind`` instead of relying on ``isinstance``
checks, where ``bool`` would otherwise pass for an ``int``.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from typing import Any


class ValueKind(enum.Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    """Classify a parsed JSON value.

    Raises:
        TypeError: if the value could not have come from a JSON document.
    """
    if value is None:
        return ValueKind.NULL
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    raise TypeError(f"unsupported configuration value type: {type(value).__name__}")


def lookup(key: str, mapping: Mapping[str, Any] | None) -> tuple[Any, bool]:
    """Return ``(raw_value, True)`` if ``key`` is present, else ``(None, False)``."""
    if mapping is None or key not in mapping:
        return None, False
    return mapping[key], True


def lookup_group(document: Mapping[str, Any] | None, group: str) -> Mapping[str, Any] | None:
    """Return the nested mapping stored under ``group``, or None."""
    value, found = lookup(group, document)
    if not found or kind_of(value) is not ValueKind.OBJECT:
        return None
    return value


def as_bool(value: Any, found: bool = True) -> tuple[bool, bool]:
    if found and kind_of(value) is ValueKind.BOOL:
        return value, True
    return False, False


def as_string(value: Any, found: bool = True) -> tuple[str, bool]:
    if found and kind_of(value) is ValueKind.STRING:
        return value, True
    return "", False


def as_int(value: Any, found: bool = True) -> tuple[int, bool]:
    """Narrow a JSON number to an int, truncating any fractional part toward zero."""
    if not found or kind_of(value) is not ValueKind.NUMBER:
        return 0, False
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0, False
        return int(value), True
    return value, True


def as_float(value: Any, found: bool = True) -> tuple[float, bool]:
    """Widen a JSON number to a float. Integers beyond float range are not found."""
    if not found or kind_of(value) is not ValueKind.NUMBER:
        return 0.0, False
    try:
        return float(value), True
    except OverflowError:
        return 0.0, False


def as_value(value: Any, found: bool = True) -> tuple[Any, bool]:
    if found:
        return value, True
    return None, False
