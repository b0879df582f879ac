"""Package settings for confstore.

Loads defaults.json once at first access. These are the settings of the
package itself (default filename, environment variable, log format), not
the application configuration a ConfigStore serves.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_settings: dict[str, Any] | None = None
_SETTINGS_PATH = Path(__file__).resolve().parent / "defaults.json"


def get_settings() -> dict[str, Any]:
    """Return the package settings, loading from disk on first call."""
    global _settings
    if _settings is None:
        with open(_SETTINGS_PATH, encoding="utf-8") as f:
            _settings = json.load(f)
    return _settings


def _reset() -> None:
    """Reset cached settings (for testing only)."""
    global _settings
    _settings = None
