"""confstore: in-memory JSON configuration with typed lookups."""

from .errors import ConfigError, ConfigNotFoundError, ConfigParseError
from .settings import get_settings
from .store import ConfigStore, RequiredAccessors
from .values import ValueKind, kind_of

__version__ = get_settings()["version"]

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigStore",
    "RequiredAccessors",
    "ValueKind",
    "kind_of",
    "__version__",
]
