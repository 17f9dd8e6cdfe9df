"""Master/slave MySQL connection selection driven by a flat config file."""

from __future__ import annotations

from .config import (
    CONFIG_FILE,
    AbstractConfig,
    ConfigError,
    ConfigFileError,
    ConfigStore,
    EndpointConfig,
    init,
    load,
    load_config,
    save_config,
)
from .connections import ConnectionBackend, ConnectionBackendError, MySQLConnectionBackend
from .models import Endpoint
from .selector import ConnectionSelector, ConnectionUnavailableError, reader, writer

__version__ = "0.1.0"

VERSION = 0x00000100
VERSION_TEXT = "v0.01"


def version() -> int:
    """Return the library version so callers can check it matches what they built against."""

    return VERSION


__all__ = [
    "AbstractConfig",
    "CONFIG_FILE",
    "ConfigError",
    "ConfigFileError",
    "ConfigStore",
    "ConnectionBackend",
    "ConnectionBackendError",
    "ConnectionSelector",
    "ConnectionUnavailableError",
    "Endpoint",
    "EndpointConfig",
    "MySQLConnectionBackend",
    "VERSION",
    "VERSION_TEXT",
    "__version__",
    "init",
    "load",
    "load_config",
    "reader",
    "save_config",
    "version",
    "writer",
]
