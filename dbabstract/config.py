"""Master/slave configuration loading helpers."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Endpoint

LOG = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / "dbabstract" / "abstract.conf"

ROLES = ("master", "slave")

# key suffix -> EndpointConfig field
_FIELD_NAMES = {
    "host": "host",
    "user": "user",
    "pass": "password",
    "db": "database",
    "port": "port",
}

RECOGNIZED_KEYS = tuple(f"{role}_{suffix}" for role in ROLES for suffix in _FIELD_NAMES)

_COMMENT_PREFIXES = ("#", ";")
_PORT_PATTERN = re.compile(r"\s*\+?(\d+)")


class ConfigError(ValueError):
    """Raised when a config file is malformed or a store is misused."""


class ConfigFileError(OSError):
    """Raised when a config file exists but has nothing to read."""


class EndpointConfig(BaseModel):
    """Connection settings for one endpoint as stored in the config file."""

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    port: int = Field(default=0, ge=0, le=65535)

    def to_endpoint(self) -> Endpoint:
        return Endpoint(
            host=self.host,
            user=self.user,
            password=self.password,
            database=self.database,
            port=self.port,
        )


class AbstractConfig(BaseModel):
    """Shape of a loaded master/slave configuration."""

    model_config = ConfigDict(frozen=True)

    master: EndpointConfig = Field(default_factory=EndpointConfig)
    slave: EndpointConfig = Field(default_factory=EndpointConfig)
    source: Path | None = None
    text: str = ""


class ConfigStore:
    """Holds one master/slave configuration, populated by a single load.

    A store starts empty, with both endpoints unconfigured. ``load`` may
    succeed at most once; a failed load leaves the store empty so the caller
    can fix the file and try again.
    """

    def __init__(self) -> None:
        self._config = AbstractConfig()
        self._field_count = 0
        self._loaded = False

    def load(self, path: str | Path) -> int:
        """Populate the store from ``path`` and return the recognized field count."""

        if self._loaded:
            raise ConfigError(f"Config store already loaded from '{self._config.source}'")
        source = Path(path)
        text = _read_config_file(source)
        config, count = _parse_config(text, source)
        self._config = config
        self._field_count = count
        self._loaded = True
        LOG.debug("Loaded database config", extra={"path": str(source), "fields": count})
        return count

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def config(self) -> AbstractConfig:
        return self._config

    @property
    def field_count(self) -> int:
        return self._field_count

    @property
    def master(self) -> Endpoint:
        return self._config.master.to_endpoint()

    @property
    def slave(self) -> Endpoint:
        return self._config.slave.to_endpoint()

    @property
    def text(self) -> str:
        return self._config.text

    @property
    def source(self) -> Path | None:
        return self._config.source


def init() -> ConfigStore:
    """Create an empty config store."""

    return ConfigStore()


def load(store: ConfigStore, path: str | Path) -> int:
    """Populate ``store`` from ``path``; 0 means nothing usable was configured."""

    return store.load(path)


def load_config(path: str | Path | None = None) -> ConfigStore:
    """Load a store from ``path`` (or ``CONFIG_FILE``), rejecting empty configs."""

    target = Path(path) if path is not None else CONFIG_FILE
    store = init()
    if store.load(target) == 0:
        raise ConfigError(f"No database settings found in '{target}'")
    return store


def save_config(config: AbstractConfig, path: str | Path | None = None) -> None:
    """Persist configuration to disk in ``key=value`` form."""

    target = Path(path) if path is not None else CONFIG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = ["# dbabstract master/slave configuration"]
    for role in ROLES:
        endpoint: EndpointConfig = getattr(config, role)
        for suffix, field in _FIELD_NAMES.items():
            value = getattr(endpoint, field)
            if value is None or (field == "port" and value == 0):
                continue
            text = str(value)
            if "\n" in text or "\r" in text:
                raise ConfigError(f"Value for '{role}_{suffix}' cannot span lines")
            if text.endswith((" ", "\t")):
                raise ConfigError(f"Value for '{role}_{suffix}' cannot end in whitespace")
            lines.append(f"{role}_{suffix}={text}")
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")


def parse_port(value: str) -> int:
    """Parse a port the way ``atoi`` would; anything non-numeric becomes 0."""

    match = _PORT_PATTERN.match(value)
    if match is None:
        return 0
    return int(match.group(1))


def _read_config_file(path: Path) -> str:
    with path.open("rb") as handle:
        raw = handle.read()
    if not raw:
        raise ConfigFileError(f"Config file '{path}' is empty")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigFileError(f"Config file '{path}' is not valid UTF-8") from exc


def _parse_config(text: str, source: Path) -> tuple[AbstractConfig, int]:
    values: dict[str, dict[str, object]] = {role: {} for role in ROLES}
    seen: set[str] = set()
    count = 0
    for lineno, line in enumerate(text.split("\n"), start=1):
        line = line.lstrip(" \t")
        if line.startswith(_COMMENT_PREFIXES):
            continue
        line = line.rstrip(" \t\r")
        if not line:
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ConfigError(f"{source}:{lineno}: expected 'key=value', got '{line}'")
        name = key.lower()
        if name not in RECOGNIZED_KEYS:
            LOG.warning(
                "Ignoring unrecognized config option '%s' in %s:%d",
                key,
                source,
                lineno,
                extra={"path": str(source), "line": lineno, "key": key},
            )
            continue
        if name in seen:
            raise ConfigError(f"{source}:{lineno}: '{name}' is already set")
        seen.add(name)
        role, _, suffix = name.partition("_")
        field = _FIELD_NAMES[suffix]
        values[role][field] = parse_port(value) if field == "port" else value
        count += 1

    try:
        config = AbstractConfig(
            master=EndpointConfig(**values["master"]),
            slave=EndpointConfig(**values["slave"]),
            source=source,
            text=text,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in '{source}': {exc}") from exc
    return config, count


__all__ = [
    "AbstractConfig",
    "CONFIG_FILE",
    "ConfigError",
    "ConfigFileError",
    "ConfigStore",
    "EndpointConfig",
    "RECOGNIZED_KEYS",
    "init",
    "load",
    "load_config",
    "parse_port",
    "save_config",
]
