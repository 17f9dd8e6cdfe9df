"""Read/write connection selection over a loaded config store."""

from __future__ import annotations

import logging
from typing import Any

from .config import ConfigStore
from .connections import ConnectionBackend, ConnectionBackendError, MySQLConnectionBackend
from .models import Endpoint

LOG = logging.getLogger(__name__)


class ConnectionUnavailableError(ConnectionBackendError):
    """Raised when a connection was required but none could be opened."""


class ConnectionSelector:
    """Hands out caller-owned connections for read or write intent.

    Reads prefer the slave and fall back to the master; writes only ever go
    to the master. Each call makes at most one attempt per endpoint.
    """

    def __init__(self, store: ConfigStore, *, backend: ConnectionBackend | None = None) -> None:
        self._store = store
        self._backend = backend or MySQLConnectionBackend()

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def backend(self) -> ConnectionBackend:
        return self._backend

    def reader(self, *, required: bool = False) -> Any | None:
        """Return a connection suitable for reads, or ``None``."""

        slave = self._store.slave
        if not slave.is_configured:
            return self.writer(required=required)
        conn = self._attempt(slave, role="slave")
        if conn is None:
            LOG.info("Falling back to master for read", extra={"endpoint": slave.describe()})
            return self.writer(required=required)
        return conn

    def writer(self, *, required: bool = False) -> Any | None:
        """Return a connection to the master, or ``None`` if unavailable."""

        master = self._store.master
        conn = None
        if master.is_configured:
            if master.is_complete:
                conn = self._attempt(master, role="master")
            else:
                LOG.warning(
                    "Skipping master endpoint without password or database",
                    extra={"endpoint": master.describe()},
                )
        if conn is None and required:
            raise ConnectionUnavailableError("No database connection available")
        return conn

    def _attempt(self, endpoint: Endpoint, *, role: str) -> Any | None:
        try:
            return self._backend.connect(endpoint)
        except ConnectionBackendError as exc:
            LOG.warning(
                "Failed to connect to %s endpoint: %s",
                role,
                exc,
                extra={"endpoint": endpoint.describe(), "role": role},
            )
            return None


def reader(store: ConfigStore, *, backend: ConnectionBackend | None = None) -> Any | None:
    """Open a read-preferring connection for ``store``."""

    return ConnectionSelector(store, backend=backend).reader()


def writer(store: ConfigStore, *, backend: ConnectionBackend | None = None) -> Any | None:
    """Open a master connection for ``store``, or return ``None``."""

    return ConnectionSelector(store, backend=backend).writer()


__all__ = [
    "ConnectionSelector",
    "ConnectionUnavailableError",
    "reader",
    "writer",
]
