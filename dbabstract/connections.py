"""Connection backends used by the read/write selector."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import mysql.connector

from .models import Endpoint

LOG = logging.getLogger(__name__)


class ConnectionBackendError(RuntimeError):
    """Raised when a backend cannot open a connection to an endpoint."""


@runtime_checkable
class ConnectionBackend(Protocol):
    """Protocol implemented by connection backends."""

    def connect(self, endpoint: Endpoint) -> Any:
        """Open a connection to the endpoint and hand it to the caller."""


class MySQLConnectionBackend:
    """Connection backend that opens MySQL connections via mysql-connector.

    Every call returns a fresh handle which the caller must close. Nothing
    is pooled or remembered between calls.
    """

    def __init__(
        self,
        *,
        compress: bool = True,
        connect_timeout: float | None = None,
        **options: Any,
    ) -> None:
        self._compress = compress
        self._connect_timeout = connect_timeout
        self._options = options

    def connect(self, endpoint: Endpoint) -> mysql.connector.MySQLConnection:
        conn = mysql.connector.MySQLConnection()
        try:
            conn.connect(**self._connect_kwargs(endpoint))
        except mysql.connector.Error as exc:
            self._close_quietly(conn, endpoint)
            raise ConnectionBackendError(
                f"Failed to connect to '{endpoint.describe()}': {exc}"
            ) from exc
        LOG.debug("Opened MySQL connection", extra={"endpoint": endpoint.describe()})
        return conn

    def _connect_kwargs(self, endpoint: Endpoint) -> dict[str, Any]:
        kwargs: dict[str, Any] = dict(self._options)
        kwargs["host"] = endpoint.host
        kwargs["user"] = endpoint.user
        kwargs["password"] = endpoint.password or ""
        if endpoint.database:
            kwargs["database"] = endpoint.database
        if endpoint.port:
            kwargs["port"] = endpoint.port
        kwargs["compress"] = self._compress
        if self._connect_timeout is not None:
            kwargs["connection_timeout"] = self._connect_timeout
        return kwargs

    @staticmethod
    def _close_quietly(conn: mysql.connector.MySQLConnection, endpoint: Endpoint) -> None:
        try:
            conn.close()
        except mysql.connector.Error:  # pragma: no cover - best effort
            LOG.debug("Failed to close half-open connection", extra={"endpoint": endpoint.describe()})


__all__ = [
    "ConnectionBackend",
    "ConnectionBackendError",
    "MySQLConnectionBackend",
]
