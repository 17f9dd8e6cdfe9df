"""Shared dataclasses used across config/selector modules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Runtime representation of one database server."""

    host: str | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    port: int = 0

    @property
    def is_configured(self) -> bool:
        """Host and user are both known."""

        return self.host is not None and self.user is not None

    @property
    def is_complete(self) -> bool:
        """Configured, with a non-empty password and database name."""

        return self.is_configured and bool(self.password) and bool(self.database)

    def describe(self) -> str:
        """Return a log-safe ``user@host:port/database`` label."""

        port = f":{self.port}" if self.port else ""
        database = f"/{self.database}" if self.database else ""
        return f"{self.user or '?'}@{self.host or '?'}{port}{database}"


__all__ = ["Endpoint"]
