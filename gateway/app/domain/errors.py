"""Gateway error taxonomy.

Connection-level errors are handled inside the connection manager (logged and
retried); query-level errors are surfaced verbatim to the HTTP caller.
"""
from __future__ import annotations

from gateway.app.constants import TRANSIENT_CONNECTION_CODES


class GatewayError(Exception):
    """Base for gateway failures."""


class ConfigurationError(GatewayError):
    """Required configuration is missing. Fatal to the connect attempt, never retried."""


class DatabaseConnectionError(GatewayError):
    """Opening a database session failed (network, auth, server down)."""


class DatabaseNotConnectedError(GatewayError):
    """An operation needed a live session and none is held."""

    def __init__(self, message: str = "db_not_connected") -> None:
        super().__init__(message)


class LivenessCheckError(GatewayError):
    """The held session did not answer the liveness query."""


class QueryExecutionError(GatewayError):
    """Running caller-supplied SQL failed.

    `code` carries the PostgreSQL SQLSTATE or a socket error name when known.
    `detail` is the formatted traceback of the driver error.
    """

    def __init__(self, message: str, *, code: str | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.detail = detail

    @property
    def is_connection_lost(self) -> bool:
        return self.code in TRANSIENT_CONNECTION_CODES
