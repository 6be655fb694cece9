"""Errors raised by the client facade."""
from __future__ import annotations


class GatewayQueryError(Exception):
    """The gateway answered but reported the query as failed."""

    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
