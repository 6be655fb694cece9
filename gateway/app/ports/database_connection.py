"""Port: the single shared database connection. Implementations live in infrastructure."""
from __future__ import annotations

from typing import Protocol

from gateway.app.domain.models import QueryRequest, QueryResult


class DatabaseConnection(Protocol):
    """Interface for connection lifecycle, query execution and liveness."""

    @property
    def ready(self) -> bool: ...

    async def connect(self) -> bool: ...

    async def run_query(self, request: QueryRequest) -> QueryResult: ...

    async def check_liveness(self) -> None: ...

    def mark_disconnected(self) -> None: ...

    def schedule_reconnect(self, reason: str = "reconnect") -> None: ...

    async def shutdown(self) -> None: ...
