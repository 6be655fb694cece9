"""Database connection factory: selects implementation from config. Only place that imports concrete connections."""
from __future__ import annotations

from gateway.app.config.settings import Settings
from gateway.app.infrastructure.persistence.postgres.postgres_connection import PostgresConnection
from gateway.app.ports.database_connection import DatabaseConnection


def create_database_connection(settings: Settings) -> DatabaseConnection:
    backend = settings.database_backend.strip().lower()

    if backend in ("postgres", "postgresql"):
        return PostgresConnection(settings)

    raise ValueError(f"Unsupported database backend: {backend}")
