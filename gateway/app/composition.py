"""
Composition root: single place where concrete implementations are wired.

Builds settings and the shared database connection from config; provides the
start/close lifecycle used by the FastAPI lifespan to populate app.state. No DI
container library, explicit wiring only.
"""

from typing import Any

from loguru import logger

from gateway.app.config.settings import Settings
from gateway.app.core import SERVICE_NAME
from gateway.app.infrastructure.persistence.factory import create_database_connection
from gateway.app.ports.database_connection import DatabaseConnection


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class AppDependencies:
    """Holds wired dependencies and their lifecycle. Built only in composition root."""

    def __init__(
        self,
        *,
        settings: Settings,
        database: DatabaseConnection,
    ) -> None:
        self._settings = settings
        self._database = database
        self._started = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def database(self) -> DatabaseConnection:
        return self._database

    def start(self) -> None:
        """Begin the first connect burst in the background so the server can serve meanwhile."""
        if not self._settings.database_url:
            logger.warning("DATABASE_URL is not set; queries will be rejected until it is configured")
        self._database.schedule_reconnect("startup")
        self._started = True
        _log("gateway_started", port=self._settings.port, environment=self._settings.environment)

    async def close(self) -> None:
        if self._started:
            try:
                await self._database.shutdown()
            except Exception as exc:
                logger.warning("database shutdown failed: {}", exc)
            self._started = False
        _log("gateway_stopped")


def create_app_dependencies(settings: Settings | None = None) -> AppDependencies:
    """
    Composition root: build all app dependencies in one place.
    Caller owns lifecycle (start/close). The database backend is selected
    from settings (database_backend).
    """
    _settings = settings or Settings()
    database = create_database_connection(_settings)

    return AppDependencies(
        settings=_settings,
        database=database,
    )
