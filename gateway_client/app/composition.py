"""Client composition root: build the HTTP client, retry policy and monitor from settings."""
from __future__ import annotations

from gateway_client.app.application.connection_monitor import ConnectionMonitor
from gateway_client.app.application.database_api import DatabaseAPI
from gateway_client.app.application.retrying_operation import RetryingOperation
from gateway_client.app.config.settings import Settings
from gateway_client.app.infrastructure.http.factory import create_http_client


def create_database_api(settings: Settings | None = None) -> DatabaseAPI:
    """Wire a DatabaseAPI. Caller owns lifecycle: `await api.start()` then `await api.cleanup()`."""
    _settings = settings or Settings()
    http_client = create_http_client(_settings)
    base_url = _settings.gateway_base_url.rstrip("/")

    retrying = RetryingOperation(
        max_retries=_settings.max_retries,
        base_delay=_settings.retry_base_delay_seconds,
        max_delay=_settings.retry_max_delay_seconds,
    )
    monitor = ConnectionMonitor(
        http_client,
        f"{base_url}/health",
        interval_seconds=_settings.connection_check_interval_seconds,
    )
    return DatabaseAPI(http_client, base_url, retrying=retrying, monitor=monitor)
