"""Client-side facade over the gateway: retried queries, connection tests and connectivity notifications."""
from __future__ import annotations

from typing import Any

from loguru import logger

from gateway_client.app.application.connection_monitor import (
    ConnectionListener,
    ConnectionMonitor,
    Unsubscribe,
)
from gateway_client.app.application.retrying_operation import RetryingOperation
from gateway_client.app.core import SERVICE_NAME
from gateway_client.app.domain.errors import GatewayQueryError
from gateway_client.app.domain.models import ConnectionTestResult, QueryResult, is_healthy_payload
from gateway_client.app.ports.http_client import AbstractHttpClient, HttpClientError


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class DatabaseAPI:
    """
    Talks to the gateway's /health and /query endpoints.

    Queries go through a RetryingOperation; any non-2xx status or an `error`
    field in the body counts as a failure and is retried before propagating.
    """

    def __init__(
        self,
        http_client: AbstractHttpClient,
        base_url: str,
        *,
        retrying: RetryingOperation,
        monitor: ConnectionMonitor,
    ) -> None:
        self._http_client = http_client
        self._base_url = base_url.rstrip("/")
        self._retrying = retrying
        self._monitor = monitor

    @property
    def health_url(self) -> str:
        return f"{self._base_url}/health"

    @property
    def query_url(self) -> str:
        return f"{self._base_url}/query"

    @property
    def is_connected(self) -> bool:
        return self._monitor.is_connected

    async def start(self) -> None:
        await self._monitor.start()

    async def query(self, text: str, params: list[Any] | None = None) -> QueryResult:
        async def _post() -> QueryResult:
            response = await self._http_client.post_json(self.query_url, {"text": text, "params": params})
            if not response.is_success:
                try:
                    error_data = response.json()
                except HttpClientError:
                    error_data = {}
                if not isinstance(error_data, dict):
                    error_data = {}
                raise GatewayQueryError(
                    error_data.get("message") or f"Query failed with status {response.status_code}",
                    status_code=response.status_code,
                    code=error_data.get("code"),
                )

            data = response.json()
            if not isinstance(data, dict):
                raise GatewayQueryError("Unexpected query response", status_code=response.status_code)
            if data.get("error"):
                raise GatewayQueryError(
                    data.get("message") or "Database query failed",
                    status_code=response.status_code,
                    code=data.get("code"),
                )
            return QueryResult.from_payload(data)

        return await self._retrying.run(_post)

    async def test_connection(self) -> ConnectionTestResult:
        """One health poll, reported in full. Monitor state and listeners are left alone."""
        try:
            response = await self._http_client.get(self.health_url)
            data = response.json()
        except HttpClientError as exc:
            _log("connection_test_failed", error=str(exc))
            return ConnectionTestResult(is_connected=False, details={"error": str(exc) or "Connection test failed"})
        details = data if isinstance(data, dict) else {"body": data}
        return ConnectionTestResult(is_connected=is_healthy_payload(data), details=details)

    def on_connection_change(self, listener: ConnectionListener) -> Unsubscribe:
        return self._monitor.subscribe(listener)

    async def cleanup(self) -> None:
        await self._monitor.cleanup()
        try:
            await self._http_client.close()
        except Exception as exc:
            logger.warning("http client close failed: {}", exc)
