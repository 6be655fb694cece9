"""HTTP client factory: builds AbstractHttpClient from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from gateway_client.app.config.settings import Settings
from gateway_client.app.infrastructure.http.httpx_client import HttpxHttpClient
from gateway_client.app.ports.http_client import AbstractHttpClient


def create_http_client(settings: Settings) -> AbstractHttpClient:
    """Build an HTTP client from settings with one timeout for every phase of the request."""
    async_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds),
    )
    return HttpxHttpClient(async_client)
