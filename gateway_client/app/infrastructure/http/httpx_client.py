"""Concrete HTTP client implementation using httpx (injected where AbstractHttpClient is needed)."""
from __future__ import annotations

from typing import Any

import httpx

from gateway_client.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
)


class _HttpxResponseAdapter:
    """Adapts httpx.Response to the HttpResponse protocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def is_success(self) -> bool:
        return self._response.is_success

    def json(self) -> Any:
        try:
            return self._response.json()
        except ValueError as exc:
            raise HttpClientError(
                f"invalid json body (status {self._response.status_code}) from {self._response.url}"
            ) from exc


class HttpxHttpClient(AbstractHttpClient):
    """AbstractHttpClient implementation using httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get(self, url: str) -> HttpResponse:
        try:
            response = await self._client.get(url)
            return _HttpxResponseAdapter(response)
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while requesting {url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"http request failed for {url}: {exc}") from exc

    async def post_json(self, url: str, payload: Any) -> HttpResponse:
        try:
            response = await self._client.post(url, json=payload)
            return _HttpxResponseAdapter(response)
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while posting to {url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"http request failed for {url}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
