"""HTTP client port: contract for talking to the gateway.

Application code depends on this port; infrastructure (e.g. httpx)
implements it. Transport failures surface as HttpClientError.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class HttpClientError(Exception):
    """Base for transport failures (network, refused connection, undecodable body)."""


class HttpClientTimeoutError(HttpClientError):
    """Raised when the request times out."""


@runtime_checkable
class HttpResponse(Protocol):
    """Minimal read-only view of an HTTP response."""

    @property
    def status_code(self) -> int: ...

    @property
    def is_success(self) -> bool: ...

    def json(self) -> Any:
        """Decode the body; raise HttpClientError if it is not JSON."""
        ...


@runtime_checkable
class AbstractHttpClient(Protocol):
    """Port: perform GET/POST requests. Implementations live in infrastructure."""

    async def get(self, url: str) -> HttpResponse:
        """Perform GET; raise HttpClientTimeoutError or HttpClientError on transport failure."""
        ...

    async def post_json(self, url: str, payload: Any) -> HttpResponse:
        """POST a JSON body; non-2xx statuses are returned, not raised."""
        ...

    async def close(self) -> None:
        """Release resources (e.g. connection pool). No-op allowed if nothing to close."""
        ...
