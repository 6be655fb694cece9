from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from gateway_client.app.core import SERVICE_NAME
from gateway_client.app.core.backoff import exponential_delay

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0
DEFAULT_MAX_DELAY_SECONDS = 10.0


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class RetryingOperation:
    """
    Runs an async unit of work, retrying failures with exponential backoff.

    The retry counter belongs to the instance, not to a single call: a success
    resets it to 0, while exhausting it leaves it spent, so the next failing
    call propagates immediately until some call succeeds again.
    With max_retries=3 and base_delay=1s the waits are 1s, 2s, 4s; the fourth
    failure is raised unchanged.
    """

    def __init__(
        self,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
        max_delay: float = DEFAULT_MAX_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._sleep = sleep
        self._retry_count = 0

    @property
    def retry_count(self) -> int:
        return self._retry_count

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        while True:
            try:
                result = await operation()
            except Exception as exc:
                if self._retry_count >= self._max_retries:
                    _log("operation_failed", retries=self._retry_count, error=str(exc))
                    raise
                self._retry_count += 1
                delay = exponential_delay(self._retry_count, self._base_delay, self._max_delay)
                logger.warning("operation failed, retry {} in {}s: {}", self._retry_count, delay, exc)
                await self._sleep(delay)
                continue
            self._retry_count = 0
            return result
