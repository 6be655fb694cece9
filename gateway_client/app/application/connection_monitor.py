"""Polls the gateway health endpoint and tells subscribers when connectivity changes.

Notifications are edge-triggered: listeners hear about a poll only when its
classification differs from the last known state (initially disconnected).
New subscribers get the current state replayed once, synchronously.
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger

from gateway_client.app.core import SERVICE_NAME
from gateway_client.app.domain.models import is_healthy_payload
from gateway_client.app.ports.http_client import AbstractHttpClient, HttpClientError

ConnectionListener = Callable[[bool], None]
Unsubscribe = Callable[[], None]

DEFAULT_CHECK_INTERVAL_SECONDS = 30.0


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class ConnectionMonitor:
    def __init__(
        self,
        http_client: AbstractHttpClient,
        health_url: str,
        *,
        interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._http_client = http_client
        self._health_url = health_url
        self._interval = interval_seconds
        self._sleep = sleep
        self._connected = False
        self._listeners: list[ConnectionListener] = []
        self._poll_task: asyncio.Task[None] | None = None
        self._starting = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def start(self) -> None:
        """Poll once now, then keep polling every interval in the background."""
        if self._poll_task is not None or self._starting:
            return
        self._starting = True
        try:
            await self.check()
            # cleanup() during the first poll clears the flag; do not start polling then.
            if not self._starting:
                return
            self._poll_task = asyncio.get_running_loop().create_task(self._poll_forever())
        finally:
            self._starting = False
        _log("connection_monitor_started", interval=self._interval)

    async def _poll_forever(self) -> None:
        while True:
            await self._sleep(self._interval)
            await self.check()

    async def check(self) -> bool:
        """Run one poll, notify listeners on a state change, return the classification."""
        connected = await self.poll()
        if connected != self._connected:
            self._connected = connected
            _log("connection_state_changed", connected=connected)
            self._notify(connected)
        return connected

    async def poll(self) -> bool:
        """Classify the gateway once without touching monitor state."""
        try:
            response = await self._http_client.get(self._health_url)
            return is_healthy_payload(response.json())
        except HttpClientError as exc:
            logger.warning("health poll failed: {}", exc)
            return False

    def subscribe(self, listener: ConnectionListener) -> Unsubscribe:
        self._listeners.append(listener)
        listener(self._connected)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, connected: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(connected)
            except Exception as exc:
                logger.exception("connection listener failed: {}", exc)

    async def cleanup(self) -> None:
        self._starting = False
        task, self._poll_task = self._poll_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._listeners.clear()
        _log("connection_monitor_stopped")
