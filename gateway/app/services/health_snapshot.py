"""Builds the health snapshot, verifying a held session with a liveness query."""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from gateway.app.constants import DatabaseStatus, HealthStatus
from gateway.app.core import SERVICE_NAME
from gateway.app.domain.errors import GatewayError
from gateway.app.ports.database_connection import DatabaseConnection
from gateway.app.schemas.health import EnvironmentInfo, HealthDegradedResponse, HealthResponse

_PROCESS_STARTED = time.monotonic()


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def process_uptime_seconds() -> float:
    return time.monotonic() - _PROCESS_STARTED


async def build_health_snapshot(
    database: DatabaseConnection,
    *,
    environment: EnvironmentInfo,
) -> HealthResponse:
    """
    Connected -> liveness check; a failed check reports `error` and schedules a reconnect.
    Disconnected -> reported as-is, no check performed.
    """
    snapshot = HealthResponse(
        status=HealthStatus.HEALTHY,
        uptime=process_uptime_seconds(),
        timestamp=_now_iso(),
        database=DatabaseStatus.CONNECTED if database.ready else DatabaseStatus.DISCONNECTED,
        environment=environment,
    )
    if not database.ready:
        return snapshot

    try:
        await database.check_liveness()
    except GatewayError as e:
        _log("db_liveness_failed", error=str(e))
        snapshot.database = DatabaseStatus.ERROR
        snapshot.database_error = str(e)
        # connect() is a no-op while marked connected, so drop the flag first.
        database.mark_disconnected()
        database.schedule_reconnect("liveness_failed")
    return snapshot


def degraded_snapshot(error: Exception) -> HealthDegradedResponse:
    return HealthDegradedResponse(status=HealthStatus.DEGRADED, error=str(error), timestamp=_now_iso())
