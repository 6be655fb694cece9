"""PostgreSQL implementation of the shared database connection (asyncpg).

One live session at a time; operations on it run one after another under a
lock, the way a single libpq session queues them. Reconnection spends a retry
budget: the first failure starts a burst of up to `db_max_retries` extra
attempts spaced by `db_retry_delay`; once the budget is spent every later
trigger gets exactly one immediate attempt. Only a successful attempt refills
the budget.
"""
from __future__ import annotations

import asyncio
import errno
import traceback
from typing import Any, Awaitable, Callable

import asyncpg
from loguru import logger

from gateway.app.config.settings import Settings
from gateway.app.constants import CONNECTION_RESET_CODE, LIVENESS_QUERY
from gateway.app.core import SERVICE_NAME
from gateway.app.domain.errors import (
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseNotConnectedError,
    LivenessCheckError,
    QueryExecutionError,
)
from gateway.app.domain.models import FieldDescription, QueryRequest, QueryResult
from gateway.app.infrastructure.persistence.postgres.constants import (
    MULTIPLE_COMMANDS_MESSAGE,
    SYNTAX_ERROR_SQLSTATE,
    ConnectionState,
)

Connector = Callable[[str], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[None]]


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def error_code(exc: BaseException) -> str | None:
    """SQLSTATE for server errors, a socket error name for transport errors, else None."""
    if isinstance(exc, (ConnectionResetError, asyncpg.exceptions.ConnectionDoesNotExistError)):
        return CONNECTION_RESET_CODE
    sqlstate = getattr(exc, "sqlstate", None)
    if sqlstate:
        return str(sqlstate)
    if isinstance(exc, OSError) and exc.errno is not None:
        return errno.errorcode.get(exc.errno, str(exc.errno))
    return None


def _is_multiple_commands_error(exc: BaseException) -> bool:
    return error_code(exc) == SYNTAX_ERROR_SQLSTATE and MULTIPLE_COMMANDS_MESSAGE in str(exc)


def _row_count(status: str | None, rows: list[Any]) -> int:
    # Command tags end with the affected row count: "SELECT 2", "INSERT 0 3", "UPDATE 1".
    if status:
        last = status.rsplit(" ", 1)[-1]
        if last.isdigit():
            return int(last)
    return len(rows)


def asyncpg_connector(settings: Settings) -> Connector:
    """Build the default connector: one asyncpg session per call."""

    async def _connect(dsn: str) -> asyncpg.Connection:
        try:
            return await asyncpg.connect(
                dsn,
                ssl=settings.database_ssl_mode or None,
                timeout=settings.database_connect_timeout_seconds,
            )
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            raise DatabaseConnectionError(f"{type(exc).__name__}: {exc}") from exc

    return _connect


class PostgresConnection:
    """DatabaseConnection implementation holding a single asyncpg connection."""

    def __init__(
        self,
        settings: Settings,
        *,
        connector: Connector | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._connector = connector or asyncpg_connector(settings)
        self._sleep = sleep
        self._state = ConnectionState.DISCONNECTED
        self._handle: Any | None = None
        self._attempts_used = 0
        self._max_attempts = settings.db_max_retries
        self._retry_delay = settings.db_retry_delay_seconds
        self._inflight: asyncio.Future[bool] | None = None
        self._background: set[asyncio.Task[None]] = set()
        self._lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def attempts_used(self) -> int:
        return self._attempts_used

    def is_connected(self) -> bool:
        return self.ready

    async def connect(self) -> bool:
        """Return True once a session is held, False when the retry budget is spent.

        Concurrent callers share the attempt burst already in flight.
        Raises ConfigurationError when no connection string is configured.
        """
        if self.ready:
            return True
        if self._inflight is None:
            inflight = asyncio.ensure_future(self._connect_with_budget())
            inflight.add_done_callback(self._clear_inflight)
            self._inflight = inflight
        return await asyncio.shield(self._inflight)

    def _clear_inflight(self, future: asyncio.Future[bool]) -> None:
        if self._inflight is future:
            self._inflight = None

    async def _connect_with_budget(self) -> bool:
        while True:
            await self._discard_handle()
            dsn = self._settings.database_url
            if not dsn:
                self._state = ConnectionState.DISCONNECTED
                _log("db_config_missing")
                raise ConfigurationError("DATABASE_URL environment variable is not set")

            self._state = ConnectionState.CONNECTING
            _log(
                "db_connect_attempt",
                attempts_used=self._attempts_used,
                max_attempts=self._max_attempts,
            )
            try:
                self._handle = await self._connector(dsn)
            except Exception as exc:
                self._handle = None
                self._state = ConnectionState.DISCONNECTED
                logger.warning("db connect failed: {}", exc)
                if self._attempts_used < self._max_attempts:
                    self._attempts_used += 1
                    _log("db_connect_retry", attempts_used=self._attempts_used, delay=self._retry_delay)
                    await self._sleep(self._retry_delay)
                    continue
                _log("db_connect_failed", attempts_used=self._attempts_used)
                return False

            self._state = ConnectionState.CONNECTED
            self._attempts_used = 0
            _log("db_connected")
            return True

    async def _discard_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            await asyncio.wait_for(handle.close(), timeout=self._settings.database_connect_timeout_seconds)
        except Exception as exc:
            logger.warning("db handle close failed: {}", exc)

    async def run_query(self, request: QueryRequest) -> QueryResult:
        if not self.ready or self._handle is None:
            raise DatabaseNotConnectedError()
        async with self._lock:
            # The handle may have been swapped while this request waited its turn.
            handle = self._handle
            if not self.ready or handle is None:
                raise DatabaseNotConnectedError()
            try:
                return await self._run_on(handle, request)
            except Exception as exc:
                raise QueryExecutionError(
                    str(exc),
                    code=error_code(exc),
                    detail="".join(traceback.format_exception(exc)),
                ) from exc

    async def _run_on(self, handle: Any, request: QueryRequest) -> QueryResult:
        try:
            statement = await handle.prepare(request.text)
        except Exception as exc:
            if request.params or not _is_multiple_commands_error(exc):
                raise
            # Several statements without parameters: run them over the simple protocol.
            status = await handle.execute(request.text)
            _log("db_multi_statement_executed", status=status)
            return QueryResult(rows=[], row_count=_row_count(status, []), fields=[])

        records = await statement.fetch(*request.params)
        rows = [dict(record) for record in records]
        return QueryResult(
            rows=rows,
            row_count=_row_count(statement.get_statusmsg(), rows),
            fields=[FieldDescription(name=attr.name, data_type=attr.type.oid) for attr in statement.get_attributes()],
        )

    async def check_liveness(self) -> None:
        """Round-trip a trivial query; raise LivenessCheckError if the server does not answer.

        While a query holds the session the check does not queue behind it: the
        session is in use, and a dead socket surfaces as that query's error.
        """
        handle = self._handle
        if handle is None:
            raise DatabaseNotConnectedError()
        if self._lock.locked():
            _log("db_liveness_skipped_busy")
            return
        try:
            async with self._lock:
                await asyncio.wait_for(
                    handle.fetchval(LIVENESS_QUERY),
                    timeout=self._settings.liveness_timeout_seconds,
                )
        except asyncio.TimeoutError as exc:
            raise LivenessCheckError("liveness check timed out") from exc
        except Exception as exc:
            raise LivenessCheckError(str(exc)) from exc

    def mark_disconnected(self) -> None:
        if self._state == ConnectionState.CONNECTED:
            self._state = ConnectionState.DISCONNECTED
            _log("db_marked_disconnected")

    def schedule_reconnect(self, reason: str = "reconnect") -> None:
        """Run connect() in the background. The caller does not wait for the outcome."""
        task = asyncio.get_running_loop().create_task(self._connect_in_background(reason))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _connect_in_background(self, reason: str) -> None:
        try:
            connected = await self.connect()
        except Exception as exc:
            logger.exception("background connect failed ({}): {}", reason, exc)
            return
        _log("db_background_connect_finished", reason=reason, connected=connected)
        if not connected:
            logger.warning("running without database connection ({})", reason)

    async def shutdown(self) -> None:
        pending = list(self._background)
        for task in pending:
            task.cancel()
        if self._inflight is not None:
            self._inflight.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self._discard_handle()
        self._state = ConnectionState.DISCONNECTED
        _log("db_closed")
