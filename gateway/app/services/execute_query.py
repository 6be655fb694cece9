"""
Accepts plain Python types and the DatabaseConnection abstraction; returns an outcome.
Router translates outcome to HTTP status codes and content.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from gateway.app.core import SERVICE_NAME
from gateway.app.domain.errors import DatabaseNotConnectedError, QueryExecutionError
from gateway.app.domain.models import QueryRequest, QueryResult
from gateway.app.ports.database_connection import DatabaseConnection


class QueryOutcomeKind:
    SUCCEEDED = "SUCCEEDED"
    UNAVAILABLE = "UNAVAILABLE"
    INVALID = "INVALID"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ExecuteQueryOutcome:
    """Result of execute_query.
    kind=SUCCEEDED => result set.
    kind=FAILED => error_message set; error_code and error_detail when the driver reported them.
    """
    kind: str
    result: QueryResult | None = None
    error_message: str | None = None
    error_code: str | None = None
    error_detail: str | None = None
    reconnect_scheduled: bool = False


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


async def execute_query(
    text: str | None,
    params: list[Any] | None,
    database: DatabaseConnection,
) -> ExecuteQueryOutcome:
    """
    Run caller-supplied SQL on the shared connection.
    A lost session (reset socket, admin shutdown) marks the connection down and
    starts a background reconnect; the outcome does not wait for it.
    """
    if not database.ready:
        return ExecuteQueryOutcome(kind=QueryOutcomeKind.UNAVAILABLE)

    if not text:
        return ExecuteQueryOutcome(kind=QueryOutcomeKind.INVALID)

    try:
        result = await database.run_query(QueryRequest(text=text, params=list(params or [])))
        return ExecuteQueryOutcome(kind=QueryOutcomeKind.SUCCEEDED, result=result)
    except DatabaseNotConnectedError:
        return ExecuteQueryOutcome(kind=QueryOutcomeKind.UNAVAILABLE)
    except QueryExecutionError as e:
        reconnect = e.is_connection_lost
        if reconnect:
            _log("query_connection_lost", code=e.code)
            database.mark_disconnected()
            database.schedule_reconnect("query_connection_lost")
        return ExecuteQueryOutcome(
            kind=QueryOutcomeKind.FAILED,
            error_message=e.message,
            error_code=e.code,
            error_detail=e.detail,
            reconnect_scheduled=reconnect,
        )
