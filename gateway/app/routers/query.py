from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from gateway.app.constants import DATABASE_NOT_CONNECTED_MESSAGE, QUERY_TEXT_REQUIRED_MESSAGE
from gateway.app.core import SERVICE_NAME
from gateway.app.routers.query_serializers import response_from_result
from gateway.app.routers.utils import expose_error_detail, json_response
from gateway.app.schemas.query import QueryErrorResponse, QueryPostRequest
from gateway.app.services.execute_query import QueryOutcomeKind, execute_query


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


query_router = APIRouter(prefix="/api", tags=["Query"])


async def _read_query_body(request: Request) -> tuple[str | None, list[Any] | None]:
    """Malformed JSON, a non-object body or a non-string text all read as "no text"."""
    try:
        payload = await request.json()
    except ValueError:
        return None, None
    if not isinstance(payload, dict):
        return None, None
    body = QueryPostRequest.model_validate(payload)
    text = body.text if isinstance(body.text, str) else None
    params = body.params if isinstance(body.params, list) else None
    return text, params


@query_router.post(
    "/query",
    summary="Execute SQL",
    description="Runs the given SQL text with optional positional parameters ($1, $2, ...) on the shared database connection and returns rows, row count and field descriptions.",
    responses={
        200: {"description": "Statement executed; rows, rowCount and fields returned."},
        400: {"description": "Query text missing or empty."},
        500: {"description": "Statement failed; message and code returned. Lost sessions trigger a background reconnect."},
        503: {"description": "Database not connected."},
    },
    openapi_extra={
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": QueryPostRequest.model_json_schema()}},
        }
    },
)
async def post_query(request: Request) -> Response:
    database = getattr(request.app.state, "database", None)
    if database is None:
        _log("query_rejected", reason="database_not_initialized")
        return json_response(QueryErrorResponse(message=DATABASE_NOT_CONNECTED_MESSAGE), status_code=503)

    text, params = await _read_query_body(request)
    outcome = await execute_query(text, params, database)

    if outcome.kind == QueryOutcomeKind.SUCCEEDED and outcome.result is not None:
        return response_from_result(outcome.result)

    if outcome.kind == QueryOutcomeKind.UNAVAILABLE:
        return json_response(QueryErrorResponse(message=DATABASE_NOT_CONNECTED_MESSAGE), status_code=503)

    if outcome.kind == QueryOutcomeKind.INVALID:
        return json_response(QueryErrorResponse(message=QUERY_TEXT_REQUIRED_MESSAGE), status_code=400)

    _log(
        "query_failed",
        code=outcome.error_code,
        error=outcome.error_message,
        reconnect_scheduled=outcome.reconnect_scheduled,
    )
    return json_response(
        QueryErrorResponse(
            message=outcome.error_message or "Database query failed",
            code=outcome.error_code,
            detail=outcome.error_detail if expose_error_detail(request) else None,
        ),
        status_code=500,
    )
