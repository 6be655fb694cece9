"""Unit tests for the client DatabaseAPI facade (query retries, connection test)."""
from __future__ import annotations

import asyncio

import pytest

from gateway_client.app.application.connection_monitor import ConnectionMonitor
from gateway_client.app.application.database_api import DatabaseAPI
from gateway_client.app.application.retrying_operation import RetryingOperation
from gateway_client.app.domain.errors import GatewayQueryError
from gateway_client.app.ports.http_client import HttpClientError
from tests.conftest import FakeHttpClient, FakeResponse, RecordingSleep, healthy_payload

BASE_URL = "http://gateway.test/api/"

QUERY_OK = FakeResponse(
    200,
    {
        "rows": [{"id": 1}, {"id": 2}],
        "rowCount": 2,
        "fields": [{"name": "id", "dataType": 23}],
    },
)


def _api(client: FakeHttpClient, *, max_retries: int = 3):
    sleep = RecordingSleep()
    retrying = RetryingOperation(max_retries=max_retries, base_delay=1.0, max_delay=10.0, sleep=sleep)
    monitor = ConnectionMonitor(client, BASE_URL.rstrip("/") + "/health")
    return DatabaseAPI(client, BASE_URL, retrying=retrying, monitor=monitor), sleep


def test_query_posts_text_and_params_and_decodes_result():
    client = FakeHttpClient(post=[QUERY_OK])
    api, sleep = _api(client)

    result = asyncio.run(api.query("SELECT id FROM t WHERE id > $1", [0]))

    assert client.post_calls == [
        ("http://gateway.test/api/query", {"text": "SELECT id FROM t WHERE id > $1", "params": [0]})
    ]
    assert result.rows == [{"id": 1}, {"id": 2}]
    assert result.row_count == 2
    assert result.fields[0].name == "id"
    assert result.fields[0].data_type == 23
    assert sleep.delays == []


def test_query_retries_server_errors_then_succeeds():
    client = FakeHttpClient(
        post=[
            FakeResponse(503, {"error": True, "message": "Database not connected"}),
            HttpClientError("connection refused"),
            QUERY_OK,
        ]
    )
    api, sleep = _api(client)

    result = asyncio.run(api.query("SELECT 1"))

    assert result.row_count == 2
    assert len(client.post_calls) == 3
    assert sleep.delays == [1.0, 2.0]


def test_query_propagates_final_failure_with_gateway_message():
    client = FakeHttpClient(post=[FakeResponse(500, {"error": True, "message": "syntax error", "code": "42601"})])
    api, sleep = _api(client)

    with pytest.raises(GatewayQueryError) as exc_info:
        asyncio.run(api.query("SELEC 1"))

    assert exc_info.value.message == "syntax error"
    assert exc_info.value.status_code == 500
    assert exc_info.value.code == "42601"
    assert len(client.post_calls) == 4
    assert sleep.delays == [1.0, 2.0, 4.0]


def test_query_non_json_error_body_uses_status_message():
    client = FakeHttpClient(post=[FakeResponse(502, invalid_json=True)])
    api, _ = _api(client, max_retries=0)

    with pytest.raises(GatewayQueryError, match="Query failed with status 502"):
        asyncio.run(api.query("SELECT 1"))


def test_query_error_field_in_success_body_is_a_failure():
    client = FakeHttpClient(post=[FakeResponse(200, {"error": True, "message": "Database query failed"})])
    api, _ = _api(client, max_retries=0)

    with pytest.raises(GatewayQueryError, match="Database query failed"):
        asyncio.run(api.query("SELECT 1"))


def test_test_connection_reports_details_without_touching_monitor():
    payload = healthy_payload("connected")
    client = FakeHttpClient(get=[FakeResponse(200, payload)])
    api, _ = _api(client)
    events: list[bool] = []
    api.on_connection_change(events.append)

    result = asyncio.run(api.test_connection())

    assert result.is_connected is True
    assert result.details == payload
    assert api.is_connected is False
    assert events == [False]


def test_test_connection_disconnected_database():
    client = FakeHttpClient(get=[FakeResponse(200, healthy_payload("disconnected"))])
    api, _ = _api(client)

    result = asyncio.run(api.test_connection())

    assert result.is_connected is False
    assert result.details["database"] == "disconnected"


def test_test_connection_transport_failure_returns_error_details():
    client = FakeHttpClient(get=[HttpClientError("connection refused")])
    api, _ = _api(client)

    result = asyncio.run(api.test_connection())

    assert result.is_connected is False
    assert result.details == {"error": "connection refused"}


def test_cleanup_stops_monitor_and_closes_http_client():
    client = FakeHttpClient(get=[FakeResponse(200, healthy_payload())])
    api, _ = _api(client)
    events: list[bool] = []
    api.on_connection_change(events.append)

    async def scenario():
        await api.start()
        await api.cleanup()

    asyncio.run(scenario())

    assert client.closed is True
    assert events == [False, True]
