"""End-to-end checks against a running gateway backed by PostgreSQL.

Run with `pytest -m integration` once the gateway is reachable at GATEWAY_BASE_URL.
"""
import os
import time

import httpx
import pytest

API_BASE = os.environ.get("GATEWAY_BASE_URL", "http://localhost:8080/api").rstrip("/")


def _wait_for_database(timeout_s: float = 90.0) -> None:
    start = time.time()
    while time.time() - start < timeout_s:
        try:
            r = httpx.get(f"{API_BASE}/health", timeout=2.0)
            if r.status_code == 200 and r.json().get("database") == "connected":
                return
        except Exception:
            pass
        time.sleep(1.0)
    raise AssertionError(f"Timed out waiting for {API_BASE}/health to report a connected database")


@pytest.mark.integration
def test_health_is_always_200():
    r = httpx.get(f"{API_BASE}/health", timeout=10.0)
    assert r.status_code == 200
    assert r.json()["status"] in ("healthy", "degraded")


@pytest.mark.integration
def test_query_round_trip():
    _wait_for_database()
    r = httpx.post(
        f"{API_BASE}/query",
        json={"text": "SELECT g AS n FROM generate_series(1, $1::int) AS g", "params": [3]},
        timeout=10.0,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["rowCount"] == len(body["rows"]) == 3
    assert body["fields"][0]["name"] == "n"


@pytest.mark.integration
def test_query_empty_text_is_400():
    _wait_for_database()
    r = httpx.post(f"{API_BASE}/query", json={"text": ""}, timeout=10.0)
    assert r.status_code == 400


@pytest.mark.integration
def test_query_syntax_error_is_500_with_sqlstate():
    _wait_for_database()
    r = httpx.post(f"{API_BASE}/query", json={"text": "SELEC 1"}, timeout=10.0)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] is True
    assert body["code"] == "42601"
