import pytest
from fastapi.testclient import TestClient

from gateway.app.infrastructure.persistence.factory import create_database_connection
from gateway.app.infrastructure.persistence.postgres.postgres_connection import PostgresConnection
from gateway.app.main import create_app
from tests.conftest import make_settings


@pytest.fixture()
def no_connection_string(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("AZURE_POSTGRESQL_CONNECTIONSTRING", raising=False)
    monkeypatch.setenv("DATABASE_BACKEND", "postgres")


def test_app_starts_and_serves_without_database(no_connection_string):
    with TestClient(create_app()) as client:
        r = client.get("/api/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["database"] == "disconnected"
        assert body["environment"]["hasConnectionString"] is False

        r = client.post("/api/query", json={"text": "SELECT 1"})
        assert r.status_code == 503


def test_factory_builds_postgres_connection():
    assert isinstance(create_database_connection(make_settings()), PostgresConnection)


def test_factory_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported database backend"):
        create_database_connection(make_settings(DATABASE_BACKEND="mongo"))


def test_settings_accept_legacy_connection_string_name(no_connection_string):
    settings = make_settings(DATABASE_URL=None)
    assert settings.database_url is None

    from gateway.app.config.settings import Settings

    legacy = Settings(_env_file=None, AZURE_POSTGRESQL_CONNECTIONSTRING="postgresql://u:p@h/db")
    assert legacy.database_url == "postgresql://u:p@h/db"
    assert legacy.db_retry_delay_seconds == 5.0


def test_error_detail_only_exposed_in_development():
    assert make_settings(APP_ENV="development").expose_error_detail is True
    assert make_settings(APP_ENV="production").expose_error_detail is False
