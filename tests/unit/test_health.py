"""Tests for health, readiness and service info endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient


def test_health_without_database(client: TestClient):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "environment": "testing", "database": "disconnected"}


def test_health_with_open_database(app, client: TestClient):  # type: ignore[no-untyped-def]
    app.state.database = MagicMock(is_open=True)
    assert client.get("/health").json()["database"] == "connected"


def test_liveness(client: TestClient):
    assert client.get("/health/live").json() == {"status": "alive"}


def test_ready_outside_production_without_database(client: TestClient):
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["database"] == {"status": "not_configured"}


def test_not_ready_when_database_ping_fails(app, client: TestClient):  # type: ignore[no-untyped-def]
    database = MagicMock(is_open=True)
    database.ping.side_effect = RuntimeError("ORA-12541")
    app.state.database = database

    resp = client.get("/health/ready")

    assert resp.status_code == 503
    assert resp.json()["checks"]["database"]["status"] == "error"


def test_not_ready_when_smtp_down(app, client: TestClient):  # type: ignore[no-untyped-def]
    email_service = MagicMock()
    email_service.verify_connection.return_value = False
    app.state.email_service = email_service

    resp = client.get("/health/ready")

    assert resp.status_code == 503
    assert resp.json()["checks"]["smtp"] == {"status": "error"}


def test_service_info(client: TestClient):
    data = client.get("/").json()
    assert data["name"] == "De Boss Loterij Payment Module"
    assert data["endpoints"]["webhook"] == "POST /api/lottery/webhook"


def test_security_and_request_id_headers(client: TestClient):
    resp = client.get("/health/live", headers={"X-Correlation-ID": "req-42"})
    assert resp.headers["X-Request-ID"] == "req-42"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert "Strict-Transport-Security" not in resp.headers


def test_service_not_ready_without_wiring():
    from lotterypay.core.config import Settings
    from lotterypay.main import create_app

    bare = TestClient(create_app(settings=Settings(app_env="testing")))
    resp = bare.get("/api/lottery/ticket/abc")
    assert resp.status_code == 503
    assert resp.json()["title"] == "Service Unavailable"
    assert resp.json()["detail"] == "Service not ready"
