# tests/test_health.py
from http import HTTPStatus

from app.api.routes import health as health_module


def test_health_endpoint_ok(client):
    """
    /health responds with 200 OK and the expected JSON shape.
    """
    response = client.get("/health")

    assert response.status_code == HTTPStatus.OK
    data = response.json()

    assert data["status"] == "ok"
    assert isinstance(data["app_name"], str)
    assert data["environment"] == "test"
    assert "timestamp_utc" in data


def test_health_endpoint_reports_configured_app_name(monkeypatch, client):
    class DummySettings:
        APP_NAME = "Attendance Test App"
        APP_ENV = "stage"

    monkeypatch.setattr(health_module, "get_settings", lambda: DummySettings())

    response = client.get("/health")
    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data["app_name"] == "Attendance Test App"
    assert data["environment"] == "stage"
