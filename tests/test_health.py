# tests/test_health.py
from http import HTTPStatus

from app.api.routes import health
from app.core.config import Settings


def test_health_endpoint_ok(client):
    """
    /health responds with 200 OK and the expected JSON shape.
    """
    response = client.get("/health")

    assert response.status_code == HTTPStatus.OK
    data = response.json()

    assert data["status"] == "ok"
    assert isinstance(data["app_name"], str)
    assert isinstance(data["environment"], str)
    assert data["external_calendar"] in ("google", "disabled")
    assert "timestamp_utc" in data


def test_health_reports_external_calendar_mode(monkeypatch, client):
    monkeypatch.setattr(
        health,
        "get_settings",
        lambda: Settings(APP_NAME="Booking Test", GOOGLE_CLIENT_ID="id", GOOGLE_CLIENT_SECRET="secret"),
    )
    enabled = client.get("/health").json()

    monkeypatch.setattr(
        health,
        "get_settings",
        lambda: Settings(GOOGLE_CLIENT_ID=None, GOOGLE_CLIENT_SECRET=None),
    )
    disabled = client.get("/health").json()

    assert enabled["app_name"] == "Booking Test"
    assert enabled["external_calendar"] == "google"
    assert disabled["external_calendar"] == "disabled"
