from unittest.mock import patch

from sqlalchemy.exc import OperationalError


def test_health(api_client):
    response = api_client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "studio-booking-api"
    assert body["environment"] == "test"


def test_ready_checks_database(api_client):
    response = api_client.get("/api/v1/health/ready")

    assert response.status_code == 200


def test_ready_reports_database_outage(api_client, db):
    with patch.object(db, "execute", side_effect=OperationalError("SELECT 1", {}, Exception("down"))):
        response = api_client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "DATABASE_UNAVAILABLE"


def test_metrics_exposition(api_client, studio):
    api_client.get(f"/api/v1/studios/{studio.id}")

    response = api_client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "studio_booking_service_operation_duration_seconds" in response.text


def test_root(api_client):
    assert api_client.get("/").status_code == 200


def test_unhandled_errors_use_internal_error_code(api_client, studio):
    from fastapi.testclient import TestClient

    from studio_booking.main import app
    from studio_booking.services.studio_service import StudioService

    with patch.object(StudioService, "get_studio", side_effect=RuntimeError("boom")):
        response = TestClient(app, raise_server_exceptions=False).get(
            f"/api/v1/studios/{studio.id}"
        )

    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "INTERNAL_ERROR"
