"""Basic health check test for the API."""

from fastapi.testclient import TestClient

from convertkit.main import app


client = TestClient(app)


def test_health_endpoint() -> None:
    """The ``/api/health`` route should return ``{"status": "ok"}``."""

    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_uses_error_body() -> None:
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
