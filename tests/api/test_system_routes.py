"""API tests for the system routes (root and health)."""

import pytest
from fastapi.testclient import TestClient

from dsagrind.core.config import settings
from dsagrind.main import app

client = TestClient(app)


@pytest.mark.api
def test_root_endpoint_returns_status_and_version() -> None:
    """Root endpoint should return operational status and app version."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()

    assert data["message"] == "DSAGrind Auth API"
    assert data["status"] == "operational"
    assert data["version"] == settings.app_version


@pytest.mark.api
def test_health_endpoint_returns_healthy_status() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "auth"}


@pytest.mark.api
def test_every_response_carries_a_trace_id() -> None:
    first = client.get("/health")
    second = client.get("/health")

    assert first.headers["X-Trace-Id"]
    assert first.headers["X-Trace-Id"] != second.headers["X-Trace-Id"]


@pytest.mark.api
def test_unknown_route_is_problem_details() -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json()["title"] == "Resource Not Found"
    assert response.json()["instance"] == "/api/nope"
