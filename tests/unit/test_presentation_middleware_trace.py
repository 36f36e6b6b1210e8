"""Unit tests for TraceMiddleware.

Tests cover:
- Generated trace id returned in X-Trace-Id
- Incoming X-Trace-Id honored
- get_trace_id() and structlog contextvars inside the request
- Context cleared after the request
"""

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dsagrind.presentation.routers.api.middleware.trace_middleware import (
    TraceMiddleware,
    get_trace_id,
)


@pytest.fixture
def client():
    app = FastAPI()
    app.add_middleware(TraceMiddleware)

    @app.get("/echo-trace")
    async def echo_trace() -> dict[str, str | None]:
        bound = structlog.contextvars.get_contextvars()
        return {"trace_id": get_trace_id(), "bound": bound.get("trace_id")}

    return TestClient(app)


@pytest.mark.unit
class TestTraceMiddleware:
    def test_generates_trace_id(self, client):
        response = client.get("/echo-trace")

        trace_id = response.headers["X-Trace-Id"]
        assert len(trace_id) == 36
        assert response.json() == {"trace_id": trace_id, "bound": trace_id}

    def test_honors_incoming_trace_id(self, client):
        response = client.get("/echo-trace", headers={"X-Trace-Id": "upstream-42"})

        assert response.headers["X-Trace-Id"] == "upstream-42"
        assert response.json()["trace_id"] == "upstream-42"

    def test_no_trace_id_outside_request(self, client):
        client.get("/echo-trace")

        assert get_trace_id() is None
