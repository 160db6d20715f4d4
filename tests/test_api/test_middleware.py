"""Tests for the timeout middleware, request ids and the error envelope."""

import asyncio

from fastapi import FastAPI
from fastapi.testclient import TestClient

from seer.api.middleware.timeout import TimeoutMiddleware


def _create_test_app(timeout: float = 1.0) -> FastAPI:
    """Create a minimal FastAPI app with timeout middleware for testing."""
    app = FastAPI()
    app.add_middleware(TimeoutMiddleware, timeout_seconds=timeout)

    @app.get("/fast")
    async def fast():
        return {"status": "ok"}

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(0.5)
        return {"status": "ok"}

    @app.get("/health")
    async def health():
        await asyncio.sleep(0.3)
        return {"status": "ok"}

    @app.post("/api/sources/fetch")
    async def fetch():
        await asyncio.sleep(0.3)
        return {"status": "completed"}

    return app


class TestTimeoutMiddleware:
    def test_fast_request_succeeds(self):
        client = TestClient(_create_test_app(timeout=5.0))

        response = client.get("/fast")

        assert response.status_code == 200

    def test_slow_request_returns_504(self):
        client = TestClient(_create_test_app(timeout=0.1))

        response = client.get("/slow")

        assert response.status_code == 504
        assert response.json() == {
            "detail": "Request timed out after 0.1s",
            "error_type": "timeout",
        }

    def test_health_excluded(self):
        client = TestClient(_create_test_app(timeout=0.1))
        assert client.get("/health").status_code == 200

    def test_sync_fetch_excluded(self):
        client = TestClient(_create_test_app(timeout=0.1))
        assert client.post("/api/sources/fetch").status_code == 200


class TestRequestId:
    def test_echoes_incoming_id(self, client):
        response = client.get("/api/sources", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_generates_id(self, client):
        response = client.get("/api/sources")
        assert response.headers["X-Request-ID"]


class TestErrorEnvelope:
    def test_unhandled_exception_is_500(self, client, mock_registry):
        mock_registry.list_sources.side_effect = RuntimeError("connection reset")

        response = client.get("/api/sources")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "error_type": "internal"}

    def test_unknown_route(self, client):
        assert client.get("/api/nothing").status_code == 404

    def test_root(self, client):
        data = client.get("/").json()
        assert data["service"] == "Seer API"
        assert data["docs"] == "/docs"
