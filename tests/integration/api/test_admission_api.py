"""Integration tests for the admission status and health endpoints."""

from fastapi.testclient import TestClient

from agentforms import __version__
from agentforms.observability.middleware import session_id_from_path


class TestAdmissionStatus:
    """Tests for GET /v1/admission/{key}/{category}."""

    def test_peek_does_not_count(self, client: TestClient) -> None:
        first = client.get("/v1/admission/visitor-1/messages").json()
        second = client.get("/v1/admission/visitor-1/messages").json()

        assert first["allowed"] is True
        assert first["limit"] == 30
        assert second["remaining"] == 30

    def test_unknown_category(self, client: TestClient) -> None:
        response = client.get("/v1/admission/visitor-1/uploads")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


class TestHealth:
    """Tests for GET /health."""

    def test_healthy(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["storage_backend"] == "inmemory"
        assert body["generation_provider"] == "template"
        assert body["active_turns"] == 0


class TestRequestContext:
    """Tests for the logging context middleware."""

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["X-Request-ID"]


class TestSessionIdFromPath:
    """Tests for session id extraction in the logging middleware."""

    def test_session_routes(self) -> None:
        session_id = "3f2c9a4e-1b7d-4c55-9a0e-5d8f2e6b7c10"
        assert session_id_from_path(f"/v1/sessions/{session_id}") == session_id
        assert session_id_from_path(f"/v1/sessions/{session_id}/turns") == session_id

    def test_other_routes(self) -> None:
        assert session_id_from_path("/v1/sessions") is None
        assert session_id_from_path("/v1/agents/3f2c9a4e-1b7d-4c55-9a0e-5d8f2e6b7c10") is None
