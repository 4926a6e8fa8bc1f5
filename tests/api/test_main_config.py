"""Tests for API main runtime configuration and app-level endpoints."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from src.api.main import _parse_allowed_origins


def test_parse_allowed_origins_empty(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    assert _parse_allowed_origins() == []


def test_parse_allowed_origins_csv(monkeypatch):
    monkeypatch.setenv(
        "ALLOWED_ORIGINS",
        "http://localhost:5173, http://127.0.0.1:5173 ,https://example.com",
    )
    assert _parse_allowed_origins() == [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "https://example.com",
    ]


def test_health(client: TestClient):
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["uptime_seconds"] >= 0


def test_api_root(client: TestClient):
    data = client.get("/api").json()
    assert data["name"] == "Salomão API"
    assert data["docs"] == "/docs"


def test_readyz_degraded_without_anthropic_key(client: TestClient, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    response = client.get("/readyz")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["checks"]["database"]["status"] == "ok"
    assert body["checks"]["anthropic"]["status"] == "degraded"


def test_readyz_ready_with_anthropic_key(client: TestClient, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

    body = client.get("/readyz").json()

    assert body["status"] == "ready"
    assert body["checks"]["anthropic"]["status"] == "configured"


def test_readyz_database_failure(client: TestClient):
    with patch("src.db.connection.get_db_context", side_effect=RuntimeError("db down")):
        response = client.get("/readyz")

    assert response.status_code == 503
    assert response.json()["checks"]["database"]["message"] == "db down"


def test_persistence_errors_render_envelope(client: TestClient):
    from src.errors import PersistenceError

    with patch(
        "src.services.chat_session_store.ChatSessionStore.create",
        side_effect=PersistenceError("Failed to create chat session"),
    ):
        response = client.post("/api/chat/start")

    assert response.status_code == 500
    assert response.json() == {
        "error_code": "E-4001",
        "message": "Failed to create chat session",
        "remediation": (
            "This is a system error. Retry the operation. "
            "Contact support if issue persists."
        ),
    }
