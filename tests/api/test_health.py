"""
Tests for health and readiness endpoints.
"""
from fastapi.testclient import TestClient

from src.api.main import app
from src.config import settings


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint returns 200 OK."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "pilot-crm"
        assert "version" in data


class TestReadinessEndpoint:
    """Tests for /ready endpoint."""

    def test_ready_when_store_loaded(self, client):
        """Returns 200 once the store has loaded."""
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["accounts"] == 6

    def test_not_ready_before_load(self, client, store):
        """Returns 503 while the store is unloaded."""
        store.loaded = False

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_not_ready_without_store(self, client):
        """Returns 503 when startup never ran."""
        app.state.store = None

        response = client.get("/ready")

        assert response.status_code == 503


class TestRootEndpoint:

    def test_lists_endpoints(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "PilotCRM API"
        assert "crm" in response.json()["endpoints"]


class TestLifespan:

    def test_startup_wires_services_to_one_store(self, monkeypatch, tmp_path):
        """The action handler and its rule engine share the loaded store."""
        monkeypatch.setattr(settings, "snapshot_path", str(tmp_path / "crm.json"))

        with TestClient(app):
            store = app.state.store
            handler = app.state.action_handler

            assert store.loaded is True
            assert handler.store is store
            assert handler.engine.store is store
            assert app.state.voice_calls.store is store
            assert not hasattr(app.state, "rule_engine")
