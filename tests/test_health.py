"""Tests for the health endpoint."""

from sqlalchemy.exc import OperationalError


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"

    def test_health_check_database_down(self, client, store, monkeypatch):
        def fail():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(store, "ping", fail)

        response = client.get("/health")
        assert response.status_code == 503
        data = response.get_json()
        assert data["status"] == "unhealthy"
        assert data["components"]["database"] == "unhealthy"
