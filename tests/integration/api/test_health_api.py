"""Integration tests for the health probes and app wiring."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from focustracks import __version__
from focustracks.application.services.playlist_transactions import (
    MembershipTransactionRunner,
)


class TestHealth:
    def test_full_health_check(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["checks"]["database"] == {"ok": True}
        assert body["checks"]["database_locks"]["lock_failures"] == 0

    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_readiness(self, client: TestClient) -> None:
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["database"] is True

    def test_probes_need_no_identity(self, client: TestClient) -> None:
        assert client.get("/health", headers={}).status_code == 200


class TestLifespan:
    def test_lifespan_wires_app_state(self, app: FastAPI) -> None:
        with TestClient(app) as client:
            assert isinstance(app.state.membership_runner, MembershipTransactionRunner)
            assert client.get("/health/ready").status_code == 200

    def test_correlation_header_round_trip(self, client: TestClient) -> None:
        response = client.get("/health/live", headers={"X-Correlation-ID": "health-1"})
        assert response.headers["X-Correlation-ID"] == "health-1"
