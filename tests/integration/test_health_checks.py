"""
Integration tests de los endpoints de health check.

- /health y /health/live responden sin dependencias externas
- /health/ready informa el almacenamiento en uso
"""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


class TestHealthChecks:
    def test_basic_health_endpoint(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "bookings-api"}

    def test_liveness_probe(self, client: TestClient):
        """Debe responder igual que /health."""
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness_probe_in_memory(self, client: TestClient):
        response = client.get("/health/ready")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"storage": "in_memory"}

    def test_unknown_route_is_404(self, client: TestClient):
        assert client.get("/health/db").status_code == 404
