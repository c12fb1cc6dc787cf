"""
Integration test for health endpoint.

Demonstrates:
- Testing critical path (API is reachable)
- Testing contracts (response structure matches HealthResponse schema)
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    """Create FastAPI test client."""
    from asset_assistant.main import app

    return TestClient(app)


def test_health_endpoint_returns_200(client: TestClient):
    """
    Demonstrates: Integration test for critical path.

    This proves the FastAPI app is configured correctly and can handle requests.
    """
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "asset-assistant"
    assert data["store_backend"] == "memory"


def test_health_endpoint_uses_correct_content_type(client: TestClient):
    """Ensure correct content-type header at the API boundary."""
    response = client.get("/health")

    assert "application/json" in response.headers["content-type"]
