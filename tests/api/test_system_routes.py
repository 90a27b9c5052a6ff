"""Root catalogue and health endpoints."""

from fastapi.testclient import TestClient

from api.config.settings import API_VERSION
from api.main import app
from docstore.factory import set_global_store
from docstore.store.memory import InMemoryDocumentStore


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["version"] == API_VERSION
    assert "POST /users/logout" in body["endpoints"]["users"]
    assert "DELETE /bugs/{id}" in body["endpoints"]["bugs"]


def test_health_reports_active_store(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["store"] == "memory"
    assert body["store_reachable"] is True
    assert body["memory"]["rss_mb"] > 0


class UnreachableStore(InMemoryDocumentStore):
    async def ping(self):
        return False


def test_health_degraded_when_store_unreachable():
    previous = set_global_store(UnreachableStore())
    try:
        response = TestClient(app).get("/health")
    finally:
        set_global_store(previous)
    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["store_reachable"] is False


def test_lifespan_keeps_installed_store(store):
    with TestClient(app) as client:
        assert client.get("/health").json()["store"] == "memory"
