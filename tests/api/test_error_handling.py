"""Exception handlers: status codes and bodies for store and unexpected failures."""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from docstore.errors import StoreError
from docstore.factory import set_global_store
from docstore.store.memory import InMemoryDocumentStore
from tests.helpers import auth_headers, print_test_status, register


class FailingFindStore(InMemoryDocumentStore):
    """Memory store whose list query fails with a configurable exception."""

    def __init__(self, error):
        super().__init__()
        self.error = error

    async def find(self, collection, filters=None, newest_first=True):
        raise self.error


@pytest.fixture
def failing_store():
    def install(error):
        store = FailingFindStore(error)
        previous = set_global_store(store)
        installed.append(previous)
        return store

    installed = []
    yield install
    for previous in installed:
        set_global_store(previous)


def test_store_failure_is_500_without_internals(failing_store):
    print_test_status("🔍 Testing persistence failure handling...")
    failing_store(StoreError("connection refused to db.internal:5432"))
    client = TestClient(app)
    _, token = register(client, "Ada", "ada@example.com")

    response = client.get("/bugs", headers=auth_headers(token))
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_unexpected_error_is_generic_500(failing_store, monkeypatch):
    monkeypatch.delenv("DEBUG_TRACEBACK", raising=False)
    failing_store(RuntimeError("boom"))
    client = TestClient(app, raise_server_exceptions=False)
    _, token = register(client, "Ada", "ada@example.com")

    response = client.get("/bugs", headers=auth_headers(token))
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_stray_value_error_is_generic_500(failing_store, monkeypatch):
    monkeypatch.delenv("DEBUG_TRACEBACK", raising=False)
    failing_store(ValueError("column body@idx_secret"))
    client = TestClient(app, raise_server_exceptions=False)
    _, token = register(client, "Ada", "ada@example.com")

    response = client.get("/bugs", headers=auth_headers(token))
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "idx_secret" not in response.text


def test_traceback_only_with_debug_flag(failing_store, monkeypatch):
    monkeypatch.setenv("DEBUG_TRACEBACK", "1")
    failing_store(RuntimeError("boom"))
    client = TestClient(app, raise_server_exceptions=False)
    _, token = register(client, "Ada", "ada@example.com")

    response = client.get("/bugs", headers=auth_headers(token))
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert any("RuntimeError" in line for line in response.json()["traceback"])


def test_schema_errors_are_400_not_422(client):
    response = client.post("/users/login", json={"email": "ada@example.com"})
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Field required"
    assert body["errors"][0]["loc"] == ["body", "password"]


def test_unknown_route_keeps_404(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
