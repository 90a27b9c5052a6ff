"""Test helpers shared by the api, docstore and client suites."""

from datetime import datetime

import httpx

from api.main import app

DEFAULT_PASSWORD = "secret123"


def print_test_status(message: str):
    """Print test status messages with timestamp."""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    print(f"[{timestamp}] {message}")


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name: str, email: str, password: str = DEFAULT_PASSWORD):
    """Register through the API and return ``(user, token)``."""
    response = client.post(
        "/users/register", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], body["token"]


def report_bug(client, token: str, **fields) -> dict:
    """Create a bug through the API with sensible defaults for required fields."""
    payload = {
        "title": "Login button unresponsive",
        "description": "Clicking login on Safari does nothing",
        "project": "Web App",
    }
    payload.update(fields)
    response = client.post("/bugs", json=payload, headers=auth_headers(token))
    assert response.status_code == 201, response.text
    return response.json()


def asgi_transport() -> httpx.ASGITransport:
    """Transport that serves requests from the in-process FastAPI app."""
    return httpx.ASGITransport(app=app)
