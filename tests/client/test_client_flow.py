"""End-to-end client flows: anonymous access, login resume and expired sessions."""

import pytest

from client.app import ClientApp
from client.auth_session import AuthState
from client.http import ApiError
from client.route_guard import Decision
from tests.helpers import asgi_transport, print_test_status


def make_app(initial_path="/"):
    return ClientApp.in_memory(
        base_url="http://testserver", transport=asgi_transport(), initial_path=initial_path
    )


@pytest.mark.asyncio
async def test_anonymous_bugs_redirects_and_resumes_after_login(store):
    print_test_status("🔍 Testing anonymous /bugs -> login -> resume...")
    setup = make_app()
    setup.start()
    await setup.session.register("Ada", "ada@example.com", "secret123", "secret123")

    client = make_app()
    assert client.start().kind is Decision.RENDER
    assert client.session.state is AuthState.ANONYMOUS

    with pytest.raises(ApiError) as exc_info:
        await client.api.get("/bugs")
    assert exc_info.value.status_code == 401

    decision = client.navigator.navigate("/bugs")
    assert decision.kind is Decision.REDIRECT
    assert client.navigator.current.path == "/login"
    assert client.navigator.current.state == {"from": "/bugs"}

    await client.session.login("ada@example.com", "secret123")
    assert client.navigator.current.path == "/login"

    decision = client.navigator.resume_after_login()
    assert decision.kind is Decision.RENDER
    assert client.navigator.current.path == "/bugs"
    assert [entry.path for entry in client.navigator.entries] == ["/", "/bugs"]

    bugs = client.bug_list()
    await bugs.load()
    assert bugs.error is None
    assert bugs.bugs == []


@pytest.mark.asyncio
async def test_login_without_origin_goes_to_dashboard(store):
    client = make_app(initial_path="/login")
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")

    client.navigator.resume_after_login()
    assert client.navigator.current.path == "/dashboard"


@pytest.mark.asyncio
async def test_revoked_session_sends_user_back_to_login(store):
    client = make_app()
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")
    client.navigator.navigate("/bugs")
    assert client.navigator.current.path == "/bugs"

    # The token stops being valid on the server while the client still holds it
    await client.auth_service.logout()
    assert client.session.is_authenticated()

    hook = client.bug_list()
    await hook.load()

    assert hook.error == "Your session has expired. Please log in again."
    assert client.session.state is AuthState.ANONYMOUS
    assert client.session_store.load() is None
    assert client.navigator.current.path == "/login"
    assert client.navigator.current.state == {"from": "/bugs"}

    await client.session.login("ada@example.com", "secret123")
    client.navigator.resume_after_login()
    assert client.navigator.current.path == "/bugs"
    await hook.load()
    assert hook.error is None
