"""AuthSessionManager against the in-process API."""

import time

import httpx
import pytest

from api.auth.jwt_auth import issue_token
from client.app import ClientApp
from client.auth_session import AuthSessionError, AuthSessionManager, AuthState
from client.http import NETWORK_ERROR_MESSAGE, ApiClient, ApiError
from client.services import AuthService
from client.session_store import MemoryStorage, Session, SessionStore
from tests.helpers import asgi_transport, print_test_status


def make_app():
    return ClientApp.in_memory(base_url="http://testserver", transport=asgi_transport())


def offline_manager(handler):
    """Manager whose requests go to ``handler`` instead of a server."""
    session_store = SessionStore(MemoryStorage())
    api = ApiClient(
        session_store, base_url="http://testserver", transport=httpx.MockTransport(handler)
    )
    return AuthSessionManager(session_store, AuthService(api))


# ==============================================================================
# BOOTSTRAP / CURRENT USER
# ==============================================================================


def test_bootstrap_without_session_is_anonymous():
    manager = AuthSessionManager(SessionStore(MemoryStorage()))
    assert manager.state is AuthState.UNKNOWN
    assert manager.bootstrap() is AuthState.ANONYMOUS
    assert manager.current_user() is None


def test_bootstrap_with_valid_session_is_authenticated():
    store = SessionStore(MemoryStorage())
    store.save(Session(user={"id": "u1", "name": "Ada"}, token=issue_token("u1", "user")))
    manager = AuthSessionManager(store)

    assert manager.bootstrap() is AuthState.AUTHENTICATED
    assert manager.current_user() == {"id": "u1", "name": "Ada"}


def test_expired_session_reads_as_no_user():
    store = SessionStore(MemoryStorage())
    stale = issue_token("u1", "user", time.time() - 31 * 24 * 3600)
    store.save(Session(user={"id": "u1"}, token=stale))
    manager = AuthSessionManager(store)

    assert manager.current_user() is None
    assert manager.bootstrap() is AuthState.ANONYMOUS


def test_subscribe_and_unsubscribe():
    manager = AuthSessionManager(SessionStore(MemoryStorage()))
    seen = []
    unsubscribe = manager.subscribe(lambda m: seen.append(m.state))

    manager.bootstrap()
    unsubscribe()
    unsubscribe()
    manager.bootstrap()
    assert seen == [AuthState.ANONYMOUS]


# ==============================================================================
# REGISTER / LOGIN
# ==============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fields, message",
    [
        (("", "ada@example.com", "secret123", "secret123"), "Please fill in all required fields"),
        (("Ada", "ada@example.com", "secret123", "secret124"), "Passwords do not match"),
        (("Ada", "ada@example.com", "short", "short"), "Password must be at least 6 characters"),
    ],
)
async def test_register_local_checks_never_reach_the_network(fields, message):
    print_test_status(f"🔍 Testing local register check: {message}")
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(201, json={})

    manager = offline_manager(handler)
    with pytest.raises(AuthSessionError) as exc_info:
        await manager.register(*fields)

    assert exc_info.value.message == message
    assert manager.error == message
    assert calls == []
    assert manager.session_store.load() is None


@pytest.mark.asyncio
async def test_register_sends_only_account_fields():
    bodies = []

    def handler(request):
        bodies.append(request.read())
        return httpx.Response(
            201,
            json={"user": {"id": "u1", "name": "Ada"}, "token": issue_token("u1", "user")},
        )

    manager = offline_manager(handler)
    user = await manager.register("Ada", "ada@example.com", "secret123", "secret123")

    assert user == {"id": "u1", "name": "Ada"}
    assert b"confirm" not in bodies[0]
    assert manager.is_authenticated()


@pytest.mark.asyncio
async def test_register_and_login_against_server(store):
    client = make_app()
    client.start()

    user = await client.session.register("Ada", "ada@example.com", "secret123", "secret123")
    assert user["email"] == "ada@example.com"
    assert client.session.state is AuthState.AUTHENTICATED

    with pytest.raises(AuthSessionError, match="User already exists"):
        await client.session.register("Ada", "ada@example.com", "secret123", "secret123")

    client.session.logout()
    await client.aclose()

    user = await client.session.login("ada@example.com", "secret123")
    assert client.session.current_user() == user
    assert client.session.session_store.token()


@pytest.mark.asyncio
async def test_failed_login_stores_nothing(store):
    client = make_app()
    client.start()

    with pytest.raises(AuthSessionError) as exc_info:
        await client.session.login("nobody@example.com", "secret123")

    assert exc_info.value.message == "Invalid email or password"
    assert exc_info.value.status_code == 401
    assert client.session.state is AuthState.ANONYMOUS
    assert client.session.session_store.load() is None


@pytest.mark.asyncio
async def test_network_failure_message():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    manager = offline_manager(handler)
    with pytest.raises(AuthSessionError) as exc_info:
        await manager.login("ada@example.com", "secret123")
    assert exc_info.value.message == NETWORK_ERROR_MESSAGE
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_login_fallback_message_when_server_gives_none():
    manager = offline_manager(lambda request: httpx.Response(500, content=b""))
    with pytest.raises(AuthSessionError) as exc_info:
        await manager.login("ada@example.com", "secret123")
    assert exc_info.value.status_code == 500
    assert exc_info.value.message


# ==============================================================================
# LOGOUT / 401
# ==============================================================================


@pytest.mark.asyncio
async def test_logout_clears_now_and_revokes_on_server(store):
    client = make_app()
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")
    token = client.session_store.token()

    client.session.logout()
    assert client.session.state is AuthState.ANONYMOUS
    assert client.session_store.load() is None

    await client.aclose()
    with pytest.raises(ApiError) as exc_info:
        await client.api.get("/users/profile", token=token)
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Not authorized, token revoked"


def test_logout_without_event_loop_still_clears():
    store = SessionStore(MemoryStorage())
    store.save(Session(user={"id": "u1"}, token=issue_token("u1", "user")))
    manager = AuthSessionManager(store, auth_service=object())
    manager.bootstrap()

    manager.logout()
    assert manager.state is AuthState.ANONYMOUS
    assert store.load() is None


@pytest.mark.asyncio
async def test_server_401_drops_the_session(store):
    client = make_app()
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")
    # Simulate a token the server no longer accepts
    session = client.session_store.load()
    client.session_store.save(Session(user=session.user, token=issue_token("ghost", "user")))

    with pytest.raises(AuthSessionError):
        await client.session.update_profile(name="X")

    assert client.session.state is AuthState.ANONYMOUS
    assert client.session_store.load() is None
    assert client.session.error == "Your session has expired. Please log in again."


# ==============================================================================
# PROFILE
# ==============================================================================


@pytest.mark.asyncio
async def test_update_profile_refreshes_stored_user_and_keeps_token(store):
    client = make_app()
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")
    token = client.session_store.token()

    user = await client.session.update_profile(name="Ada King")
    assert user["name"] == "Ada King"
    assert client.session.current_user()["name"] == "Ada King"
    assert client.session_store.token() == token


@pytest.mark.asyncio
async def test_update_profile_password_rules(store):
    client = make_app()
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")

    with pytest.raises(AuthSessionError, match="New passwords do not match."):
        await client.session.update_profile(
            current_password="secret123", new_password="brand-new", confirm_password="other"
        )

    # Without the current password the new one is not sent at all
    await client.session.update_profile(new_password="brand-new", confirm_password="brand-new")
    with pytest.raises(AuthSessionError):
        await client.session.login("ada@example.com", "brand-new")

    with pytest.raises(AuthSessionError, match="Current password is incorrect"):
        await client.session.update_profile(
            current_password="wrong-one", new_password="brand-new", confirm_password="brand-new"
        )

    await client.session.update_profile(
        current_password="secret123", new_password="brand-new", confirm_password="brand-new"
    )
    await client.session.login("ada@example.com", "brand-new")


@pytest.mark.asyncio
async def test_refresh_profile_reads_server_copy(store):
    client = make_app()
    client.start()
    await client.session.register("Ada", "ada@example.com", "secret123", "secret123")
    token = client.session_store.token()

    user = await client.session.refresh_profile()
    assert user["email"] == "ada@example.com"
    assert client.session.error is None
    assert client.session_store.token() == token


@pytest.mark.asyncio
async def test_refresh_profile_failure_is_reported():
    manager = offline_manager(
        lambda request: httpx.Response(500, json={"detail": "Internal server error"})
    )
    with pytest.raises(AuthSessionError) as exc_info:
        await manager.refresh_profile()
    assert exc_info.value.status_code == 500
    assert manager.error == "Internal server error"

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    manager = offline_manager(handler)
    with pytest.raises(AuthSessionError, match="Unable to reach the server"):
        await manager.refresh_profile()
    assert manager.error == NETWORK_ERROR_MESSAGE
