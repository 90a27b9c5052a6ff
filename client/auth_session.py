"""Client-side authentication session manager.

Owns the process-wide notion of "who is signed in". State moves
UNKNOWN -> ANONYMOUS | AUTHENTICATED at bootstrap and AUTHENTICATED ->
ANONYMOUS on logout or on a 401 from the server. Listeners registered with
``subscribe`` are called with the manager after every state change.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Callable, List, Optional, Set

from api.utils.debug import print__client_debug
from client.http import ApiError
from client.session_store import Session, SessionStore

FIELDS_REQUIRED_MESSAGE = "Please fill in all required fields"
PASSWORDS_MISMATCH_MESSAGE = "Passwords do not match"
PASSWORD_TOO_SHORT_MESSAGE = "Password must be at least 6 characters"
NEW_PASSWORDS_MISMATCH_MESSAGE = "New passwords do not match."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."
LOGIN_FAILED_MESSAGE = "Login failed. Please try again."
REGISTER_FAILED_MESSAGE = "Registration failed. Please try again."
PROFILE_FAILED_MESSAGE = "Failed to update profile. Please try again."
PROFILE_LOAD_FAILED_MESSAGE = "Failed to load profile. Please try again."

MIN_PASSWORD_LENGTH = 6


class AuthState(enum.Enum):
    UNKNOWN = "unknown"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AuthSessionError(Exception):
    """A login/register/profile failure carrying the message to display."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _server_message(error: ApiError, fallback: str) -> str:
    if error.status_code is None:
        return error.message
    return error.message or fallback


class AuthSessionManager:
    """Session provider injected at the root of the client application."""

    def __init__(self, session_store: SessionStore, auth_service=None):
        self.session_store = session_store
        self.auth_service = auth_service
        self.state = AuthState.UNKNOWN
        self.error: Optional[str] = None
        self._listeners: List[Callable[["AuthSessionManager"], None]] = []
        self._pending: Set[asyncio.Task] = set()

    # ==========================================================================
    # STATE AND SUBSCRIPTION
    # ==========================================================================

    def subscribe(self, listener: Callable[["AuthSessionManager"], None]) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: AuthState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(self)

    def bootstrap(self) -> AuthState:
        """Read the persisted session once at startup."""
        user = self.current_user()
        self._set_state(AuthState.AUTHENTICATED if user else AuthState.ANONYMOUS)
        print__client_debug(f"AUTH BOOTSTRAP: {self.state.value}")
        return self.state

    def current_user(self) -> Optional[dict]:
        """The stored user, or None when absent or the token has expired."""
        session = self.session_store.load()
        if session is None or session.is_expired():
            return None
        return session.user

    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def _settle_after_failure(self) -> None:
        # A failed attempt never ends a session that is still stored
        if self.current_user() is None:
            self._set_state(AuthState.ANONYMOUS)

    def _start_session(self, payload: dict) -> dict:
        session = Session(user=payload["user"], token=payload["token"])
        self.session_store.save(session)
        self.error = None
        self._set_state(AuthState.AUTHENTICATED)
        return session.user

    # ==========================================================================
    # LOGIN / REGISTER
    # ==========================================================================

    async def login(self, email: str, password: str) -> dict:
        """Authenticate and persist ``{user, token}``; returns the user.

        Raises:
            AuthSessionError: with the message to display; nothing is stored.
        """
        try:
            payload = await self.auth_service.login(email, password)
        except ApiError as exc:
            self.error = _server_message(exc, LOGIN_FAILED_MESSAGE)
            self._settle_after_failure()
            raise AuthSessionError(self.error, exc.status_code) from exc
        return self._start_session(payload)

    async def register(
        self, name: str, email: str, password: str, confirm_password: str
    ) -> dict:
        """Validate locally, then create the account and sign in.

        The local checks run before any request is sent.
        """
        if not name or not email or not password:
            self.error = FIELDS_REQUIRED_MESSAGE
        elif password != confirm_password:
            self.error = PASSWORDS_MISMATCH_MESSAGE
        elif len(password) < MIN_PASSWORD_LENGTH:
            self.error = PASSWORD_TOO_SHORT_MESSAGE
        else:
            self.error = None
        if self.error:
            raise AuthSessionError(self.error, 400)

        try:
            payload = await self.auth_service.register(name, email, password)
        except ApiError as exc:
            self.error = _server_message(exc, REGISTER_FAILED_MESSAGE)
            self._settle_after_failure()
            raise AuthSessionError(self.error, exc.status_code) from exc
        return self._start_session(payload)

    # ==========================================================================
    # LOGOUT / FAILURE
    # ==========================================================================

    def logout(self) -> None:
        """Clear the session now; revoke the token on the server if a loop runs."""
        token = self.session_store.token()
        self.session_store.clear()
        self._set_state(AuthState.ANONYMOUS)

        if not token or self.auth_service is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            print__client_debug("LOGOUT: no running loop, server revocation skipped")
            return
        task = loop.create_task(self._revoke(token))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _revoke(self, token: str) -> None:
        try:
            await self.auth_service.logout(token)
        except ApiError as exc:
            print__client_debug(f"LOGOUT: server revocation failed: {exc.message}")

    async def wait_pending(self) -> None:
        """Await outstanding best-effort requests (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    def handle_authentication_failure(self, _error: Optional[ApiError] = None) -> None:
        """React to a 401: drop the stored session and become ANONYMOUS."""
        if self.session_store.load() is None and self.state is AuthState.ANONYMOUS:
            return
        self.session_store.clear()
        self.error = SESSION_EXPIRED_MESSAGE
        self._set_state(AuthState.ANONYMOUS)

    # ==========================================================================
    # PROFILE
    # ==========================================================================

    def _replace_user(self, user: dict) -> None:
        session = self.session_store.load()
        if session is None:
            return
        self.session_store.save(Session(user=user, token=session.token))
        self._set_state(AuthState.AUTHENTICATED)

    async def update_profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
        confirm_password: Optional[str] = None,
    ) -> dict:
        """Send a profile change; the stored user copy is refreshed on success."""
        if new_password and new_password != confirm_password:
            self.error = NEW_PASSWORDS_MISMATCH_MESSAGE
            raise AuthSessionError(self.error, 400)

        fields = {}
        if name is not None:
            fields["name"] = name
        if email is not None:
            fields["email"] = email
        if current_password:
            fields["currentPassword"] = current_password
            if new_password:
                fields["newPassword"] = new_password

        try:
            user = await self.auth_service.update_profile(fields)
        except ApiError as exc:
            if exc.status_code == 401:
                self.error = SESSION_EXPIRED_MESSAGE
            else:
                self.error = _server_message(exc, PROFILE_FAILED_MESSAGE)
            raise AuthSessionError(self.error, exc.status_code) from exc
        self.error = None
        self._replace_user(user)
        return user

    async def refresh_profile(self) -> dict:
        try:
            user = await self.auth_service.get_profile()
        except ApiError as exc:
            if exc.status_code == 401:
                self.error = SESSION_EXPIRED_MESSAGE
            else:
                self.error = _server_message(exc, PROFILE_LOAD_FAILED_MESSAGE)
            raise AuthSessionError(self.error, exc.status_code) from exc
        self.error = None
        self._replace_user(user)
        return user
