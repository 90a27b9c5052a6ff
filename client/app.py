"""Client composition root: one object wiring storage, HTTP, services and session."""

from __future__ import annotations

from typing import Optional

import httpx

from client.auth_session import AuthSessionManager
from client.bug_hooks import BugDetailHook, BugFormHook, BugListHook
from client.config import BUGTRACKER_API_URL, BUGTRACKER_SESSION_FILE, REQUEST_TIMEOUT
from client.http import ApiClient
from client.route_guard import Navigator, RouteGuard
from client.services import AuthService, BugService
from client.session_store import FileStorage, MemoryStorage, SessionStore


class ClientApp:
    """Everything a page needs, built once and shared.

    Pass ``transport`` (e.g. ``httpx.ASGITransport(app=api.main.app)``) to talk
    to an in-process server, and ``storage`` to choose where the session lives
    (defaults to ``FileStorage(BUGTRACKER_SESSION_FILE)``).
    """

    def __init__(
        self,
        base_url: str = BUGTRACKER_API_URL,
        storage=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = REQUEST_TIMEOUT,
        initial_path: str = "/",
    ):
        if storage is None:
            storage = FileStorage(BUGTRACKER_SESSION_FILE)
        self.session_store = SessionStore(storage)
        self.api = ApiClient(
            self.session_store, base_url=base_url, timeout=timeout, transport=transport
        )
        self.auth_service = AuthService(self.api)
        self.bug_service = BugService(self.api)
        self.session = AuthSessionManager(self.session_store, self.auth_service)
        self.api.on_unauthorized = self.session.handle_authentication_failure
        self.guard = RouteGuard(self.session)
        self.navigator = Navigator(self.guard, initial=initial_path)

    @classmethod
    def in_memory(cls, **kwargs) -> "ClientApp":
        return cls(storage=MemoryStorage(), **kwargs)

    def start(self):
        """Bootstrap the session and evaluate the initial location."""
        self.session.bootstrap()
        return self.navigator.refresh()

    def bug_list(self) -> BugListHook:
        return BugListHook(self.bug_service, self.session)

    def bug_detail(self, bug_id: str) -> BugDetailHook:
        return BugDetailHook(self.bug_service, bug_id, self.session)

    def bug_form(self, bug_id: Optional[str] = None) -> BugFormHook:
        return BugFormHook(self.bug_service, bug_id, self.session)

    async def aclose(self) -> None:
        await self.session.wait_pending()
        self.navigator.close()
