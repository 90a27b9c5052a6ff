"""Route protection for the client's page table.

``RouteGuard.decide`` maps the auth state to LOADING (wait), RENDER, or a
REDIRECT to ``/login`` that carries the requested location in
``state["from"]``. ``Navigator`` is a small history stack standing in for the
browser router; redirects are applied as replace navigations so the
protected location never stays in history.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import List, Optional

from api.utils.debug import print__client_debug
from client.auth_session import AuthState

LOGIN_PATH = "/login"
DEFAULT_AFTER_LOGIN = "/dashboard"

PROTECTED_ROUTES = (
    "/dashboard",
    "/bugs",
    "/bugs/new",
    "/bugs/:id",
    "/bugs/edit/:id",
    "/profile",
)


def _pattern(route: str) -> "re.Pattern":
    parts = [
        "[^/]+" if segment.startswith(":") else re.escape(segment)
        for segment in route.strip("/").split("/")
    ]
    return re.compile("^/" + "/".join(parts) + "/?$")


_PROTECTED_PATTERNS = [(route, _pattern(route)) for route in PROTECTED_ROUTES]


def match_route(path: str) -> Optional[str]:
    """The protected route pattern ``path`` falls under, if any."""
    path = path.split("?", 1)[0]
    for route, pattern in _PROTECTED_PATTERNS:
        if pattern.match(path):
            return route
    return None


def is_protected(path: str) -> bool:
    return match_route(path) is not None


class Decision(enum.Enum):
    LOADING = "loading"
    RENDER = "render"
    REDIRECT = "redirect"


@dataclass
class GuardDecision:
    kind: Decision
    redirect_to: Optional[str] = None
    state: dict = field(default_factory=dict)
    replace: bool = False


class RouteGuard:
    def __init__(self, manager):
        self.manager = manager

    def decide(self, location: str) -> GuardDecision:
        if not is_protected(location):
            return GuardDecision(Decision.RENDER)
        if self.manager.state is AuthState.UNKNOWN:
            return GuardDecision(Decision.LOADING)
        if self.manager.state is AuthState.AUTHENTICATED:
            return GuardDecision(Decision.RENDER)
        return GuardDecision(
            Decision.REDIRECT,
            redirect_to=LOGIN_PATH,
            state={"from": location},
            replace=True,
        )


def post_login_destination(state: Optional[dict], default: str = DEFAULT_AFTER_LOGIN) -> str:
    """Where to go after a successful login: the preserved location or ``default``."""
    if state and isinstance(state.get("from"), str) and state["from"]:
        return state["from"]
    return default


@dataclass
class HistoryEntry:
    path: str
    state: dict = field(default_factory=dict)


class Navigator:
    """In-memory history with push/replace/back, consulting a guard per move."""

    def __init__(self, guard: Optional[RouteGuard] = None, initial: str = "/"):
        self.guard = guard
        self.entries: List[HistoryEntry] = [HistoryEntry(initial)]
        self.last_decision: Optional[GuardDecision] = None
        self._unsubscribe = None
        if guard is not None:
            self._unsubscribe = guard.manager.subscribe(lambda _manager: self.refresh())

    @property
    def current(self) -> HistoryEntry:
        return self.entries[-1]

    def push(self, path: str, state: Optional[dict] = None) -> None:
        self.entries.append(HistoryEntry(path, dict(state or {})))

    def replace(self, path: str, state: Optional[dict] = None) -> None:
        self.entries[-1] = HistoryEntry(path, dict(state or {}))

    def back(self) -> HistoryEntry:
        if len(self.entries) > 1:
            self.entries.pop()
        return self.current

    def _apply(self, decision: GuardDecision) -> GuardDecision:
        self.last_decision = decision
        if decision.kind is Decision.REDIRECT:
            print__client_debug(
                f"GUARD: redirect {decision.state.get('from')} -> {decision.redirect_to}"
            )
            if decision.replace:
                self.replace(decision.redirect_to, decision.state)
            else:
                self.push(decision.redirect_to, decision.state)
        return decision

    def navigate(self, path: str, state: Optional[dict] = None, replace: bool = False) -> GuardDecision:
        if replace:
            self.replace(path, state)
        else:
            self.push(path, state)
        if self.guard is None:
            return GuardDecision(Decision.RENDER)
        return self._apply(self.guard.decide(path))

    def refresh(self) -> Optional[GuardDecision]:
        """Re-evaluate the current location, e.g. after the auth state changed."""
        if self.guard is None:
            return None
        return self._apply(self.guard.decide(self.current.path))

    def resume_after_login(self) -> GuardDecision:
        """Leave the login page for the location it was entered from."""
        destination = post_login_destination(self.current.state)
        return self.navigate(destination, replace=True)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
