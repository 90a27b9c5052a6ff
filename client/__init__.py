"""Bug Tracker client: session handling, route guard and bug data hooks."""

from client.app import ClientApp
from client.auth_session import AuthSessionError, AuthSessionManager, AuthState
from client.http import ApiClient, ApiError

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthSessionError",
    "AuthSessionManager",
    "AuthState",
    "ClientApp",
]
