"""Domain errors and the FastAPI exception handlers that render them."""

from .errors import (
    AuthenticationError,
    AuthorizationError,
    BugTrackerError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BugTrackerError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
