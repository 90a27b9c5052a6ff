"""
Dependencies package for the API server.

This package contains FastAPI dependencies for authentication and store
access for the Bug Tracker application.
"""

# Import authentication dependencies
from .auth import (
    get_bug_repository,
    get_current_user,
    get_store,
    get_token_claims,
    get_token_repository,
    get_user_repository,
)

# Export all dependencies for easier access
__all__ = [
    "get_bug_repository",
    "get_current_user",
    "get_store",
    "get_token_claims",
    "get_token_repository",
    "get_user_repository",
]
