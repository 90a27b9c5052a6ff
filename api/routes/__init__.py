"""
Routes package for the API server.

This package contains FastAPI route handlers for the root catalogue, health
checks, users and bugs of the Bug Tracker application.
"""

# Routes module initialization
from .bugs import router as bugs_router
from .health import router as health_router
from .root import router as root_router
from .users import router as users_router

# Export all routers for easy import
__all__ = [
    "bugs_router",
    "health_router",
    "root_router",
    "users_router",
]
