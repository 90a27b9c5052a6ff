"""
Configuration package for the API server.

This package contains settings, constants, and configuration management
for the Bug Tracker application.
"""

# Import key configuration items for easier access
from .settings import (
    BASE_DIR,
    BUG_PRIORITIES,
    BUG_STATUSES,
    CORS_ALLOWED_ORIGINS,
    DEFAULT_BUG_PRIORITY,
    DEFAULT_BUG_STATUS,
    JWT_ALGORITHM,
    JWT_EXPIRES_DAYS,
    ROLE_ADMIN,
    ROLE_USER,
    start_time,
)

__all__ = [
    "BASE_DIR",
    "BUG_PRIORITIES",
    "BUG_STATUSES",
    "CORS_ALLOWED_ORIGINS",
    "DEFAULT_BUG_PRIORITY",
    "DEFAULT_BUG_STATUS",
    "JWT_ALGORITHM",
    "JWT_EXPIRES_DAYS",
    "ROLE_ADMIN",
    "ROLE_USER",
    "start_time",
]
