"""
Data models package for the API server.

This package contains Pydantic models for request/response validation
for the Bug Tracker application.
"""

# Import request models
from .requests import (
    BugCreateRequest,
    BugUpdateRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)

# Import response models
from .responses import (
    AuthResponse,
    BugResponse,
    DeletedResponse,
    HealthResponse,
    MessageResponse,
    RootResponse,
    UserReference,
    UserResponse,
)

# Export all models for easier access
__all__ = [
    # Request models
    "BugCreateRequest",
    "BugUpdateRequest",
    "LoginRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    # Response models
    "AuthResponse",
    "BugResponse",
    "DeletedResponse",
    "HealthResponse",
    "MessageResponse",
    "RootResponse",
    "UserReference",
    "UserResponse",
]
