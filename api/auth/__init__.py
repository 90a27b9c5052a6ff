"""
Authentication package for the API server.

This package contains bearer token issuing/verification and password hashing
for the Bug Tracker application.
"""

# Import authentication functions
from .jwt_auth import hash_password, issue_token, verify_password, verify_token

# Export all authentication functions for easier access
__all__ = ["hash_password", "issue_token", "verify_password", "verify_token"]
