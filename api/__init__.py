"""
API package for the Bug Tracker application.

This package contains the FastAPI server: configuration, authentication,
request/response models, the bug mutation policy and the route handlers.
"""

__version__ = "1.0.0"

# Don't import anything during package initialization; submodules import
# what they need when they need it.

__all__ = []
