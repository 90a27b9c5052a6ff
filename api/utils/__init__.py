"""
Utility functions package for the API server.

This package contains the environment-gated debug printing helpers shared by
the API server, the document store and the client package.
"""

# Debug utilities
from .debug import (
    print__bugs_debug,
    print__client_debug,
    print__debug,
    print__docstore_debug,
    print__http_error_debug,
    print__http_trace_debug,
    print__startup_debug,
    print__token_debug,
    print__users_debug,
)

# Export all utilities for easy access
__all__ = [
    "print__bugs_debug",
    "print__client_debug",
    "print__debug",
    "print__docstore_debug",
    "print__http_error_debug",
    "print__http_trace_debug",
    "print__startup_debug",
    "print__token_debug",
    "print__users_debug",
]
