"""HTTP middleware registration for the API server."""

from .cors import setup_brotli_middleware, setup_cors_middleware

__all__ = ["setup_brotli_middleware", "setup_cors_middleware"]
