"""
MODULE_DESCRIPTION: Middleware Setup - CORS and Brotli Compression

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Wrapper functions that register the HTTP middleware of the Bug Tracker API:

    setup_cors_middleware(app)
        Cross-Origin Resource Sharing for the browser client. Allowed origins
        come from CORS_ALLOWED_ORIGINS (comma-separated, see
        api.config.settings). The Authorization header must be allowed so the
        client can send its bearer token.

    setup_brotli_middleware(app)
        Brotli compression for responses of at least 1000 bytes when the
        client sends "Accept-Encoding: br" (bug lists grow quickly).

===================================================================================
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from brotli_asgi import BrotliMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config.settings import CORS_ALLOWED_ORIGINS
from api.utils.debug import print__startup_debug

# ==============================================================================
# MIDDLEWARE SETUP - CORS AND BROTLI
# ==============================================================================


def setup_cors_middleware(app: FastAPI):
    """Setup CORS middleware for the FastAPI application.

    Configuration:
        - allow_origins: CORS_ALLOWED_ORIGINS
        - allow_credentials: True
        - allow_methods: GET, POST, PUT, DELETE, OPTIONS
        - allow_headers: ["*"] (includes Authorization)
    """
    print__startup_debug(f"📋 CORS allowed origins: {CORS_ALLOWED_ORIGINS}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


def setup_brotli_middleware(app: FastAPI):
    """Compress responses of 1000 bytes or more with Brotli."""
    print__startup_debug("📋 Registering Brotli compression middleware...")
    app.add_middleware(BrotliMiddleware, minimum_size=1000)
