"""
MODULE_DESCRIPTION: Exception Handlers - Centralized Error Processing for FastAPI

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Centralized exception handling for the Bug Tracker API. Every error leaves
the server as JSON with a ``detail`` message and a precise status code.

Exception Handler Types:
    1. validation_exception_handler: request schema errors → 400
    2. bug_tracker_error_handler: domain errors → their own status
       (400 validation, 401 authentication, 403 authorization, 404 not found,
       500 persistence)
    3. store_error_handler: document store failures escaping the policy → 500
    4. http_exception_handler: Starlette/FastAPI HTTPException → JSON with
       debug tracing (401 traced in detail)
    5. general_exception_handler: anything else (including a stray ValueError)
       → 500 "Internal server error"

Response Format:
    {"detail": "<message>"}
    Schema failures add "errors": [<pydantic error>, ...]

Security Note:
    500 responses never include exception text. A traceback is added only
    when DEBUG_TRACEBACK=1.

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
import traceback

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config.settings import debug_traceback_enabled
from api.exceptions.errors import BugTrackerError, PersistenceError

# Import debug functions from utils
from api.utils.debug import (
    print__debug,
    print__http_error_debug,
    print__http_trace_debug,
)
from docstore.errors import StoreError

# ==============================================================================
# HELPERS
# ==============================================================================


def _first_error_message(errors):
    """Human readable message of the first schema error, without pydantic's prefix."""
    if not errors:
        return "Validation error"
    message = str(errors[0].get("msg", "Validation error"))
    return message.removeprefix("Value error, ")


def _trace_unauthorized(request: Request, detail):
    print__http_error_debug(f"🚨 HTTP 401 UNAUTHORIZED: {detail}")
    print__http_trace_debug(f"🚨 HTTP 401 TRACE: Request URL: {request.url}")
    print__http_trace_debug(f"🚨 HTTP 401 TRACE: Request method: {request.method}")
    # Never log the credential itself
    headers = {
        key: ("<redacted>" if key.lower() == "authorization" else value)
        for key, value in request.headers.items()
    }
    print__http_trace_debug(f"🚨 HTTP 401 TRACE: Request headers: {headers}")
    client_ip = request.client.host if request.client else "unknown"
    print__http_error_debug(f"🚨 HTTP 401 CLIENT: IP address: {client_ip}")


# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================


async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    """Handle request schema errors as 400 Bad Request.

    Unknown bug fields, bad enum values, malformed emails and short passwords
    all land here. ``detail`` carries the first error's message so clients can
    show it inline.

    Response Format:
        {
            "detail": "Password must be at least 6 characters",
            "errors": [{"loc": ["body", "password"], "msg": "...", "type": "value_error"}]
        }
    """
    errors = jsonable_encoder(exc.errors())
    print__debug(f"Validation error: {errors}")
    return JSONResponse(
        status_code=400,
        content={"detail": _first_error_message(errors), "errors": errors},
    )


async def bug_tracker_error_handler(request: Request, exc: BugTrackerError):
    """Answer a domain error with its own status code and message."""
    if exc.status_code == 401:
        _trace_unauthorized(request, exc.message)
    else:
        print__http_error_debug(f"🚨 HTTP {exc.status_code} ERROR: {exc.message}")
        print__http_trace_debug(
            f"🚨 HTTP {exc.status_code} TRACE: {request.method} {request.url}"
        )

    if exc.status_code >= 500 and exc.__cause__ is not None:
        print__debug(
            f"Persistence failure: {type(exc.__cause__).__name__}: {exc.__cause__}"
        )

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def store_error_handler(request: Request, exc: StoreError):
    """Store failures that bypassed the policy are reported like PersistenceError."""
    print__debug(f"Store error: {type(exc).__name__}: {exc}")
    error = PersistenceError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with comprehensive debugging for 401 errors."""
    if exc.status_code == 401:
        _trace_unauthorized(request, exc.detail)
        print__http_trace_debug(
            f"🚨 HTTP 401 TRACE: Full traceback:\n{traceback.format_exc()}"
        )
    elif exc.status_code >= 400:
        print__http_error_debug(f"🚨 HTTP {exc.status_code} ERROR: {exc.detail}")
        print__http_trace_debug(
            f"🚨 HTTP {exc.status_code} TRACE: Request URL: {request.url}"
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(_request: Request, exc: Exception):
    """Handle unexpected exceptions with 500 Internal Server Error.

    Does NOT include exception details in the response; a traceback is added
    only when DEBUG_TRACEBACK=1.
    """
    print__debug(f"Unexpected error: {type(exc).__name__}: {str(exc)}")

    content = {"detail": "Internal server error"}
    if debug_traceback_enabled():
        content["traceback"] = traceback.format_exception(
            type(exc), exc, exc.__traceback__
        )
    return JSONResponse(status_code=500, content=content)
