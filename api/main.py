"""Bug Tracker FastAPI Backend Application

This module is the entry point of the Bug Tracker API. It wires the document
store lifecycle, middleware, exception handlers and route routers into one
FastAPI application.
"""

MODULE_DESCRIPTION = r"""Bug Tracker FastAPI Backend Application

Key Features:
-------------
1. REST API:
   - Users: register, login, profile read/update, logout (token revocation)
   - Bugs: list, get, create, partial update, delete
   - Root catalogue and health endpoints

2. Authorization:
   - HS256 bearer tokens on every /bugs and /users/profile request
   - Bug update/delete only by the reporter or an admin
   - Reads open to any authenticated user

3. Persistence:
   - PostgreSQL JSONB document store with a connection pool opened in the
     lifespan and closed on shutdown
   - In-memory fallback when PostgreSQL is not configured
     (InMemoryStore_fallback=1)

4. Error Handling:
   - Precise status codes: 400 validation, 401 authentication,
     403 authorization, 404 not found, 500 persistence/unhandled
   - Request schema errors are answered with 400 (not FastAPI's default 422)
   - {"detail": <message>} bodies everywhere

5. Windows Compatibility:
   - Explicit Windows event loop policy configuration for psycopg

Startup Sequence:
-----------------
1. Record startup timestamp for uptime tracking
2. Initialize the document store (PostgreSQL or in-memory fallback)

Shutdown Sequence:
------------------
1. Close the connection pool and clear the global store

Running:
--------
    uvicorn api.main:app --reload
    python uvicorn_start.py
"""

# ==============================================================================
# CRITICAL WINDOWS COMPATIBILITY CONFIGURATION
# ==============================================================================
# Must be set before any asyncio-using import so psycopg async works on Windows
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ==============================================================================
# ENVIRONMENT VARIABLES LOADING
# ==============================================================================
from dotenv import load_dotenv

load_dotenv()

# ==============================================================================
# PROJECT ROOT DIRECTORY CONFIGURATION
# ==============================================================================
try:
    from pathlib import Path

    BASE_DIR = Path(__file__).resolve().parents[1]  # Go up one level from api/main.py
except NameError:
    BASE_DIR = Path(os.getcwd())

# Enables "from docstore import ..." when started from another directory
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# ==============================================================================
# STANDARD LIBRARY AND THIRD-PARTY IMPORTS
# ==============================================================================
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import api.config.settings as settings
from api.config.settings import API_TITLE, API_VERSION
from api.exceptions.errors import BugTrackerError
from api.exceptions.handlers import (
    bug_tracker_error_handler,
    general_exception_handler,
    http_exception_handler,
    store_error_handler,
    validation_exception_handler,
)
from api.middleware.cors import setup_brotli_middleware, setup_cors_middleware
from api.routes import bugs_router, health_router, root_router, users_router
from api.utils.debug import print__startup_debug
from docstore.errors import StoreError
from docstore.factory import cleanup_store, initialize_store

# ==============================================================================
# APPLICATION LIFESPAN MANAGEMENT
# ==============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Open the document store on startup and release it on shutdown."""
    settings._APP_STARTUP_TIME = datetime.now()
    print__startup_debug("🚀 FastAPI application starting up...")

    store = await initialize_store()
    print__startup_debug(f"✅ Document store ready: {type(store).__name__}")

    yield  # Application runs here, serving requests

    print__startup_debug("🛑 FastAPI application shutting down...")
    print__startup_debug(
        f"Application ran for {datetime.now() - settings._APP_STARTUP_TIME}"
    )
    await cleanup_store()


# ==============================================================================
# FASTAPI APPLICATION INITIALIZATION
# ==============================================================================
app = FastAPI(
    title=API_TITLE,
    description="""Bug tracking API: report, list, update and delete bugs.

## Authentication
All endpoints except `/`, `/health`, `/users/register`, `/users/login` and
`/docs` require a Bearer token obtained from register or login.

## Authorization
A bug may be updated or deleted only by its reporter or by an admin.
    """,
    version=API_VERSION,
    lifespan=lifespan,
    responses={
        400: {
            "description": "Validation Error - Invalid request body",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Password must be at least 6 characters",
                        "errors": [
                            {
                                "loc": ["body", "password"],
                                "msg": "Value error, Password must be at least 6 characters",
                                "type": "value_error",
                            }
                        ],
                    }
                }
            },
        },
        500: {
            "description": "Internal Server Error",
            "content": {
                "application/json": {"example": {"detail": "Internal server error"}}
            },
        },
    },
)

# ==============================================================================
# MIDDLEWARE REGISTRATION
# ==============================================================================
setup_cors_middleware(app)
setup_brotli_middleware(app)

# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(BugTrackerError, bug_tracker_error_handler)
app.add_exception_handler(StoreError, store_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ==============================================================================
# ROUTE REGISTRATION
# ==============================================================================
app.include_router(root_router, tags=["Root"])  # GET /
app.include_router(health_router, tags=["Health"])  # GET /health
app.include_router(users_router)  # /users/*
app.include_router(bugs_router)  # /bugs, /bugs/{id}

print__startup_debug("[SUCCESS] All route routers registered successfully")
