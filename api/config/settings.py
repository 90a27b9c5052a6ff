"""
MODULE_DESCRIPTION: API Configuration Settings - Global State and Application Constants

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

This module is the central configuration hub for the Bug Tracker API. It defines
the constants read from the environment and the domain constants (bug status and
priority domains, defaults, field limits) shared by the request models, the
mutation policy and the repositories.

The module manages:
    - Application startup tracking (uptime)
    - JWT issuing settings (secret, algorithm, lifetime)
    - Password hashing cost
    - CORS origins
    - Role names and admin bootstrap list
    - Bug field domains and defaults

===================================================================================
ENVIRONMENT VARIABLES
===================================================================================

    JWT_SECRET            Secret used to sign HS256 bearer tokens
    JWT_ALGORITHM         Signing algorithm (default: HS256)
    JWT_EXPIRES_DAYS      Token lifetime in days (default: 30)
    BCRYPT_ROUNDS         bcrypt cost factor (default: 12, minimum 4)
    CORS_ALLOWED_ORIGINS  Comma-separated list of allowed origins
    ADMIN_EMAILS          Comma-separated list of emails registered as admin
    DEBUG_TRACEBACK       Include tracebacks in 500 responses (0/1)

===================================================================================
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import time

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Constants
try:
    from pathlib import Path

    BASE_DIR = Path(__file__).resolve().parents[2]
except NameError:
    BASE_DIR = Path(os.getcwd()).parents[0]

# ==============================================================================
# APPLICATION LIFECYCLE TRACKING
# ==============================================================================

start_time = time.time()

# Set by the lifespan handler in api.main
_APP_STARTUP_TIME = None

API_TITLE = "Bug Tracker API"
API_VERSION = "1.0.0"

# ==============================================================================
# AUTHENTICATION SETTINGS
# ==============================================================================

JWT_SECRET = os.environ.get("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_DAYS = int(os.environ.get("JWT_EXPIRES_DAYS", "30"))

# bcrypt refuses cost factors below 4
BCRYPT_ROUNDS = max(4, int(os.environ.get("BCRYPT_ROUNDS", "12")))

MIN_PASSWORD_LENGTH = 6

ROLE_USER = "user"
ROLE_ADMIN = "admin"

ADMIN_EMAILS = {
    email.strip().lower()
    for email in os.environ.get("ADMIN_EMAILS", "").split(",")
    if email.strip()
}

# ==============================================================================
# CORS
# ==============================================================================

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]

# ==============================================================================
# BUG DOMAIN
# ==============================================================================

BUG_STATUSES = ("open", "in-progress", "resolved", "closed")
BUG_PRIORITIES = ("low", "medium", "high", "critical")
DEFAULT_BUG_STATUS = "open"
DEFAULT_BUG_PRIORITY = "medium"
BUG_TITLE_MAX_LENGTH = 100

# Keys the server owns; stripped from any create or update payload
SERVER_MANAGED_BUG_FIELDS = ("id", "_id", "reportedBy", "createdAt", "updatedAt")

# Keys a patch may carry
MUTABLE_BUG_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "project",
    "steps",
    "assignedTo",
)


def debug_traceback_enabled() -> bool:
    """Read DEBUG_TRACEBACK at call time so tests can toggle it."""
    return os.getenv("DEBUG_TRACEBACK", "0") == "1"

