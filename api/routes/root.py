"""
MODULE_DESCRIPTION: Root Endpoint - API Catalogue

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

``GET /`` lists the endpoints the Bug Tracker API exposes, grouped by area.
Publicly accessible to make API discovery easy; interactive documentation is
served by FastAPI at /docs and /redoc.

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

from fastapi import APIRouter

from api.config.settings import API_TITLE, API_VERSION
from api.models.responses import RootResponse

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

# Create router instance for root endpoint
router = APIRouter()

ENDPOINT_CATALOGUE = {
    "users": [
        "POST /users/register",
        "POST /users/login",
        "GET /users/profile",
        "PUT /users/profile",
        "POST /users/logout",
    ],
    "bugs": [
        "GET /bugs",
        "GET /bugs/{id}",
        "POST /bugs",
        "PUT /bugs/{id}",
        "DELETE /bugs/{id}",
    ],
    "system": ["GET /", "GET /health", "GET /docs"],
}


# ==============================================================================
# API ENDPOINT: ROOT / API DOCUMENTATION
# ==============================================================================


@router.get("/", tags=["root"], response_model=RootResponse)
async def api_root():
    """API root endpoint - endpoint catalogue. No authentication required."""
    return {
        "message": f"{API_TITLE} is running",
        "version": API_VERSION,
        "endpoints": ENDPOINT_CATALOGUE,
    }
