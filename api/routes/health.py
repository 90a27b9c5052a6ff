"""
MODULE_DESCRIPTION: Health Routes - Liveness and Document Store Status

===================================================================================
ENDPOINTS
===================================================================================

    GET /health    → 200 healthy | 503 degraded (store unreachable)

No authentication required. Reports uptime, process memory and which
document store implementation is active (postgres or the in-memory
fallback), and whether it answers a ping.

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

import time
from datetime import datetime, timezone

import psutil
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.config.settings import API_VERSION, start_time
from api.dependencies.auth import get_store
from api.models.responses import HealthResponse
from api.utils.debug import print__debug

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

router = APIRouter(tags=["health"])


def _memory_usage():
    process = psutil.Process()
    memory_info = process.memory_info()
    return {
        "rss_mb": round(memory_info.rss / 1024 / 1024, 2),
        "vms_mb": round(memory_info.vms / 1024 / 1024, 2),
        "percent": round(process.memory_percent(), 2),
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service and document store health",
    responses={503: {"description": "Document store unreachable"}},
)
async def health_check(store=Depends(get_store)):
    store_reachable = await store.ping()
    status = "healthy" if store_reachable else "degraded"

    health_data = {
        "status": status,
        "store": store.name,
        "store_reachable": store_reachable,
        "uptime_seconds": round(time.time() - start_time, 3),
        "memory": _memory_usage(),
        "version": API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if not store_reachable:
        print__debug(f"⚠️ HEALTH: {store.name} store unreachable")
        return JSONResponse(status_code=503, content=health_data)

    return health_data
