"""PostgreSQL Connection String Generation and Basic Connection Management

This module builds the connection string and connection kwargs used by the
document store pool, and offers a direct connection for one-off operations
such as schema setup.
"""

from __future__ import annotations

MODULE_DESCRIPTION = r"""PostgreSQL Connection String Generation and Basic Connection Management

Key Features:
-------------
1. Connection String Generation:
   - Credentials and endpoint from get_db_config()
   - sslmode from DOCSTORE_SSLMODE (default: prefer)
   - Unique application_name per process for tracing in pg_stat_activity
   - Connect timeout and TCP keepalive settings
   - Cached in docstore.globals._CONNECTION_STRING_CACHE

2. Connection Parameters:
   - autocommit=False: every store operation commits explicitly
   - prepare_threshold=None: no server-side prepared statements

3. Health Check:
   - "SELECT 1" probe, returns False on any error, never raises

4. Direct Connection Access:
   - Async context manager around psycopg.AsyncConnection.connect()

Usage Examples:
--------------
   from docstore.database.connection import get_direct_connection
   async with get_direct_connection() as conn:
       async with conn.cursor() as cur:
           await cur.execute("SELECT count(*) FROM documents")
"""

import os
import time
import uuid
from contextlib import asynccontextmanager

import psycopg

from api.utils.debug import print__docstore_debug
from docstore.config import (
    CONNECT_TIMEOUT,
    KEEPALIVES_COUNT,
    KEEPALIVES_IDLE,
    KEEPALIVES_INTERVAL,
    SSLMODE,
    get_db_config,
)


# ==============================================================================
# MODULE FUNCTIONS
# ==============================================================================


def get_connection_string():
    """Generate the PostgreSQL connection string, cached for the process lifetime.

    Returns:
        str: postgresql:// URI with sslmode, application_name, timeout and
            keepalive query parameters.
    """
    print__docstore_debug("CONNECTION STRING START: Generating PostgreSQL connection string")
    import docstore.globals as globals_module

    if globals_module._CONNECTION_STRING_CACHE is not None:
        print__docstore_debug("CONNECTION STRING CACHED: Using cached connection string")
        return globals_module._CONNECTION_STRING_CACHE

    config = get_db_config()

    process_id = os.getpid()
    startup_time = int(time.time())
    random_id = uuid.uuid4().hex[:8]
    app_name = f"bugtracker_{process_id}_{startup_time}_{random_id}"
    print__docstore_debug(f"CONNECTION STRING APP NAME: {app_name}")

    globals_module._CONNECTION_STRING_CACHE = (
        f"postgresql://{config['user']}:{config['password']}@"
        f"{config['host']}:{config['port']}/{config['dbname']}?"
        f"sslmode={SSLMODE}"
        f"&application_name={app_name}"
        f"&connect_timeout={CONNECT_TIMEOUT}"
        f"&keepalives_idle={KEEPALIVES_IDLE}"
        f"&keepalives_interval={KEEPALIVES_INTERVAL}"
        f"&keepalives_count={KEEPALIVES_COUNT}"
    )

    print__docstore_debug("CONNECTION STRING COMPLETE: PostgreSQL connection string generated")
    return globals_module._CONNECTION_STRING_CACHE


def get_connection_kwargs():
    """Connection kwargs shared by the pool and direct connections."""
    return {
        "autocommit": False,
        "prepare_threshold": None,
    }


async def check_connection_health(connection):
    """Return True if ``connection`` answers ``SELECT 1``.

    Used as the pool ``check`` callback, so it must never raise.
    """
    try:
        async with connection.cursor() as cur:
            await cur.execute("SELECT 1")
            result = await cur.fetchone()
            return result is not None and result[0] == 1
    except Exception as exc:
        print__docstore_debug(f"Connection health check failed: {exc}")
        return False


@asynccontextmanager
async def get_direct_connection(autocommit=False):
    """Open a dedicated connection outside the pool.

    Args:
        autocommit: True for DDL statements run during schema setup.
    """
    connection_string = get_connection_string()
    connection_kwargs = {**get_connection_kwargs(), "autocommit": autocommit}

    async with await psycopg.AsyncConnection.connect(
        connection_string, **connection_kwargs
    ) as conn:
        yield conn
