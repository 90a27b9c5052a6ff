"""Connection pool lifecycle for the PostgreSQL document store.

``create_pool()`` opens an ``AsyncConnectionPool`` configured from
``docstore.config``; the pool is owned by ``PostgresDocumentStore`` and closed
by ``close_pool()`` during application shutdown.
"""

from __future__ import annotations

from psycopg_pool import AsyncConnectionPool

from api.utils.debug import print__docstore_debug
from docstore.config import (
    CONNECT_TIMEOUT,
    DEFAULT_MAX_IDLE,
    DEFAULT_MAX_LIFETIME,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
    DEFAULT_POOL_TIMEOUT,
)
from docstore.database.connection import (
    check_connection_health,
    get_connection_kwargs,
    get_connection_string,
)


def _build_pool():
    return AsyncConnectionPool(
        conninfo=get_connection_string(),
        min_size=DEFAULT_POOL_MIN_SIZE,
        max_size=DEFAULT_POOL_MAX_SIZE,
        timeout=DEFAULT_POOL_TIMEOUT,
        max_idle=DEFAULT_MAX_IDLE,
        max_lifetime=DEFAULT_MAX_LIFETIME,
        kwargs={
            **get_connection_kwargs(),
            "connect_timeout": CONNECT_TIMEOUT,
        },
        check=check_connection_health,
        open=False,
    )


async def create_pool():
    """Create and open a connection pool, waiting until min_size connections exist.

    Raises:
        psycopg_pool.PoolTimeout: PostgreSQL could not be reached in time.
    """
    print__docstore_debug("POOL CREATE START: Opening AsyncConnectionPool")
    pool = _build_pool()
    try:
        await pool.open(wait=True, timeout=DEFAULT_POOL_TIMEOUT)
    except Exception as exc:
        print__docstore_debug(f"POOL CREATE ERROR: Failed to open pool: {exc}")
        await pool.close()
        raise
    print__docstore_debug("POOL CREATE COMPLETE: Pool opened")
    return pool


async def close_pool(pool):
    """Close ``pool``, logging instead of raising on failure."""
    if pool is None:
        return
    try:
        await pool.close()
        print__docstore_debug("POOL CLOSE: Connection pool closed")
    except Exception as exc:
        print__docstore_debug(f"POOL CLOSE ERROR: {exc}")


async def force_close_pool(pool):
    """Close ``pool`` and drop the cached connection string.

    The next ``get_connection_string()`` call then picks up changed
    environment variables and a fresh application_name.
    """
    import docstore.globals as globals_module

    await close_pool(pool)
    globals_module._CONNECTION_STRING_CACHE = None
    print__docstore_debug("FORCE CLOSE COMPLETE: Connection string cache cleared")
