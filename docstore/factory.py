"""Document store factory and lifecycle management.

The FastAPI lifespan calls ``initialize_store()`` on startup and
``cleanup_store()`` on shutdown; request handlers reach the store through
``get_global_store()``.
"""

from __future__ import annotations

MODULE_DESCRIPTION = r"""Document Store Factory and Lifecycle Management

Functions:
----------
1. create_postgres_store():
   - Validates the PostgreSQL environment variables
   - Creates the documents table and indexes (idempotent)
   - Opens the connection pool and verifies it with a ping

2. initialize_store():
   - Idempotent startup hook for the FastAPI lifespan
   - Double-checked under _STORE_INIT_LOCK so concurrent callers share one store
   - Falls back to InMemoryDocumentStore when PostgreSQL is not configured
     or unreachable, if INMEMORY_FALLBACK_ENABLED is set; re-raises otherwise

3. get_global_store():
   - Returns the global store, initialising it lazily on first use

4. set_global_store():
   - Replaces the global store (tests install a fresh in-memory store)

5. cleanup_store():
   - Closes the pool of a PostgreSQL store and clears global state

Usage:
------
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await initialize_store()
        yield
        await cleanup_store()
"""

import asyncio

import docstore.globals as globals_module
from api.utils.debug import print__docstore_debug
from docstore.config import INMEMORY_FALLBACK_ENABLED, check_postgres_env_vars
from docstore.database.pool_manager import create_pool, force_close_pool
from docstore.database.table_setup import setup_documents_table
from docstore.errors import StoreError
from docstore.store.memory import InMemoryDocumentStore
from docstore.store.postgres import PostgresDocumentStore


# ==============================================================================
# MODULE FUNCTIONS
# ==============================================================================


async def create_postgres_store():
    """Create a ready-to-use PostgresDocumentStore.

    Raises:
        StoreError: environment incomplete or the database did not answer.
        psycopg.Error: table setup or pool creation failed.
    """
    print__docstore_debug("CREATE STORE START: Creating PostgreSQL document store")

    if not check_postgres_env_vars():
        raise StoreError("Missing required PostgreSQL environment variables")

    await setup_documents_table()
    pool = await create_pool()
    store = PostgresDocumentStore(pool)

    if not await store.ping():
        await force_close_pool(pool)
        raise StoreError("PostgreSQL document store failed its health check")

    print__docstore_debug("CREATE STORE COMPLETE: PostgreSQL document store ready")
    return store


async def initialize_store():
    """Initialise the global store once; returns the active store."""
    if globals_module._GLOBAL_STORE is not None:
        return globals_module._GLOBAL_STORE

    if globals_module._STORE_INIT_LOCK is None:
        globals_module._STORE_INIT_LOCK = asyncio.Lock()

    async with globals_module._STORE_INIT_LOCK:
        # Another coroutine may have finished while this one waited
        if globals_module._GLOBAL_STORE is not None:
            print__docstore_debug("STORE INIT: Store created by a concurrent caller")
            return globals_module._GLOBAL_STORE

        try:
            print__docstore_debug("🚀 STORE INIT: Initializing PostgreSQL document store...")
            globals_module._GLOBAL_STORE = await create_postgres_store()
            print__docstore_debug("✅ STORE INIT: PostgreSQL document store initialized")
        except Exception as exc:
            print__docstore_debug(f"❌ STORE INIT: PostgreSQL store unavailable: {exc}")
            if not INMEMORY_FALLBACK_ENABLED:
                raise
            print__docstore_debug("🔄 STORE INIT: Falling back to InMemoryDocumentStore...")
            globals_module._GLOBAL_STORE = InMemoryDocumentStore()

    return globals_module._GLOBAL_STORE


async def get_global_store():
    """Unified access point for the store used by every repository."""
    if globals_module._GLOBAL_STORE is None:
        print__docstore_debug("GET STORE: No global store yet - initializing lazily")
        await initialize_store()
    return globals_module._GLOBAL_STORE


def set_global_store(store):
    """Install ``store`` as the global store, returning the previous one."""
    previous = globals_module._GLOBAL_STORE
    globals_module._GLOBAL_STORE = store
    return previous


async def cleanup_store():
    """Close the global store on shutdown and clear global state."""
    print__docstore_debug("🧹 STORE CLEANUP: Starting document store cleanup...")
    store = globals_module._GLOBAL_STORE
    globals_module._GLOBAL_STORE = None
    globals_module._STORE_INIT_LOCK = None

    if store is None:
        return

    if isinstance(store, PostgresDocumentStore):
        await force_close_pool(store.pool)
    else:
        await store.close()
    print__docstore_debug(
        f"✅ STORE CLEANUP: {type(store).__name__} cleaned up successfully"
    )
