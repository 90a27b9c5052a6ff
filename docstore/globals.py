"""Global state shared across the document store modules.

Module-level singletons read and written through ``import docstore.globals as
globals_module`` so every module observes the same value.
"""

# ==============================================================================
# GLOBAL DOCUMENT STORE INSTANCE
# ==============================================================================
# The store the API uses for every repository call.
#
# Created by: docstore/factory.py::initialize_store()
# Used in: docstore/factory.py::get_global_store()
#
# Value States:
#   - None: not initialised yet (or cleaned up)
#   - PostgresDocumentStore: persistent JSONB-backed store
#   - InMemoryDocumentStore: fallback store (development and tests)
#
_GLOBAL_STORE = None

# ==============================================================================
# CONNECTION STRING CACHE
# ==============================================================================
# Generated once per process so the application_name stays stable.
#
# Created by: docstore/database/connection.py::get_connection_string()
# Cleared by: docstore/database/pool_manager.py::force_close_pool()
#
_CONNECTION_STRING_CACHE = None

# ==============================================================================
# INITIALISATION LOCK
# ==============================================================================
# Serialises lazy store creation so concurrent first requests build one store
# (and one connection pool). Created on first use inside the running loop.
#
# Created by: docstore/factory.py::initialize_store()
# Cleared by: docstore/factory.py::cleanup_store()
#
_STORE_INIT_LOCK = None
