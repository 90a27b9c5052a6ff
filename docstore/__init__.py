"""Document store package.

Persists users, bugs and revoked tokens as JSON documents, either in PostgreSQL
(JSONB) or, as a fallback, in process memory.
"""

from docstore.errors import DuplicateKeyError, StoreError
from docstore.factory import (
    cleanup_store,
    get_global_store,
    initialize_store,
    set_global_store,
)

__all__ = [
    "DuplicateKeyError",
    "StoreError",
    "cleanup_store",
    "get_global_store",
    "initialize_store",
    "set_global_store",
]
