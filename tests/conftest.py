"""Shared pytest fixtures.

Environment is fixed before any project module is imported: settings are read
into module constants at import time.
"""

import os
import sys

# CRITICAL: Set Windows event loop policy FIRST, before other imports
if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["InMemoryStore_fallback"] = "1"
# Never reach for a real PostgreSQL during the suite
for var in ("host", "dbname", "user", "password"):
    os.environ.pop(var, None)

try:
    from pathlib import Path

    BASE_DIR = Path(__file__).resolve().parents[1]
except NameError:
    BASE_DIR = Path(os.getcwd())

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

import pytest
from fastapi.testclient import TestClient

from api.main import app
from docstore.factory import set_global_store
from docstore.store.memory import InMemoryDocumentStore


@pytest.fixture
def store():
    """A fresh in-memory store installed as the global store."""
    fresh = InMemoryDocumentStore()
    previous = set_global_store(fresh)
    yield fresh
    set_global_store(previous)


@pytest.fixture
def client(store):
    return TestClient(app)


@pytest.fixture
def asgi_app(store):
    """The FastAPI app backed by a fresh store, for in-process httpx transports."""
    return app
