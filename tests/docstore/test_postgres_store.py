"""PostgresDocumentStore statements and error translation, on a recording fake pool."""

from contextlib import asynccontextmanager

import psycopg
import pytest

from docstore.errors import DuplicateKeyError, StoreError
from docstore.store.postgres import PostgresDocumentStore


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows

    async def fetchone(self):
        return self.rows[0] if self.rows else None

    async def fetchall(self):
        return list(self.rows)


class FakeConnection:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.executed = []
        self.commits = 0

    async def execute(self, query, params=None):
        self.executed.append((" ".join(query.split()), params))
        if self.error is not None:
            raise self.error
        return FakeCursor(self.rows)

    async def commit(self):
        self.commits += 1


class FakePool:
    def __init__(self, conn):
        self.conn = conn

    @asynccontextmanager
    async def connection(self):
        yield self.conn


@pytest.mark.asyncio
async def test_insert_writes_body_with_identity_and_commits():
    conn = FakeConnection(rows=[({"id": "abc", "title": "T"},)])
    store = PostgresDocumentStore(FakePool(conn))

    result = await store.insert_one("bugs", {"id": "abc", "title": "T"})

    query, params = conn.executed[0]
    assert query.startswith("INSERT INTO documents")
    assert params[0] == "bugs"
    assert params[1] == "abc"
    body = params[2].obj
    assert body["title"] == "T"
    assert body["createdAt"] == body["updatedAt"]
    assert conn.commits == 1
    assert result == {"id": "abc", "title": "T"}


@pytest.mark.asyncio
async def test_find_uses_containment_and_order():
    conn = FakeConnection(rows=[({"id": "1"},), ({"id": "2"},)])
    store = PostgresDocumentStore(FakePool(conn))

    docs = await store.find("bugs", {"status": "open"})
    query, params = conn.executed[0]
    assert "body @> %s" in query
    assert "ORDER BY created_at DESC, seq DESC" in query
    assert params[1].obj == {"status": "open"}
    assert docs == [{"id": "1"}, {"id": "2"}]

    await store.find("bugs", newest_first=False)
    assert "ORDER BY created_at ASC, seq ASC" in conn.executed[1][0]
    assert conn.executed[1][1][1].obj == {}


@pytest.mark.asyncio
async def test_update_never_patches_store_owned_keys():
    conn = FakeConnection(rows=[])
    store = PostgresDocumentStore(FakePool(conn))

    assert await store.update_one("bugs", "1", {"id": "x", "createdAt": "y", "status": "closed"}) is None
    query, params = conn.executed[0]
    assert "SET body = body || %s" in query
    patch = params[0].obj
    assert set(patch) == {"status", "updatedAt"}


@pytest.mark.asyncio
async def test_driver_errors_are_translated():
    store = PostgresDocumentStore(FakePool(FakeConnection(error=psycopg.OperationalError("gone"))))
    with pytest.raises(StoreError):
        await store.find_one("bugs", "1")

    store = PostgresDocumentStore(
        FakePool(FakeConnection(error=psycopg.errors.UniqueViolation("duplicate key")))
    )
    with pytest.raises(DuplicateKeyError):
        await store.insert_one("revoked_tokens", {"id": "jti"})


@pytest.mark.asyncio
async def test_delete_reports_whether_a_row_went():
    store = PostgresDocumentStore(FakePool(FakeConnection(rows=[("1",)])))
    assert await store.delete_one("bugs", "1") is True
    store = PostgresDocumentStore(FakePool(FakeConnection(rows=[])))
    assert await store.delete_one("bugs", "1") is False
