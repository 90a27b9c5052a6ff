"""PostgreSQL document store on a single JSONB table.

Every collection lives in ``documents`` keyed by ``(collection, id)``. Filters
use JSONB containment (``body @> %s``) and partial updates use JSONB
concatenation (``body || %s``) so a patch is applied in one statement.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

import psycopg
from psycopg.types.json import Jsonb

from api.utils.debug import print__docstore_debug
from docstore.config import DOCUMENTS_TABLE
from docstore.database.connection import check_connection_health
from docstore.database.pool_manager import close_pool
from docstore.errors import DuplicateKeyError, StoreError
from docstore.store.base import (
    Document,
    DocumentStore,
    new_document_id,
    utc_timestamp,
)

# Keys owned by the store; never taken from a caller's update
_PROTECTED_KEYS = ("id", "createdAt", "updatedAt")


class PostgresDocumentStore(DocumentStore):
    """Document store over an open ``psycopg_pool.AsyncConnectionPool``."""

    name = "postgres"

    def __init__(self, pool, table=DOCUMENTS_TABLE):
        self.pool = pool
        self.table = table

    @asynccontextmanager
    async def _connection(self, collection):
        try:
            async with self.pool.connection() as conn:
                yield conn
        except psycopg.errors.UniqueViolation as exc:
            constraint = getattr(exc.diag, "constraint_name", None) or ""
            field = "email" if constraint.endswith("_email") else "id"
            print__docstore_debug(f"POSTGRES DUPLICATE: {collection}.{field}")
            raise DuplicateKeyError(collection, field) from exc
        except psycopg.Error as exc:
            print__docstore_debug(f"POSTGRES ERROR: {type(exc).__name__}: {exc}")
            raise StoreError(str(exc)) from exc

    async def insert_one(self, collection: str, document: Document) -> Document:
        now = utc_timestamp()
        body = {
            **document,
            "id": document.get("id") or new_document_id(),
            "createdAt": now,
            "updatedAt": now,
        }
        created = datetime.fromisoformat(now)

        async with self._connection(collection) as conn:
            cur = await conn.execute(
                f"""
                INSERT INTO {self.table} (collection, id, body, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING body
                """,
                (collection, body["id"], Jsonb(body), created, created),
            )
            row = await cur.fetchone()
            await conn.commit()

        print__docstore_debug(f"POSTGRES INSERT: {collection}/{body['id']}")
        return row[0]

    async def find_one(self, collection: str, doc_id: str) -> Optional[Document]:
        async with self._connection(collection) as conn:
            cur = await conn.execute(
                f"SELECT body FROM {self.table} WHERE collection = %s AND id = %s",
                (collection, doc_id),
            )
            row = await cur.fetchone()
        return row[0] if row else None

    async def find_one_by(
        self, collection: str, filters: Document
    ) -> Optional[Document]:
        async with self._connection(collection) as conn:
            cur = await conn.execute(
                f"""
                SELECT body FROM {self.table}
                WHERE collection = %s AND body @> %s
                ORDER BY created_at ASC, seq ASC
                LIMIT 1
                """,
                (collection, Jsonb(filters)),
            )
            row = await cur.fetchone()
        return row[0] if row else None

    async def find(
        self,
        collection: str,
        filters: Optional[Document] = None,
        newest_first: bool = True,
    ) -> List[Document]:
        direction = "DESC" if newest_first else "ASC"
        async with self._connection(collection) as conn:
            cur = await conn.execute(
                f"""
                SELECT body FROM {self.table}
                WHERE collection = %s AND body @> %s
                ORDER BY created_at {direction}, seq {direction}
                """,
                (collection, Jsonb(filters or {})),
            )
            rows = await cur.fetchall()
        return [row[0] for row in rows]

    async def update_one(
        self, collection: str, doc_id: str, changes: Document
    ) -> Optional[Document]:
        now = utc_timestamp()
        patch = {k: v for k, v in changes.items() if k not in _PROTECTED_KEYS}
        patch["updatedAt"] = now

        async with self._connection(collection) as conn:
            cur = await conn.execute(
                f"""
                UPDATE {self.table}
                SET body = body || %s, updated_at = %s
                WHERE collection = %s AND id = %s
                RETURNING body
                """,
                (Jsonb(patch), datetime.fromisoformat(now), collection, doc_id),
            )
            row = await cur.fetchone()
            await conn.commit()

        print__docstore_debug(
            f"POSTGRES UPDATE: {collection}/{doc_id} found={row is not None}"
        )
        return row[0] if row else None

    async def delete_one(self, collection: str, doc_id: str) -> bool:
        async with self._connection(collection) as conn:
            cur = await conn.execute(
                f"DELETE FROM {self.table} WHERE collection = %s AND id = %s RETURNING id",
                (collection, doc_id),
            )
            row = await cur.fetchone()
            await conn.commit()

        print__docstore_debug(
            f"POSTGRES DELETE: {collection}/{doc_id} removed={row is not None}"
        )
        return row is not None

    async def ping(self) -> bool:
        try:
            async with self.pool.connection() as conn:
                return await check_connection_health(conn)
        except Exception as exc:
            print__docstore_debug(f"POSTGRES PING FAILED: {exc}")
            return False

    async def close(self) -> None:
        await close_pool(self.pool)
