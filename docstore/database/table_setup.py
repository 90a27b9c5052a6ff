"""Database Table Creation and Schema Management

Creates the single ``documents`` table that backs every collection, plus the
indexes the repositories rely on.
"""

from __future__ import annotations

MODULE_DESCRIPTION = r"""Database Table Creation and Schema Management

Table Schema:
-------------
   CREATE TABLE documents (
       seq         BIGSERIAL,                 -- insertion order tiebreaker
       collection  VARCHAR(64)  NOT NULL,     -- "users", "bugs", "revoked_tokens"
       id          VARCHAR(64)  NOT NULL,     -- document id (uuid hex)
       body        JSONB        NOT NULL,     -- full document including id and timestamps
       created_at  TIMESTAMPTZ  NOT NULL,
       updated_at  TIMESTAMPTZ  NOT NULL,
       PRIMARY KEY (collection, id)
   );

Index Strategy:
---------------
1. idx_documents_collection_created: list a collection newest-first
2. idx_documents_body: GIN index for equality filters (body @> '{...}')
3. idx_documents_users_email: UNIQUE on lower(body->>'email') for users

Idempotency:
------------
Every statement uses IF NOT EXISTS, so setup runs on each startup.
DDL runs on a dedicated autocommit connection.
"""

from api.utils.debug import print__docstore_debug
from docstore.config import DOCUMENTS_TABLE
from docstore.database.connection import get_direct_connection

SCHEMA_STATEMENTS = (
    f"""
    CREATE TABLE IF NOT EXISTS {DOCUMENTS_TABLE} (
        seq BIGSERIAL,
        collection VARCHAR(64) NOT NULL,
        id VARCHAR(64) NOT NULL,
        body JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL,
        PRIMARY KEY (collection, id)
    )
    """,
    f"""
    CREATE INDEX IF NOT EXISTS idx_{DOCUMENTS_TABLE}_collection_created
    ON {DOCUMENTS_TABLE}(collection, created_at DESC, seq DESC)
    """,
    f"""
    CREATE INDEX IF NOT EXISTS idx_{DOCUMENTS_TABLE}_body
    ON {DOCUMENTS_TABLE} USING GIN (body jsonb_path_ops)
    """,
    f"""
    CREATE UNIQUE INDEX IF NOT EXISTS idx_{DOCUMENTS_TABLE}_users_email
    ON {DOCUMENTS_TABLE}((lower(body->>'email')))
    WHERE collection = 'users'
    """,
)


async def setup_documents_table():
    """Create the documents table and its indexes.

    Raises:
        psycopg.Error: the connection or a DDL statement failed.
    """
    print__docstore_debug("TABLE SETUP START: Creating documents table")
    try:
        async with get_direct_connection(autocommit=True) as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)
        print__docstore_debug("TABLE SETUP COMPLETE: documents table ready")
    except Exception as exc:
        print__docstore_debug(f"TABLE SETUP ERROR: {exc}")
        raise