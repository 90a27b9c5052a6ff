"""User, bug and revoked-token repositories on the in-memory store."""

import pytest

from docstore.repositories import (
    BugRepository,
    RevokedTokenRepository,
    UserRepository,
    public_user,
)
from docstore.store.memory import InMemoryDocumentStore


@pytest.mark.asyncio
async def test_user_email_normalised_and_looked_up():
    users = UserRepository(InMemoryDocumentStore())
    user = await users.create(" Ada ", " Ada@Example.COM ", "hash", "user")

    assert user["name"] == "Ada"
    assert user["email"] == "ada@example.com"
    assert (await users.get_by_email("ADA@example.com"))["id"] == user["id"]
    assert await users.get(None) is None


def test_public_user_hides_password_hash():
    view = public_user(
        {"id": "1", "name": "Ada", "email": "a@b.c", "role": "user", "passwordHash": "x"}
    )
    assert "passwordHash" not in view
    assert view["createdAt"] is None


@pytest.mark.asyncio
async def test_bug_references_resolve_to_names():
    store = InMemoryDocumentStore()
    users = UserRepository(store)
    bugs = BugRepository(store, users)
    ada = await users.create("Ada", "ada@example.com", "hash", "user")

    first = await bugs.create({"title": "A", "reportedBy": ada["id"], "assignedTo": None})
    second = await bugs.create({"title": "B", "reportedBy": "ghost", "assignedTo": ada["id"]})

    resolved = await bugs.resolve_many(await bugs.list_all())
    assert [bug["id"] for bug in resolved] == [second["id"], first["id"]]
    assert resolved[0]["reportedBy"] == {"id": "ghost", "name": None}
    assert resolved[0]["assignedTo"] == {"id": ada["id"], "name": "Ada"}
    assert resolved[1]["assignedTo"] is None


@pytest.mark.asyncio
async def test_revoked_tokens():
    tokens = RevokedTokenRepository(InMemoryDocumentStore())
    assert await tokens.is_revoked("jti-1") is False

    await tokens.revoke("jti-1", "user-1", 1_900_000_000)
    await tokens.revoke("jti-1", "user-1", 1_900_000_000)

    assert await tokens.is_revoked("jti-1") is True
    assert await tokens.is_revoked("") is False
