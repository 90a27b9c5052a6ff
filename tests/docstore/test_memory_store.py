"""InMemoryDocumentStore behaviour shared with the PostgreSQL store."""

import pytest

from docstore.errors import DuplicateKeyError
from docstore.store.memory import InMemoryDocumentStore


@pytest.mark.asyncio
async def test_insert_assigns_id_and_timestamps():
    store = InMemoryDocumentStore()
    doc = await store.insert_one("bugs", {"title": "T"})
    assert doc["id"]
    assert doc["createdAt"] == doc["updatedAt"]
    assert doc["createdAt"].endswith("+00:00")


@pytest.mark.asyncio
async def test_documents_are_copied_in_and_out():
    store = InMemoryDocumentStore()
    source = {"title": "T", "tags": ["a"]}
    doc = await store.insert_one("bugs", source)
    source["tags"].append("b")
    doc["tags"].append("c")

    stored = await store.find_one("bugs", doc["id"])
    assert stored["tags"] == ["a"]


@pytest.mark.asyncio
async def test_find_orders_by_creation():
    store = InMemoryDocumentStore()
    ids = [(await store.insert_one("bugs", {"n": n}))["id"] for n in range(5)]

    newest = await store.find("bugs")
    oldest = await store.find("bugs", newest_first=False)
    assert [d["id"] for d in newest] == list(reversed(ids))
    assert [d["id"] for d in oldest] == ids


@pytest.mark.asyncio
async def test_find_with_filters_and_find_one_by():
    store = InMemoryDocumentStore()
    await store.insert_one("bugs", {"status": "open", "project": "A"})
    await store.insert_one("bugs", {"status": "closed", "project": "A"})
    await store.insert_one("bugs", {"status": "open", "project": "B"})

    assert len(await store.find("bugs", {"status": "open"})) == 2
    assert len(await store.find("bugs", {"status": "open", "project": "A"})) == 1
    assert (await store.find_one_by("bugs", {"project": "B"}))["status"] == "open"
    assert await store.find_one_by("bugs", {"project": "C"}) is None


@pytest.mark.asyncio
async def test_update_merges_and_protects_identity():
    store = InMemoryDocumentStore()
    doc = await store.insert_one("bugs", {"title": "T", "status": "open"})

    updated = await store.update_one(
        "bugs", doc["id"], {"status": "closed", "id": "other", "createdAt": "1999"}
    )
    assert updated["title"] == "T"
    assert updated["status"] == "closed"
    assert updated["id"] == doc["id"]
    assert updated["createdAt"] == doc["createdAt"]
    assert updated["updatedAt"] >= doc["updatedAt"]

    assert await store.update_one("bugs", "missing", {"status": "open"}) is None


@pytest.mark.asyncio
async def test_delete():
    store = InMemoryDocumentStore()
    doc = await store.insert_one("bugs", {"title": "T"})
    assert await store.delete_one("bugs", doc["id"]) is True
    assert await store.delete_one("bugs", doc["id"]) is False
    assert await store.find_one("bugs", doc["id"]) is None


@pytest.mark.asyncio
async def test_user_email_is_unique_case_insensitively():
    store = InMemoryDocumentStore()
    first = await store.insert_one("users", {"email": "ada@example.com"})
    second = await store.insert_one("users", {"email": "bob@example.com"})

    with pytest.raises(DuplicateKeyError):
        await store.insert_one("users", {"email": "ADA@example.com"})
    with pytest.raises(DuplicateKeyError):
        await store.update_one("users", second["id"], {"email": "ada@example.com"})

    # Re-saving one's own email is fine
    await store.update_one("users", first["id"], {"email": "ada@example.com"})


@pytest.mark.asyncio
async def test_explicit_id_must_be_unique():
    store = InMemoryDocumentStore()
    await store.insert_one("revoked_tokens", {"id": "jti-1"})
    with pytest.raises(DuplicateKeyError):
        await store.insert_one("revoked_tokens", {"id": "jti-1"})


@pytest.mark.asyncio
async def test_ping():
    assert await InMemoryDocumentStore().ping() is True
