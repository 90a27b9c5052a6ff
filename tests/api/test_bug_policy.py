"""BugPolicy against the in-memory store, without HTTP."""

import pytest

from api.exceptions.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from api.policy.bug_policy import BugPolicy, can_modify
from docstore.errors import StoreError
from docstore.repositories import BugRepository, UserRepository
from docstore.store.memory import InMemoryDocumentStore


async def _setup(store=None):
    store = store or InMemoryDocumentStore()
    users = UserRepository(store)
    reporter = await users.create("Ada", "ada@example.com", "hash", "user")
    other = await users.create("Bob", "bob@example.com", "hash", "user")
    admin = await users.create("Carol", "carol@example.com", "hash", "admin")
    policy = BugPolicy(BugRepository(store, users))
    return store, policy, reporter, other, admin


def test_can_modify():
    bug = {"reportedBy": "u1"}
    assert can_modify({"id": "u1", "role": "user"}, bug)
    assert can_modify({"id": "u2", "role": "admin"}, bug)
    assert not can_modify({"id": "u2", "role": "user"}, bug)


@pytest.mark.asyncio
async def test_create_uses_caller_and_defaults():
    _, policy, reporter, other, _ = await _setup()
    bug = await policy.create_bug(
        reporter,
        {"title": "T", "description": "D", "project": "P", "assignedTo": other["id"]},
    )
    assert bug["reportedBy"] == {"id": reporter["id"], "name": "Ada"}
    assert bug["assignedTo"] == {"id": other["id"], "name": "Bob"}
    assert bug["status"] == "open"
    assert bug["priority"] == "medium"
    assert bug["steps"] == ""


@pytest.mark.asyncio
async def test_forbidden_update_leaves_storage_untouched():
    store, policy, reporter, other, _ = await _setup()
    bug = await policy.create_bug(reporter, {"title": "T", "description": "D", "project": "P"})
    before = await store.find_one("bugs", bug["id"])

    with pytest.raises(AuthorizationError):
        await policy.update_bug(bug["id"], other, {"status": "closed"})

    assert await store.find_one("bugs", bug["id"]) == before


@pytest.mark.asyncio
async def test_admin_update_and_partial_merge():
    _, policy, reporter, _, admin = await _setup()
    bug = await policy.create_bug(
        reporter, {"title": "T", "description": "D", "project": "P", "priority": "high"}
    )
    updated = await policy.update_bug(bug["id"], admin, {"status": "resolved"})
    assert updated["status"] == "resolved"
    assert updated["priority"] == "high"
    assert updated["reportedBy"]["id"] == reporter["id"]


@pytest.mark.asyncio
async def test_update_rejects_unknown_and_blank_fields():
    _, policy, reporter, _, _ = await _setup()
    bug = await policy.create_bug(reporter, {"title": "T", "description": "D", "project": "P"})

    with pytest.raises(ValidationError, match="Unknown bug field"):
        await policy.update_bug(bug["id"], reporter, {"severity": "high"})
    with pytest.raises(ValidationError, match="Please specify the project"):
        await policy.update_bug(bug["id"], reporter, {"project": ""})
    with pytest.raises(ValidationError, match="Invalid status"):
        await policy.update_bug(bug["id"], reporter, {"status": "done"})


@pytest.mark.asyncio
async def test_delete_then_get_is_not_found():
    _, policy, reporter, _, _ = await _setup()
    bug = await policy.create_bug(reporter, {"title": "T", "description": "D", "project": "P"})

    assert await policy.delete_bug(bug["id"], reporter) == {"id": bug["id"]}
    with pytest.raises(NotFoundError):
        await policy.get_bug(bug["id"], reporter)
    with pytest.raises(NotFoundError):
        await policy.delete_bug(bug["id"], reporter)


@pytest.mark.asyncio
async def test_get_traces_the_reader(monkeypatch, capsys):
    monkeypatch.setenv("print__bugs_debug", "1")
    _, policy, reporter, other, _ = await _setup()
    bug = await policy.create_bug(reporter, {"title": "T", "description": "D", "project": "P"})
    capsys.readouterr()

    fetched = await policy.get_bug(bug["id"], other)
    assert fetched["id"] == bug["id"]
    assert f"BUG GET: {bug['id']} for user {other['id']}" in capsys.readouterr().out


class BrokenStore(InMemoryDocumentStore):
    async def update_one(self, collection, doc_id, changes):
        raise StoreError("write failed")


@pytest.mark.asyncio
async def test_store_errors_surface_as_persistence_errors():
    _, policy, reporter, _, _ = await _setup(BrokenStore())
    bug = await policy.create_bug(reporter, {"title": "T", "description": "D", "project": "P"})

    with pytest.raises(PersistenceError) as exc_info:
        await policy.update_bug(bug["id"], reporter, {"status": "closed"})
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Internal server error"
