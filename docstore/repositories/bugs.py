"""Bug persistence and reference resolution."""

from __future__ import annotations

from typing import List, Optional

from api.utils.debug import print__bugs_debug
from docstore.repositories.users import UserRepository
from docstore.store.base import Document, DocumentStore

BUGS_COLLECTION = "bugs"


class BugRepository:
    """Reads and writes documents in the ``bugs`` collection.

    ``reportedBy`` and ``assignedTo`` are stored as user ids; ``resolve`` and
    ``resolve_many`` turn them into ``{id, name}`` references for clients.
    """

    collection = BUGS_COLLECTION

    def __init__(self, store: DocumentStore, users: Optional[UserRepository] = None):
        self.store = store
        self.users = users or UserRepository(store)

    async def create(self, fields: Document) -> Document:
        bug = await self.store.insert_one(self.collection, fields)
        print__bugs_debug(f"BUG CREATED: {bug['id']} by {bug.get('reportedBy')}")
        return bug

    async def get(self, bug_id: str) -> Optional[Document]:
        return await self.store.find_one(self.collection, bug_id)

    async def list_all(self) -> List[Document]:
        """All bugs, newest first by createdAt."""
        return await self.store.find(self.collection, newest_first=True)

    async def update(self, bug_id: str, changes: Document) -> Optional[Document]:
        """Apply ``changes`` in one write; returns None when the bug vanished."""
        return await self.store.update_one(self.collection, bug_id, changes)

    async def delete(self, bug_id: str) -> bool:
        return await self.store.delete_one(self.collection, bug_id)

    async def resolve(self, bug: Document) -> Document:
        return (await self.resolve_many([bug]))[0]

    async def resolve_many(self, bugs: List[Document]) -> List[Document]:
        ids = []
        for bug in bugs:
            ids.append(bug.get("reportedBy"))
            ids.append(bug.get("assignedTo"))
        names = await self.users.names_for(ids)

        def reference(user_id):
            if not user_id:
                return None
            return {"id": user_id, "name": names.get(user_id)}

        return [
            {
                **bug,
                "reportedBy": reference(bug.get("reportedBy")),
                "assignedTo": reference(bug.get("assignedTo")),
            }
            for bug in bugs
        ]
