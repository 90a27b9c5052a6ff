"""User persistence on top of the document store."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from api.utils.debug import print__users_debug
from docstore.store.base import Document, DocumentStore

USERS_COLLECTION = "users"


def normalise_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Reads and writes documents in the ``users`` collection.

    Emails are stored lower-cased; the store enforces their uniqueness and
    raises ``DuplicateKeyError`` on conflict.
    """

    collection = USERS_COLLECTION

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create(
        self, name: str, email: str, password_hash: str, role: str
    ) -> Document:
        user = await self.store.insert_one(
            self.collection,
            {
                "name": name.strip(),
                "email": normalise_email(email),
                "passwordHash": password_hash,
                "role": role,
            },
        )
        print__users_debug(f"USER CREATED: {user['id']} role={role}")
        return user

    async def get(self, user_id: str) -> Optional[Document]:
        if not user_id:
            return None
        return await self.store.find_one(self.collection, user_id)

    async def get_by_email(self, email: str) -> Optional[Document]:
        return await self.store.find_one_by(
            self.collection, {"email": normalise_email(email)}
        )

    async def update(self, user_id: str, changes: Document) -> Optional[Document]:
        if "email" in changes:
            changes = {**changes, "email": normalise_email(changes["email"])}
        return await self.store.update_one(self.collection, user_id, changes)

    async def names_for(self, user_ids: Iterable[Optional[str]]) -> Dict[str, Optional[str]]:
        """Map each distinct user id to its display name (None when unresolved)."""
        names = {}
        for user_id in user_ids:
            if not user_id or user_id in names:
                continue
            user = await self.get(user_id)
            names[user_id] = user["name"] if user else None
        return names


def public_user(user: Document) -> Document:
    """The client-facing view of a user; the password hash never leaves the server."""
    return {
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "role": user["role"],
        "createdAt": user.get("createdAt"),
        "updatedAt": user.get("updatedAt"),
    }
