"""Abstract document store interface.

A document is a flat JSON object. Every stored document carries a string ``id``
plus ``createdAt`` and ``updatedAt`` ISO-8601 UTC timestamps that the store
maintains; callers never set them.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

Document = Dict[str, Any]

# Unique fields per collection, enforced by every implementation
UNIQUE_FIELDS = {
    "users": ("email",),
}


def utc_timestamp() -> str:
    """Current UTC time with fixed microsecond precision so strings sort in time order."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def new_document_id() -> str:
    return uuid.uuid4().hex


class DocumentStore(ABC):
    """Async CRUD over named collections of JSON documents."""

    name = "abstract"

    @abstractmethod
    async def insert_one(self, collection: str, document: Document) -> Document:
        """Persist a new document and return it with id and timestamps set.

        Raises:
            DuplicateKeyError: a unique field of the collection is already taken.
        """

    @abstractmethod
    async def find_one(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document with ``doc_id`` or None."""

    @abstractmethod
    async def find_one_by(
        self, collection: str, filters: Document
    ) -> Optional[Document]:
        """Return the first document whose top-level fields equal ``filters``."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Optional[Document] = None,
        newest_first: bool = True,
    ) -> List[Document]:
        """Return all matching documents ordered by creation time."""

    @abstractmethod
    async def update_one(
        self, collection: str, doc_id: str, changes: Document
    ) -> Optional[Document]:
        """Overwrite the given top-level fields in a single write.

        Fields not named in ``changes`` are left untouched and ``updatedAt`` is
        refreshed. Returns the updated document, or None if it does not exist.
        """

    @abstractmethod
    async def delete_one(self, collection: str, doc_id: str) -> bool:
        """Remove a document permanently. Returns False if it did not exist."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the store is reachable."""

    async def close(self) -> None:
        """Release any resources held by the store."""
