"""Non-persistent document store kept in process memory.

Used when PostgreSQL is not configured (INMEMORY_FALLBACK_ENABLED) and by the
test suite. Documents are deep-copied on the way in and out so callers can never
mutate stored state without going through the store.
"""

from __future__ import annotations

import copy
import itertools
from typing import Dict, List, Optional

from api.utils.debug import print__docstore_debug
from docstore.errors import DuplicateKeyError
from docstore.store.base import (
    UNIQUE_FIELDS,
    Document,
    DocumentStore,
    new_document_id,
    utc_timestamp,
)


def _normalise(value):
    return value.lower() if isinstance(value, str) else value


def _matches(document: Document, filters: Optional[Document]) -> bool:
    if not filters:
        return True
    return all(
        key in document and document[key] == value for key, value in filters.items()
    )


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store; every operation completes without awaiting I/O."""

    name = "memory"

    def __init__(self):
        self._collections: Dict[str, Dict[str, Document]] = {}
        # Insertion sequence breaks createdAt ties
        self._sequence: Dict[tuple, int] = {}
        self._counter = itertools.count()

    def _collection(self, collection: str) -> Dict[str, Document]:
        return self._collections.setdefault(collection, {})

    def _check_unique(self, collection: str, document: Document, exclude_id=None):
        for field in UNIQUE_FIELDS.get(collection, ()):
            if field not in document:
                continue
            wanted = _normalise(document[field])
            for doc_id, existing in self._collection(collection).items():
                if doc_id == exclude_id:
                    continue
                if _normalise(existing.get(field)) == wanted:
                    raise DuplicateKeyError(collection, field, document[field])

    async def insert_one(self, collection: str, document: Document) -> Document:
        stored = copy.deepcopy(document)
        stored["id"] = stored.get("id") or new_document_id()
        now = utc_timestamp()
        stored["createdAt"] = now
        stored["updatedAt"] = now

        self._check_unique(collection, stored)
        if stored["id"] in self._collection(collection):
            raise DuplicateKeyError(collection, "id", stored["id"])

        self._collection(collection)[stored["id"]] = stored
        self._sequence[(collection, stored["id"])] = next(self._counter)
        print__docstore_debug(f"MEMORY INSERT: {collection}/{stored['id']}")
        return copy.deepcopy(stored)

    async def find_one(self, collection: str, doc_id: str) -> Optional[Document]:
        document = self._collection(collection).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def find_one_by(
        self, collection: str, filters: Document
    ) -> Optional[Document]:
        for document in self._ordered(collection, newest_first=False):
            if _matches(document, filters):
                return copy.deepcopy(document)
        return None

    async def find(
        self,
        collection: str,
        filters: Optional[Document] = None,
        newest_first: bool = True,
    ) -> List[Document]:
        return [
            copy.deepcopy(document)
            for document in self._ordered(collection, newest_first)
            if _matches(document, filters)
        ]

    def _ordered(self, collection: str, newest_first: bool) -> List[Document]:
        def sort_key(doc):
            return doc["createdAt"], self._sequence.get((collection, doc["id"]), 0)

        return sorted(
            self._collection(collection).values(),
            key=sort_key,
            reverse=newest_first,
        )

    async def update_one(
        self, collection: str, doc_id: str, changes: Document
    ) -> Optional[Document]:
        existing = self._collection(collection).get(doc_id)
        if existing is None:
            return None

        merged = {**existing, **copy.deepcopy(changes)}
        merged["id"] = existing["id"]
        merged["createdAt"] = existing["createdAt"]
        merged["updatedAt"] = utc_timestamp()
        self._check_unique(collection, merged, exclude_id=doc_id)

        self._collection(collection)[doc_id] = merged
        print__docstore_debug(
            f"MEMORY UPDATE: {collection}/{doc_id} fields={sorted(changes)}"
        )
        return copy.deepcopy(merged)

    async def delete_one(self, collection: str, doc_id: str) -> bool:
        removed = self._collection(collection).pop(doc_id, None)
        self._sequence.pop((collection, doc_id), None)
        print__docstore_debug(
            f"MEMORY DELETE: {collection}/{doc_id} removed={removed is not None}"
        )
        return removed is not None

    async def ping(self) -> bool:
        return True