"""Document store implementations."""

from docstore.store.base import DocumentStore
from docstore.store.memory import InMemoryDocumentStore
from docstore.store.postgres import PostgresDocumentStore

__all__ = ["DocumentStore", "InMemoryDocumentStore", "PostgresDocumentStore"]
