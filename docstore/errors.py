"""Errors raised by document store implementations.

Driver-specific failures (``psycopg.Error``) are converted to these at the store
boundary so callers above the store never import the driver.
"""


class StoreError(Exception):
    """The store could not complete an operation."""


class DuplicateKeyError(StoreError):
    """A write violated a unique field of the collection."""

    def __init__(self, collection, field, value=None):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {collection}.{field}")
