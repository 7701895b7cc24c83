"""Errors raised by the metadata store.

Every storage failure surfaces as one of these, chained (``raise ... from``)
to the underlying ``sqlite3.Error``.  A lookup that matches nothing is not an
error: it returns ``None``.
"""

from __future__ import annotations


class MetadataStoreError(Exception):
    """Base class for all metadata store failures."""


class StorageUnavailable(MetadataStoreError):
    """The database file or its schema could not be opened or created."""


class WriteError(MetadataStoreError):
    """An insert or update failed."""


class DuplicateUrlError(WriteError):
    """An insert conflicted with an existing row on the unique ``url`` column."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class QueryError(MetadataStoreError):
    """A read failed."""
