from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class DocumentState(str, Enum):
    """Crawl progress of a document.  Stored in the table by member name."""

    DISCOVERED = "DISCOVERED"
    FETCHING = "FETCHING"
    FETCHED = "FETCHED"
    FAILED = "FAILED"


class MetadataDocument(BaseModel):
    """One row of the metadata table.

    ``id`` and the two timestamps are assigned by the store; a document built
    by a caller for insertion only needs ``url`` and ``state``.  Timestamps are
    integer seconds since the UTC epoch.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    url: str
    state: DocumentState
    created_at: int | None = None
    last_updated: int | None = None

    @model_validator(mode="after")
    def _check_timestamps(self) -> MetadataDocument:
        if (
            self.created_at is not None
            and self.last_updated is not None
            and self.created_at > self.last_updated
        ):
            raise ValueError("created_at must not be later than last_updated")
        return self


class UrlState(BaseModel):
    """A ``(url, state)`` pair for batch state updates."""

    model_config = ConfigDict(frozen=True)

    url: str
    state: DocumentState
