from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Iterable

from pydantic import ValidationError

from crawlmeta.core.errors import DuplicateUrlError, QueryError, WriteError
from crawlmeta.core.tables import TableNames
from crawlmeta.models.metadata.document import DocumentState, MetadataDocument, UrlState
from crawlmeta.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _epoch_seconds() -> int:
    """Current UTC time as integer seconds since the epoch."""
    return int(datetime.now(timezone.utc).timestamp())


def _is_duplicate_url(exc: sqlite3.Error) -> bool:
    return isinstance(exc, sqlite3.IntegrityError) and "UNIQUE" in str(exc)


class MetadataStore(BaseRepository):
    """SQLite store of crawl state keyed by URL.

    Usage::

        with MetadataStore("crawl.db") as store:
            store.insert_one(MetadataDocument(url=url, state=DocumentState.DISCOVERED))
            store.update_state(url, DocumentState.FETCHED)

    Batch writes run in a single transaction: if any row fails, none of the
    batch is committed.  Timestamps in a batch are read from the clock once
    per row.
    """

    TABLE_NAME = TableNames.METADATA

    def ensure_schema(self) -> None:
        # Column layout and index name match databases written by earlier
        # crawler releases.
        with self._conn:
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table} ("
                " id INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT UNIQUE,"
                " url TEXT NOT NULL UNIQUE,"
                " lastUpdated NUMERIC NOT NULL,"
                " createdAt NUMERIC NOT NULL,"
                " state TEXT NOT NULL)"
            )
            self._conn.execute(
                f"CREATE UNIQUE INDEX IF NOT EXISTS idx_url ON {self._table} (url)"
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_url_and_state(
        self, url: str, state: DocumentState
    ) -> MetadataDocument | None:
        """Return the document matching both *url* and *state*, or ``None``."""
        sql = (
            f"SELECT id, url, createdAt, lastUpdated, state FROM {self._table}"
            " WHERE url = ? AND state = ?"
        )
        conn = self._conn
        try:
            row = conn.execute(sql, (url, state.name)).fetchone()
        except sqlite3.Error as exc:
            logger.exception("Lookup failed for url=%s state=%s", url, state.name)
            raise QueryError(f"Database read error for {url}") from exc
        if row is None:
            return None
        return self._to_document(row)

    # ------------------------------------------------------------------
    # Inserts
    # ------------------------------------------------------------------

    def insert_one(self, document: MetadataDocument) -> None:
        """Insert *document*; the store sets ``created_at`` and ``last_updated``.

        Any ``id`` or timestamps carried by *document* are ignored.

        Raises:
            DuplicateUrlError: a row with the same URL already exists.
            WriteError: any other database failure.
        """
        conn = self._conn
        try:
            with conn:
                conn.execute(self._insert_sql(), self._insert_params(document))
        except sqlite3.Error as exc:
            if _is_duplicate_url(exc):
                raise DuplicateUrlError(
                    f"Document already exists for url={document.url}",
                    url=document.url,
                ) from exc
            logger.exception("Insert failed for url=%s", document.url)
            raise WriteError(f"Database write error for {document.url}") from exc

    def insert_many(self, documents: Iterable[MetadataDocument]) -> int:
        """Insert *documents* in order and return the number of rows inserted.

        The whole batch is rolled back on the first failing row, so either
        every document is stored or none is.
        """
        documents = list(documents)
        if not documents:
            return 0
        conn = self._conn
        try:
            with conn:
                cursor = conn.executemany(
                    self._insert_sql(),
                    (self._insert_params(doc) for doc in documents),
                )
        except sqlite3.Error as exc:
            if _is_duplicate_url(exc):
                raise DuplicateUrlError(
                    f"Batch of {len(documents)} rejected: duplicate url"
                ) from exc
            logger.exception("Batch insert of %d documents failed", len(documents))
            raise WriteError("Database batch write error") from exc
        logger.debug("Inserted %d rows into %s", cursor.rowcount, self.table_name)
        return cursor.rowcount

    # ------------------------------------------------------------------
    # State updates
    # ------------------------------------------------------------------

    def update_state(self, url: str, state: DocumentState) -> int:
        """Set the state of the document at *url* and refresh ``last_updated``.

        Returns the number of rows changed; ``0`` when *url* is unknown.
        """
        conn = self._conn
        try:
            with conn:
                cursor = conn.execute(
                    self._update_sql(), (state.name, _epoch_seconds(), url)
                )
        except sqlite3.Error as exc:
            logger.exception("State update failed for url=%s", url)
            raise WriteError(f"Database write error for {url}") from exc
        return cursor.rowcount

    def update_many_states(self, pairs: Iterable[UrlState]) -> int:
        """Apply each ``(url, state)`` pair in order, in a single transaction.

        Unknown URLs are skipped.  Returns the total number of rows changed.
        """
        pairs = list(pairs)
        if not pairs:
            return 0
        conn = self._conn
        try:
            with conn:
                cursor = conn.executemany(
                    self._update_sql(),
                    ((p.state.name, _epoch_seconds(), p.url) for p in pairs),
                )
        except sqlite3.Error as exc:
            logger.exception("Batch state update of %d urls failed", len(pairs))
            raise WriteError("Database batch write error") from exc
        logger.debug("Updated %d rows in %s", cursor.rowcount, self.table_name)
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _insert_sql(self) -> str:
        return (
            f"INSERT INTO {self._table} (url, lastUpdated, createdAt, state)"
            " VALUES (?, ?, ?, ?)"
        )

    def _update_sql(self) -> str:
        # lastUpdated never drops below createdAt, even if the clock steps back.
        return (
            f"UPDATE {self._table} SET state = ?, lastUpdated = MAX(createdAt, ?)"
            " WHERE url = ?"
        )

    @staticmethod
    def _insert_params(document: MetadataDocument) -> tuple[str, int, int, str]:
        now = _epoch_seconds()
        return (document.url, now, now, document.state.name)

    @staticmethod
    def _to_document(row: sqlite3.Row) -> MetadataDocument:
        try:
            state = DocumentState[row["state"]]
        except KeyError as exc:
            raise QueryError(
                f"Unknown state {row['state']!r} stored for url={row['url']}"
            ) from exc
        try:
            return MetadataDocument(
                id=row["id"],
                url=row["url"],
                state=state,
                created_at=int(row["createdAt"]),
                last_updated=int(row["lastUpdated"]),
            )
        except ValidationError as exc:
            raise QueryError(f"Invalid row stored for url={row['url']}") from exc
