from __future__ import annotations

import logging
import sqlite3

from crawlmeta.core.errors import StorageUnavailable

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owner of a single SQLite connection.

    One manager per store instance; nothing here is shared process-wide.

    Lifecycle::

        db = DatabaseManager("crawl.db")
        db.connect()      # once, before any query
        ...
        db.disconnect()   # once, when done
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Open the connection, creating the database file if it is absent."""
        if self._conn is not None:
            return
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.Error as exc:
            logger.exception("Could not open SQLite database at %s", self.path)
            raise StorageUnavailable(
                f"Cannot open database at {self.path}: {exc}"
            ) from exc
        conn.row_factory = sqlite3.Row
        self._conn = conn
        logger.info("Connected to SQLite database at %s.", self.path)

    def disconnect(self) -> None:
        """Close the connection.  A no-op when not connected."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Disconnected from SQLite database at %s.", self.path)

    def get_connection(self) -> sqlite3.Connection:
        """Return the live connection."""
        if self._conn is None:
            raise RuntimeError(
                "DatabaseManager is not connected. Call connect() first."
            )
        return self._conn
