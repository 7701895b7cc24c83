"""Base class for SQLite-backed repositories.

A repository owns its ``DatabaseManager``: the connection is opened by
``initialize()`` and released by ``close()``, or scoped with ``with``.

Extending for a new table:
    1. Add the default table name to ``TableNames``.
    2. Subclass ``BaseRepository``, set ``TABLE_NAME``, and override
       ``ensure_schema()`` with the DDL your table needs.

Example::

    class QueueRepository(BaseRepository):
        TABLE_NAME = TableNames.QUEUE

        def ensure_schema(self) -> None:
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table} (url TEXT NOT NULL)"
            )
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC
from types import TracebackType
from typing import ClassVar, TypeVar

from crawlmeta.core.config import Settings
from crawlmeta.core.database import DatabaseManager
from crawlmeta.core.errors import StorageUnavailable
from crawlmeta.core.tables import quote_identifier

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseRepository")


class BaseRepository(ABC):
    """Binds a repository to one table in one SQLite database file.

    Subclasses declare:
    - ``TABLE_NAME`` - the default table, from ``TableNames``.
    - ``ensure_schema()`` - idempotent DDL run by ``initialize()``.
    """

    TABLE_NAME: ClassVar[str]

    def __init__(self, db_path: str, table_name: str | None = None) -> None:
        self.table_name = self.TABLE_NAME if table_name is None else table_name
        # Rejects anything that is not a plain identifier.
        self._table = quote_identifier(self.table_name)
        self._db = DatabaseManager(db_path)

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_settings(cls: type[T], settings: Settings) -> T:
        """Build the repository from configured path and table name.

        Usage::

            store = MetadataStore.from_settings(settings)
        """
        return cls(settings.db_path, settings.table_name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def db_path(self) -> str:
        return self._db.path

    @property
    def _conn(self) -> sqlite3.Connection:
        return self._db.get_connection()

    def initialize(self) -> None:
        """Open the connection and create the schema if needed.

        Safe to call against a database that already has the schema.

        Raises:
            StorageUnavailable: the file could not be opened or the DDL failed.
        """
        self._db.connect()
        try:
            self.ensure_schema()
        except sqlite3.Error as exc:
            logger.exception("Schema creation failed for table %s", self.table_name)
            self._db.disconnect()
            raise StorageUnavailable(
                f"Cannot create schema for table {self.table_name}: {exc}"
            ) from exc

    def close(self) -> None:
        """Release the connection."""
        self._db.disconnect()

    def __enter__(self: T) -> T:
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Schema management (override in subclasses)
    # ------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """Create tables and indexes.  Called by ``initialize()``.

        The default is a no-op.  Overrides must be idempotent
        (``IF NOT EXISTS``) and may raise ``sqlite3.Error``.
        """
