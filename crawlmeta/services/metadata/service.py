from __future__ import annotations

import logging
from typing import Iterable

from crawlmeta.core.errors import DuplicateUrlError
from crawlmeta.models.metadata.document import DocumentState, MetadataDocument
from crawlmeta.repositories.metadata.store import MetadataStore

logger = logging.getLogger(__name__)


class MetadataService:
    """Crawler-facing helpers on top of ``MetadataStore``."""

    def __init__(self, store: MetadataStore) -> None:
        self._store = store

    def get(self, url: str, state: DocumentState) -> MetadataDocument | None:
        """Return the document for *url* if it is currently in *state*."""
        return self._store.get_by_url_and_state(url, state)

    def record_discovered(self, urls: Iterable[str]) -> int:
        """Record each URL as ``DISCOVERED`` and return how many were new.

        URLs already in the store are skipped.  Inserts are issued one by one
        so a known URL does not discard the rest of the batch.

        Raises:
            WriteError: any write failure other than a duplicate URL.
        """
        recorded = 0
        for url in urls:
            try:
                self._store.insert_one(
                    MetadataDocument(url=url, state=DocumentState.DISCOVERED)
                )
            except DuplicateUrlError:
                logger.debug("Skipping already known url=%s", url)
                continue
            recorded += 1
        return recorded

    def transition(self, url: str, state: DocumentState) -> bool:
        """Move *url* to *state*.  Returns ``False`` when the URL is unknown."""
        changed = self._store.update_state(url, state)
        if not changed:
            logger.warning("No document to move to %s for url=%s", state.name, url)
        return changed > 0
