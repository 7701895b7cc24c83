from __future__ import annotations

import logging

import pytest

from crawlmeta.core.logging import LOGGER_NAMESPACE
from crawlmeta.repositories.metadata.store import MetadataStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "crawl.db")


@pytest.fixture
def store(db_path):
    """Initialized store on a fresh database file, closed after the test."""
    with MetadataStore(db_path) as s:
        yield s


@pytest.fixture
def clean_logger():
    """Restore the ``crawlmeta`` logger after a test reconfigures it."""
    log = logging.getLogger(LOGGER_NAMESPACE)
    handlers, level, propagate = list(log.handlers), log.level, log.propagate
    log.handlers.clear()
    yield log
    log.handlers[:] = handlers
    log.setLevel(level)
    log.propagate = propagate
