from __future__ import annotations

import logging

from crawlmeta.core.config import settings

LOGGER_NAMESPACE = "crawlmeta"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Configure the ``crawlmeta`` logger namespace.

    The crawler embedding this package usually owns the root logger, so
    ``logging.basicConfig`` may already be a no-op.  Configuring the
    ``crawlmeta`` namespace directly, with ``propagate = False``, keeps store
    logs on stderr regardless of how the host process set up logging.

    Calling it again only updates the level; a second handler is never added.
    """
    name = (level or settings.log_level).upper()
    log = logging.getLogger(LOGGER_NAMESPACE)
    log.setLevel(getattr(logging, name, logging.INFO))
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        log.addHandler(handler)
    log.propagate = False
    return log
