"""Start-up routine: check configuration, connect, ensure indexes."""

from __future__ import annotations

import logging
import sys

from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from .. import config
from ..clients.mongodb_client import get_mongo_client
from ..errors import ConfigurationError, StoreConnectionError
from ..services.storage import ensure_indexes

logger = logging.getLogger(__name__)


def run() -> None:
    """Prepare the database for the page layer.

    A missing ``MONGODB_URI`` ends the process before any connection is
    attempted; an unreachable store ends it after the single failed attempt.
    """
    logger.info("Starting event booking bootstrap")

    try:
        config.require_mongodb_uri()
    except ConfigurationError as exc:
        logger.critical("%s", exc.message)
        sys.exit(exc)

    try:
        get_mongo_client()
    except StoreConnectionError as exc:
        logger.critical("%s", exc.message)
        sys.exit(exc)

    ensure_indexes()
    _log_summary()


def _log_summary() -> None:
    logger.info("=== Event Booking Bootstrap ===")
    logger.info("Database: %s", config.MONGODB_DATABASE)
    logger.info("Collections: %s, %s", config.EVENTS_COLLECTION, config.BOOKINGS_COLLECTION)
    logger.info("===============================")


__all__ = ["run"]
