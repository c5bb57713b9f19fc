"""Process-wide accessor for the MongoDB client.

The first caller creates the client and confirms it with a ``ping``. Callers
arriving while that attempt is still running wait on the same future instead
of opening their own connection. A failed attempt is forgotten so the next
call starts over.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .. import config
from ..errors import StoreConnectionError

logger = logging.getLogger(__name__)

_client: MongoClient | None = None
_pending: Future | None = None
_lock = threading.Lock()


def _connect(uri: str) -> MongoClient:
    client: MongoClient | None = None
    try:
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        )
        client.admin.command("ping")
    except PyMongoError as exc:
        if client is not None:
            client.close()
        raise StoreConnectionError(f"Could not connect to MongoDB: {exc}") from exc
    return client


def get_mongo_client() -> MongoClient:
    """Return the cached :class:`pymongo.MongoClient`, connecting at most once.

    Raises
    ------
    ConfigurationError
        If ``MONGODB_URI`` is not set. Raised before any connection attempt.
    StoreConnectionError
        If the in-flight attempt fails. Every caller waiting on that attempt
        receives the same error.
    """
    global _client, _pending
    if _client is not None:
        return _client

    uri = config.require_mongodb_uri()

    with _lock:
        if _client is not None:
            return _client
        pending = _pending
        owner = pending is None
        if owner:
            pending = _pending = Future()

    if not owner:
        logger.debug("Waiting on in-flight MongoDB connection attempt")
        return pending.result()

    logger.info("Connecting to MongoDB")
    try:
        client = _connect(uri)
    except Exception as exc:
        with _lock:
            _pending = None
        logger.error("MongoDB connection attempt failed: %s", exc)
        pending.set_exception(exc)
        raise

    with _lock:
        _client = client
        _pending = None
    pending.set_result(client)
    logger.info("Connected to MongoDB")
    return client


def get_database() -> Database:
    """Return the configured application database."""
    return get_mongo_client()[config.MONGODB_DATABASE]


def close_mongo_client() -> None:
    """Close and forget the cached client, if any."""
    global _client
    with _lock:
        client, _client = _client, None
    if client is not None:
        client.close()
        logger.info("Closed MongoDB client")


__all__ = ["get_mongo_client", "get_database", "close_mongo_client"]
