"""Persistence layer: MongoDB collections, indexes and document CRUD."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..clients.mongodb_client import get_database
from ..config import BOOKINGS_COLLECTION, EVENTS_COLLECTION
from ..errors import StoreConnectionError

logger = logging.getLogger(__name__)

BOOKING_UNIQUE_INDEX: str = "uniq_event_email"

_indexes_ready: bool = False
_index_lock = threading.Lock()


def _create_indexes(database: Database) -> None:
    events = database[EVENTS_COLLECTION]
    events.create_index([("slug", ASCENDING)], unique=True)
    events.create_index([("date", ASCENDING), ("mode", ASCENDING)])

    bookings = database[BOOKINGS_COLLECTION]
    bookings.create_index([("eventId", ASCENDING)])
    bookings.create_index([("eventId", ASCENDING), ("createdAt", DESCENDING)])
    bookings.create_index([("email", ASCENDING)])
    # One booking per event per email
    bookings.create_index(
        [("eventId", ASCENDING), ("email", ASCENDING)],
        unique=True,
        name=BOOKING_UNIQUE_INDEX,
    )
    logger.info("Ensured indexes on %s and %s", EVENTS_COLLECTION, BOOKINGS_COLLECTION)


def ensure_indexes() -> None:
    """Create every index the event and booking queries rely on."""
    global _indexes_ready
    with _index_lock:
        _create_indexes(get_database())
        _indexes_ready = True


def _indexed_database() -> Database:
    """Return the database, creating the indexes on first use in this process."""
    global _indexes_ready
    database = get_database()
    if not _indexes_ready:
        with _index_lock:
            if not _indexes_ready:
                try:
                    _create_indexes(database)
                except PyMongoError as exc:
                    raise StoreConnectionError(f"Could not create indexes: {exc}") from exc
                _indexes_ready = True
    return database


def get_events_collection() -> Collection:
    """Return the ``events`` collection, connecting and indexing on first use."""
    return _indexed_database()[EVENTS_COLLECTION]


def get_bookings_collection() -> Collection:
    """Return the ``bookings`` collection, connecting and indexing on first use."""
    return _indexed_database()[BOOKINGS_COLLECTION]


def insert_document(collection: Collection, document: Dict[str, Any]) -> ObjectId:
    """Insert *document* and return its new ``_id``.

    :class:`pymongo.errors.DuplicateKeyError` propagates so callers can
    report the conflict in their own terms.
    """
    result = collection.insert_one(document)
    logger.info("Stored document in %s with _id=%s", collection.name, result.inserted_id)
    return result.inserted_id


def find_by_id(
    collection: Collection,
    document_id: ObjectId | str,
    projection: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """Return the document with *document_id*, or ``None``.

    Strings are converted with :class:`bson.ObjectId`, so a malformed id
    raises :class:`bson.errors.InvalidId`.
    """
    if not isinstance(document_id, ObjectId):
        document_id = ObjectId(document_id)
    return collection.find_one({"_id": document_id}, projection)


def find_one(collection: Collection, predicate: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the first document matching *predicate*, or ``None``."""
    return collection.find_one(predicate)


def replace_document(
    collection: Collection, document_id: ObjectId, document: Dict[str, Any]
) -> None:
    """Replace the stored document with *document_id* by *document*."""
    collection.replace_one({"_id": document_id}, document)
    logger.info("Replaced document in %s with _id=%s", collection.name, document_id)


__all__ = [
    "BOOKING_UNIQUE_INDEX",
    "get_events_collection",
    "get_bookings_collection",
    "ensure_indexes",
    "insert_document",
    "find_by_id",
    "find_one",
    "replace_document",
]
