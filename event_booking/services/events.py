"""Event validation, normalization and persistence.

Writes are prepared explicitly: :func:`validate_event` runs the
:class:`EventInput` schema, whose validators trim text and normalize the
date and time, then :func:`prepare_event` derives the slug. Every problem is
reported in a single :class:`ValidationFailure`.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import (
    DuplicateSlugError,
    ErrorKind,
    EventNotFoundError,
    FieldError,
    StoreConnectionError,
    ValidationFailure,
)
from ..models.event import EVENT_FIELDS, Event
from ..models.schemas import EventInput, field_errors
from ..utils.datetime_utils import get_current_timestamp, normalize_date
from ..utils.text_cleaning import generate_slug
from .storage import (
    find_by_id,
    find_one,
    get_events_collection,
    insert_document,
    replace_document,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def validate_event(
    candidate: Mapping[str, Any], previous: Optional[Event] = None
) -> EventInput:
    """Run the event schema over *candidate*.

    *previous* is the stored record when editing; a date or time equal to the
    stored value is kept as is.

    Raises
    ------
    ValidationFailure
        Listing every violated field, format errors included.
    """
    data = {name: candidate[name] for name in EVENT_FIELDS if name in candidate}
    try:
        return EventInput.model_validate(data, context={"previous": previous})
    except ValidationError as exc:
        failure = ValidationFailure(field_errors(exc))
        logger.warning("Rejected event '%s': %s", data.get("title"), failure.as_dict())
        raise failure from exc


def prepare_event(
    candidate: Mapping[str, Any],
    previous: Optional[Event] = None,
    rng: Optional[random.Random] = None,
) -> Event:
    """Validate *candidate* and return an unsaved :class:`Event`.

    The slug is derived when the event is new or its title changed; a
    caller-supplied ``slug`` is ignored.
    """
    fields = validate_event(candidate, previous)

    if previous is None or fields.title != previous.title:
        slug = generate_slug(fields.title, rng=rng)
    else:
        slug = previous.slug

    return Event(
        slug=slug,
        id=previous.id if previous is not None else None,
        created_at=previous.created_at if previous is not None else None,
        updated_at=previous.updated_at if previous is not None else None,
        **fields.model_dump(),
    )


def _store_failure(action: str, exc: PyMongoError) -> StoreConnectionError:
    logger.error("MongoDB error while %s: %s", action, exc)
    return StoreConnectionError(f"Database error while {action}: {exc}")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def create_event(data: Mapping[str, Any]) -> Event:
    """Validate *data* and insert it as a new event.

    Raises
    ------
    ValidationFailure
        If any field is invalid; nothing is written.
    DuplicateSlugError
        If the generated slug is already taken.
    StoreConnectionError
        If MongoDB fails the write.
    """
    event = prepare_event(data)
    now = get_current_timestamp()
    event.created_at = now
    event.updated_at = now

    try:
        event.id = insert_document(get_events_collection(), event.to_document())
    except DuplicateKeyError as exc:
        logger.warning("Slug collision for event '%s': %s", event.title, event.slug)
        raise DuplicateSlugError(event.slug) from exc
    except PyMongoError as exc:
        raise _store_failure("creating an event", exc) from exc

    logger.info("Created event '%s' (%s)", event.title, event.slug)
    return event


def update_event(event_id: ObjectId | str, changes: Mapping[str, Any]) -> Event:
    """Apply *changes* to a stored event, re-deriving whatever they touch."""
    collection = get_events_collection()
    try:
        document = find_by_id(collection, event_id)
    except InvalidId as exc:
        raise EventNotFoundError(str(event_id)) from exc
    except PyMongoError as exc:
        raise _store_failure("loading an event", exc) from exc
    if document is None:
        raise EventNotFoundError(str(event_id))

    previous = Event.from_document(document)
    candidate: Dict[str, Any] = {name: getattr(previous, name) for name in EVENT_FIELDS}
    candidate.update(changes)

    event = prepare_event(candidate, previous)
    event.updated_at = get_current_timestamp()

    try:
        replace_document(collection, previous.id, event.to_document())
    except DuplicateKeyError as exc:
        logger.warning("Slug collision for event '%s': %s", event.title, event.slug)
        raise DuplicateSlugError(event.slug) from exc
    except PyMongoError as exc:
        raise _store_failure("updating an event", exc) from exc

    logger.info("Updated event '%s' (%s)", event.title, event.slug)
    return event


def get_event_by_slug(slug: str) -> Optional[Event]:
    """Return the event with *slug*, or ``None``."""
    document = find_one(get_events_collection(), {"slug": slug})
    return Event.from_document(document) if document else None


def list_events(limit: Optional[int] = None) -> List[Event]:
    """Return events newest first."""
    cursor = get_events_collection().find().sort("createdAt", DESCENDING)
    if limit:
        cursor = cursor.limit(limit)
    return [Event.from_document(document) for document in cursor]


def list_events_by_date_and_mode(date: str, mode: str) -> List[Event]:
    """Return events held on *date* in *mode*.

    Raises
    ------
    ValidationFailure
        If *date* cannot be parsed.
    """
    try:
        day = normalize_date(date)
    except ValueError as exc:
        raise ValidationFailure([FieldError("date", str(exc), ErrorKind.FORMAT)]) from exc
    query = {"date": day, "mode": mode}
    return [Event.from_document(document) for document in get_events_collection().find(query)]


def get_similar_events_by_slug(slug: str, limit: int = 3) -> List[Event]:
    """Return up to *limit* other events sharing at least one tag with *slug*."""
    event = get_event_by_slug(slug)
    if event is None:
        return []
    query = {"_id": {"$ne": event.id}, "tags": {"$in": event.tags}}
    cursor = get_events_collection().find(query).limit(limit)
    return [Event.from_document(document) for document in cursor]


__all__ = [
    "validate_event",
    "prepare_event",
    "create_event",
    "update_event",
    "get_event_by_slug",
    "list_events",
    "list_events_by_date_and_mode",
    "get_similar_events_by_slug",
]
