"""Booking validation and persistence.

A booking is accepted only when its event exists and the email has not
booked that event before. The second rule is enforced by the unique
``(eventId, email)`` index; a rejected insert becomes
:class:`DuplicateBookingError`.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import (
    DuplicateBookingError,
    ErrorKind,
    EventNotFoundError,
    FieldError,
    StoreConnectionError,
    ValidationFailure,
)
from ..models.booking import Booking
from ..models.schemas import BookingInput, field_errors, normalize_email, to_object_id
from ..utils.datetime_utils import get_current_timestamp
from .storage import (
    find_by_id,
    get_bookings_collection,
    get_events_collection,
    insert_document,
)

logger = logging.getLogger(__name__)


def validate_booking(
    candidate: Mapping[str, Any],
) -> Tuple[Optional[BookingInput], List[FieldError]]:
    """Run the booking schema over *candidate*.

    Returns the parsed input, or ``None`` with every violated field.
    """
    try:
        return BookingInput.model_validate(dict(candidate)), []
    except ValidationError as exc:
        return None, field_errors(exc)


def check_event_exists(event_id: Any) -> Optional[FieldError]:
    """Return a field error when *event_id* does not name a stored event.

    A missing event and a failed lookup are reported with different kinds so
    that a malformed id or an unavailable store is never mistaken for
    "event not found".
    """
    try:
        document = find_by_id(get_events_collection(), event_id, {"_id": 1})
    except (InvalidId, TypeError, PyMongoError, StoreConnectionError) as exc:
        logger.warning("Event lookup for booking failed (%s): %s", event_id, exc)
        return FieldError(
            "eventId", "Invalid events ID format or database error", ErrorKind.LOOKUP
        )

    if document is None:
        return FieldError(
            "eventId", f"Event with ID {event_id} does not exist", ErrorKind.REFERENTIAL
        )
    return None


def prepare_booking(
    candidate: Mapping[str, Any], previous: Optional[Booking] = None
) -> Booking:
    """Normalize, validate and reference-check *candidate*.

    The event lookup only runs for new bookings or when ``eventId`` differs
    from *previous*, and also when the email is invalid so that one failure
    lists every problem.

    Raises
    ------
    ValidationFailure
        Listing every violated field.
    """
    fields, errors = validate_booking(candidate)

    event_id = fields.event_id if fields is not None else to_object_id(candidate.get("eventId"))
    id_invalid = any(error.field == "eventId" for error in errors)
    if not id_invalid and (previous is None or event_id != previous.event_id):
        reference_error = check_event_exists(event_id)
        if reference_error is not None:
            errors.append(reference_error)

    if errors:
        failure = ValidationFailure(errors)
        logger.warning("Rejected booking for event %s: %s", event_id, failure.as_dict())
        raise failure

    return Booking(
        event_id=fields.event_id,
        email=fields.email,
        id=previous.id if previous is not None else None,
        created_at=previous.created_at if previous is not None else None,
        updated_at=previous.updated_at if previous is not None else None,
    )


def create_booking(data: Mapping[str, Any]) -> Booking:
    """Validate *data* and store it as a new booking.

    Raises
    ------
    ValidationFailure
        If a field is invalid or the event does not exist; nothing is written.
    DuplicateBookingError
        If the email already booked the event.
    StoreConnectionError
        If MongoDB fails the write.
    """
    booking = prepare_booking(data)
    now = get_current_timestamp()
    booking.created_at = now
    booking.updated_at = now

    try:
        booking.id = insert_document(get_bookings_collection(), booking.to_document())
    except DuplicateKeyError as exc:
        logger.warning("Duplicate booking for event %s by %s", booking.event_id, booking.email)
        raise DuplicateBookingError(str(booking.event_id), booking.email) from exc
    except PyMongoError as exc:
        logger.error("MongoDB error while creating a booking: %s", exc)
        raise StoreConnectionError(f"Database error while creating a booking: {exc}") from exc

    logger.info("Created booking for event %s", booking.event_id)
    return booking


def _event_object_id(event_id: ObjectId | str) -> ObjectId:
    # ObjectId(None) would mint a fresh id instead of failing
    if not ObjectId.is_valid(event_id):
        raise EventNotFoundError(str(event_id))
    return ObjectId(event_id)


def count_bookings(event_id: ObjectId | str) -> int:
    """Return how many bookings *event_id* has."""
    return get_bookings_collection().count_documents({"eventId": _event_object_id(event_id)})


def list_recent_bookings(event_id: ObjectId | str, limit: int = 10) -> List[Booking]:
    """Return the newest bookings for *event_id*."""
    cursor = (
        get_bookings_collection()
        .find({"eventId": _event_object_id(event_id)})
        .sort("createdAt", DESCENDING)
        .limit(limit)
    )
    return [Booking.from_document(document) for document in cursor]


def list_bookings_by_email(email: str) -> List[Booking]:
    """Return every booking made with *email*, newest first."""
    cursor = (
        get_bookings_collection()
        .find({"email": normalize_email(email)})
        .sort("createdAt", DESCENDING)
    )
    return [Booking.from_document(document) for document in cursor]


__all__ = [
    "validate_booking",
    "check_event_exists",
    "prepare_booking",
    "create_booking",
    "count_bookings",
    "list_recent_bookings",
    "list_bookings_by_email",
]
