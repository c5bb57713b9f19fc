"""Service layer modules grouping business logic by concern.

This module provides convenience re-exports so that callers can simply do for
example `from event_booking.services import create_booking` without having to
know which underlying module provides the symbol.
"""

from .events import (  # noqa: F401
    create_event,
    get_event_by_slug,
    get_similar_events_by_slug,
    list_events,
    list_events_by_date_and_mode,
    prepare_event,
    update_event,
)
from .bookings import (  # noqa: F401
    count_bookings,
    create_booking,
    list_bookings_by_email,
    list_recent_bookings,
    prepare_booking,
)
from .storage import ensure_indexes  # noqa: F401

__all__ = [
    "create_event",
    "get_event_by_slug",
    "get_similar_events_by_slug",
    "list_events",
    "list_events_by_date_and_mode",
    "prepare_event",
    "update_event",
    "count_bookings",
    "create_booking",
    "list_bookings_by_email",
    "list_recent_bookings",
    "prepare_booking",
    "ensure_indexes",
]
