"""Domain models used across the project."""

from .event import Event, EventMode, EVENT_FIELDS  # noqa: F401
from .booking import Booking  # noqa: F401
from .schemas import EventInput, BookingInput, field_errors  # noqa: F401

__all__ = [
    "Event",
    "EventMode",
    "EVENT_FIELDS",
    "Booking",
    "EventInput",
    "BookingInput",
    "field_errors",
]
