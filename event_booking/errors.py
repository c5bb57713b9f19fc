"""Error taxonomy for event_booking.

Every error carries an :class:`ErrorKind` and a human-readable message so the
page layer can render it without inspecting exception types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence


class ErrorKind(Enum):
    """Error categories surfaced to callers."""

    CONFIGURATION = "CONFIGURATION"
    CONNECTION = "CONNECTION"
    VALIDATION = "VALIDATION"
    FORMAT = "FORMAT"
    REFERENTIAL = "REFERENTIAL"
    LOOKUP = "LOOKUP"
    UNIQUENESS = "UNIQUENESS"
    NOT_FOUND = "NOT_FOUND"


class EventBookingError(Exception):
    """Base error with a kind and a user-safe message."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class ConfigurationError(EventBookingError):
    """Raised when required configuration is missing."""

    kind = ErrorKind.CONFIGURATION


class StoreConnectionError(EventBookingError):
    """Raised when the document store cannot be reached."""

    kind = ErrorKind.CONNECTION


@dataclass(frozen=True)
class FieldError:
    """A single violated field and why."""

    field: str
    message: str
    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationFailure(EventBookingError):
    """Raised when a candidate record violates one or more field rules."""

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors: List[FieldError] = list(errors)
        fields = ", ".join(sorted({error.field for error in self.errors}))
        super().__init__(f"Validation failed for: {fields}")

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        kinds = {error.kind for error in self.errors}
        if len(kinds) == 1:
            return kinds.pop()
        return ErrorKind.VALIDATION

    @property
    def fields(self) -> List[str]:
        return [error.field for error in self.errors]

    def as_dict(self) -> Dict[str, List[str]]:
        """Group messages by field, keeping their original order."""
        grouped: Dict[str, List[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


class ConflictError(EventBookingError):
    """Raised when a unique index rejects a write."""

    kind = ErrorKind.UNIQUENESS


class DuplicateSlugError(ConflictError):
    """Raised when a generated slug collides with an existing event."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"An event with slug '{slug}' already exists")
        self.slug = slug


class DuplicateBookingError(ConflictError):
    """Raised when an email has already booked the event."""

    def __init__(self, event_id: str, email: str) -> None:
        super().__init__(f"{email} has already booked event {event_id}")
        self.event_id = event_id
        self.email = email


class EventNotFoundError(EventBookingError):
    """Raised when an event to update does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event with ID {event_id} does not exist")
        self.event_id = event_id


__all__ = [
    "ErrorKind",
    "EventBookingError",
    "ConfigurationError",
    "StoreConnectionError",
    "FieldError",
    "ValidationFailure",
    "ConflictError",
    "DuplicateSlugError",
    "DuplicateBookingError",
    "EventNotFoundError",
]
