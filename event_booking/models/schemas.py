"""Pydantic input schemas for event and booking writes.

Validators trim text, normalize date/time and email, and pydantic collects
every violation in one pass. :func:`field_errors` turns a
:class:`pydantic.ValidationError` into the project's :class:`FieldError` list.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from ..config import DESCRIPTION_MAX_LENGTH, OVERVIEW_MAX_LENGTH, TITLE_MAX_LENGTH
from ..errors import ErrorKind, FieldError
from ..utils.datetime_utils import normalize_date, normalize_time
from ..utils.text_cleaning import clean_text
from .event import EventMode

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

_LABELS: Dict[str, str] = {
    "title": "Title",
    "description": "Description",
    "overview": "Overview",
    "image": "Image URL",
    "venue": "Venue",
    "location": "Location",
    "date": "Date",
    "time": "Time",
    "mode": "Mode",
    "audience": "Audience",
    "agenda": "Agenda",
    "organizer": "Organizer",
    "tags": "Tags",
    "eventId": "Event ID",
    "email": "Email",
}
_REQUIRED_MESSAGES: Dict[str, str] = {"tags": "Tags are required"}
_EMPTY_MESSAGES: Dict[str, str] = {
    "agenda": "At least one agenda item is required",
    "tags": "At least one tag is required",
}
MODE_MESSAGE: str = "Mode must be either online, offline, or hybrid"


def normalize_email(email: Any) -> Any:
    """Trim and lowercase *email*; non-strings are returned untouched."""
    if isinstance(email, str):
        return email.strip().lower()
    return email


def to_object_id(value: Any) -> Any:
    """Convert a well-formed id string to :class:`ObjectId`, else pass it through."""
    if isinstance(value, str) and ObjectId.is_valid(value.strip()):
        return ObjectId(value.strip())
    return value


class EventInput(BaseModel):
    """Fields a caller may supply for an event.

    Pass ``context={"previous": <Event>}`` when editing so an unchanged date
    or time is kept as stored instead of being parsed again.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    overview: str = Field(min_length=1, max_length=OVERVIEW_MAX_LENGTH)
    image: str = Field(min_length=1)
    venue: str = Field(min_length=1)
    location: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    mode: EventMode
    audience: str = Field(min_length=1)
    agenda: List[str] = Field(min_length=1)
    organizer: str = Field(min_length=1)
    tags: List[str] = Field(min_length=1)

    @field_validator(
        "title", "description", "overview", "image", "venue", "location",
        "date", "time", "audience", "organizer",
        mode="before",
    )
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return clean_text(value)

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: str, info: ValidationInfo) -> str:
        previous = (info.context or {}).get("previous")
        if previous is not None and value == previous.date:
            return value
        return normalize_date(value)

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: str, info: ValidationInfo) -> str:
        previous = (info.context or {}).get("previous")
        if previous is not None and value == previous.time:
            return value
        return normalize_time(value)


class BookingInput(BaseModel):
    """Fields a caller may supply for a booking."""

    event_id: Any = Field(alias="eventId")
    email: str = Field(min_length=1)

    @field_validator("event_id", mode="before")
    @classmethod
    def _convert_event_id(cls, value: Any) -> Any:
        return to_object_id(value)

    @field_validator("event_id")
    @classmethod
    def _require_event_id(cls, value: Any) -> Any:
        if value is None or value == "":
            raise ValueError("Event ID is required")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Any) -> Any:
        return normalize_email(value)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please provide a valid email address")
        return value


def _field_error(error: Dict[str, Any]) -> FieldError:
    loc = error["loc"]
    field = str(loc[0])
    label = _LABELS.get(field, field)
    error_type = error["type"]
    value = error.get("input")

    if len(loc) == 1 and (error_type == "missing" or value is None or value == ""):
        return FieldError(field, _REQUIRED_MESSAGES.get(field, f"{label} is required"))
    if field in _EMPTY_MESSAGES:
        if error_type == "too_short":
            return FieldError(field, _EMPTY_MESSAGES[field])
        return FieldError(field, f"{label} must be a list of strings")
    if error_type == "string_too_long":
        limit = error["ctx"]["max_length"]
        return FieldError(field, f"{label} cannot exceed {limit} characters")
    if error_type == "enum":
        return FieldError(field, MODE_MESSAGE)
    if error_type == "string_type":
        return FieldError(field, f"{label} must be a string")
    if error_type == "value_error":
        return FieldError(field, str(error["ctx"]["error"]), ErrorKind.FORMAT)
    return FieldError(field, f"{label}: {error['msg']}")


def field_errors(exc: ValidationError) -> List[FieldError]:
    """Map every pydantic error to a :class:`FieldError`, dropping repeats."""
    errors: List[FieldError] = []
    for error in exc.errors():
        converted = _field_error(error)
        if converted not in errors:
            errors.append(converted)
    return errors


__all__ = [
    "EMAIL_PATTERN",
    "MODE_MESSAGE",
    "EventInput",
    "BookingInput",
    "normalize_email",
    "to_object_id",
    "field_errors",
]
