"""Definition of the `Event` dataclass used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from bson import ObjectId


class EventMode(str, Enum):
    """How attendees take part in an event."""

    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


# Record keys in the order they are validated and reported.
EVENT_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "agenda",
    "organizer",
    "tags",
)


@dataclass(slots=True)
class Event:
    """A developer event as stored in the ``events`` collection."""

    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    organizer: str
    agenda: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    id: Optional[ObjectId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        """Return the MongoDB document for this event (without ``_id``)."""
        document: Dict[str, Any] = {name: getattr(self, name) for name in EVENT_FIELDS}
        document["slug"] = self.slug
        document["agenda"] = list(self.agenda)
        document["tags"] = list(self.tags)
        document["createdAt"] = self.created_at
        document["updatedAt"] = self.updated_at
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Event":
        return cls(
            title=document["title"],
            slug=document["slug"],
            description=document["description"],
            overview=document["overview"],
            image=document["image"],
            venue=document["venue"],
            location=document["location"],
            date=document["date"],
            time=document["time"],
            mode=document["mode"],
            audience=document["audience"],
            organizer=document["organizer"],
            agenda=list(document.get("agenda", [])),
            tags=list(document.get("tags", [])),
            id=document.get("_id"),
            created_at=document.get("createdAt"),
            updated_at=document.get("updatedAt"),
        )


__all__ = ["Event", "EventMode", "EVENT_FIELDS"]
