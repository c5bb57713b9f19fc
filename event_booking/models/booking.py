"""Definition of the `Booking` dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId


@dataclass(slots=True)
class Booking:
    """One attendee's reservation for an event, keyed by email."""

    event_id: ObjectId
    email: str
    id: Optional[ObjectId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "email": self.email,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Booking":
        return cls(
            event_id=document["eventId"],
            email=document["email"],
            id=document.get("_id"),
            created_at=document.get("createdAt"),
            updated_at=document.get("updatedAt"),
        )


__all__ = ["Booking"]
