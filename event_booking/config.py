"""Centralised configuration for event_booking.

Environment variables are loaded once and all related constants are
grouped by concern for easier maintenance.
"""

from __future__ import annotations

import os
from dotenv import load_dotenv

from .errors import ConfigurationError

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Core credentials (from environment)
# ---------------------------------------------------------------------------
MONGODB_URI: str | None = os.getenv("MONGODB_URI")

# ---------------------------------------------------------------------------
# Database settings
# ---------------------------------------------------------------------------
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "devevent")
MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = int(
    os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000")
)
EVENTS_COLLECTION: str = "events"
BOOKINGS_COLLECTION: str = "bookings"

# ---------------------------------------------------------------------------
# Event field limits
# ---------------------------------------------------------------------------
TITLE_MAX_LENGTH: int = 100
DESCRIPTION_MAX_LENGTH: int = 1000
OVERVIEW_MAX_LENGTH: int = 500
SLUG_SUFFIX_LENGTH: int = 4


def require_mongodb_uri() -> str:
    """Return the MongoDB connection string or fail loudly if it is unset."""
    if not MONGODB_URI:
        raise ConfigurationError(
            "Please define the MONGODB_URI environment variable inside .env"
        )
    return MONGODB_URI


# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    # credentials
    "MONGODB_URI",
    # database
    "MONGODB_DATABASE",
    "MONGODB_SERVER_SELECTION_TIMEOUT_MS",
    "EVENTS_COLLECTION",
    "BOOKINGS_COLLECTION",
    # limits
    "TITLE_MAX_LENGTH",
    "DESCRIPTION_MAX_LENGTH",
    "OVERVIEW_MAX_LENGTH",
    "SLUG_SUFFIX_LENGTH",
    # helpers
    "require_mongodb_uri",
]
