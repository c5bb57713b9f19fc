"""Utility functions for the event booking project.

Re-exports the slug helpers and datetime utilities so that imports like
`from ..utils import generate_slug` or `from ..utils import get_current_timestamp`
work as expected.
"""

from .text_cleaning import slugify, generate_slug, clean_text  # noqa: F401
from .datetime_utils import get_current_timestamp, normalize_date, normalize_time  # noqa: F401

__all__ = [
    "slugify",
    "generate_slug",
    "clean_text",
    "get_current_timestamp",
    "normalize_date",
    "normalize_time",
]
