"""Text helpers shared by the record validators."""

from __future__ import annotations

import random
import re
import string
from typing import Final, Optional

from ..config import SLUG_SUFFIX_LENGTH

_SLUG_ALPHABET: Final[str] = string.ascii_lowercase + string.digits

# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """Reduce *text* to lowercase, hyphen-separated ``[a-z0-9-]`` characters."""
    cleaned: str = text.lower().strip()
    # Remove special characters
    cleaned = re.sub(r"[^a-z0-9\s-]", "", cleaned)
    # Whitespace runs become a single hyphen
    cleaned = re.sub(r"\s+", "-", cleaned)
    cleaned = re.sub(r"-+", "-", cleaned)
    return cleaned.strip("-")


def random_suffix(length: int = SLUG_SUFFIX_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Return *length* random lowercase alphanumeric characters."""
    chooser = rng or random
    return "".join(chooser.choices(_SLUG_ALPHABET, k=length))


def generate_slug(title: str, rng: Optional[random.Random] = None) -> str:
    """Create a URL-friendly slug from *title* with a short random suffix.

    The suffix reduces collisions but does not rule them out, e.g.
    ``"My Workshop!"`` becomes ``"my-workshop-a7b2"``. A title with no usable
    characters falls back to the base ``"event"``.
    """
    base: str = slugify(title) or "event"
    return f"{base}-{random_suffix(rng=rng)}"


def clean_text(value: object) -> object:
    """Strip surrounding whitespace from strings, leave anything else untouched."""
    if isinstance(value, str):
        return value.strip()
    return value


__all__ = ["slugify", "random_suffix", "generate_slug", "clean_text"]
