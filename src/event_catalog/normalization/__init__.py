"""
Normalization helpers for feed ingestion.

- text: string canonicalisation used for matching and fingerprints
- values: coercion of raw cells (tags, booleans, numbers, statuses, times)
"""

from .text import normalize_handle, normalize_text, slugify
from .values import (
    normalize_boolean,
    normalize_event_tags,
    normalize_number,
    normalize_status,
    normalize_tags,
    normalize_venue_tags,
)

__all__ = [
    "normalize_text",
    "normalize_handle",
    "slugify",
    "normalize_boolean",
    "normalize_number",
    "normalize_tags",
    "normalize_event_tags",
    "normalize_venue_tags",
    "normalize_status",
]
