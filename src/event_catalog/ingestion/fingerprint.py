"""
Fingerprint Engine.

Content fingerprints identify repeated observations of the same real event,
from repeated fetches or from several sources, even when sources disagree on
the exact minute it starts. Content is hashed, not identity, so rows with
different event_ids still converge.
"""

import hashlib
from datetime import datetime
from typing import Optional

from event_catalog.normalization.text import normalize_text
from event_catalog.schemas.event import EventDraft

DEFAULT_BUCKET_MINUTES = 30

# Fields whose change marks an event as changed (see change_hash)
CORE_FIELDS = (
    "title",
    "start_datetime",
    "end_datetime",
    "venue_id",
    "price_min",
    "price_max",
    "currency",
    "status",
)


def _sha1(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def date_bucket(start: datetime) -> str:
    """Calendar date of ``start`` in its own timezone (ISO format)."""
    return start.date().isoformat()


def time_bucket(start: datetime, bucket_minutes: int = DEFAULT_BUCKET_MINUTES) -> str:
    """
    Round the local start time to the nearest bucket, half up.

    With 30 minute buckets 22:14 -> "22:00" and 22:15 -> "22:30". A time that
    rounds past midnight renders as "24:00" and stays on its own date bucket.
    """
    if bucket_minutes <= 0:
        raise ValueError("bucket_minutes must be positive")
    minute_of_day = start.hour * 60 + start.minute
    remainder = minute_of_day % bucket_minutes
    rounded = minute_of_day - remainder
    if remainder * 2 >= bucket_minutes:
        rounded += bucket_minutes
    return f"{rounded // 60:02d}:{rounded % 60:02d}"


def fingerprint_key(
    title: str,
    start_datetime: datetime,
    venue_id: str,
    bucket_minutes: int = DEFAULT_BUCKET_MINUTES,
) -> str:
    """The un-hashed fingerprint composition (useful for debugging)."""
    return "|".join(
        [
            normalize_text(title),
            date_bucket(start_datetime),
            time_bucket(start_datetime, bucket_minutes),
            venue_id,
        ]
    )


def fingerprint(
    title: str,
    start_datetime: datetime,
    venue_id: str,
    bucket_minutes: int = DEFAULT_BUCKET_MINUTES,
) -> str:
    """Stable dedupe key: sha1 of title|dateBucket|timeBucket|venue_id."""
    return _sha1(fingerprint_key(title, start_datetime, venue_id, bucket_minutes))


def _core_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def change_hash(event: EventDraft, venue_id: Optional[str] = None) -> str:
    """
    Hash of an event's core fields.

    Two observations with equal change hashes carry the same title, times,
    venue, price and status; display-only fields do not affect it.
    """
    parts = []
    for name in CORE_FIELDS:
        value = getattr(event, name)
        if name == "venue_id" and venue_id is not None:
            value = venue_id
        parts.append(f"{name}={_core_value(value)}")
    return _sha1("\x1f".join(parts))
