"""
Timestamp parsing for feed cells.

Feeds send ISO-8601-style timestamps: date only, "T" or space separated,
minutes or seconds precision, with or without an offset or "Z". Naive values
are wall-clock times in the event's own timezone.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo


def parse_timestamp(value: str) -> datetime:
    """
    Parse a timestamp cell.

    Raises:
        ValueError: If the value is not a valid calendar timestamp
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty timestamp")
    return datetime.fromisoformat(text)


def get_timezone(name: str) -> tzinfo:
    """
    Look up an IANA timezone.

    Raises:
        zoneinfo.ZoneInfoNotFoundError: For unknown zone names
        ValueError: For malformed zone names
    """
    return ZoneInfo(name)


def localize(value: datetime, tz: tzinfo) -> datetime:
    """Attach ``tz`` to a naive timestamp, or convert an aware one into ``tz``."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)
