"""
Value normalizers for raw feed cells.

Feed cells arrive as strings (or occasionally already-typed values from an
in-memory source). These helpers coerce them into the catalog's types and
never raise on malformed input.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from event_catalog.schemas.event import EventStatus

TRUTHY_VALUES = frozenset({"true", "1", "yes"})

DEFAULT_STATUS_ALIASES: Mapping[str, EventStatus] = MappingProxyType(
    {
        "scheduled": EventStatus.SCHEDULED,
        "active": EventStatus.SCHEDULED,
        "needs_review": EventStatus.SCHEDULED,
        "cancelled": EventStatus.CANCELLED,
        "canceled": EventStatus.CANCELLED,
        "postponed": EventStatus.POSTPONED,
        "sold_out": EventStatus.SOLD_OUT,
        "soldout": EventStatus.SOLD_OUT,
        "draft": EventStatus.DRAFT,
        "archived": EventStatus.ARCHIVED,
    }
)

_RANGE_TIME_RE = re.compile(r"\b(\d{1,2}):(\d{2})\s*[-–]\s*\d{1,2}:\d{2}\b")
_OPENS_TIME_RE = re.compile(r"(?:opens?\s+(?:at\s+)?|daily\s+)(\d{1,2}):(\d{2})\b")
_ANY_TIME_RE = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_HOUR_ONLY_RE = re.compile(r"\b(\d{1,2})h\b")
_OPENS_AT_CELL_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?(?::\d{2})?$")


def clean_str(value: Any) -> str | None:
    """Trim a cell to a string; empty and missing cells become None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def normalize_boolean(value: Any, default: bool = False) -> bool:
    """Interpret 'true' / '1' / 'yes' (any case) as True."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    return text in TRUTHY_VALUES


def normalize_number(value: Any) -> float | None:
    """Parse a numeric cell; unparsable or empty cells become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _split_tags(raw: Any, separator: str) -> list[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, (list, tuple, set, frozenset)):
        parts: Iterable[Any] = raw
    else:
        parts = str(raw).split(separator)
    return [str(p).strip().lower() for p in parts if str(p).strip()]


def normalize_tags(raw: Any) -> list[str]:
    """Split a tag cell into lowercase tags (pipe separated if any pipe, else commas)."""
    separator = "|" if isinstance(raw, str) and "|" in raw else ","
    return _split_tags(raw, separator)


def normalize_event_tags(
    raw: Any,
    allowed_tags: Iterable[str] | None = None,
    max_tags: int = 5,
) -> list[str]:
    """
    Normalize an event tag cell.

    Tags are pipe separated (a comma separated cell is accepted when it
    contains no pipe), lowercased, de-duplicated in order, filtered by the
    allowed list when one is given, and capped at ``max_tags``.
    """
    separator = "|"
    if isinstance(raw, str) and "|" not in raw:
        separator = ","
    allowed = set(allowed_tags or ())
    seen: set[str] = set()
    out: list[str] = []
    for tag in _split_tags(raw, separator):
        if tag in seen:
            continue
        if allowed and tag not in allowed:
            continue
        seen.add(tag)
        out.append(tag)
        if len(out) >= max_tags:
            break
    return out


def normalize_venue_tags(raw: Any, allowed_tags: Iterable[str] | None = None) -> list[str]:
    """Normalize a pipe separated venue tag cell (no cap)."""
    allowed = set(allowed_tags or ())
    seen: set[str] = set()
    out: list[str] = []
    for tag in _split_tags(raw, "|"):
        if tag in seen or (allowed and tag not in allowed):
            continue
        seen.add(tag)
        out.append(tag)
    return out


def normalize_status(
    raw: Any,
    aliases: Mapping[str, EventStatus] = DEFAULT_STATUS_ALIASES,
) -> EventStatus:
    """Map free-form status text onto EventStatus; unknown values are scheduled."""
    text = clean_str(raw)
    if not text:
        return EventStatus.SCHEDULED
    return aliases.get(text.lower(), EventStatus.SCHEDULED)


def _hhmm(hour: str, minute: str | None) -> str | None:
    h, m = int(hour), int(minute or 0)
    if h > 23 or m > 59:
        return None
    return f"{h:02d}:{m:02d}"


def parse_opens_at(raw: Any) -> str | None:
    """Parse an explicit opening time cell ('9', '9:30', '09:30:00') to 'HH:MM'."""
    text = clean_str(raw)
    if not text:
        return None
    match = _OPENS_AT_CELL_RE.match(text)
    if not match:
        return None
    return _hhmm(match.group(1), match.group(2))


def parse_opening_time_from_description(description: Any) -> str | None:
    """
    Find an opening time in free text.

    Tried in order: a time range ("10:00-18:00"), "opens at 9:30" /
    "daily 9:30", any "HH:MM", then an hour like "21h".
    """
    text = clean_str(description)
    if not text:
        return None
    text = text.lower()
    for pattern in (_RANGE_TIME_RE, _OPENS_TIME_RE, _ANY_TIME_RE):
        match = pattern.search(text)
        if match:
            parsed = _hhmm(match.group(1), match.group(2))
            if parsed:
                return parsed
    match = _HOUR_ONLY_RE.search(text)
    if match:
        return _hhmm(match.group(1), None)
    return None
