"""
Feed column schemas.

Single source of truth for the event and venue CSV columns. If a column is
renamed upstream, only the legacy maps below need editing.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

EVENT_COLUMNS: tuple[str, ...] = (
    "event_id",
    "source_name",
    "source_event_id",
    "dedupe_key",
    "title",
    "description_short",
    "description_long",
    "start_datetime",
    "end_datetime",
    "timezone",
    "is_all_day",
    "status",
    "venue_id",
    "venue_name",
    "venue_address",
    "neighborhood",
    "city",
    "region",
    "country",
    "postal_code",
    "latitude",
    "longitude",
    "category",
    "tags",
    "price_min",
    "price_max",
    "currency",
    "is_free",
    "age_restriction",
    "language",
    "ticket_url",
    "primary_image_id",
    "primary_image_url",
    "image_credit",
    "source_url",
    "confidence_score",
    "promoter_id",
    "promoter_name",
    "first_seen_at",
    "last_seen_at",
    "changed_at",
    "change_hash",
    "source_count",
    "sources",
    "created_at",
    "updated_at",
    "opens_at",
    "recurrence_rule",
)

VENUE_COLUMNS: tuple[str, ...] = (
    "venue_id",
    "name",
    "slug",
    "aliases",
    "instagram_handle",
    "primary_image_url",
    "description_short",
    "website_url",
    "venue_tags",
    "address",
    "city",
    "neighborhood",
    "region",
    "country",
    "postal_code",
    "latitude",
    "longitude",
    "venue_url",
    "instagram_url",
    "tags",
    "created_at",
    "updated_at",
)

# Legacy column names -> current column names
EVENT_LEGACY_COLUMNS: Mapping[str, str] = MappingProxyType(
    {
        "id": "event_id",
        "image_url": "primary_image_url",
    }
)

VENUE_LEGACY_COLUMNS: Mapping[str, str] = MappingProxyType(
    {
        "venue_name": "name",
        "lat": "latitude",
        "lng": "longitude",
    }
)

REQUIRED_EVENT_COLUMNS: tuple[str, ...] = ("event_id", "title", "start_datetime")

EVENT_COLUMN_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "timezone": "Europe/Lisbon",
        "is_all_day": False,
        "status": "scheduled",
        "is_free": False,
    }
)


def resolve_column(name: str, legacy_map: Mapping[str, str]) -> str:
    """Return the current name for a (possibly legacy) column header."""
    trimmed = (name or "").strip()
    if not trimmed:
        return trimmed
    return legacy_map.get(trimmed, trimmed)


def resolve_event_column(name: str) -> str:
    return resolve_column(name, EVENT_LEGACY_COLUMNS)


def resolve_venue_column(name: str) -> str:
    return resolve_column(name, VENUE_LEGACY_COLUMNS)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def remap_row(row: Mapping[str, Any], legacy_map: Mapping[str, str]) -> dict[str, Any]:
    """
    Rename legacy columns of one raw row to their current names.

    Header names are trimmed. When a legacy and a current column both carry a
    value, the current column wins; a blank current column is filled from
    the legacy one.
    """
    remapped: dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            continue
        header = str(key).strip()
        if not header:
            continue
        target = legacy_map.get(header, header)
        is_legacy = target != header
        if target in remapped:
            existing = remapped[target]
            if is_legacy and not _is_blank(existing):
                continue
            if not is_legacy and _is_blank(value):
                continue
        remapped[target] = value
    return remapped


def remap_event_row(row: Mapping[str, Any]) -> dict[str, Any]:
    return remap_row(row, EVENT_LEGACY_COLUMNS)


def remap_venue_row(row: Mapping[str, Any]) -> dict[str, Any]:
    return remap_row(row, VENUE_LEGACY_COLUMNS)
