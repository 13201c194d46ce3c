"""Catalog schemas: events, venues, feed columns."""

from .event import (
    UNKNOWN_VENUE_ID,
    Event,
    EventDraft,
    EventStatus,
    IngestionStats,
    QuarantinedRow,
    QuarantineReason,
    filter_events_for_listing,
    is_visible_in_listing,
    is_visible_on_detail,
)
from .venue import MatchKind, Resolved, Unresolved, Venue, VenueIndex, VenueResolution

__all__ = [
    "UNKNOWN_VENUE_ID",
    "Event",
    "EventDraft",
    "EventStatus",
    "IngestionStats",
    "QuarantinedRow",
    "QuarantineReason",
    "filter_events_for_listing",
    "is_visible_in_listing",
    "is_visible_on_detail",
    "MatchKind",
    "Resolved",
    "Unresolved",
    "Venue",
    "VenueIndex",
    "VenueResolution",
]
