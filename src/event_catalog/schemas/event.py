# src/event_catalog/schemas/event.py
"""
Canonical Event Schema for the event catalog.

Events from every tabular feed are normalized into this model. The schema is
split in two layers:
- EventDraft: a validated, normalized feed row (no dedupe bookkeeping yet)
- Event: a canonical catalog record, i.e. a draft plus its fingerprint and
  the ledger fields tracking its observation history across merges

Quarantine and ingestion statistics models live here too, since they are the
other half of every ingestion pass output.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

UNKNOWN_VENUE_ID = "unknown"


# ============================================================================
# ENUMS
# ============================================================================


class EventStatus(str, Enum):
    """Publication status of an event."""

    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"
    SOLD_OUT = "sold_out"
    DRAFT = "draft"
    ARCHIVED = "archived"


# Statuses that appear in default event listings
VISIBLE_IN_LISTING = frozenset(
    {EventStatus.SCHEDULED, EventStatus.SOLD_OUT, EventStatus.POSTPONED}
)

# Statuses hidden from default listings (still reachable on detail pages)
HIDDEN_FROM_LISTING = frozenset({EventStatus.CANCELLED, EventStatus.ARCHIVED})

# Statuses never visible publicly
NEVER_VISIBLE = frozenset({EventStatus.DRAFT})


def is_visible_in_listing(status: EventStatus) -> bool:
    return status in VISIBLE_IN_LISTING


def is_visible_on_detail(status: EventStatus) -> bool:
    return status not in NEVER_VISIBLE


class QuarantineReason(str, Enum):
    """
    Why a feed row was excluded from the catalog.

    Closed set; declaration order is the order checks run in, so the first
    failing check determines the reason.
    """

    MISSING_EVENT_ID = "missing_event_id"
    MISSING_TITLE = "missing_title"
    MISSING_START_DATETIME = "missing_start_datetime"
    INVALID_DATETIME = "invalid_datetime"
    VENUE_RESOLUTION_FAILED = "venue_resolution_failed"
    PARSE_ERROR = "parse_error"
    UNKNOWN = "unknown"


# ============================================================================
# EVENT RECORDS
# ============================================================================


class EventDraft(BaseModel):
    """
    A feed row that passed validation and field normalization.

    Venue fields hold the raw row values until the venue is resolved; the
    orchestrator then replaces venue_id/venue_name with canonical values.
    """

    model_config = ConfigDict(frozen=True)

    # ---- CORE EVENT INFORMATION ----
    event_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description_short: Optional[str] = None
    description_long: Optional[str] = None

    # ---- SOURCE ----
    source_name: Optional[str] = None
    source_event_id: Optional[str] = None
    dedupe_key: Optional[str] = None
    source_url: Optional[str] = None
    confidence_score: Optional[float] = None

    # ---- TIMING ----
    start_datetime: datetime
    end_datetime: Optional[datetime] = None
    timezone: str = "Europe/Lisbon"
    is_all_day: bool = False
    recurrence_rule: Optional[str] = None
    status: EventStatus = EventStatus.SCHEDULED

    # ---- VENUE & LOCATION ----
    venue_id: Optional[str] = None
    venue_name: Optional[str] = None
    venue_name_raw: Optional[str] = Field(
        default=None,
        description="Venue label as it appeared in the feed, kept for review",
    )
    venue_address: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # ---- CLASSIFICATION ----
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    # ---- PRICING & TICKETS ----
    price_min: Optional[float] = Field(default=None, ge=0)
    price_max: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    is_free: bool = False
    ticket_url: Optional[str] = None
    age_restriction: Optional[str] = None
    language: Optional[str] = None

    # ---- MEDIA ----
    primary_image_id: Optional[str] = None
    primary_image_url: Optional[str] = None
    image_credit: Optional[str] = None

    # ---- PROMOTER ----
    promoter_id: Optional[str] = None
    promoter_name: Optional[str] = None

    # ---- SOURCE TIMESTAMPS (passed through as given) ----
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v

    @model_validator(mode="after")
    def validate_price_range(self) -> "EventDraft":
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_max < self.price_min
        ):
            raise ValueError("price_max cannot be less than price_min")
        return self


class Event(EventDraft):
    """
    Canonical catalog event.

    Exactly one Event exists per fingerprint within an ingestion pass. The
    ledger fields record when the event was first and last observed, when its
    core content last changed and which sources reported it.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "event_id": "e1",
                "title": "Jazz Night",
                "start_datetime": "2024-05-01T22:00:00+01:00",
                "timezone": "Europe/Lisbon",
                "venue_id": "v1",
                "venue_name": "Hot Clube",
                "fingerprint": "5d41402abc4b2a76b9719d911017c592",
                "source_count": 2,
                "sources": ["SourceA", "SourceB"],
            }
        },
    )

    venue_id: str = UNKNOWN_VENUE_ID
    fingerprint: str

    # ---- LEDGER ----
    first_seen_at: datetime
    last_seen_at: datetime
    changed_at: Optional[datetime] = None
    change_hash: str
    source_count: int = Field(ge=1)
    sources: List[str] = Field(min_length=1)

    @model_validator(mode="after")
    def validate_ledger(self) -> "Event":
        if self.source_count != len(self.sources):
            raise ValueError("source_count must equal the number of sources")
        if self.first_seen_at > self.last_seen_at:
            raise ValueError("first_seen_at cannot be after last_seen_at")
        return self


def filter_events_for_listing(events: List[Event]) -> List[Event]:
    """Keep events whose status appears in default listings."""
    return [e for e in events if is_visible_in_listing(e.status)]


# ============================================================================
# QUARANTINE & STATS
# ============================================================================


class QuarantinedRow(BaseModel):
    """A feed row excluded from the catalog, with the reason it failed."""

    model_config = ConfigDict(frozen=True)

    row: Dict[str, Any]
    reason: QuarantineReason
    detail: Optional[str] = None


def _empty_reason_counts() -> Dict[QuarantineReason, int]:
    return {reason: 0 for reason in QuarantineReason}


class IngestionStats(BaseModel):
    """
    Diagnostics for one ingestion pass.

    Dumped with camelCase aliases (``totalRows``, ``quarantinedByReason``...)
    for the monitoring endpoint. Every quarantine reason is always present.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_rows: int = 0
    loaded_count: int = 0
    quarantined_by_reason: Dict[QuarantineReason, int] = Field(
        default_factory=_empty_reason_counts
    )
    duplicates_merged: int = 0
    listing_count: int = 0
    venues_loaded: int = 0

    @field_validator("quarantined_by_reason")
    @classmethod
    def fill_missing_reasons(
        cls, v: Dict[QuarantineReason, int]
    ) -> Dict[QuarantineReason, int]:
        counts = _empty_reason_counts()
        counts.update(v)
        return counts

    @computed_field  # type: ignore[prop-decorator]
    @property
    def quarantined_count(self) -> int:
        return sum(self.quarantined_by_reason.values())
