"""
Module for event deduplication.

Validated, venue-resolved drafts are folded into one canonical Event per
real-world event, matched by dedupe_key, event_id or content fingerprint.
Each merge updates the event's ledger (first/last seen, change
tracking, contributing sources).

Strategies follow the Strategy pattern:
- FingerprintDeduplicator: title + date + 30 minute time bucket + venue
- EXACT: same as above with one minute buckets (exact start time)
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from event_catalog.ingestion.fingerprint import (
    DEFAULT_BUCKET_MINUTES,
    change_hash,
    fingerprint,
)
from event_catalog.normalization.datetimes import parse_timestamp
from event_catalog.schemas.event import UNKNOWN_VENUE_ID, Event, EventDraft

logger = logging.getLogger(__name__)


class DeduplicationStrategy(str, Enum):
    """Available deduplication strategies."""

    FINGERPRINT = "fingerprint"
    EXACT = "exact"


@dataclass(frozen=True)
class DedupCandidate:
    """A validated draft whose venue fields already hold canonical values."""

    draft: EventDraft
    source_label: str


@dataclass
class DeduplicationResult:
    """Canonical events (first-seen order) and the number of merged rows."""

    events: list[Event] = field(default_factory=list)
    duplicates_merged: int = 0


def _new_event(incoming: EventDraft, event_fingerprint: str, source_label: str, now: datetime) -> Event:
    data = incoming.model_dump()
    data["venue_id"] = incoming.venue_id or UNKNOWN_VENUE_ID
    return Event(
        **data,
        fingerprint=event_fingerprint,
        first_seen_at=now,
        last_seen_at=now,
        changed_at=None,
        change_hash=change_hash(incoming, venue_id=data["venue_id"]),
        source_count=1,
        sources=[source_label],
    )


def _updated_at_order(value: str | None) -> float:
    """Sort key for a source's updated_at; missing or unparseable sorts oldest."""
    try:
        stamp = parse_timestamp(value or "")
    except ValueError:
        return 0.0
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=UTC)
    return stamp.timestamp()


def merge_event(
    existing: Event | None,
    incoming: EventDraft,
    *,
    event_fingerprint: str,
    source_label: str,
    now: datetime,
) -> Event:
    """
    Merge one observation into a canonical event.

    Args:
        existing: Current canonical event, or None for the first observation
        incoming: Validated draft with canonical venue fields
        event_fingerprint: Fingerprint of the first observation
        source_label: Label of the source that produced incoming
        now: Timestamp of the ingestion pass

    Returns:
        New Event; existing is never mutated

    When the incoming core fields differ from the stored ones and incoming is
    not older (by updated_at) than the stored observation, display fields are
    overwritten from incoming. event_id, fingerprint and first_seen_at always
    stay with the first observation.
    """
    if existing is None:
        return _new_event(incoming, event_fingerprint, source_label, now)

    venue_id = incoming.venue_id or UNKNOWN_VENUE_ID
    incoming_hash = change_hash(incoming, venue_id=venue_id)

    sources = list(existing.sources)
    if source_label not in sources:
        sources.append(source_label)

    update = {
        "last_seen_at": max(existing.last_seen_at, now),
        "sources": sources,
        "source_count": len(sources),
    }

    if incoming_hash != existing.change_hash:
        if _updated_at_order(incoming.updated_at) >= _updated_at_order(existing.updated_at):
            update.update(incoming.model_dump(exclude={"event_id"}))
            update["venue_id"] = venue_id
            update["change_hash"] = incoming_hash
            update["changed_at"] = now
        else:
            logger.debug(
                f"Keeping stored fields of {existing.event_id}: "
                f"{source_label} row is older ({incoming.updated_at})"
            )

    return existing.model_copy(update=update)


class EventDeduplicator(ABC):
    """Abstract base for deduplication strategies."""

    @abstractmethod
    def deduplicate(
        self, candidates: Iterable[DedupCandidate], now: datetime
    ) -> DeduplicationResult:
        """Fold candidates into canonical events."""
        pass


class FingerprintDeduplicator(EventDeduplicator):
    """
    Merge candidates that describe the same event.

    Two candidates are the same event when they share a dedupe_key (when the
    feed sets one), an event_id, or a content fingerprint. Identity keys win
    over content: a rescheduled row keeps merging into its event even though
    its fingerprint moved.

    A single-threaded fold over the candidates in feed order, so the result
    is deterministic for a given feed.
    """

    def __init__(self, bucket_minutes: int = DEFAULT_BUCKET_MINUTES):
        """
        Initialize with the start-time bucket size.

        Args:
            bucket_minutes: Start times are rounded to this many minutes
        """
        if bucket_minutes <= 0:
            raise ValueError("bucket_minutes must be positive")
        self.bucket_minutes = bucket_minutes

    def fingerprint_for(self, draft: EventDraft) -> str:
        """Fingerprint of a draft with canonical venue fields."""
        return fingerprint(
            draft.title,
            draft.start_datetime,
            draft.venue_id or UNKNOWN_VENUE_ID,
            self.bucket_minutes,
        )

    @staticmethod
    def match_keys(draft: EventDraft, event_fingerprint: str) -> list[tuple[str, str]]:
        """Keys a draft can match on, strongest first."""
        keys = []
        if draft.dedupe_key:
            keys.append(("dedupe_key", draft.dedupe_key))
        keys.append(("event_id", draft.event_id))
        keys.append(("fingerprint", event_fingerprint))
        return keys

    def deduplicate(
        self, candidates: Iterable[DedupCandidate], now: datetime
    ) -> DeduplicationResult:
        """
        Deduplicate candidates by dedupe_key, event_id and fingerprint.

        Returns:
            DeduplicationResult; duplicates_merged counts every candidate that
            matched an already seen event on any key
        """
        # canonical fingerprint -> event, in first-seen order
        events: dict[str, Event] = {}
        # (key kind, value) -> canonical fingerprint, rebuilt every pass
        owners: dict[tuple[str, str], str] = {}
        merged = 0

        for candidate in candidates:
            draft = candidate.draft
            keys = self.match_keys(draft, self.fingerprint_for(draft))
            match = next(
                ((kind, owners[(kind, value)]) for kind, value in keys if (kind, value) in owners),
                None,
            )

            if match is None:
                owner = keys[-1][1]
                existing = None
            else:
                kind, owner = match
                existing = events[owner]
                merged += 1
                logger.debug(
                    f"Merging {draft.event_id} into {existing.event_id} "
                    f"by {kind} (source: {candidate.source_label})"
                )

            events[owner] = merge_event(
                existing,
                draft,
                event_fingerprint=owner,
                source_label=candidate.source_label,
                now=now,
            )
            for key in keys:
                owners.setdefault(key, owner)

        return DeduplicationResult(
            events=list(events.values()),
            duplicates_merged=merged,
        )


def get_deduplicator(
    strategy: DeduplicationStrategy = DeduplicationStrategy.FINGERPRINT,
    bucket_minutes: int = DEFAULT_BUCKET_MINUTES,
) -> EventDeduplicator:
    """
    Create a deduplicator instance for the given strategy.

    Args:
        strategy: DeduplicationStrategy enum value
        bucket_minutes: Bucket size for the fingerprint strategy

    Returns:
        Configured EventDeduplicator instance
    """
    if strategy == DeduplicationStrategy.EXACT:
        return FingerprintDeduplicator(bucket_minutes=1)
    return FingerprintDeduplicator(bucket_minutes=bucket_minutes)
