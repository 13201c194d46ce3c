"""
Ingestion Orchestrator.

Drives one batch pass over the event and venue feeds:

    fetch (events + venues, concurrently) -> validate -> resolve venues
    -> fingerprint and merge -> events + quarantine + stats

Row-level problems never escape a pass; they end up in the quarantine list.
Pipeline-level problems (the event feed cannot be fetched, the deadline
expires) raise IngestionError and no partial output is returned.
"""

import asyncio
import logging
import uuid
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import httpx

from event_catalog.configs.config import Config
from event_catalog.configs.settings import MINUTES_PER_DAY, Settings, get_settings
from event_catalog.ingestion.adapters import (
    BaseSourceAdapter,
    CSVAdapterConfig,
    CSVFeedAdapter,
)
from event_catalog.ingestion.deduplication import (
    DedupCandidate,
    DeduplicationStrategy,
    EventDeduplicator,
    FingerprintDeduplicator,
    get_deduplicator,
)
from event_catalog.ingestion.exceptions import (
    ConfigurationError,
    FeedFetchError,
    IngestionError,
    IngestionTimeoutError,
)
from event_catalog.ingestion.loaders import (
    QuarantinedVenue,
    canonical_venues_as_venues,
    load_venue_rows,
)
from event_catalog.ingestion.validation import DEFAULT_TIMEZONE, RowValidator, ValidatedRow
from event_catalog.ingestion.venue_index import build_venue_index, resolve_venue
from event_catalog.monitoring.logging import with_context
from event_catalog.normalization.rules import NormalizationRules
from event_catalog.schemas.columns import remap_event_row
from event_catalog.schemas.event import (
    Event,
    IngestionStats,
    QuarantinedRow,
    QuarantineReason,
    filter_events_for_listing,
)
from event_catalog.schemas.venue import Unresolved, Venue, VenueIndex

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_LABEL = "events_feed"


class PipelineStage(str, Enum):
    """Stage of an ingestion pass."""

    PENDING = "pending"
    FETCHING = "fetching"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


@dataclass
class IngestionResult:
    """Output of one ingestion pass."""

    events: list[Event]
    quarantined: list[QuarantinedRow]
    stats: IngestionStats
    venues: list[Venue]
    venue_quarantine: list[QuarantinedVenue] = field(default_factory=list)
    run_id: str = ""
    stage: PipelineStage = PipelineStage.DONE
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @property
    def duration_seconds(self) -> float:
        if self.started_at and self.ended_at:
            return (self.ended_at - self.started_at).total_seconds()
        return 0.0

    @property
    def listing_events(self) -> list[Event]:
        """Events visible in default listings."""
        return filter_events_for_listing(self.events)


@dataclass
class PassState:
    """Mutable state of one ingestion pass; never shared between passes."""

    run_id: str
    log: logging.LoggerAdapter
    stage: PipelineStage = PipelineStage.PENDING

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage
        with_context(self.log, stage=stage.value).debug(f"Stage -> {stage.value}")

    def fail(self, error: IngestionError) -> IngestionError:
        """Tag error with this pass's run_id and the stage that failed."""
        error.run_id = self.run_id
        error.stage = self.stage
        self.advance(PipelineStage.FAILED)
        return error


def _as_row(raw: Any) -> dict[str, Any]:
    return dict(raw) if isinstance(raw, Mapping) else {"value": repr(raw)}


class IngestionOrchestrator:
    """
    Coordinates one ingestion pass.

    An orchestrator holds configuration only; every call to run() builds a
    fresh PassState, venue index and event map, so passes never share state
    and one orchestrator can run several passes concurrently.
    """

    def __init__(
        self,
        event_adapter: BaseSourceAdapter,
        venue_adapter: BaseSourceAdapter | None = None,
        *,
        rules: NormalizationRules | None = None,
        deduplicator: EventDeduplicator | None = None,
        default_timezone: str = DEFAULT_TIMEZONE,
        default_source_label: str = DEFAULT_SOURCE_LABEL,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            event_adapter: Adapter for the event feed
            venue_adapter: Adapter for the venue feed; None uses the
                canonical venue list
            rules: Normalization rules for event and venue rows
            deduplicator: Dedup strategy (fingerprint by default)
            default_timezone: Zone for rows without a timezone
            default_source_label: Source label for rows without source_name
            clock: Returns the pass timestamp (UTC now by default)
        """
        self.event_adapter = event_adapter
        self.venue_adapter = venue_adapter
        self.rules = rules or NormalizationRules()
        self.deduplicator = deduplicator or FingerprintDeduplicator()
        self.validator = RowValidator(self.rules, default_timezone)
        self.default_source_label = default_source_label
        self._clock = clock or (lambda: datetime.now(UTC))

    # ========================================================================
    # EXECUTION
    # ========================================================================

    async def run(self, timeout_seconds: float | None = None) -> IngestionResult:
        """
        Execute one ingestion pass.

        Args:
            timeout_seconds: Optional deadline for the whole pass

        Returns:
            IngestionResult

        Raises:
            IngestionTimeoutError: If the deadline expires
            IngestionError: If the event feed cannot be obtained; ``stage``
                on the error names the stage the pass was in
        """
        run_id = uuid.uuid4().hex[:12]
        state = PassState(run_id=run_id, log=with_context(logger, run_id=run_id))
        try:
            if timeout_seconds is None:
                return await self._run(state)
            return await asyncio.wait_for(self._run(state), timeout=timeout_seconds)
        except TimeoutError as e:
            state.log.error(f"Ingestion pass exceeded {timeout_seconds}s deadline")
            raise state.fail(IngestionTimeoutError(timeout_seconds)) from e
        except IngestionError as e:
            state.fail(e)
            raise

    async def _run(self, state: PassState) -> IngestionResult:
        log = state.log
        started_at = datetime.now(UTC)
        now = self._clock()
        log.info("Starting ingestion pass")

        state.advance(PipelineStage.FETCHING)
        rows, (venues, venue_quarantine) = await asyncio.gather(
            self._fetch_events(log), self._fetch_venues(log)
        )

        index = build_venue_index(venues)

        state.advance(PipelineStage.VALIDATING)
        quarantined: list[QuarantinedRow] = []
        validated = self._validate_rows(rows, quarantined, log)

        state.advance(PipelineStage.RESOLVING)
        candidates = self._resolve_rows(validated, index, quarantined, log)

        state.advance(PipelineStage.MERGING)
        dedup = self.deduplicator.deduplicate(candidates, now)

        stats = self._build_stats(rows, dedup.events, quarantined, dedup.duplicates_merged, venues)
        state.advance(PipelineStage.DONE)
        self._log_summary(stats, log)

        return IngestionResult(
            events=dedup.events,
            quarantined=quarantined,
            stats=stats,
            venues=venues,
            venue_quarantine=venue_quarantine,
            run_id=state.run_id,
            stage=state.stage,
            started_at=started_at,
            ended_at=datetime.now(UTC),
        )

    # ========================================================================
    # FETCHING
    # ========================================================================

    async def _fetch_events(self, log: logging.LoggerAdapter) -> list[dict[str, Any]]:
        source_id = self.event_adapter.source_id
        try:
            result = await self.event_adapter.fetch()
        except Exception as e:
            raise FeedFetchError(source_id, [str(e)]) from e
        if not result.success:
            raise FeedFetchError(source_id, result.errors)
        log.info(f"Fetched {result.total_fetched} event rows from {source_id}")
        return result.rows

    async def _fetch_venues(
        self, log: logging.LoggerAdapter
    ) -> tuple[list[Venue], list[QuarantinedVenue]]:
        if self.venue_adapter is None:
            venues = canonical_venues_as_venues()
            log.info(f"No venue feed configured, using {len(venues)} canonical venues")
            return venues, []

        source_id = self.venue_adapter.source_id
        try:
            result = await self.venue_adapter.fetch()
        except Exception as e:
            log.warning(f"Venue feed {source_id} failed: {e}", exc_info=True)
            result = None

        if result is None or not result.success:
            if result is not None:
                log.warning(f"Venue feed {source_id} failed: {'; '.join(result.errors)}")
            venues = canonical_venues_as_venues()
            log.warning(f"Falling back to {len(venues)} canonical venues")
            return venues, []

        loaded = load_venue_rows(result.rows, self.rules.allowed_venue_tags)
        return loaded.venues, loaded.quarantined

    # ========================================================================
    # PER-ROW PROCESSING
    # ========================================================================

    def _validate_rows(
        self,
        rows: Iterable[Any],
        quarantined: list[QuarantinedRow],
        log: logging.LoggerAdapter,
    ) -> list[ValidatedRow]:
        validated: list[ValidatedRow] = []
        for raw in rows:
            try:
                outcome = self.validator.validate(remap_event_row(raw))
            except Exception as e:
                log.error(f"Unexpected error processing row: {e}", exc_info=True)
                outcome = QuarantinedRow(
                    row=_as_row(raw), reason=QuarantineReason.UNKNOWN, detail=str(e)
                )
            if isinstance(outcome, QuarantinedRow):
                quarantined.append(outcome)
            else:
                validated.append(outcome)
        return validated

    def _resolve_rows(
        self,
        validated: Iterable[ValidatedRow],
        index: VenueIndex,
        quarantined: list[QuarantinedRow],
        log: logging.LoggerAdapter,
    ) -> list[DedupCandidate]:
        candidates: list[DedupCandidate] = []
        for item in validated:
            draft = item.draft
            try:
                resolution = resolve_venue(
                    index,
                    venue_id_raw=draft.venue_id,
                    venue_name_raw=draft.venue_name,
                    source_name_raw=draft.source_name,
                )
                if isinstance(resolution, Unresolved):
                    quarantined.append(
                        QuarantinedRow(
                            row=item.row,
                            reason=QuarantineReason.VENUE_RESOLUTION_FAILED,
                            detail=f"No venue matches '{resolution.venue_name_raw}'",
                        )
                    )
                    continue
                candidates.append(
                    DedupCandidate(
                        draft=draft.model_copy(
                            update={
                                "venue_id": resolution.venue_id,
                                "venue_name": resolution.venue_name,
                            }
                        ),
                        source_label=draft.source_name or self.default_source_label,
                    )
                )
            except Exception as e:
                log.error(f"Unexpected error resolving row {draft.event_id}: {e}", exc_info=True)
                quarantined.append(
                    QuarantinedRow(row=item.row, reason=QuarantineReason.UNKNOWN, detail=str(e))
                )
        return candidates

    # ========================================================================
    # STATS
    # ========================================================================

    @staticmethod
    def _build_stats(
        rows: list[Any],
        events: list[Event],
        quarantined: list[QuarantinedRow],
        duplicates_merged: int,
        venues: list[Venue],
    ) -> IngestionStats:
        return IngestionStats(
            total_rows=len(rows),
            loaded_count=len(events),
            quarantined_by_reason=dict(Counter(q.reason for q in quarantined)),
            duplicates_merged=duplicates_merged,
            listing_count=len(filter_events_for_listing(events)),
            venues_loaded=len(venues),
        )

    @staticmethod
    def _log_summary(stats: IngestionStats, log: logging.LoggerAdapter) -> None:
        log.info(
            f"Ingestion complete: {stats.total_rows} rows, {stats.loaded_count} events, "
            f"{stats.duplicates_merged} merged, {stats.quarantined_count} quarantined",
            extra={"payload": stats.model_dump(by_alias=True, mode="json")},
        )
        for reason, count in stats.quarantined_by_reason.items():
            if count:
                log.info(f"Quarantined ({reason.value}): {count}")


# ============================================================================
# ENTRY POINTS
# ============================================================================


def build_orchestrator(
    settings: Settings | None = None,
    *,
    events_url: str | None = None,
    venues_url: str | None = None,
    config: dict[str, Any] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IngestionOrchestrator:
    """
    Build an orchestrator for the configured CSV feeds.

    Explicit URLs override EVENTS_CSV_URL / VENUES_CSV_URL.

    Raises:
        ConfigurationError: If no event feed URL is available
    """
    settings = settings or get_settings()
    events_url = events_url or settings.EVENTS_CSV_URL
    venues_url = venues_url or settings.VENUES_CSV_URL
    if not events_url:
        raise ConfigurationError("EVENTS_CSV_URL is not set")

    if config is None:
        config = Config.load_ingestion_config(settings=settings)
    rules = Config.load_normalization_rules(config)

    dedup_config = config.get("deduplication") or {}
    try:
        strategy = DeduplicationStrategy(dedup_config.get("strategy", "fingerprint"))
    except ValueError as e:
        raise ConfigurationError(f"Unknown deduplication strategy: {e}") from e
    try:
        bucket_minutes = int(dedup_config.get("bucket_minutes") or settings.TIME_BUCKET_MINUTES)
        if bucket_minutes <= 0 or MINUTES_PER_DAY % bucket_minutes != 0:
            raise ValueError(f"bucket_minutes must divide {MINUTES_PER_DAY}, got {bucket_minutes}")
        deduplicator = get_deduplicator(strategy, bucket_minutes)
    except ValueError as e:
        raise ConfigurationError(f"Invalid deduplication config: {e}") from e
    default_timezone = (config.get("normalization") or {}).get("default_timezone")

    event_adapter = CSVFeedAdapter(
        CSVAdapterConfig(
            source_id="events_feed",
            url=events_url,
            request_timeout=settings.REQUEST_TIMEOUT,
            max_retries=settings.MAX_RETRIES,
        ),
        transport=transport,
    )
    venue_adapter = None
    if venues_url:
        venue_adapter = CSVFeedAdapter(
            CSVAdapterConfig(
                source_id="venues_feed",
                url=venues_url,
                request_timeout=settings.REQUEST_TIMEOUT,
                max_retries=settings.MAX_RETRIES,
            ),
            transport=transport,
        )

    return IngestionOrchestrator(
        event_adapter,
        venue_adapter,
        rules=rules,
        deduplicator=deduplicator,
        default_timezone=default_timezone or settings.DEFAULT_TIMEZONE,
        default_source_label=settings.DEFAULT_SOURCE_LABEL,
    )


async def ingest(
    settings: Settings | None = None,
    *,
    events_url: str | None = None,
    venues_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IngestionResult:
    """Run one pass over the configured feeds."""
    settings = settings or get_settings()
    orchestrator = build_orchestrator(
        settings, events_url=events_url, venues_url=venues_url, transport=transport
    )
    return await orchestrator.run(timeout_seconds=settings.PASS_TIMEOUT_SECONDS)


def run_ingestion(
    settings: Settings | None = None,
    *,
    events_url: str | None = None,
    venues_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IngestionResult:
    """Synchronous wrapper around ingest() for scripts and the CLI."""
    return asyncio.run(
        ingest(settings, events_url=events_url, venues_url=venues_url, transport=transport)
    )
