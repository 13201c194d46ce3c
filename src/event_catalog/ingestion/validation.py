"""
Row Validator.

Turns a remapped feed row into an EventDraft, or a QuarantinedRow carrying the
first check it failed. Checks run in a fixed order:

1. event_id present          -> missing_event_id
2. title present             -> missing_title
3. start_datetime present    -> missing_start_datetime
4. start_datetime parseable  -> invalid_datetime
5. remaining fields normalize -> parse_error
6. anything else             -> unknown

Venue resolution is not done here; the orchestrator resolves venues after
validation so a row with a missing title is never reported as an unresolved
venue.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Dict, Optional, Union

from event_catalog.normalization.datetimes import get_timezone, localize, parse_timestamp
from event_catalog.normalization.rules import NormalizationRules
from event_catalog.normalization.values import (
    clean_str,
    normalize_boolean,
    normalize_event_tags,
    normalize_number,
    normalize_status,
    parse_opening_time_from_description,
    parse_opens_at,
)
from event_catalog.schemas.event import EventDraft, QuarantinedRow, QuarantineReason

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Lisbon"

# Passed through to the draft after trimming
_TEXT_FIELDS = (
    "description_short",
    "description_long",
    "source_name",
    "source_event_id",
    "dedupe_key",
    "source_url",
    "recurrence_rule",
    "venue_address",
    "neighborhood",
    "city",
    "region",
    "country",
    "postal_code",
    "ticket_url",
    "age_restriction",
    "language",
    "primary_image_id",
    "primary_image_url",
    "image_credit",
    "promoter_id",
    "promoter_name",
    "created_at",
    "updated_at",
)

_NUMBER_FIELDS = ("latitude", "longitude", "price_min", "price_max", "confidence_score")


@dataclass(frozen=True)
class ValidatedRow:
    """A row that passed validation, with its normalized draft."""

    row: Dict[str, Any]
    draft: EventDraft


ValidationOutcome = Union[ValidatedRow, QuarantinedRow]


class RowValidator:
    """
    Validates and normalizes event feed rows.

    Stateless apart from its configuration, so one instance can be shared by
    every row in a pass.
    """

    def __init__(
        self,
        rules: Optional[NormalizationRules] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
    ):
        self.rules = rules or NormalizationRules()
        self.default_timezone = default_timezone

    def validate(self, row: Mapping[str, Any]) -> ValidationOutcome:
        """
        Validate one row.

        Never raises: every failure becomes a QuarantinedRow.
        """
        try:
            return self._validate(row)
        except Exception as e:
            logger.error(f"Unexpected error validating row: {e}", exc_info=True)
            return self._quarantine(row, QuarantineReason.UNKNOWN, str(e))

    def _validate(self, row: Mapping[str, Any]) -> ValidationOutcome:
        event_id = clean_str(row.get("event_id")) or clean_str(row.get("id"))
        if not event_id:
            return self._quarantine(row, QuarantineReason.MISSING_EVENT_ID)

        title = clean_str(row.get("title"))
        if not title:
            return self._quarantine(row, QuarantineReason.MISSING_TITLE)

        start_raw = clean_str(row.get("start_datetime"))
        if not start_raw:
            return self._quarantine(row, QuarantineReason.MISSING_START_DATETIME)

        try:
            start = parse_timestamp(start_raw)
        except ValueError:
            return self._quarantine(
                row,
                QuarantineReason.INVALID_DATETIME,
                f"Unparsable start_datetime '{start_raw}'",
            )

        try:
            draft = self._build_draft(row, event_id, title, start)
        except Exception as e:
            logger.debug(f"Row {event_id} failed normalization: {e}")
            return self._quarantine(row, QuarantineReason.PARSE_ERROR, str(e))

        return ValidatedRow(row=dict(row), draft=draft)

    def _build_draft(
        self,
        row: Mapping[str, Any],
        event_id: str,
        title: str,
        start: datetime,
    ) -> EventDraft:
        timezone = clean_str(row.get("timezone")) or self.default_timezone
        tz = get_timezone(timezone)
        start = localize(start, tz)

        end: Optional[datetime] = None
        end_raw = clean_str(row.get("end_datetime"))
        if end_raw:
            try:
                end = localize(parse_timestamp(end_raw), tz)
            except ValueError:
                logger.debug(f"Row {event_id}: dropping invalid end_datetime '{end_raw}'")

        is_all_day = normalize_boolean(row.get("is_all_day"))
        if is_all_day and start.time() == time(0, 0):
            start, end = self._bound_all_day(row, start, end)
            is_all_day = False

        fields: Dict[str, Any] = {name: clean_str(row.get(name)) for name in _TEXT_FIELDS}
        fields.update({name: normalize_number(row.get(name)) for name in _NUMBER_FIELDS})

        category = clean_str(row.get("category"))
        currency = clean_str(row.get("currency"))
        venue_name = clean_str(row.get("venue_name"))

        return EventDraft(
            event_id=event_id,
            title=title,
            start_datetime=start,
            end_datetime=end,
            timezone=timezone,
            is_all_day=is_all_day,
            status=normalize_status(row.get("status"), self.rules.status_aliases),
            venue_id=clean_str(row.get("venue_id")),
            venue_name=venue_name,
            venue_name_raw=venue_name,
            category=category.lower() if category else None,
            tags=normalize_event_tags(
                row.get("tags"),
                allowed_tags=self.rules.allowed_event_tags,
                max_tags=self.rules.max_event_tags,
            ),
            currency=currency.upper() if currency else None,
            is_free=normalize_boolean(row.get("is_free")),
            **fields,
        )

    def _bound_all_day(
        self,
        row: Mapping[str, Any],
        start: datetime,
        end: Optional[datetime],
    ) -> tuple[datetime, Optional[datetime]]:
        """Give an all-day event starting at midnight a concrete opening hour."""
        opening = (
            parse_opens_at(row.get("opens_at"))
            or parse_opening_time_from_description(row.get("description_short"))
            or parse_opening_time_from_description(row.get("description_long"))
            or self.rules.default_opening_time
        )
        hour, minute = (int(part) for part in opening.split(":"))
        start = start.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if end is None or end <= start:
            end = start + timedelta(hours=1)
        return start, end

    @staticmethod
    def _quarantine(
        row: Mapping[str, Any],
        reason: QuarantineReason,
        detail: Optional[str] = None,
    ) -> QuarantinedRow:
        raw = dict(row) if isinstance(row, Mapping) else {"value": repr(row)}
        return QuarantinedRow(row=raw, reason=reason, detail=detail)
