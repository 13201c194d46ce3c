"""Tabular export of catalog events."""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

import pandas as pd

from event_catalog.schemas.columns import EVENT_COLUMNS
from event_catalog.schemas.event import Event, filter_events_for_listing

# Event columns that are input-only and never present on an Event
_INPUT_ONLY_COLUMNS = frozenset({"opens_at"})

EXPORT_COLUMNS: tuple[str, ...] = tuple(
    c for c in EVENT_COLUMNS if c not in _INPUT_ONLY_COLUMNS
) + ("venue_name_raw", "fingerprint")


def _cell(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return "|".join(str(v) for v in value)
    return value


def events_to_dataframe(events: Iterable[Event], include_hidden: bool = False) -> pd.DataFrame:
    """
    Flatten events into a DataFrame with the feed's column order.

    Tags and sources are joined with "|" so the frame round-trips through the
    same CSV layout the feeds use. Events hidden from listings are dropped
    unless include_hidden is set.
    """
    events = list(events)
    if not include_hidden:
        events = filter_events_for_listing(events)

    records = [
        {column: _cell(getattr(event, column, None)) for column in EXPORT_COLUMNS}
        for event in events
    ]
    return pd.DataFrame.from_records(records, columns=list(EXPORT_COLUMNS))
