"""Unit tests for the tabular event export."""

from datetime import datetime, timezone

import pytest

from event_catalog.ingestion.deduplication import merge_event
from event_catalog.ingestion.export import EXPORT_COLUMNS, events_to_dataframe
from event_catalog.schemas.event import EventDraft, EventStatus

NOW = datetime(2024, 4, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def create_event():
    """Return a function that creates canonical Event objects."""

    def _create_event(source_label="SourceA", **kwargs):
        defaults = {
            "event_id": "e1",
            "title": "Jazz Night",
            "start_datetime": datetime(2024, 5, 1, 21, 0, tzinfo=timezone.utc),
            "venue_id": "v1",
            "venue_name": "Hot Clube",
            "tags": ["jazz", "live"],
        }
        defaults.update(kwargs)
        return merge_event(
            None,
            EventDraft(**defaults),
            event_fingerprint=f"fp-{defaults['event_id']}",
            source_label=source_label,
            now=NOW,
        )

    return _create_event


class TestEventsToDataFrame:
    """Tests for events_to_dataframe."""

    def test_columns(self, create_event):
        frame = events_to_dataframe([create_event()])
        assert list(frame.columns) == list(EXPORT_COLUMNS)
        assert "opens_at" not in frame.columns
        assert "fingerprint" in frame.columns

    def test_cell_formatting(self, create_event):
        row = events_to_dataframe([create_event()]).iloc[0]
        assert row["tags"] == "jazz|live"
        assert row["sources"] == "SourceA"
        assert row["status"] == "scheduled"
        assert row["start_datetime"] == "2024-05-01T21:00:00+00:00"
        assert row["first_seen_at"] == NOW.isoformat()
        assert row["fingerprint"] == "fp-e1"

    def test_hidden_events_dropped_by_default(self, create_event):
        events = [
            create_event(),
            create_event(event_id="e2", status=EventStatus.CANCELLED),
            create_event(event_id="e3", status=EventStatus.DRAFT),
        ]
        assert events_to_dataframe(events)["event_id"].tolist() == ["e1"]
        assert events_to_dataframe(events, include_hidden=True)["event_id"].tolist() == [
            "e1",
            "e2",
            "e3",
        ]

    def test_empty(self):
        frame = events_to_dataframe([])
        assert frame.empty
        assert list(frame.columns) == list(EXPORT_COLUMNS)
