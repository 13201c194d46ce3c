"""
Unit tests for the value normalizers.

Tests booleans, numbers, tags, statuses and opening-time parsing.
"""

import pytest

from event_catalog.normalization.values import (
    clean_str,
    normalize_boolean,
    normalize_event_tags,
    normalize_number,
    normalize_status,
    normalize_tags,
    normalize_venue_tags,
    parse_opening_time_from_description,
    parse_opens_at,
)
from event_catalog.schemas.event import EventStatus


class TestCleanStr:
    """Tests for clean_str."""

    def test_trims(self):
        assert clean_str("  hello ") == "hello"

    @pytest.mark.parametrize("value", [None, "", "   ", float("nan")])
    def test_empty_becomes_none(self, value):
        """Blank cells become None."""
        assert clean_str(value) is None

    def test_non_string(self):
        assert clean_str(42) == "42"


class TestNormalizeBoolean:
    """Tests for normalize_boolean."""

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", " Yes ", True])
    def test_truthy(self, value):
        assert normalize_boolean(value) is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "maybe", False])
    def test_falsy(self, value):
        assert normalize_boolean(value) is False

    def test_default_for_missing(self):
        """Missing or blank values use the default."""
        assert normalize_boolean(None, default=True) is True
        assert normalize_boolean("", default=True) is True
        assert normalize_boolean(None) is False


class TestNormalizeNumber:
    """Tests for normalize_number."""

    def test_parses_numbers(self):
        assert normalize_number("12.5") == 12.5
        assert normalize_number(" -9.1 ") == -9.1
        assert normalize_number(3) == 3.0

    @pytest.mark.parametrize("value", [None, "", "abc", "nan", "inf", True])
    def test_unparsable_is_none(self, value):
        assert normalize_number(value) is None


class TestTags:
    """Tests for tag normalization."""

    def test_event_tags_pipe_separated(self):
        """Tags are trimmed, lowercased and de-duplicated in order."""
        assert normalize_event_tags("Jazz | Live|jazz||Rock") == ["jazz", "live", "rock"]

    def test_event_tags_capped(self):
        """At most five tags are kept by default."""
        assert normalize_event_tags("a|b|c|d|e|f|g") == ["a", "b", "c", "d", "e"]

    def test_event_tags_custom_cap(self):
        assert normalize_event_tags("a|b|c", max_tags=2) == ["a", "b"]

    def test_event_tags_allowed_filter(self):
        """Tags outside the allowed list are dropped before capping."""
        assert normalize_event_tags("techno|jazz|house", allowed_tags={"jazz", "house"}) == [
            "jazz",
            "house",
        ]

    def test_event_tags_comma_fallback(self):
        """A cell without pipes is split on commas."""
        assert normalize_event_tags("jazz, live") == ["jazz", "live"]

    def test_event_tags_list_input(self):
        assert normalize_event_tags(["Jazz", " live "]) == ["jazz", "live"]

    def test_empty_tags(self):
        assert normalize_event_tags("") == []
        assert normalize_event_tags(None) == []

    def test_comma_tags(self):
        assert normalize_tags("Club, Live Music ,") == ["club", "live music"]

    def test_pipe_tags(self):
        assert normalize_tags("Club|Live, Music") == ["club", "live, music"]

    def test_venue_tags_not_capped(self):
        assert normalize_venue_tags("a|b|c|d|e|f") == ["a", "b", "c", "d", "e", "f"]

    def test_venue_tags_allowed_filter(self):
        assert normalize_venue_tags("club|bar", allowed_tags=["bar"]) == ["bar"]


class TestNormalizeStatus:
    """Tests for normalize_status."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("scheduled", EventStatus.SCHEDULED),
            ("Active", EventStatus.SCHEDULED),
            ("needs_review", EventStatus.SCHEDULED),
            ("Canceled", EventStatus.CANCELLED),
            ("cancelled", EventStatus.CANCELLED),
            ("soldout", EventStatus.SOLD_OUT),
            ("sold_out", EventStatus.SOLD_OUT),
            ("postponed", EventStatus.POSTPONED),
            ("draft", EventStatus.DRAFT),
            ("archived", EventStatus.ARCHIVED),
        ],
    )
    def test_aliases(self, raw, expected):
        assert normalize_status(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "who knows"])
    def test_unknown_defaults_to_scheduled(self, raw):
        assert normalize_status(raw) == EventStatus.SCHEDULED

    def test_custom_aliases(self):
        assert normalize_status("esgotado", {"esgotado": EventStatus.SOLD_OUT}) == EventStatus.SOLD_OUT


class TestOpeningTimes:
    """Tests for opening-time parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("9", "09:00"), ("9:30", "09:30"), ("09:30:00", "09:30"), ("21", "21:00")],
    )
    def test_parse_opens_at(self, raw, expected):
        assert parse_opens_at(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "25:00", "9:75", "morning"])
    def test_parse_opens_at_invalid(self, raw):
        assert parse_opens_at(raw) is None

    def test_description_range(self):
        """A time range yields its start."""
        assert parse_opening_time_from_description("Open 10:00-18:00 every day") == "10:00"

    def test_description_opens_at(self):
        assert parse_opening_time_from_description("Exhibition. Opens at 9:30.") == "09:30"

    def test_description_daily(self):
        assert parse_opening_time_from_description("Daily 8:15, free entry") == "08:15"

    def test_description_hour_only(self):
        assert parse_opening_time_from_description("Doors 21h") == "21:00"

    def test_description_without_time(self):
        assert parse_opening_time_from_description("All day long") is None
        assert parse_opening_time_from_description(None) is None
