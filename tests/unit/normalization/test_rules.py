"""Unit tests for NormalizationRules."""

import dataclasses

import pytest

from event_catalog.normalization.rules import NormalizationRules
from event_catalog.normalization.values import DEFAULT_STATUS_ALIASES
from event_catalog.schemas.event import EventStatus


class TestNormalizationRules:
    """Tests for NormalizationRules construction."""

    def test_defaults(self):
        rules = NormalizationRules()
        assert rules.status_aliases is DEFAULT_STATUS_ALIASES
        assert rules.allowed_event_tags == frozenset()
        assert rules.max_event_tags == 5
        assert rules.default_opening_time == "10:00"

    def test_frozen(self):
        """Rules cannot be mutated after construction."""
        rules = NormalizationRules()
        with pytest.raises(dataclasses.FrozenInstanceError):
            rules.max_event_tags = 10  # type: ignore[misc]

    def test_from_config(self):
        rules = NormalizationRules.from_config(
            {
                "status_aliases": {"Esgotado": "sold_out"},
                "allowed_event_tags": ["Jazz", "techno"],
                "allowed_venue_tags": ["club"],
                "max_event_tags": 3,
                "default_opening_time": "09:00",
            }
        )
        assert rules.status_aliases["esgotado"] == EventStatus.SOLD_OUT
        # built-in aliases still apply
        assert rules.status_aliases["canceled"] == EventStatus.CANCELLED
        assert rules.allowed_event_tags == frozenset({"jazz", "techno"})
        assert rules.allowed_venue_tags == frozenset({"club"})
        assert rules.max_event_tags == 3
        assert rules.default_opening_time == "09:00"

    def test_from_empty_config(self):
        assert NormalizationRules.from_config(None) == NormalizationRules.from_config({})

    def test_does_not_mutate_builtin_aliases(self):
        NormalizationRules.from_config({"status_aliases": {"live": "scheduled"}})
        assert "live" not in DEFAULT_STATUS_ALIASES

    @pytest.mark.parametrize(
        "config",
        [
            {"max_event_tags": 0},
            {"default_opening_time": "25:00"},
            {"default_opening_time": "9am"},
            {"status_aliases": {"live": "not-a-status"}},
        ],
    )
    def test_invalid_config(self, config):
        with pytest.raises(ValueError):
            NormalizationRules.from_config(config)
