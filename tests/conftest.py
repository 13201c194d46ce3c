"""
Shared pytest fixtures for the event catalog test suite.

Provides factory fixtures for raw feed rows and Venue objects, and a venue
index built from a small set of venues.
"""

from typing import Any, Optional

import pytest

from event_catalog.configs.settings import get_settings
from event_catalog.ingestion.venue_index import build_venue_index
from event_catalog.schemas.venue import Venue


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Keep environment-derived settings from leaking between tests."""
    for name in ("EVENTS_CSV_URL", "VENUES_CSV_URL", "PASS_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def create_row():
    """
    Return a function that creates raw event feed rows with sensible defaults.

    All values are strings, as they arrive from a CSV feed. Defaults can be
    overridden (or removed by passing None) via keyword arguments.

    Example:
        row = create_row(title="Jazz Night", venue_name="Hot Clube")
    """

    def _create_row(**kwargs: Any) -> dict[str, Any]:
        row: dict[str, Any] = {
            "event_id": "e1",
            "title": "Jazz Night",
            "start_datetime": "2024-05-01T22:00:00",
            "timezone": "Europe/Lisbon",
            "status": "scheduled",
            "venue_id": "",
            "venue_name": "Hot Clube",
            "source_name": "SourceA",
            "tags": "jazz|live",
            "price_min": "10",
            "price_max": "15",
            "currency": "eur",
        }
        row.update(kwargs)
        return {k: v for k, v in row.items() if v is not None}

    return _create_row


@pytest.fixture
def create_venue():
    """
    Return a function that creates Venue objects with sensible defaults.

    Example:
        venue = create_venue(venue_id="v2", name="Musicbox", aliases={"mbox"})
    """

    def _create_venue(
        venue_id: str = "v1",
        name: str = "Hot Clube",
        aliases: Optional[set[str]] = None,
        **kwargs: Any,
    ) -> Venue:
        return Venue(
            venue_id=venue_id,
            name=name,
            aliases=frozenset(aliases or ()),
            **kwargs,
        )

    return _create_venue


@pytest.fixture
def sample_venues(create_venue):
    """A small venue set covering every lookup path."""
    return [
        create_venue(
            venue_id="v1",
            name="Hot Clube",
            aliases={"Hot Clube de Portugal"},
            instagram_handle="@hotclube",
        ),
        create_venue(
            venue_id="v2",
            name="Lux Frágil",
            slug="lux-fragil",
            aliases={"Lux"},
            instagram_url="https://www.instagram.com/luxfragil/",
        ),
        create_venue(venue_id="v3", name="Musicbox Lisboa"),
    ]


@pytest.fixture
def venue_index(sample_venues):
    """VenueIndex built from sample_venues."""
    return build_venue_index(sample_venues)
