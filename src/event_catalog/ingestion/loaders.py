"""
Venue loaders.

Turns venue feed rows into Venue records, and provides the canonical venue
fallback used when no venue feed is available.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from event_catalog.data.canonical_venues import CANONICAL_VENUES, CanonicalVenue
from event_catalog.normalization.text import normalize_handle, slugify
from event_catalog.normalization.values import (
    clean_str,
    normalize_number,
    normalize_tags,
    normalize_venue_tags,
)
from event_catalog.schemas.columns import remap_venue_row
from event_catalog.schemas.venue import Venue

logger = logging.getLogger(__name__)

MISSING_VENUE_ID_OR_NAME = "missing venue_id/name"

_TEXT_FIELDS = (
    "instagram_handle",
    "instagram_url",
    "primary_image_url",
    "description_short",
    "website_url",
    "venue_url",
    "neighborhood",
    "city",
    "region",
    "country",
    "postal_code",
    "created_at",
    "updated_at",
)


@dataclass(frozen=True)
class QuarantinedVenue:
    """A venue feed row that could not become a Venue."""

    row: dict[str, Any]
    error: str


@dataclass
class VenueLoadResult:
    venues: list[Venue] = field(default_factory=list)
    quarantined: list[QuarantinedVenue] = field(default_factory=list)


def _split_aliases(raw: Any) -> frozenset[str]:
    text = clean_str(raw)
    if not text:
        return frozenset()
    return frozenset(part.strip() for part in text.split("|") if part.strip())


def normalize_venue(
    row: Mapping[str, Any],
    allowed_tags: Optional[Iterable[str]] = None,
) -> Venue | None:
    """
    Normalize one (already remapped) venue row.

    Returns None when the row has neither venue_id nor name. A missing
    venue_id defaults to the slug of the name; a missing name to the id.
    """
    venue_id = clean_str(row.get("venue_id"))
    name = clean_str(row.get("name"))
    if not venue_id and not name:
        return None

    venue_id = venue_id or slugify(name) or name
    name = name or venue_id

    tags = set(normalize_tags(row.get("tags")))
    tags.update(normalize_venue_tags(row.get("venue_tags"), allowed_tags))

    fields = {key: clean_str(row.get(key)) for key in _TEXT_FIELDS}
    if fields["instagram_handle"]:
        fields["instagram_handle"] = normalize_handle(fields["instagram_handle"])

    return Venue(
        venue_id=venue_id,
        name=name,
        slug=clean_str(row.get("slug")) or slugify(name),
        aliases=_split_aliases(row.get("aliases")),
        venue_address=clean_str(row.get("address")) or clean_str(row.get("venue_address")),
        latitude=normalize_number(row.get("latitude")),
        longitude=normalize_number(row.get("longitude")),
        tags=frozenset(tags),
        **fields,
    )


def load_venue_rows(
    rows: Iterable[Mapping[str, Any]],
    allowed_tags: Optional[Iterable[str]] = None,
) -> VenueLoadResult:
    """
    Normalize a batch of raw venue feed rows.

    Rows missing both id and name, or failing model validation, are
    quarantined. Venue quarantine never fails the ingestion pass.
    """
    allowed = frozenset(allowed_tags or ())
    result = VenueLoadResult()

    for raw in rows:
        row = remap_venue_row(raw)
        try:
            venue = normalize_venue(row, allowed)
        except ValidationError as e:
            result.quarantined.append(QuarantinedVenue(row=row, error=str(e)))
            continue
        if venue is None:
            result.quarantined.append(QuarantinedVenue(row=row, error=MISSING_VENUE_ID_OR_NAME))
            continue
        result.venues.append(venue)

    if result.quarantined:
        logger.warning(f"Quarantined {len(result.quarantined)} venue rows")
    logger.info(f"Loaded {len(result.venues)} venues from feed")
    return result


def canonical_venue_to_venue(canonical: CanonicalVenue) -> Venue:
    handle = normalize_handle(canonical.handle)
    return Venue(
        venue_id=canonical.key,
        name=canonical.name,
        slug=canonical.key,
        instagram_handle=handle or None,
        instagram_url=f"https://instagram.com/{handle}" if handle else None,
    )


def canonical_venues_as_venues(
    canonical: Iterable[CanonicalVenue] = CANONICAL_VENUES,
) -> list[Venue]:
    """Convert the canonical venue list into Venue records."""
    return [canonical_venue_to_venue(c) for c in canonical]
