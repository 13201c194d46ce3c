"""
Venue Index: deterministic venue resolution by id, handle, name and alias.

The index is rebuilt from scratch on every ingestion pass. Key collisions
(two venues normalizing to the same name, alias or handle) are resolved
last-write-wins; overwrites are logged at debug level so frequent collisions
in the venue feed can be spotted.
"""

import logging
import re
from collections.abc import Iterable
from types import MappingProxyType
from typing import Dict, Optional

from event_catalog.normalization.text import normalize_handle, normalize_text
from event_catalog.schemas.venue import (
    MatchKind,
    Resolved,
    Unresolved,
    Venue,
    VenueIndex,
    VenueResolution,
)

logger = logging.getLogger(__name__)

_INSTAGRAM_URL_RE = re.compile(r"instagram\.com/([^/?#]+)", re.IGNORECASE)


def extract_instagram_handle(url: Optional[str]) -> str:
    """Pull the normalized handle out of an instagram.com/<handle> URL."""
    if not url:
        return ""
    match = _INSTAGRAM_URL_RE.search(url)
    if not match:
        return ""
    return normalize_handle(match.group(1))


def _put(mapping: Dict[str, str], key: str, venue_id: str, map_name: str) -> None:
    if not key:
        return
    previous = mapping.get(key)
    if previous is not None and previous != venue_id:
        logger.debug(
            f"Venue index collision in {map_name}: '{key}' {previous} -> {venue_id}"
        )
    mapping[key] = venue_id


def build_venue_index(venues: Iterable[Venue]) -> VenueIndex:
    """
    Build the four lookup maps from a venue collection.

    Args:
        venues: Canonical venues, in feed order (later entries win collisions)

    Returns:
        Read-only VenueIndex
    """
    by_id: Dict[str, Venue] = {}
    by_name: Dict[str, str] = {}
    by_alias: Dict[str, str] = {}
    by_handle: Dict[str, str] = {}

    for venue in venues:
        venue_id = venue.venue_id.strip()
        if venue_id in by_id:
            logger.debug(f"Duplicate venue_id '{venue_id}' replaces earlier venue")
        by_id[venue_id] = venue

        _put(by_name, normalize_text(venue.name), venue_id, "by_name")
        if venue.slug:
            _put(by_name, normalize_text(venue.slug), venue_id, "by_name")

        for alias in sorted(venue.aliases):
            _put(by_alias, normalize_text(alias), venue_id, "by_alias")

        if venue.instagram_handle:
            _put(by_handle, normalize_handle(venue.instagram_handle), venue_id, "by_handle")
        _put(by_handle, extract_instagram_handle(venue.instagram_url), venue_id, "by_handle")

    logger.info(
        f"Built venue index: {len(by_id)} venues, {len(by_name)} names, "
        f"{len(by_alias)} aliases, {len(by_handle)} handles"
    )
    return VenueIndex(
        by_id=MappingProxyType(by_id),
        by_name=MappingProxyType(by_name),
        by_alias=MappingProxyType(by_alias),
        by_handle=MappingProxyType(by_handle),
    )


def _resolved(index: VenueIndex, venue_id: str, matched_by: MatchKind) -> Resolved:
    return Resolved(
        venue_id=venue_id,
        venue_name=index.by_id[venue_id].name,
        matched_by=matched_by,
    )


def resolve_venue(
    index: VenueIndex,
    venue_id_raw: Optional[str] = None,
    venue_name_raw: Optional[str] = None,
    source_name_raw: Optional[str] = None,
) -> VenueResolution:
    """
    Resolve a raw venue reference against the index.

    Priority (first hit wins): venue_id → social handle (source name, else
    venue name) → exact normalized name/slug → alias → Unresolved.
    No partial or fuzzy matching: an unknown venue is preferred over a wrong
    one.
    """
    venue_id = (venue_id_raw or "").strip()
    venue_name = (venue_name_raw or "").strip()
    source_name = (source_name_raw or "").strip()

    if venue_id and venue_id in index.by_id:
        return _resolved(index, venue_id, MatchKind.ID)

    handle = normalize_handle(source_name or venue_name)
    if handle:
        matched = index.by_handle.get(handle)
        if matched is not None:
            return _resolved(index, matched, MatchKind.HANDLE)

    name_norm = normalize_text(venue_name)
    if name_norm:
        matched = index.by_name.get(name_norm)
        if matched is not None:
            return _resolved(index, matched, MatchKind.NAME)
        matched = index.by_alias.get(name_norm)
        if matched is not None:
            return _resolved(index, matched, MatchKind.ALIAS)

    return Unresolved(venue_name_raw=venue_name or venue_id or "unknown")
