# src/event_catalog/schemas/venue.py
"""
Venue schema and venue resolution types.

- Venue: canonical venue record, immutable for the whole ingestion pass
- VenueIndex: the four lookup maps used to resolve noisy venue references
- VenueResolution: Resolved | Unresolved, the outcome of one lookup
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from event_catalog.schemas.event import UNKNOWN_VENUE_ID


class Venue(BaseModel):
    """
    Canonical venue record.

    ``venue_id`` is the stable external identifier and is unique across an
    index; ``name`` is never empty.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "venue_id": "lux-fragil",
                "name": "Lux Frágil",
                "slug": "lux-fragil",
                "aliases": ["lux", "lux fragil"],
                "instagram_handle": "luxfragil",
                "city": "Lisboa",
            }
        },
    )

    venue_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    slug: str = ""
    aliases: frozenset[str] = Field(default_factory=frozenset)
    instagram_handle: Optional[str] = None
    instagram_url: Optional[str] = None

    primary_image_url: Optional[str] = None
    description_short: Optional[str] = None
    website_url: Optional[str] = None
    venue_url: Optional[str] = None

    # ---- LOCATION ----
    venue_address: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    tags: frozenset[str] = Field(default_factory=frozenset)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Venue name cannot be blank")
        return v


@dataclass(frozen=True)
class VenueIndex:
    """
    Multi-key venue lookup, built once per ingestion pass.

    Each map has its own key normalization:
    - by_id: raw venue_id (trimmed)
    - by_name: normalize_text(name) and normalize_text(slug)
    - by_alias: normalize_text(alias)
    - by_handle: normalize_handle(instagram handle)
    """

    by_id: Mapping[str, Venue]
    by_name: Mapping[str, str]
    by_alias: Mapping[str, str]
    by_handle: Mapping[str, str]

    def __len__(self) -> int:
        return len(self.by_id)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self.by_id


class MatchKind(str, Enum):
    """Which index map produced a resolution."""

    ID = "id"
    HANDLE = "handle"
    NAME = "name"
    ALIAS = "alias"


@dataclass(frozen=True)
class Resolved:
    """The reference matched a canonical venue."""

    venue_id: str
    venue_name: str
    matched_by: MatchKind


@dataclass(frozen=True)
class Unresolved:
    """No index entry matched; the raw label is kept for manual review."""

    venue_name_raw: str

    @property
    def venue_id(self) -> str:
        return UNKNOWN_VENUE_ID


VenueResolution = Union[Resolved, Unresolved]
