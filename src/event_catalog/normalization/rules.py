"""
Normalization rules.

Lookup tables that shape field normalization (status aliases, allowed tag
vocabularies, tag caps, default opening time). They are loaded once from
ingestion.yaml and passed into the components that need them.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from event_catalog.normalization.values import DEFAULT_STATUS_ALIASES
from event_catalog.schemas.event import EventStatus

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class NormalizationRules:
    """Immutable normalization configuration for one ingestion pass."""

    status_aliases: Mapping[str, EventStatus] = field(
        default_factory=lambda: DEFAULT_STATUS_ALIASES
    )
    allowed_event_tags: frozenset[str] = frozenset()
    allowed_venue_tags: frozenset[str] = frozenset()
    max_event_tags: int = 5
    default_opening_time: str = "10:00"

    def __post_init__(self) -> None:
        if self.max_event_tags < 1:
            raise ValueError("max_event_tags must be at least 1")
        if not _HHMM_RE.match(self.default_opening_time):
            raise ValueError(
                f"default_opening_time must be HH:MM, got '{self.default_opening_time}'"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> "NormalizationRules":
        """
        Build rules from the ``normalization`` section of ingestion.yaml.

        Example config:
            normalization:
              status_aliases:
                live: scheduled
              allowed_event_tags: [techno, jazz]
              max_event_tags: 5
              default_opening_time: "10:00"

        Extra status aliases extend the built-in ones.
        """
        config = config or {}
        aliases = dict(DEFAULT_STATUS_ALIASES)
        for raw, status in (config.get("status_aliases") or {}).items():
            aliases[str(raw).strip().lower()] = EventStatus(str(status).strip().lower())

        return cls(
            status_aliases=MappingProxyType(aliases),
            allowed_event_tags=frozenset(
                str(t).strip().lower() for t in config.get("allowed_event_tags") or ()
            ),
            allowed_venue_tags=frozenset(
                str(t).strip().lower() for t in config.get("allowed_venue_tags") or ()
            ),
            max_event_tags=int(config.get("max_event_tags", 5)),
            default_opening_time=str(config.get("default_opening_time", "10:00")),
        )
