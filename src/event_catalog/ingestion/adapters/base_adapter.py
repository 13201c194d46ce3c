"""
Base Source Adapter.

Feed adapters hand the orchestrator raw rows and nothing else: no
validation, no normalization. Each feed format gets its own adapter behind
the BaseSourceAdapter interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SourceType(str, Enum):
    """Kind of feed an adapter reads."""

    CSV = "csv"
    STATIC = "static"


@dataclass
class FetchResult:
    """
    Raw rows from one fetch of one feed.

    ``success`` is False only when the feed could not be obtained; an empty
    feed is a successful fetch with no rows.
    """

    success: bool
    source_type: SourceType
    rows: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    fetch_started_at: datetime | None = None
    fetch_ended_at: datetime | None = None

    @property
    def total_fetched(self) -> int:
        return len(self.rows)

    @property
    def duration_seconds(self) -> float:
        if not (self.fetch_started_at and self.fetch_ended_at):
            return 0.0
        return (self.fetch_ended_at - self.fetch_started_at).total_seconds()


@dataclass
class AdapterConfig:
    """Settings shared by every feed adapter; subclasses add their own."""

    source_id: str
    source_type: SourceType
    request_timeout: float = 30
    max_retries: int = 3


class BaseSourceAdapter(ABC):
    """
    Interface for feed adapters.

    Subclasses implement fetch() and _validate_config(); the config is
    checked once, when the adapter is built.
    """

    def __init__(self, config: AdapterConfig):
        """
        Args:
            config: Adapter settings; source_id names the feed in logs and errors

        Raises:
            ValueError: If the config is unusable for this adapter
        """
        self.config = config
        self._validate_config()

    @property
    def source_id(self) -> str:
        return self.config.source_id

    @property
    def source_type(self) -> SourceType:
        return self.config.source_type

    @abstractmethod
    async def fetch(self, **kwargs) -> FetchResult:
        """Fetch every row currently in the feed."""

    @abstractmethod
    def _validate_config(self) -> None:
        """Raise ValueError when the config is unusable."""
