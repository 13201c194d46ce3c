"""
Static Rows Adapter.

Serves rows that are already in memory, for embedding callers that fetch
feeds themselves and for tests.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from .base_adapter import AdapterConfig, BaseSourceAdapter, FetchResult, SourceType


@dataclass
class StaticAdapterConfig(AdapterConfig):
    source_type: SourceType = SourceType.STATIC


class StaticRowsAdapter(BaseSourceAdapter):
    """Adapter returning a fixed list of rows on every fetch."""

    def __init__(self, rows: Iterable[Mapping[str, Any]], source_id: str = "static"):
        self._rows = [dict(row) for row in rows]
        super().__init__(StaticAdapterConfig(source_id=source_id))

    def _validate_config(self) -> None:
        pass

    async def fetch(self, **kwargs) -> FetchResult:
        now = datetime.now(UTC)
        return FetchResult(
            success=True,
            source_type=SourceType.STATIC,
            rows=[dict(row) for row in self._rows],
            fetch_started_at=now,
            fetch_ended_at=now,
        )
