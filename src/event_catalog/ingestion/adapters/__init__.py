"""
Source Adapters for feed ingestion.

Adapters provide a unified interface for fetching raw rows:
- CSV feeds over HTTP (CSVFeedAdapter)
- In-memory rows (StaticRowsAdapter)

Usage:
    from event_catalog.ingestion.adapters import CSVAdapterConfig, CSVFeedAdapter

    adapter = CSVFeedAdapter(CSVAdapterConfig(source_id="events", url=url))
    result = await adapter.fetch()
"""

from .base_adapter import AdapterConfig, BaseSourceAdapter, FetchResult, SourceType
from .csv_adapter import CSVAdapterConfig, CSVFeedAdapter, parse_csv_rows
from .static_adapter import StaticRowsAdapter

__all__ = [
    "AdapterConfig",
    "BaseSourceAdapter",
    "SourceType",
    "FetchResult",
    "CSVAdapterConfig",
    "CSVFeedAdapter",
    "StaticRowsAdapter",
    "parse_csv_rows",
]
