"""Exceptions raised by the event catalog."""


class CatalogError(Exception):
    """Base class for all event catalog errors."""


class ConfigurationError(CatalogError):
    """Invalid settings or ingestion configuration."""


class IngestionError(CatalogError):
    """An ingestion pass could not complete; no partial output is produced."""

    # set by the orchestrator when the error ends a pass
    run_id: str | None = None
    stage: str | None = None


class FeedFetchError(IngestionError):
    """A feed could not be fetched or parsed."""

    def __init__(self, source_id: str, errors: list[str] | None = None):
        self.source_id = source_id
        self.errors = list(errors or [])
        detail = "; ".join(self.errors) or "no rows returned"
        super().__init__(f"Failed to fetch feed '{source_id}': {detail}")


class IngestionTimeoutError(IngestionError):
    """The ingestion pass exceeded its deadline."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Ingestion pass timed out after {timeout_seconds}s")
