"""
CSV Feed Adapter.

Adapter for fetching published CSV feeds (e.g. a spreadsheet exported as
CSV) over HTTP and parsing them into raw rows.
"""

import asyncio
import io
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx
import pandas as pd

from .base_adapter import AdapterConfig, BaseSourceAdapter, FetchResult, SourceType

logger = logging.getLogger(__name__)


@dataclass
class CSVAdapterConfig(AdapterConfig):
    """Configuration for CSV feed adapters."""

    source_type: SourceType = SourceType.CSV
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)


def parse_csv_rows(text: str) -> list[dict[str, Any]]:
    """
    Parse CSV text into rows.

    Every cell is kept as a string (no NA or number coercion), blank lines are
    skipped and header names are trimmed. An empty document yields no rows.
    """
    if not text.strip():
        return []
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return []
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame.to_dict(orient="records")


class CSVFeedAdapter(BaseSourceAdapter):
    """
    Adapter for CSV feeds served over HTTP.

    Supports:
    - Retry logic with exponential backoff
    - Custom headers
    - A pluggable httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        config: CSVAdapterConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the CSV adapter.

        Args:
            config: CSVAdapterConfig with the feed URL
            transport: Optional httpx transport for the underlying client
        """
        self.transport = transport
        super().__init__(config)

    @property
    def csv_config(self) -> CSVAdapterConfig:
        """Get typed config."""
        return self.config  # type: ignore[return-value]

    def _validate_config(self) -> None:
        """Validate CSV configuration."""
        if not self.csv_config.url:
            raise ValueError("CSV adapter requires a url")
        if self.csv_config.max_retries < 0:
            raise ValueError("max_retries cannot be negative")

    def _build_client(self) -> httpx.AsyncClient:
        headers = {"Accept": "text/csv, text/plain, */*", **self.csv_config.headers}
        return httpx.AsyncClient(
            headers=headers,
            timeout=self.csv_config.request_timeout,
            follow_redirects=True,
            transport=self.transport,
        )

    async def fetch(self, **kwargs) -> FetchResult:
        """
        Fetch and parse the feed.

        Returns:
            FetchResult; success is False when the feed could not be
            downloaded or parsed
        """
        fetch_started = datetime.now(UTC)
        rows: list[dict[str, Any]] = []
        errors: list[str] = []
        metadata: dict[str, Any] = {"url": self.csv_config.url, "attempts": 0}

        try:
            async with self._build_client() as client:
                text = await self._make_request(client, metadata)
            rows = parse_csv_rows(text)
            metadata["columns"] = sorted(rows[0].keys()) if rows else []
        except httpx.HTTPError as e:
            logger.error(f"CSV fetch failed for {self.source_id}: {e}")
            errors.append(f"HTTP error: {e}")
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            logger.error(f"CSV parse failed for {self.source_id}: {e}")
            errors.append(f"Parse error: {e}")

        result = FetchResult(
            success=not errors,
            source_type=SourceType.CSV,
            rows=rows,
            errors=errors,
            metadata=metadata,
            fetch_started_at=fetch_started,
            fetch_ended_at=datetime.now(UTC),
        )
        logger.info(
            f"Fetched {result.total_fetched} rows from {self.source_id} "
            f"in {result.duration_seconds:.2f}s"
        )
        return result

    async def _make_request(
        self,
        client: httpx.AsyncClient,
        metadata: dict[str, Any],
        retry_count: int = 0,
    ) -> str:
        """
        Download the feed text with retry logic.

        Raises:
            httpx.HTTPError: Once max_retries is exhausted
        """
        metadata["attempts"] += 1
        try:
            response = await client.get(self.csv_config.url)
            response.raise_for_status()
            return response.text
        except httpx.HTTPError as e:
            if retry_count < self.csv_config.max_retries:
                wait_time = 2**retry_count
                logger.warning(f"Request failed, retrying in {wait_time}s: {e}")
                await asyncio.sleep(wait_time)
                return await self._make_request(client, metadata, retry_count + 1)

            logger.error(f"Request failed after {retry_count} retries: {e}")
            raise
