"""
event_catalog.api.main.

FastAPI entrypoint for the event catalog.

Responsibilities
----------------
• Health monitoring
• Catalog listing (events, venues) from a fresh ingestion pass
• Ingestion diagnostics (sanity check)

Environment
-----------
Requires EVENTS_CSV_URL; VENUES_CSV_URL is optional (canonical venues are
used when it is unset).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from event_catalog.configs.settings import get_settings
from event_catalog.ingestion.exceptions import CatalogError
from event_catalog.ingestion.orchestrator import IngestionResult, ingest
from event_catalog.schemas.event import is_visible_on_detail

logger = logging.getLogger(__name__)

IngestionRunner = Callable[[], Awaitable[IngestionResult]]

# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Event Catalog API",
    version="1.0.0",
    description="Event and venue catalog built from tabular feeds.",
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Surface failed ingestion passes as a 500 with a message."""
    logger.error(f"{request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


# ---------------------------------------------------------------------------
# DEPENDENCIES
# ---------------------------------------------------------------------------


def get_ingestion_runner() -> IngestionRunner:
    """
    Provide the coroutine that runs one ingestion pass.

    Returns
    -------
    Callable
        Zero-argument coroutine function returning an IngestionResult.
    """
    settings = get_settings()

    async def runner() -> IngestionResult:
        return await ingest(settings)

    return runner


# ---------------------------------------------------------------------------
# HEALTH ENDPOINT
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Monitoring"])
def health_check() -> dict[str, str]:
    """
    Check API health.

    Returns
    -------
    dict
        Service status indicator.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# CATALOG ENDPOINTS
# ---------------------------------------------------------------------------


@app.get("/events", tags=["Catalog"])
async def list_events(
    include_hidden: bool = False,
    runner: IngestionRunner = Depends(get_ingestion_runner),
) -> list[dict[str, Any]]:
    """
    List catalog events.

    Parameters
    ----------
    include_hidden : bool
        Also return cancelled and archived events. Drafts are never returned.
    """
    result = await runner()
    if include_hidden:
        events = [e for e in result.events if is_visible_on_detail(e.status)]
    else:
        events = result.listing_events
    return [e.model_dump(mode="json") for e in events]


@app.get("/venues", tags=["Catalog"])
async def list_venues(
    runner: IngestionRunner = Depends(get_ingestion_runner),
) -> list[dict[str, Any]]:
    """List the venues used to resolve the current catalog."""
    result = await runner()
    return [v.model_dump(mode="json") for v in result.venues]


# ---------------------------------------------------------------------------
# DIAGNOSTICS
# ---------------------------------------------------------------------------


@app.get("/sanity-check", tags=["Monitoring"])
async def sanity_check(
    runner: IngestionRunner = Depends(get_ingestion_runner),
) -> dict[str, Any]:
    """
    Run an ingestion pass and report its statistics.

    Returns
    -------
    dict
        ``stats`` (camelCase counters) and ``quarantinedByReason`` with every
        quarantine reason present.
    """
    result = await runner()
    stats = result.stats.model_dump(by_alias=True, mode="json")
    return {
        "stats": stats,
        "quarantinedByReason": stats["quarantinedByReason"],
    }
