#!/usr/bin/env python3
"""
cli.py

Command-line interface for the event catalog.

Commands:
  - event-catalog sanity-check : Run an ingestion pass and print its stats
  - event-catalog export       : Run an ingestion pass and write events to CSV

Typical usage:
  event-catalog sanity-check --events-url https://.../events.csv
  event-catalog --json-logs sanity-check --json
  event-catalog export --output events.csv --include-hidden
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional

from event_catalog.configs.settings import get_settings
from event_catalog.ingestion.exceptions import CatalogError
from event_catalog.ingestion.export import events_to_dataframe
from event_catalog.ingestion.orchestrator import IngestionResult, run_ingestion
from event_catalog.monitoring.logging import LoggingOptions, setup_logging


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="event-catalog", description="Event Catalog CLI")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    p.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    sub = p.add_subparsers(dest="cmd", required=True)

    # sanity-check
    ps = sub.add_parser("sanity-check", help="Print ingestion statistics")
    ps.add_argument("--events-url", default=None, help="Override EVENTS_CSV_URL")
    ps.add_argument("--venues-url", default=None, help="Override VENUES_CSV_URL")
    ps.add_argument("--json", action="store_true", help="Print stats as JSON")

    # export
    pe = sub.add_parser("export", help="Write catalog events to CSV")
    pe.add_argument("--output", "-o", required=True, help="Output CSV path")
    pe.add_argument("--events-url", default=None, help="Override EVENTS_CSV_URL")
    pe.add_argument("--venues-url", default=None, help="Override VENUES_CSV_URL")
    pe.add_argument(
        "--include-hidden",
        action="store_true",
        help="Include events hidden from default listings",
    )

    return p.parse_args(argv)


def format_report(result: IngestionResult) -> str:
    """Human-readable sanity-check report."""
    stats = result.stats
    lines = [
        "--- Ingestion Sanity Check ---",
        f"Total rows:        {stats.total_rows}",
        f"Loaded:            {stats.loaded_count}",
        f"Listing count:     {stats.listing_count}",
        f"Quarantined:       {stats.quarantined_count}",
        f"Duplicates merged: {stats.duplicates_merged}",
        f"Venues loaded:     {stats.venues_loaded}",
        "",
        "Quarantined by reason:",
    ]
    reasons = [(r, c) for r, c in stats.quarantined_by_reason.items() if c > 0]
    if not reasons:
        lines.append("  (none)")
    for reason, count in reasons:
        lines.append(f"  {reason.value}: {count}")
    lines.append("---")
    return "\n".join(lines)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()

    setup_logging(
        LoggingOptions(
            level=args.log_level or settings.LOG_LEVEL,
            json_logs=bool(args.json_logs or settings.JSON_LOGS),
        )
    )

    try:
        result = run_ingestion(
            settings, events_url=args.events_url, venues_url=args.venues_url
        )
    except CatalogError as e:
        print(f"Failed: {e}")
        return 1

    if args.cmd == "sanity-check":
        if args.json:
            stats = result.stats.model_dump(by_alias=True, mode="json")
            print(json.dumps({"stats": stats}, indent=2, ensure_ascii=False))
        else:
            print(format_report(result))
        return 0

    if args.cmd == "export":
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        frame = events_to_dataframe(result.events, include_hidden=bool(args.include_hidden))
        frame.to_csv(output, index=False)
        print(f"Wrote {len(frame)} events to {output}")
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
