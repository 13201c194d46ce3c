"""
Ingestion layer for the event catalog.

Turns raw event and venue feed rows into a clean, de-duplicated catalog.

Key Components:
- venue_index: venue index builder and resolver
- validation: RowValidator (row -> EventDraft or quarantine)
- fingerprint / deduplication: content fingerprints and the merge ledger
- adapters: feed fetching (CSV over HTTP, in-memory rows)
- orchestrator: IngestionOrchestrator and the run_ingestion entry point
"""
