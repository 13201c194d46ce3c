"""
Event catalog: ingestion of event and venue feeds into a clean,
de-duplicated catalog.
"""

__version__ = "0.1.0"
