"""Ingestion layer.

Adapters that receive raw broker messages and turn them into display
records for the state store.
"""

from meteodisplay.ingestion.mqtt import DisplayIngestor, parse_payload

__all__ = ["DisplayIngestor", "parse_payload"]
