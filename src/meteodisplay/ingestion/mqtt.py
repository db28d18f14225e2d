"""MQTT ingestion helpers.

Translates raw inbound payloads into display records and merges them into
the state store.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from meteodisplay._redact import redact_payload
from meteodisplay.exceptions import DisplayPayloadError
from meteodisplay.models.display import DisplayRecord
from meteodisplay.state.store import DisplayStateStore

_logger = logging.getLogger(__name__)


def parse_payload(payload: bytes | str) -> DisplayRecord:
    """Decode a UTF-8 JSON payload into a :class:`DisplayRecord`.

    Raises
    ------
    DisplayPayloadError
        On invalid UTF-8, invalid JSON or an unusable record shape.
    """
    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    except UnicodeDecodeError as exc:
        _logger.debug("Undecodable payload %s", redact_payload(payload))
        raise DisplayPayloadError(f"Error parsing data: {exc}") from exc
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        _logger.debug("Unparseable payload %r", redact_payload(text))
        raise DisplayPayloadError(f"Error parsing data: {exc}") from exc
    _logger.debug("Decoded payload %s", redact_payload(raw))
    return DisplayRecord.from_payload(raw)


class DisplayIngestor:
    """Entry point for messages delivered by the subscriber."""

    def __init__(
        self,
        store: DisplayStateStore,
        *,
        topic: str,
        on_update: Callable[[DisplayRecord], None] | None = None,
    ) -> None:
        self._store = store
        self._topic = topic
        self._on_update = on_update

    @property
    def topic(self) -> str:
        return self._topic

    def handle(self, topic: str, payload: bytes) -> bool:
        """Process one message. Returns whether the stored state changed."""
        if topic != self._topic:
            _logger.debug("Ignoring message on topic=%s", topic)
            return False

        try:
            record = parse_payload(payload)
        except DisplayPayloadError as exc:
            exc.topic = topic
            _logger.error("Dropping message on topic=%s: %s", topic, exc)
            return False

        _logger.debug("Received update topic=%s patch=%s", topic, record.to_patch())
        if not self._store.merge(record):
            return False
        if self._on_update is not None:
            self._on_update(record)
        return True
