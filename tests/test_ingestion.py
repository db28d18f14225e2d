from __future__ import annotations

import json
import logging

import pytest

from meteodisplay.encoder import encode
from meteodisplay.exceptions import DisplayPayloadError
from meteodisplay.ingestion.mqtt import DisplayIngestor, parse_payload
from meteodisplay.models.display import DisplayRecord
from meteodisplay.state.store import DisplayStateStore

TOPIC = "bus/services/meteo-display/data"


def _payload(data: object) -> bytes:
    return json.dumps(data).encode("utf-8")


def test_parse_payload_accepts_bytes_and_str() -> None:
    assert parse_payload(b'{"humidity": 40}') == DisplayRecord(humidity=40)
    assert parse_payload('{"humidity": 40}') == DisplayRecord(humidity=40)


@pytest.mark.parametrize("payload", [b"not json", b"\xff\xfe", b"[1, 2]", b'{"wind": {"speed": "x"}}'])
def test_parse_payload_rejects_malformed(payload: bytes) -> None:
    with pytest.raises(DisplayPayloadError):
        parse_payload(payload)


def test_valid_message_is_merged() -> None:
    store = DisplayStateStore()
    ingestor = DisplayIngestor(store, topic=TOPIC)

    assert ingestor.handle(TOPIC, _payload({"wind": {"heading": 10}})) is True
    assert ingestor.handle(TOPIC, _payload({"wind": {"speed": 5}})) is True

    assert store.as_dict() == {"wind": {"heading": 10, "speed": 5}}


def test_other_topics_are_ignored() -> None:
    store = DisplayStateStore()
    ingestor = DisplayIngestor(store, topic=TOPIC)

    assert ingestor.handle("bus/devices/meteo-display/data", _payload({"humidity": 1})) is False
    assert store.as_dict() == {}


def test_malformed_message_is_logged_and_dropped(caplog: pytest.LogCaptureFixture) -> None:
    store = DisplayStateStore()
    store.merge({"humidity": 10})
    ingestor = DisplayIngestor(store, topic=TOPIC)

    with caplog.at_level(logging.ERROR, logger="meteodisplay.ingestion.mqtt"):
        assert ingestor.handle(TOPIC, b"{broken") is False

    assert store.as_dict() == {"humidity": 10}
    assert any("Dropping message" in record.getMessage() for record in caplog.records)


def test_on_update_called_only_for_real_changes() -> None:
    seen: list[DisplayRecord] = []
    store = DisplayStateStore()
    ingestor = DisplayIngestor(store, topic=TOPIC, on_update=seen.append)

    ingestor.handle(TOPIC, _payload({}))
    ingestor.handle(TOPIC, b"nope")
    ingestor.handle(TOPIC, _payload({"events": 3}))

    assert seen == [DisplayRecord(events=3)]


@pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-Infinity"])
def test_non_finite_strings_rejected(value: str) -> None:
    with pytest.raises(DisplayPayloadError):
        parse_payload(_payload({"clouds": {"n": value}}))


def test_non_finite_string_does_not_erase_known_value() -> None:
    store = DisplayStateStore()
    ingestor = DisplayIngestor(store, topic=TOPIC)

    assert ingestor.handle(TOPIC, _payload({"clouds": {"n": 3}})) is True
    assert ingestor.handle(TOPIC, _payload({"clouds": {"n": "nan"}})) is False

    assert store.as_dict() == {"clouds": {"n": 3}}
    assert encode(store.snapshot())[12] == "3"


def test_raw_payload_logged_redacted(caplog: pytest.LogCaptureFixture) -> None:
    store = DisplayStateStore()
    ingestor = DisplayIngestor(store, topic=TOPIC)

    with caplog.at_level(logging.DEBUG, logger="meteodisplay.ingestion.mqtt"):
        ingestor.handle(TOPIC, _payload({"humidity": 40, "password": "hunter2", "note": "y" * 500}))

    text = caplog.text
    assert "hunter2" not in text
    assert "<redacted>" in text
    assert "<truncated>" in text
    assert store.as_dict() == {"humidity": 40}
