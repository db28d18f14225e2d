from __future__ import annotations

from meteodisplay.models.display import DisplayRecord
from meteodisplay.state.store import DisplayStateStore, deep_merge


def test_nested_merge_keeps_previous_fields() -> None:
    store = DisplayStateStore()

    store.merge(DisplayRecord.from_payload({"wind": {"heading": 10}}))
    store.merge(DisplayRecord.from_payload({"wind": {"speed": 5}}))

    assert store.as_dict() == {"wind": {"heading": 10, "speed": 5}}
    snapshot = store.snapshot()
    assert snapshot.wind is not None
    assert snapshot.wind.heading == 10
    assert snapshot.wind.speed == 5


def test_newer_values_overwrite() -> None:
    store = DisplayStateStore()

    store.merge({"pressure": {"h_pa": 1000, "mm_hg": 750}, "humidity": 30})
    store.merge({"pressure": {"h_pa": 1013}})

    assert store.as_dict() == {"pressure": {"h_pa": 1013, "mm_hg": 750}, "humidity": 30}


def test_empty_update_is_not_a_change() -> None:
    store = DisplayStateStore()

    assert store.merge(DisplayRecord()) is False
    assert store.merge({}) is False
    assert store.version == 0

    assert store.merge({"events": 1}) is True
    assert store.version == 1


def test_absent_fields_never_erase_state() -> None:
    store = DisplayStateStore()

    store.merge(DisplayRecord.from_payload({"temperature": -3, "hasThunder": True}))
    # Patches are pruned at the ingestion boundary; null means "no update".
    store.merge(DisplayRecord.from_payload({"temperature": None, "humidity": 80}))

    assert store.as_dict() == {"temperature": -3, "has_thunder": True, "humidity": 80}


def test_false_indicator_overwrites_true() -> None:
    store = DisplayStateStore()

    store.merge({"is_urgent": True})
    store.merge({"is_urgent": False})

    assert store.snapshot().is_urgent is False


def test_as_dict_is_a_copy() -> None:
    store = DisplayStateStore()
    store.merge({"wind": {"speed": 5}})

    view = store.as_dict()
    view["wind"]["speed"] = 99

    assert store.as_dict() == {"wind": {"speed": 5}}


def test_merged_patch_is_not_aliased() -> None:
    store = DisplayStateStore()
    patch = {"clouds": {"n": 3}}

    store.merge(patch)
    patch["clouds"]["n"] = 7

    assert store.as_dict() == {"clouds": {"n": 3}}


def test_deep_merge_replaces_mismatched_shapes() -> None:
    target = {"a": 1, "b": {"c": 2}}

    deep_merge(target, {"a": {"x": 1}, "b": 3})

    assert target == {"a": {"x": 1}, "b": 3}


def test_snapshot_of_empty_store() -> None:
    assert DisplayStateStore().snapshot() == DisplayRecord()
