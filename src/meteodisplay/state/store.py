"""In-memory display state store.

This is the only component allowed to mutate the cumulative record.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from meteodisplay.models.display import DisplayRecord


def deep_merge(target: dict[str, Any], patch: Mapping[str, Any]) -> None:
    """Merge *patch* into *target* in place.

    Nested mappings present on both sides are merged recursively; any other
    value in the patch overwrites. Keys missing from the patch are kept.
    """
    for key, value in patch.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            deep_merge(current, value)
        elif isinstance(value, Mapping):
            target[key] = copy.deepcopy(dict(value))
        else:
            target[key] = copy.deepcopy(value)


class DisplayStateStore:
    """Cumulative merged view of every partial update received so far.

    The store performs no validation; patches are expected to come from
    :meth:`DisplayRecord.to_patch` at the ingestion boundary.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._version = 0

    @property
    def version(self) -> int:
        """Number of non-empty merges applied."""
        return self._version

    def merge(self, update: DisplayRecord | Mapping[str, Any]) -> bool:
        """Merge a partial record. Returns ``False`` when it carried nothing."""
        patch = update.to_patch() if isinstance(update, DisplayRecord) else update
        if not patch:
            return False
        deep_merge(self._data, patch)
        self._version += 1
        return True

    def as_dict(self) -> dict[str, Any]:
        """Deep copy of the merged state (snake_case keys)."""
        return copy.deepcopy(self._data)

    def snapshot(self) -> DisplayRecord:
        """The merged state as a record."""
        return DisplayRecord.model_validate(self.as_dict())
