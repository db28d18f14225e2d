"""Sparse display record models.

Field names on the wire are camelCase and match the inbound JSON exactly
(``wind.maxPerpendicularSpeed``, ``pressure.hPa``, ``hasThunder`` ...).
Comments give the zero-based positions each field occupies in the code.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from meteodisplay.exceptions import DisplayPayloadError
from meteodisplay.models._base import DisplayBaseModel


class Wind(DisplayBaseModel):
    """Wind readings."""

    heading: float | None = None  # [4, 5], degrees, tens resolution
    speed: float | None = None  # [6, 7]
    max_speed: float | None = None  # [20, 21]
    max_perpendicular_speed: float | None = None  # [44, 45]


class Pressure(DisplayBaseModel):
    """Pressure in two independent units."""

    h_pa: float | None = None  # [8, 9, 10, 11]
    mm_hg: float | None = None  # [29, 30, 31]


class Clouds(DisplayBaseModel):
    """Cloud coverage and base height."""

    n: float | None = None  # [12]
    nh: float | None = None  # [19]
    height: float | None = None  # [26, 27, 28], tens resolution


class Visibility(DisplayBaseModel):
    """Four independent visibility channels, tens resolution."""

    s: float | None = None  # [41, 42, 43]
    l1: float | None = None  # [32, 33, 34]
    l2: float | None = None  # [35, 36, 37]
    l3: float | None = None  # [38, 39, 40]


class DisplayRecord(DisplayBaseModel):
    """Partial display state.

    Parameters
    ----------
    hours, minutes : float or None
        Clock fields. The scheduler always overlays them from wall-clock time.
    wind, pressure, clouds, visibility : nested groups or None
    humidity : float or None
    temperature : float or None
        Signed; the sign occupies its own position.
    has_thunder, is_urgent : bool or None
        Only ``True`` changes the code.
    has_icing : bool or None
        Any present value sets the icing marker.
    events, unit_id : float or None
        Single digits.
    """

    hours: float | None = None  # [0, 1]
    minutes: float | None = None  # [2, 3]
    wind: Wind | None = None
    pressure: Pressure | None = None
    clouds: Clouds | None = None
    visibility: Visibility | None = None
    humidity: float | None = None  # [13, 14, 15]
    temperature: float | None = None  # [16, 17, 18]
    has_thunder: bool | None = None  # [22]
    events: float | None = None  # [23]
    is_urgent: bool | None = None  # [24]
    unit_id: float | None = None  # [25]
    has_icing: bool | None = None  # [46]

    @classmethod
    def from_payload(cls, raw: Any) -> DisplayRecord:
        """Validate a decoded wire object.

        Raises
        ------
        DisplayPayloadError
            When *raw* is not an object or a field has an unusable type.
        """
        if not isinstance(raw, dict):
            raise DisplayPayloadError(f"Display payload must be a JSON object, got {type(raw).__name__}")
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise DisplayPayloadError(f"Invalid display payload: {exc.error_count()} error(s): {exc}") from exc

    def with_clock(self, hours: int, minutes: int) -> DisplayRecord:
        """Return a copy with the clock fields replaced (not merged)."""
        return self.model_copy(update={"hours": hours, "minutes": minutes})
