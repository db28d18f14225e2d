"""Positional encoder for the 47-character display code.

Each present field of a :class:`DisplayRecord` writes decimal digits into
pre-assigned offsets of a fixed buffer. Fields write disjoint ranges so
the order they are applied in does not matter. Encoding never fails:
out-of-range numbers are clamped.
"""

from __future__ import annotations

import math

from meteodisplay.models.display import DisplayRecord

DISPLAY_LENGTH = 47
PLACEHOLDER = "-"
URGENT_INDEX = 24
DEFAULT_CODE = PLACEHOLDER * URGENT_INDEX + "1" + PLACEHOLDER * (DISPLAY_LENGTH - URGENT_INDEX - 1)


def clamp_and_round(value: float, low: int, high: int) -> int:
    """Clamp *value* into ``[low, high]`` and round half up."""
    clamped = min(high, max(low, value))
    whole = math.floor(clamped)
    if clamped - whole >= 0.5:
        whole += 1
    return int(whole)


def digit(value: int, place: int) -> str:
    """Decimal digit of *value* at *place* (0 = units)."""
    return str(int(value // 10**place) % 10)


def digit_if_present(value: int, place: int) -> str:
    """Like :func:`digit` but blanks places above the value's magnitude."""
    if value >= 10**place:
        return digit(value, place)
    return PLACEHOLDER


def _tens(value: float, high: int) -> int:
    # Values shown with a fixed trailing zero: round to tens, clamp the tens count.
    return clamp_and_round(value / 10, 0, high) * 10


def _put(buffer: list[str], start: int, value: int, places: tuple[int, ...]) -> None:
    # Every place but the last is suppressed when the value is too small.
    *suppressed, plain = places
    for offset, place in enumerate(suppressed):
        buffer[start + offset] = digit_if_present(value, place)
    buffer[start + len(suppressed)] = digit(value, plain)


def encode(record: DisplayRecord) -> str:
    """Render *record* into the fixed-position display code."""
    buffer = list(DEFAULT_CODE)

    if record.hours is not None:
        hours = clamp_and_round(record.hours, 0, 99)
        buffer[0] = digit(hours, 1)
        buffer[1] = digit(hours, 0)
    if record.minutes is not None:
        minutes = clamp_and_round(record.minutes, 0, 99)
        buffer[2] = digit(minutes, 1)
        buffer[3] = digit(minutes, 0)

    wind = record.wind
    if wind is not None:
        if wind.heading is not None:
            _put(buffer, 4, _tens(wind.heading, 99), (2, 1))
        if wind.speed is not None:
            _put(buffer, 6, clamp_and_round(wind.speed, 0, 99), (1, 0))
        if wind.max_speed is not None:
            _put(buffer, 20, clamp_and_round(wind.max_speed, 0, 99), (1, 0))
        if wind.max_perpendicular_speed is not None:
            _put(buffer, 44, clamp_and_round(wind.max_perpendicular_speed, 0, 99), (1, 0))

    pressure = record.pressure
    if pressure is not None:
        if pressure.h_pa is not None:
            _put(buffer, 8, clamp_and_round(pressure.h_pa, 0, 9999), (3, 2, 1, 0))
        if pressure.mm_hg is not None:
            _put(buffer, 29, clamp_and_round(pressure.mm_hg, 0, 999), (2, 1, 0))

    clouds = record.clouds
    if clouds is not None:
        # n and nh are not clamped; floor-mod keeps them to one character.
        if clouds.n is not None:
            buffer[12] = digit(math.floor(clouds.n), 0)
        if clouds.nh is not None:
            buffer[19] = digit(math.floor(clouds.nh), 0)
        if clouds.height is not None:
            _put(buffer, 26, _tens(clouds.height, 999), (3, 2, 1))

    visibility = record.visibility
    if visibility is not None:
        for start, value in (
            (32, visibility.l1),
            (35, visibility.l2),
            (38, visibility.l3),
            (41, visibility.s),
        ):
            if value is not None:
                _put(buffer, start, _tens(value, 999), (3, 2, 1))

    if record.humidity is not None:
        _put(buffer, 13, clamp_and_round(record.humidity, 0, 999), (2, 1, 0))

    if record.temperature is not None:
        temperature = clamp_and_round(record.temperature, -99, 99)
        # The device reads '1' as minus and '-' as plus.
        buffer[16] = PLACEHOLDER if temperature >= 0 else "1"
        _put(buffer, 17, abs(temperature), (1, 0))

    if record.has_thunder:
        buffer[22] = "1"
    if record.events is not None:
        buffer[23] = digit(clamp_and_round(record.events, 0, 9), 0)
    if record.is_urgent:
        buffer[URGENT_INDEX] = "0"
    if record.unit_id is not None:
        buffer[25] = digit(clamp_and_round(record.unit_id, 0, 9), 0)
    if record.has_icing is not None:
        buffer[46] = "1"

    return "".join(buffer)
