"""Muhurta windows derived from sunrise and sunset.

Rahu Kaal, Gulika Kaal and Yamaganda use the traditional division of the
daytime into eight equal parts. Abhijit and Dur Muhurat use the division of
the daytime into fifteen muhurtas. Values are minutes since local midnight
and may fall outside ``[0, 1440)`` for windows before sunrise.
"""

from __future__ import annotations

from typing import Dict, Tuple

Window = Tuple[int, int]

# Rahu, Gulika and Yamaganda segment indices (1-based) per weekday.
RAHU_INDEX = {
    "Monday": 2,
    "Tuesday": 7,
    "Wednesday": 5,
    "Thursday": 6,
    "Friday": 4,
    "Saturday": 3,
    "Sunday": 8,
}

GULIKA_INDEX = {
    "Monday": 6,
    "Tuesday": 5,
    "Wednesday": 4,
    "Thursday": 3,
    "Friday": 2,
    "Saturday": 1,
    "Sunday": 7,
}

YAMAGANDA_INDEX = {
    "Monday": 4,
    "Tuesday": 3,
    "Wednesday": 2,
    "Thursday": 1,
    "Friday": 7,
    "Saturday": 6,
    "Sunday": 5,
}

# Daytime muhurta (1-based, of fifteen) that carries Dur Muhurat.
DUR_MUHURTA_INDEX = {
    "Monday": 9,
    "Tuesday": 4,
    "Wednesday": 8,
    "Thursday": 6,
    "Friday": 4,
    "Saturday": 1,
    "Sunday": 14,
}

BRAHMA_OFFSETS = (-96, -48)
AMRIT_OFFSETS = (-90, -30)


def _segment(start: int, duration: int, index: int, parts: int = 8) -> Window:
    """Return the ``index`` (1-based) segment of a span divided into ``parts``."""

    seg_start = start + (index - 1) * duration // parts
    seg_end = start + index * duration // parts
    return seg_start, seg_end


def solar_noon(sunrise: int, sunset: int) -> int:
    return (sunrise + sunset) // 2


def abhijit_window(sunrise: int, sunset: int) -> Window:
    """Centre a window of ``day_length / 15`` on solar noon.

    The window stays strictly inside ``(sunrise, sunset)`` for any positive
    day length of at least three minutes.
    """

    day_length = sunset - sunrise
    width = max(1, round(day_length / 15))
    noon = solar_noon(sunrise, sunset)
    start = noon - width // 2
    end = start + width
    if start <= sunrise:
        start = sunrise + 1
    if end >= sunset:
        end = sunset - 1
    return start, max(start, end)


def compute_muhurta_blocks(sunrise: int, sunset: int, weekday: str) -> Dict[str, Window]:
    day_length = sunset - sunrise
    return {
        "rahu_kaal": _segment(sunrise, day_length, RAHU_INDEX[weekday]),
        "gulika_kaal": _segment(sunrise, day_length, GULIKA_INDEX[weekday]),
        "yamaganda_kaal": _segment(sunrise, day_length, YAMAGANDA_INDEX[weekday]),
        "dur_muhurat": _segment(sunrise, day_length, DUR_MUHURTA_INDEX[weekday], parts=15),
        "abhijit_muhurat": abhijit_window(sunrise, sunset),
        "brahma_muhurat": (sunrise + BRAHMA_OFFSETS[0], sunrise + BRAHMA_OFFSETS[1]),
        "amrit_kaal": (sunrise + AMRIT_OFFSETS[0], sunrise + AMRIT_OFFSETS[1]),
    }
