"""Deterministic Panchang approximation from date, sunrise and sunset.

Cycle positions are modular functions of the calendar date rather than
true lunar longitudes, and element end times are stable pseudo-random
offsets from sunrise. The muhurta windows use the traditional division of
the actual sunrise-to-sunset span. Every input has a default, so
:func:`calculate_fields` always returns a complete field map.
"""

from __future__ import annotations

import hashlib
from datetime import date as date_cls
from typing import Any, Dict, Optional

from ..schemas.panchang import PanchangRecord
from .festivals import festivals_for_date, vrats_for_day
from .muhurta import compute_muhurta_blocks
from .record_builder import build_record
from .tables import (
    KRISHNA,
    MASA_NAMES,
    NAKSHATRA,
    SHUKLA,
    WEEKDAYS,
    YOGA,
    karana_for_half_index,
    tithi_name,
)
from .timeutil import FormatError, format_span, minutes_to_time, time_to_minutes

FieldMap = Dict[str, Any]

DEFAULT_SUNRISE = "06:00"
DEFAULT_SUNSET = "18:00"
MIN_DAY_MINUTES = 60

MOONRISE_OFFSET = 780
MOONSET_OFFSET = 420
MIN_ELEMENT_OFFSET = 120

RITU_NAMES = ["Shishira", "Vasanta", "Grishma", "Varsha", "Sharad", "Hemanta"]


def _minutes_or(value: Optional[str], default: str) -> int:
    try:
        return time_to_minutes(value) if value else time_to_minutes(default)
    except FormatError:
        return time_to_minutes(default)


def sun_minutes(sunrise: Optional[str], sunset: Optional[str]) -> tuple[int, int]:
    """Sunrise/sunset as minutes, replaced by defaults when unusable."""

    sr = _minutes_or(sunrise, DEFAULT_SUNRISE)
    ss = _minutes_or(sunset, DEFAULT_SUNSET)
    if ss - sr < MIN_DAY_MINUTES:
        return time_to_minutes(DEFAULT_SUNRISE), time_to_minutes(DEFAULT_SUNSET)
    return sr, ss


def date_offset(target: date_cls, salt: str) -> int:
    """Stable offset in ``[MIN_ELEMENT_OFFSET, 1440)`` minutes for a date."""

    digest = hashlib.sha256(f"{target.isoformat()}:{salt}".encode("utf-8")).digest()
    span = 1440 - MIN_ELEMENT_OFFSET
    return MIN_ELEMENT_OFFSET + int.from_bytes(digest[:4], "big") % span


def lunar_day_for_date(target: date_cls) -> int:
    return (target.day - 1) % 30 + 1


def _paksha_for_lunar_day(day: int) -> str:
    return SHUKLA if day <= 15 else KRISHNA


def ayana_for_date(target: date_cls) -> str:
    # sidereal Makara to Karka sankranti
    return "Uttarayana" if (1, 14) <= (target.month, target.day) < (7, 16) else "Dakshinayana"


def ritu_for_date(target: date_cls) -> str:
    return RITU_NAMES[(target.month - 1) // 2]


def masa_for_date(target: date_cls) -> str:
    return MASA_NAMES[(target.month + 9) % 12]


def calculate_fields(
    target: date_cls,
    sunrise: Optional[str] = None,
    sunset: Optional[str] = None,
    weekday: Optional[str] = None,
) -> FieldMap:
    weekday = weekday if weekday in WEEKDAYS else WEEKDAYS[target.weekday()]
    sr, ss = sun_minutes(sunrise, sunset)
    day_of_year = target.timetuple().tm_yday

    lunar_day = lunar_day_for_date(target)
    paksha = _paksha_for_lunar_day(lunar_day)
    next_day = lunar_day % 30 + 1
    half = 2 * (lunar_day - 1)

    nakshatra_index = day_of_year % len(NAKSHATRA)
    yoga_index = (day_of_year + target.day) % len(YOGA)
    tithi_offset = date_offset(target, "tithi")

    windows = compute_muhurta_blocks(sr, ss, weekday)
    nakshatra = NAKSHATRA.name_for(nakshatra_index)

    fields: FieldMap = {
        "weekday": weekday,
        "sunrise": minutes_to_time(sr),
        "sunset": minutes_to_time(ss),
        "moonrise": minutes_to_time(sr + MOONRISE_OFFSET),
        "moonset": minutes_to_time(sr + MOONSET_OFFSET),
        "lunar_day": lunar_day,
        "paksha": paksha,
        "tithi": tithi_name(lunar_day - 1, paksha),
        "tithi_end": minutes_to_time(sr + tithi_offset),
        "tithi_next": tithi_name(next_day - 1, _paksha_for_lunar_day(next_day)),
        "nakshatra": nakshatra,
        "nakshatra_end": minutes_to_time(sr + date_offset(target, "nakshatra")),
        "nakshatra_next": NAKSHATRA.name_for(nakshatra_index + 1),
        "yoga": YOGA.name_for(yoga_index),
        "yoga_end": minutes_to_time(sr + date_offset(target, "yoga")),
        "yoga_next": YOGA.name_for(yoga_index + 1),
        "karana": karana_for_half_index(half),
        "karana_end": minutes_to_time(sr + tithi_offset // 2),
        "karana_next": karana_for_half_index(half + 1),
        "rashi": NAKSHATRA.metadata_for(nakshatra)["rashi"],
        "masa": masa_for_date(target),
        "ayana": ayana_for_date(target),
        "ritu": ritu_for_date(target),
        "festivals": festivals_for_date(target),
        "vrats": vrats_for_day(weekday, tithi_name(lunar_day - 1, paksha), paksha),
    }
    for key, (start, end) in windows.items():
        fields[key] = format_span(start, end)
    return fields


def calculate_record(
    target: date_cls,
    location: Dict[str, Any],
    sunrise: Optional[str] = None,
    sunset: Optional[str] = None,
    weekday: Optional[str] = None,
) -> PanchangRecord:
    """Complete :class:`PanchangRecord` built only from calculated fields."""

    fields = calculate_fields(target, sunrise, sunset, weekday)
    sources = {key: "calculated" for key in fields}
    return build_record(target, location, fields, sources, status="calculated")
