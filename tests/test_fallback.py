from datetime import date

import pytest

from panchang_api.services.fallback import (
    DEFAULT_SUNRISE,
    DEFAULT_SUNSET,
    ayana_for_date,
    calculate_fields,
    calculate_record,
    masa_for_date,
    sun_minutes,
)
from panchang_api.services.muhurta import abhijit_window, compute_muhurta_blocks, solar_noon
from panchang_api.services.tables import WEEKDAYS
from panchang_api.services.timeutil import time_to_minutes


DELHI = {"name": "New Delhi, India", "city": "New Delhi", "country": "India", "lat": 28.6139, "lon": 77.2090, "tz": "Asia/Kolkata"}


def test_calculation_is_deterministic():
    first = calculate_fields(date(2025, 6, 22), "05:24", "19:22")
    second = calculate_fields(date(2025, 6, 22), "05:24", "19:22")
    assert first == second


def test_calculated_fields_are_complete():
    fields = calculate_fields(date(2025, 6, 22), "05:24", "19:22")
    for key in ("tithi", "nakshatra", "yoga", "karana", "tithi_end", "nakshatra_next", "rahu_kaal", "masa", "ritu"):
        assert fields[key]
    assert fields["weekday"] == "Sunday"
    assert fields["tithi"] == "Saptami"
    assert fields["paksha"] == "Krishna"


def test_unusable_sun_times_fall_back_to_defaults():
    defaults = (time_to_minutes(DEFAULT_SUNRISE), time_to_minutes(DEFAULT_SUNSET))
    assert sun_minutes(None, None) == defaults
    assert sun_minutes("bogus", "19:00") == (defaults[0], 1140)
    assert sun_minutes("12:00", "12:30") == defaults


@pytest.mark.parametrize("sunrise, sunset", [(324, 1162), (360, 1080), (480, 900), (300, 1320), (600, 663)])
def test_abhijit_lies_strictly_inside_daytime(sunrise, sunset):
    start, end = abhijit_window(sunrise, sunset)
    assert sunrise < start <= end < sunset
    assert abs((start + end) // 2 - solar_noon(sunrise, sunset)) <= 1


def test_rahu_kaal_uses_weekday_segment():
    # 06:00-18:00, each eighth is 90 minutes
    assert compute_muhurta_blocks(360, 1080, "Monday")["rahu_kaal"] == (450, 540)
    assert compute_muhurta_blocks(360, 1080, "Sunday")["rahu_kaal"] == (990, 1080)
    assert compute_muhurta_blocks(360, 1080, "Saturday")["gulika_kaal"] == (360, 450)


def test_every_weekday_has_windows():
    for weekday in WEEKDAYS:
        blocks = compute_muhurta_blocks(324, 1162, weekday)
        assert set(blocks) == {
            "rahu_kaal",
            "gulika_kaal",
            "yamaganda_kaal",
            "dur_muhurat",
            "abhijit_muhurat",
            "brahma_muhurat",
            "amrit_kaal",
        }


def test_calendar_helpers():
    assert ayana_for_date(date(2025, 6, 22)) == "Uttarayana"
    assert ayana_for_date(date(2025, 10, 1)) == "Dakshinayana"
    assert masa_for_date(date(2025, 3, 20)) == "Chaitra"
    assert masa_for_date(date(2025, 4, 10)) == "Vaishakha"


def test_calculated_record_is_marked_calculated():
    record = calculate_record(date(2025, 6, 22), DELHI, "05:24", "19:22")
    assert record.provenance.status == "calculated"
    assert set(record.provenance.sources.values()) == {"calculated"}
    assert record.weekday == "Sunday"
    assert record.location.utc_offset == "+05:30"
    assert record.auspicious_times.abhijit_muhurat.count(":") == 2
    intervals = record.dosha_intervals
    assert intervals[0].start_minutes == 0 and intervals[-1].end_minutes == 1440
    assert all(a.end_minutes == b.start_minutes for a, b in zip(intervals, intervals[1:]))
