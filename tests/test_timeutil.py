import pytest

from panchang_api.services.timeutil import (
    FormatError,
    format_duration,
    minutes_to_time,
    normalize_clock,
    normalize_span,
    parse_span,
    time_to_minutes,
)


@pytest.mark.parametrize("clock", ["00:00", "05:24", "12:00", "19:22", "23:59"])
def test_clock_values_survive_parsing_and_formatting(clock):
    assert minutes_to_time(time_to_minutes(clock)) == clock


def test_single_digit_hour_is_accepted():
    assert time_to_minutes("5:07") == 307


@pytest.mark.parametrize("bad", ["", "24:00", "12:60", "noon", "12-30", "1230", None])
def test_invalid_clock_raises_format_error(bad):
    with pytest.raises(FormatError):
        time_to_minutes(bad)


def test_format_error_is_a_value_error():
    assert issubclass(FormatError, ValueError)


def test_minutes_to_time_wraps_modulo_one_day():
    assert minutes_to_time(-30) == "23:30"
    assert minutes_to_time(1440) == "00:00"
    assert minutes_to_time(1500) == minutes_to_time(60) == "01:00"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("05:24 AM", "05:24"),
        ("12:05 AM", "00:05"),
        ("12:40 PM", "12:40"),
        ("09:35 PM, Jun 23", "21:35"),
        ("7:09 p.m.", "19:09"),
        ("18:45:10", "18:45"),
        ("13:10 PM", None),
        ("--", None),
        (None, None),
    ],
)
def test_normalize_clock(text, expected):
    assert normalize_clock(text) == expected


def test_spans_accept_dash_and_to_separators():
    assert parse_span("05:27 PM to 07:09 PM") == ("17:27", "19:09")
    assert normalize_span("11:55 - 12:50") == "11:55 - 12:50"
    assert normalize_span("Rahu 05:27 PM") is None


def test_format_duration():
    assert format_duration(778) == "12h 58m"
    assert format_duration(-5) == "0h 0m"
