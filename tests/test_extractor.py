from datetime import date

import requests

from conftest import FakeResponse, FakeSession
from panchang_api.services.drik_client import DrikPanchangClient
from panchang_api.services.extractor import (
    classify,
    clean_text,
    extract,
    extract_for_day,
    extract_script_variables,
    is_valid_value,
    split_name_and_end,
)


def test_script_variables_are_parsed_as_literals(sample_page):
    variables = extract_script_variables(sample_page)
    assert variables["nakshatra_name"] == "Ashwini"
    assert variables["sunset_mins"] == 1162
    assert variables["festival_list"] == ["Yogini Ekadashi"]
    assert "broken" not in variables


def test_extract_combines_script_and_html(sample_page):
    fields = extract(sample_page)
    assert fields["tithi"] == "Ekadashi"
    assert fields["tithi_end"] == "07:18"
    assert fields["tithi_next"] == "Dwadashi"
    assert fields["nakshatra"] == "Ashwini"
    assert fields["nakshatra_end"] == "21:35"
    assert fields["yoga"] == "Sukarma"
    assert fields["yoga_end"] == "17:40"
    assert fields["karana"] == "Balava"
    assert fields["sunrise"] == "05:24"
    assert fields["sunset"] == "19:22"
    assert fields["rahu_kaal"] == "17:27 - 19:09"
    assert fields["weekday"] == "Sunday"
    assert fields["festivals"] == ["Yogini Ekadashi"]
    assert fields["vrats"] == ["Ekadashi Vrat"]
    assert fields["dosha_intervals"] == [(324, 400, ["Rahu"]), (380, 450, ["N Visha"])]
    assert "moonrise" not in fields
    assert classify(fields) == "ok"


def test_script_values_win_over_html():
    page = (
        "<table><tr><td>Nakshatra</td><td>Bharani</td></tr></table>"
        '<script>var drikp_g_nakshatra_name_ = "Krittika";</script>'
    )
    assert extract(page)["nakshatra"] == "Krittika"


def test_placeholders_and_markup_are_rejected():
    assert not is_valid_value("--")
    assert not is_valid_value("Unknown")
    assert not is_valid_value("<b>Tithi</b>")
    assert not is_valid_value("function () { x }")
    assert not is_valid_value("x" * 81)
    assert is_valid_value("Shukla Paksha")


def test_clean_text_strips_tags_and_entities():
    assert clean_text("<b>Rahu&nbsp;Kalam</b>\n  ") == "Rahu Kalam"


def test_split_name_and_end_handles_next_day_suffix():
    parts = split_name_and_end("Revati upto 04:12 AM, Jun 23 Ashwini")
    assert parts.name == "Revati"
    assert parts.end == "04:12"
    assert parts.next_name == "Ashwini"
    assert parts.end_date == "Jun 23"
    assert split_name_and_end("Ashwini upto 09:35 PM Bharani").end_date is None
    assert split_name_and_end("Vishti").end is None


def test_stated_end_date_is_kept_with_the_end_time():
    fields = extract("<table><tr><td>Nakshatra</td><td>Revati upto 04:12 AM, Jun 23</td></tr></table>")
    assert fields["nakshatra_end"] == "04:12"
    assert fields["nakshatra_end_date"] == "Jun 23"


def test_quoted_script_values_may_contain_semicolons():
    page = (
        "<script>"
        'var drikp_g_yoga_name_ = "Siddhi upto 01:02 PM; Vyatipata";'
        "var drikp_g_karana_name_ = 'Vanija' ;"
        "</script>"
    )
    variables = extract_script_variables(page)
    assert variables["yoga_name"] == "Siddhi upto 01:02 PM; Vyatipata"
    assert variables["karana_name"] == "Vanija"


def test_page_without_core_fields_is_partial():
    fields = extract("<table><tr><td>Tithi</td><td>Navami</td></tr></table>")
    assert fields == {"tithi": "Navami"}
    assert classify(fields) == "partial"
    assert classify({}) == "failed"


def test_extract_for_day_reports_transport_failure():
    session = FakeSession(requests.ConnectionError("boom"))
    client = DrikPanchangClient(session, retries=2, backoff=0.0, sleep=lambda s: None)
    result = extract_for_day(client, date(2025, 6, 22), "New Delhi")
    assert result.status == "failed"
    assert result.fields == {}
    assert "boom" in result.error
    assert len(session.calls) == 2


def test_extract_for_day_reports_timeout():
    session = FakeSession(requests.Timeout("slow"))
    client = DrikPanchangClient(session, retries=1, backoff=0.0, sleep=lambda s: None)
    result = extract_for_day(client, date(2025, 6, 22), "New Delhi")
    assert result.status == "failed"
    assert result.error.startswith("timeout:")


def test_extract_for_day_success(sample_page):
    session = FakeSession(FakeResponse(200, text=sample_page))
    client = DrikPanchangClient(session, retries=1)
    result = extract_for_day(client, date(2025, 6, 22), "New Delhi")
    assert result.status == "ok"
    assert result.error is None
    assert session.calls[0]["params"] == {"date": "22/06/2025", "city": "New Delhi", "lang": "en"}
