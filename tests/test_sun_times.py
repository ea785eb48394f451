from datetime import date

import pytest
import requests

from conftest import FakeResponse, FakeSession
from panchang_api.services import sun_times
from panchang_api.services.sun_times import (
    SunriseSunsetClient,
    SunTimesUnavailable,
    local_sun_times,
    resolve_sun_times,
)
from panchang_api.services.timeutil import time_to_minutes


TARGET = date(2025, 6, 22)
OK_PAYLOAD = {
    "status": "OK",
    "results": {"sunrise": "2025-06-21T23:54:00+00:00", "sunset": "2025-06-22T13:52:00+00:00"},
}


def test_service_times_are_converted_to_local_zone():
    session = FakeSession(FakeResponse(200, payload=OK_PAYLOAD))
    client = SunriseSunsetClient(session)
    assert client.fetch(TARGET, 28.6139, 77.2090, "Asia/Kolkata") == ("05:24", "19:22")
    assert session.calls[0]["params"] == {"lat": 28.6139, "lng": 77.2090, "date": "2025-06-22", "formatted": 0}


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, payload={"status": "INVALID_REQUEST"}),
        FakeResponse(500, payload=OK_PAYLOAD),
        FakeResponse(200, payload={"status": "OK", "results": {"sunrise": "soon"}}),
        requests.ConnectionError("down"),
    ],
)
def test_service_failures_raise(response):
    with pytest.raises(SunTimesUnavailable):
        SunriseSunsetClient(FakeSession(response)).fetch(TARGET, 28.6, 77.2, "Asia/Kolkata")


def test_local_computation_is_plausible_for_delhi_midsummer():
    sunrise, sunset = local_sun_times(TARGET, 28.6139, 77.2090, "Asia/Kolkata")
    assert 5 * 60 <= time_to_minutes(sunrise) <= 5 * 60 + 45
    assert 19 * 60 <= time_to_minutes(sunset) <= 19 * 60 + 45


def test_resolution_falls_back_to_local_then_defaults(monkeypatch):
    failing = SunriseSunsetClient(FakeSession(requests.ConnectionError("down")))
    resolved = resolve_sun_times(TARGET, 28.6139, 77.2090, "Asia/Kolkata", client=failing)
    assert resolved.source == "service"

    monkeypatch.setattr(sun_times, "local_sun_times", lambda *args: None)
    resolved = resolve_sun_times(TARGET, 78.22, 15.65, "Arctic/Longyearbyen", client=failing)
    assert resolved == ("06:00", "18:00", "calculated")


def test_service_can_be_disabled(monkeypatch):
    monkeypatch.setenv("PANCHANG_SUN_SERVICE_ENABLED", "false")
    session = FakeSession(FakeResponse(200, payload=OK_PAYLOAD))
    resolve_sun_times(TARGET, 28.6139, 77.2090, "Asia/Kolkata", client=SunriseSunsetClient(session))
    assert session.calls == []
