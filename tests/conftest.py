from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from panchang_api.services.cache import TTLCache
from panchang_api.services.drik_client import DrikPanchangClient
from panchang_api.services.location import ReverseGeocoder
from panchang_api.services.orchestrators.panchang_assembler import PanchangAssembler
from panchang_api.services.sun_times import SunriseSunsetClient


SAMPLE_DAY_PAGE = """
<html>
<head>
<script>
var drikp_g_tithi_name_ = "Ekadashi upto 07:18 AM Dwadashi";
var drikp_g_nakshatra_name_ = 'Ashwini';
var drikp_g_nakshatra_hhmm_ = "09:35 PM";
var drikp_g_sunrise_hhmm_ = "05:24 AM";
var drikp_g_sunset_mins_ = 1162;
var drikp_g_festival_list_ = ["Yogini Ekadashi"];
var drikp_g_dosha_intervals_ = [[324, 400, ["Rahu"]], [380, 450, ["N Visha"]]];
var drikp_g_broken_ = function() { return 1; };
</script>
<script src="/js/app.js"></script>
</head>
<body>
<div class="dpTableKey">Yoga</div><div class="dpTableValue">Sukarma upto 05:40 PM</div>
<table>
<tr><td>Karana</td><td>Balava upto 07:18 AM</td></tr>
<tr><td>Paksha</td><td>Krishna Paksha</td></tr>
<tr><td>Rahu Kalam</td><td>05:27 PM to 07:09 PM</td></tr>
<tr><td>Moonrise</td><td>--</td></tr>
</table>
<p>Weekday: Sunday</p>
<div class="festival-card">Yogini Ekadashi</div>
<div class="vrat-item">Ekadashi Vrat</div>
</body>
</html>
"""


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", payload: Any = None) -> None:
        self.status_code = status_code
        self.text = text
        self._payload = payload

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    """Replays queued responses; an exception instance in the queue is raised."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None, timeout: Any = None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if not self.responses:
            raise requests.ConnectionError("no more fake responses")
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


def unreachable_assembler(cache: Optional[TTLCache] = None) -> PanchangAssembler:
    """Assembler whose every outbound call fails immediately."""

    down = requests.ConnectionError("network unreachable")
    return PanchangAssembler(
        drik_client=DrikPanchangClient(FakeSession(down), retries=2, backoff=0.0, sleep=lambda s: None),
        sun_client=SunriseSunsetClient(FakeSession(down)),
        geocoder=ReverseGeocoder(FakeSession(down)),
        cache=cache if cache is not None else TTLCache(max_entries=32, ttl=60),
        sleep=lambda s: None,
    )


@pytest.fixture
def sample_page() -> str:
    return SAMPLE_DAY_PAGE


@pytest.fixture
def offline_assembler() -> PanchangAssembler:
    return unreachable_assembler()
