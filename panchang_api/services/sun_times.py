"""Sunrise and sunset for a place and date.

The sunrise-sunset.org API is asked first; when it is disabled or fails the
times are computed locally with Swiss Ephemeris, and as a last resort the
fixed ``06:00``/``18:00`` defaults are used.
"""

from __future__ import annotations

import logging
import os
from datetime import date as date_cls, datetime, timedelta, timezone
from typing import NamedTuple, Optional, Tuple
from zoneinfo import ZoneInfo

import requests
import swisseph as swe

from .fallback import DEFAULT_SUNRISE, DEFAULT_SUNSET
from .util.deadline import Deadline, cap_timeout


logger = logging.getLogger(__name__)

SUNRISE_SUNSET_URL = "https://api.sunrise-sunset.org/json"


class SunTimesUnavailable(RuntimeError):
    """The sunrise/sunset service returned nothing usable."""


class SunTimes(NamedTuple):
    sunrise: str
    sunset: str
    source: str


def _service_enabled() -> bool:
    return os.getenv("PANCHANG_SUN_SERVICE_ENABLED", "true").lower() == "true"


def _service_timeout() -> float:
    return float(os.getenv("SUN_SERVICE_TIMEOUT_SECONDS", "10"))


def _backend_flag() -> int:
    backend = (os.getenv("EPHEMERIS_BACKEND") or "moseph").strip().lower()
    return swe.FLG_SWIEPH if backend == "swieph" else swe.FLG_MOSEPH


def _local_clock(instant: datetime, zone: ZoneInfo) -> str:
    return instant.astimezone(zone).strftime("%H:%M")


class SunriseSunsetClient:
    """``(lat, lon, date) -> (sunrise, sunset)`` from sunrise-sunset.org."""

    def __init__(self, session: Optional[requests.Session] = None, url: str = SUNRISE_SUNSET_URL, timeout: Optional[float] = None):
        self.session = session or requests.Session()
        self.url = url
        self.timeout = _service_timeout() if timeout is None else timeout

    def fetch(self, target: date_cls, lat: float, lon: float, tz: str, deadline: Optional[Deadline] = None) -> Tuple[str, str]:
        if deadline is not None and deadline.expired:
            raise SunTimesUnavailable("Request deadline expired before the sunrise lookup")
        params = {"lat": lat, "lng": lon, "date": target.isoformat(), "formatted": 0}
        try:
            resp = self.session.get(self.url, params=params, timeout=cap_timeout(self.timeout, deadline))
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise SunTimesUnavailable(f"Sunrise lookup failed: {exc}") from exc

        if payload.get("status") != "OK":
            raise SunTimesUnavailable(f"Sunrise service status {payload.get('status')!r}")
        results = payload.get("results") or {}
        zone = ZoneInfo(tz)
        try:
            sunrise = datetime.fromisoformat(results["sunrise"])
            sunset = datetime.fromisoformat(results["sunset"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SunTimesUnavailable(f"Malformed sunrise payload: {exc}") from exc
        return _local_clock(sunrise, zone), _local_clock(sunset, zone)


def _jd_to_datetime(jd: float) -> datetime:
    year, month, day, hours = swe.revjul(jd, swe.GREG_CAL)
    return datetime(year, month, day, tzinfo=timezone.utc) + timedelta(hours=hours)


def _rise_or_set(jd_start: float, rsmi: int, lat: float, lon: float) -> Optional[datetime]:
    geopos = (lon, lat, 0.0)
    try:
        result, times = swe.rise_trans(jd_start, swe.SUN, rsmi | swe.BIT_DISC_CENTER, geopos, 0.0, 0.0, _backend_flag())
    except swe.Error:
        return None
    if result < 0 or not times:
        return None
    return _jd_to_datetime(times[0])


def local_sun_times(target: date_cls, lat: float, lon: float, tz: str) -> Optional[Tuple[str, str]]:
    """Compute sunrise/sunset with Swiss Ephemeris; ``None`` when the sun does not rise or set."""

    zone = ZoneInfo(tz)
    start = datetime(target.year, target.month, target.day, tzinfo=zone).astimezone(timezone.utc)
    jd_start = swe.julday(start.year, start.month, start.day, start.hour + start.minute / 60.0, swe.GREG_CAL)
    sunrise = _rise_or_set(jd_start, swe.CALC_RISE, lat, lon)
    sunset = _rise_or_set(jd_start, swe.CALC_SET, lat, lon)
    if sunrise is None or sunset is None:
        return None
    return _local_clock(sunrise, zone), _local_clock(sunset, zone)


def resolve_sun_times(
    target: date_cls,
    lat: float,
    lon: float,
    tz: str,
    client: Optional[SunriseSunsetClient] = None,
    deadline: Optional[Deadline] = None,
) -> SunTimes:
    if client is not None and _service_enabled():
        try:
            sunrise, sunset = client.fetch(target, lat, lon, tz, deadline=deadline)
            return SunTimes(sunrise, sunset, "service")
        except SunTimesUnavailable as exc:
            logger.warning("panchang.sun.service_failed", extra={"date": target.isoformat(), "error": str(exc)})

    computed = local_sun_times(target, lat, lon, tz)
    if computed is not None:
        return SunTimes(computed[0], computed[1], "service")

    logger.info("panchang.sun.defaults", extra={"date": target.isoformat(), "lat": lat, "lon": lon})
    return SunTimes(DEFAULT_SUNRISE, DEFAULT_SUNSET, "calculated")
