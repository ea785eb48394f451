"""Helpers for normalising Panchang place inputs."""

import os
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

_TF = TimezoneFinder()


DEF_LAT = float(os.getenv("DEFAULT_PLACE_LAT", "28.6139"))
DEF_LON = float(os.getenv("DEFAULT_PLACE_LON", "77.2090"))
DEF_TZ = os.getenv("DEFAULT_PLACE_TZ", "Asia/Kolkata")
DEF_CITY = os.getenv("DEFAULT_PLACE_CITY", "New Delhi")
DEF_COUNTRY = os.getenv("DEFAULT_PLACE_COUNTRY", "India")


def clamp_lat_lon(lat: float, lon: float) -> Tuple[float, float]:
    """Clamp latitude/longitude to safe ranges."""

    lat = max(min(lat, 89.9), -89.9)
    if not -180.0 <= lon < 180.0:
        lon = ((lon + 180.0) % 360.0) - 180.0  # wrap to [-180, 180)
    return lat, lon


def infer_tz(lat: float, lon: float) -> Optional[str]:
    """Infer timezone name for a coordinate pair."""

    return _TF.timezone_at(lng=lon, lat=lat)


def validate_tz(tz_name: str) -> str:
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Invalid timezone: {tz_name}") from exc
    return tz_name


def default_place() -> dict:
    return {
        "name": f"{DEF_CITY}, {DEF_COUNTRY}",
        "city": DEF_CITY,
        "country": DEF_COUNTRY,
        "lat": DEF_LAT,
        "lon": DEF_LON,
        "tz": DEF_TZ,
    }
