"""Resolve a request's city and/or coordinates into a Panchang place.

Resolution order: explicit coordinates, the static city directory, then the
configured default city. Missing city names for coordinates come from the
BigDataCloud reverse geocoder, else the nearest directory city.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Any, Dict, Optional, Tuple

import requests

from .util.deadline import Deadline, cap_timeout
from .util.place_defaults import DEF_TZ, clamp_lat_lon, default_place, infer_tz, validate_tz


logger = logging.getLogger(__name__)

REVERSE_GEOCODE_URL = "https://api.bigdatacloud.net/data/reverse-geocode-client"
NEAREST_CITY_MAX_KM = 150.0

# name -> (lat, lon, tz, country)
CITY_DIRECTORY: Dict[str, Tuple[float, float, str, str]] = {
    "New Delhi": (28.6139, 77.2090, "Asia/Kolkata", "India"),
    "Mumbai": (19.0760, 72.8777, "Asia/Kolkata", "India"),
    "Kolkata": (22.5726, 88.3639, "Asia/Kolkata", "India"),
    "Chennai": (13.0827, 80.2707, "Asia/Kolkata", "India"),
    "Bengaluru": (12.9716, 77.5946, "Asia/Kolkata", "India"),
    "Hyderabad": (17.3850, 78.4867, "Asia/Kolkata", "India"),
    "Ahmedabad": (23.0225, 72.5714, "Asia/Kolkata", "India"),
    "Pune": (18.5204, 73.8567, "Asia/Kolkata", "India"),
    "Jaipur": (26.9124, 75.7873, "Asia/Kolkata", "India"),
    "Lucknow": (26.8467, 80.9462, "Asia/Kolkata", "India"),
    "Kanpur": (26.4499, 80.3319, "Asia/Kolkata", "India"),
    "Nagpur": (21.1458, 79.0882, "Asia/Kolkata", "India"),
    "Indore": (22.7196, 75.8577, "Asia/Kolkata", "India"),
    "Bhopal": (23.2599, 77.4126, "Asia/Kolkata", "India"),
    "Patna": (25.5941, 85.1376, "Asia/Kolkata", "India"),
    "Varanasi": (25.3176, 82.9739, "Asia/Kolkata", "India"),
    "Ujjain": (23.1765, 75.7885, "Asia/Kolkata", "India"),
    "Prayagraj": (25.4358, 81.8463, "Asia/Kolkata", "India"),
    "Ranchi": (23.3441, 85.3096, "Asia/Kolkata", "India"),
    "Amritsar": (31.6340, 74.8723, "Asia/Kolkata", "India"),
    "Surat": (21.1702, 72.8311, "Asia/Kolkata", "India"),
    "Haridwar": (29.9457, 78.1642, "Asia/Kolkata", "India"),
    "Kathmandu": (27.7172, 85.3240, "Asia/Kathmandu", "Nepal"),
    "Singapore": (1.3521, 103.8198, "Asia/Singapore", "Singapore"),
    "London": (51.5074, -0.1278, "Europe/London", "United Kingdom"),
    "New York": (40.7128, -74.0060, "America/New_York", "United States"),
}

CITY_ALIASES = {
    "delhi": "New Delhi",
    "bangalore": "Bengaluru",
    "bombay": "Mumbai",
    "calcutta": "Kolkata",
    "madras": "Chennai",
    "allahabad": "Prayagraj",
    "banaras": "Varanasi",
    "benares": "Varanasi",
}


class GeocodingError(RuntimeError):
    """Reverse geocoding failed or returned nothing usable."""


def _geocode_enabled() -> bool:
    return os.getenv("PANCHANG_GEOCODE_ENABLED", "true").lower() == "true"


def _geocode_timeout() -> float:
    return float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "10"))


def lookup_city(name: Optional[str]) -> Optional[Dict[str, Any]]:
    """Case-insensitive directory lookup; ``None`` for unknown cities."""

    if not name:
        return None
    key = name.split(",")[0].strip().lower()
    canonical = CITY_ALIASES.get(key)
    if canonical is None:
        canonical = next((c for c in CITY_DIRECTORY if c.lower() == key), None)
    if canonical is None:
        return None
    lat, lon, tz, country = CITY_DIRECTORY[canonical]
    return {"name": f"{canonical}, {country}", "city": canonical, "country": country, "lat": lat, "lon": lon, "tz": tz}


def _distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dp, dl = p2 - p1, math.radians(lon2 - lon1)
    a = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 6371.0 * 2 * math.asin(math.sqrt(a))


def nearest_city(lat: float, lon: float, max_km: float = NEAREST_CITY_MAX_KM) -> Optional[str]:
    best, best_km = None, max_km
    for name, (c_lat, c_lon, _, _) in CITY_DIRECTORY.items():
        km = _distance_km(lat, lon, c_lat, c_lon)
        if km <= best_km:
            best, best_km = name, km
    return best


class ReverseGeocoder:
    """``(lat, lon) -> {city, country, timezone}`` via BigDataCloud."""

    def __init__(self, session: Optional[requests.Session] = None, url: str = REVERSE_GEOCODE_URL, timeout: Optional[float] = None):
        self.session = session or requests.Session()
        self.url = url
        self.timeout = _geocode_timeout() if timeout is None else timeout

    def reverse(self, lat: float, lon: float, deadline: Optional[Deadline] = None) -> Dict[str, str]:
        if deadline is not None and deadline.expired:
            raise GeocodingError("Request deadline expired before reverse geocoding")
        params = {"latitude": lat, "longitude": lon, "localityLanguage": "en"}
        try:
            resp = self.session.get(self.url, params=params, timeout=cap_timeout(self.timeout, deadline))
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise GeocodingError(f"Reverse geocoding failed for {lat},{lon}: {exc}") from exc

        city = payload.get("city") or payload.get("locality") or payload.get("principalSubdivision")
        if not city:
            raise GeocodingError(f"No locality found for {lat},{lon}")
        return {
            "city": city,
            "country": payload.get("countryName") or "Unknown",
            "timezone": infer_tz(lat, lon) or DEF_TZ,
        }


def resolve_place(
    city: Optional[str] = None,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    tz: Optional[str] = None,
    geocoder: Optional[ReverseGeocoder] = None,
    deadline: Optional[Deadline] = None,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return the effective place and flags describing any defaults used.

    ``place["city"]`` is the name sent to the Panchang site; it is ``None``
    when coordinates could not be tied to any city.
    """

    flags: Dict[str, Any] = {"place_defaults_used": False, "tz_inferred": False, "default_reason": None}
    if tz:
        validate_tz(tz)

    if lat is not None and lon is not None:
        lat, lon = clamp_lat_lon(float(lat), float(lon))
        place: Dict[str, Any] = {"city": None, "country": "Unknown", "lat": lat, "lon": lon, "tz": tz}
        if not tz:
            place["tz"] = infer_tz(lat, lon) or DEF_TZ
            flags["tz_inferred"] = True
        known = lookup_city(city)
        if city:
            place["city"] = known["city"] if known else city.strip()
            place["country"] = known["country"] if known else "Unknown"
        elif geocoder is not None and _geocode_enabled():
            try:
                found = geocoder.reverse(lat, lon, deadline=deadline)
                place["city"], place["country"] = found["city"], found["country"]
            except GeocodingError as exc:
                logger.warning("panchang.place.geocode_failed", extra={"lat": lat, "lon": lon, "error": str(exc)})
        if not place["city"]:
            nearest = nearest_city(lat, lon)
            if nearest:
                place["city"], place["country"] = nearest, CITY_DIRECTORY[nearest][3]
        label = place["city"] or f"{lat:.4f}, {lon:.4f}"
        place["name"] = f"{label}, {place['country']}" if place["city"] and place["country"] != "Unknown" else label
        return place, flags

    known = lookup_city(city)
    if known:
        if tz:
            known["tz"] = tz
        return known, flags

    place = default_place()
    flags["place_defaults_used"] = True
    if city:
        # keep the requested name for the Panchang site, coordinates fall back
        flags["default_reason"] = "unknown_city"
        place.update({"city": city.strip(), "name": city.strip(), "country": "Unknown"})
    else:
        flags["default_reason"] = "missing_place"
    if tz:
        place["tz"] = tz
    return place, flags
