"""Reverse geocoding endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from ..schemas.panchang import ReverseGeocodeVM
from ..services.location import CITY_DIRECTORY, GeocodingError, ReverseGeocoder, nearest_city
from ..services.orchestrators.panchang_assembler import PanchangAssembler, get_assembler
from ..services.util.deadline import Deadline
from ..services.util.place_defaults import DEF_TZ, default_place, infer_tz


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/location", tags=["location"])


@router.get("", response_model=ReverseGeocodeVM, summary="City, country and timezone for coordinates")
def reverse_geocode(
    lat: float = Query(..., ge=-90.0, le=90.0, description="Latitude"),
    lon: float = Query(..., ge=-180.0, le=180.0, description="Longitude"),
    assembler: PanchangAssembler = Depends(get_assembler),
):
    geocoder = assembler.geocoder or ReverseGeocoder()
    try:
        found = geocoder.reverse(lat, lon, deadline=Deadline.from_env())
    except GeocodingError as exc:
        logger.warning("panchang.place.geocode_failed", extra={"lat": lat, "lon": lon, "error": str(exc)})
        nearest = nearest_city(lat, lon)
        if nearest:
            found = {"city": nearest, "country": CITY_DIRECTORY[nearest][3], "timezone": CITY_DIRECTORY[nearest][2]}
        else:
            fallback = default_place()
            found = {"city": fallback["city"], "country": fallback["country"], "timezone": infer_tz(lat, lon) or DEF_TZ}
    return ReverseGeocodeVM(lat=lat, lon=lon, **found)
