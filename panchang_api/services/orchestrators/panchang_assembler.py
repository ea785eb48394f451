"""Assemble a Panchang record from scraped and calculated fields.

Per request: resolve sunrise/sunset, try the Panchang site, run the
fallback calculator with the best sunrise/sunset, then merge field by
field (a non-empty scraped value wins). Any failure along the way degrades
to the fully calculated record, so :meth:`PanchangAssembler.assemble` never
raises.
"""

from __future__ import annotations

import logging
import os
import time
from datetime import date as date_cls, timedelta
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple

from ...schemas.panchang import PanchangRecord
from ..cache import TTLCache
from ..drik_client import DrikPanchangClient
from ..extractor import ExtractionResult, FieldMap, extract_for_day
from ..fallback import calculate_fields, calculate_record
from ..location import ReverseGeocoder, resolve_place
from ..record_builder import build_record
from ..sun_times import SunriseSunsetClient, resolve_sun_times
from ..tables import WEEKDAYS
from ..util.deadline import Deadline


logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 7

STATUS_BY_EXTRACTION = {"ok": "scraped", "partial": "partial", "failed": "calculated"}


def _scrape_enabled() -> bool:
    return os.getenv("PANCHANG_SCRAPE_ENABLED", "true").lower() == "true"


def _failed_ttl_seconds() -> float:
    return float(os.getenv("PANCHANG_FAILED_TTL_SECONDS", "300"))


def _range_delay_seconds() -> float:
    return float(os.getenv("PANCHANG_RANGE_DELAY_SECONDS", "1.0"))


def _is_present(value: Any) -> bool:
    return value is not None and value != "" and value != [] and value != {}


def merge_fields(scraped: FieldMap, calculated: FieldMap) -> Tuple[FieldMap, Dict[str, str]]:
    """Field-by-field merge: non-empty scraped values win over calculated ones."""

    merged: FieldMap = dict(calculated)
    sources = {key: "calculated" for key in calculated}
    for key, value in scraped.items():
        if _is_present(value):
            merged[key] = value
            sources[key] = "scraped"
    return merged, sources


def cache_key(target: date_cls, place: Dict[str, Any]) -> Tuple[str, float, float, str, str]:
    """``(date, lat, lon, city, tz)`` with coordinates rounded to two decimals."""

    city = (place.get("city") or "").strip().casefold()
    return (
        target.isoformat(),
        round(float(place["lat"]), 2),
        round(float(place["lon"]), 2),
        city,
        place.get("tz") or "",
    )


class PanchangAssembler:
    def __init__(
        self,
        drik_client: Optional[DrikPanchangClient] = None,
        sun_client: Optional[SunriseSunsetClient] = None,
        geocoder: Optional[ReverseGeocoder] = None,
        cache: Optional[TTLCache[PanchangRecord]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.drik_client = drik_client
        self.sun_client = sun_client
        self.geocoder = geocoder
        self.cache = cache if cache is not None else TTLCache()
        self._sleep = sleep

    def resolve(
        self,
        city: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        tz: Optional[str] = None,
        deadline: Optional[Deadline] = None,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Resolve request inputs into ``(place, flags)``; raises ``ValueError`` for a bad timezone."""

        place, flags = resolve_place(city, lat, lon, tz, geocoder=self.geocoder, deadline=deadline)
        if flags["place_defaults_used"] or flags["tz_inferred"]:
            logger.info(
                "panchang.place.defaults",
                extra={"requested_city": city, "resolved": place["name"], **flags},
            )
        return place, flags

    def assemble(self, target: date_cls, place: Dict[str, Any], deadline: Optional[Deadline] = None) -> PanchangRecord:
        key = cache_key(target, place)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("panchang.cache.hit", extra={"key": key})
            return cached

        deadline = deadline or Deadline.from_env()
        ttl: Optional[float] = None
        try:
            record = self._assemble_uncached(target, place, deadline)
        except Exception as exc:  # degrade to the total calculator
            logger.exception("panchang.assemble.failed", extra={"date": target.isoformat(), "error": str(exc)})
            record = calculate_record(target, place)
        if record.provenance.status == "calculated":
            ttl = _failed_ttl_seconds()
        self.cache.put_with_expiry(key, record, ttl)
        return record

    def assemble_range(
        self,
        start: date_cls,
        end: date_cls,
        place: Dict[str, Any],
        deadline: Optional[Deadline] = None,
    ) -> List[PanchangRecord]:
        """Assemble consecutive days, pausing between uncached scrapes."""

        days = (end - start).days + 1
        if days < 1:
            raise ValueError("end date must not be before start date")
        if days > MAX_RANGE_DAYS:
            raise ValueError(f"date range is limited to {MAX_RANGE_DAYS} days")

        records: List[PanchangRecord] = []
        scraped_previous = False
        for offset in range(days):
            target = start + timedelta(days=offset)
            cached = self.cache.get(cache_key(target, place)) is not None
            if scraped_previous and not cached:
                self._sleep(_range_delay_seconds())
            records.append(self.assemble(target, place, deadline=deadline))
            scraped_previous = not cached
        return records

    def _extract(self, target: date_cls, place: Dict[str, Any], deadline: Deadline) -> ExtractionResult:
        if not _scrape_enabled() or self.drik_client is None:
            return ExtractionResult(status="failed", error="skipped: scraping disabled")
        if not place.get("city"):
            return ExtractionResult(status="failed", error="skipped: no city for coordinates")
        return extract_for_day(self.drik_client, target, place["city"], deadline=deadline)

    def _assemble_uncached(self, target: date_cls, place: Dict[str, Any], deadline: Deadline) -> PanchangRecord:
        sun = resolve_sun_times(target, place["lat"], place["lon"], place["tz"], client=self.sun_client, deadline=deadline)
        extraction = self._extract(target, place, deadline)
        scraped = extraction.fields

        scraped_weekday = scraped.pop("weekday", None)
        if scraped_weekday and WEEKDAYS[target.weekday()].lower() not in scraped_weekday.lower():
            logger.warning(
                "panchang.extract.weekday_mismatch",
                extra={"date": target.isoformat(), "scraped": scraped_weekday},
            )

        calculated = calculate_fields(
            target,
            scraped.get("sunrise") or sun.sunrise,
            scraped.get("sunset") or sun.sunset,
        )
        merged, sources = merge_fields(scraped, calculated)
        for key in ("sunrise", "sunset"):
            if sources.get(key) == "calculated" and merged[key] == getattr(sun, key):
                sources[key] = sun.source

        status = STATUS_BY_EXTRACTION.get(extraction.status, "calculated")
        logger.info(
            "panchang.merge.provenance",
            extra={
                "date": target.isoformat(),
                "city": place.get("city"),
                "status": status,
                "scraped": sorted(k for k, v in sources.items() if v == "scraped"),
                "calculated": sorted(k for k, v in sources.items() if v != "scraped"),
            },
        )
        return build_record(target, place, merged, sources, status=status, error=extraction.error)


@lru_cache(maxsize=1)
def get_assembler() -> PanchangAssembler:
    return PanchangAssembler(
        drik_client=DrikPanchangClient(),
        sun_client=SunriseSunsetClient(),
        geocoder=ReverseGeocoder(),
    )


def assemble(target: date_cls, place: Dict[str, Any], deadline: Optional[Deadline] = None) -> PanchangRecord:
    return get_assembler().assemble(target, place, deadline=deadline)
