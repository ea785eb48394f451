"""Panchang record schemas returned by the Panchang API endpoints.

Attributes are snake_case in Python and serialised as camelCase JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional


Source = Literal["scraped", "service", "calculated"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationVM(CamelModel):
    name: str
    city: str
    country: str
    lat: float
    lon: float
    tz: str
    utc_offset: str


class ElementVM(CamelModel):
    name: str
    end_time: str
    next_name: str
    ends_next_day: bool = False


class TithiVM(ElementVM):
    number: int
    paksha: str
    deity: str
    sanskrit: str


class NakshatraVM(ElementVM):
    lord: str
    deity: str
    sanskrit: str


class YogaVM(ElementVM):
    meaning: str
    nature: str
    sanskrit: str


class KaranaVM(ElementVM):
    meaning: str
    kind: str
    sanskrit: str


class TimingsVM(CamelModel):
    sunrise: str
    sunset: str
    moonrise: str
    moonset: str
    solar_noon: str
    day_length: str
    night_length: str


class MoonDataVM(CamelModel):
    rashi: str
    rashi_lord: str
    element: str
    phase: str
    illumination_percent: int


class AuspiciousTimesVM(CamelModel):
    abhijit_muhurat: str
    amrit_kaal: str
    brahma_muhurat: str


class InauspiciousTimesVM(CamelModel):
    rahu_kaal: str
    yama_ganda_kaal: str
    gulika_kaal: str
    dur_muhurat: str


class MasaVM(CamelModel):
    name: str
    paksha: str
    ayana: str
    ritu: str


class DoshaIntervalVM(CamelModel):
    start: str
    end: str
    start_minutes: int
    end_minutes: int
    tags: List[str] = Field(default_factory=list)
    severity: Literal["normal", "caution", "avoid"]
    description: str


class ProvenanceVM(CamelModel):
    status: Literal["scraped", "partial", "calculated"]
    sources: Dict[str, Source] = Field(default_factory=dict)
    error: Optional[str] = None


class PanchangRecord(CamelModel):
    date: str
    location: LocationVM
    weekday: str
    tithi: TithiVM
    nakshatra: NakshatraVM
    yoga: YogaVM
    karana: KaranaVM
    timings: TimingsVM
    moon_data: MoonDataVM
    auspicious_times: AuspiciousTimesVM
    inauspicious_times: InauspiciousTimesVM
    masa: MasaVM
    festivals: List[str] = Field(default_factory=list)
    vrats: List[str] = Field(default_factory=list)
    dosha_intervals: List[DoshaIntervalVM] = Field(default_factory=list)
    provenance: ProvenanceVM
    notes: List[str] = Field(default_factory=list)


class PanchangRangeVM(CamelModel):
    start: str
    end: str
    days: List[PanchangRecord]


class CityVM(CamelModel):
    name: str
    lat: float
    lon: float
    tz: str


class ReverseGeocodeVM(CamelModel):
    city: str
    country: str
    timezone: str
    lat: float
    lon: float
