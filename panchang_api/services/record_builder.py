"""Turn a merged field map into a :class:`PanchangRecord`."""

from __future__ import annotations

from datetime import date as date_cls, datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from ..schemas.panchang import (
    AuspiciousTimesVM,
    DoshaIntervalVM,
    InauspiciousTimesVM,
    KaranaVM,
    LocationVM,
    MasaVM,
    MoonDataVM,
    NakshatraVM,
    PanchangRecord,
    ProvenanceVM,
    TimingsVM,
    TithiVM,
    YogaVM,
)
from .dosha import build_intervals, triples_from_spans
from .festivals import merge_names
from .muhurta import solar_noon
from .tables import (
    KARANA,
    KRISHNA,
    NAKSHATRA,
    RASHI,
    SHUKLA,
    TITHI,
    UNKNOWN,
    WEEKDAYS,
    YOGA,
    illumination_for_lunar_day,
    lunar_day,
    moon_phase_for_lunar_day,
    normalize_paksha,
    paksha_from_name,
    tithi_name,
    Table,
)
from .timeutil import MINUTES_PER_DAY, FormatError, format_duration, minutes_to_time, time_to_minutes

FieldMap = Dict[str, Any]

NOTES_CALCULATED = "Values not available from the Panchang site are approximations derived from sunrise and sunset."
NOTE_ROLLOVER = "An end time earlier than sunrise falls on the following day."

# Merge-only keys that are not record fields.
INTERNAL_FIELDS = {"lunar_day", "weekday"}


def _minutes(value: Optional[str], default: int) -> int:
    try:
        return time_to_minutes(value) if value else default
    except FormatError:
        return default


def _stated_next_day(stated: Optional[str], target: date_cls) -> Optional[bool]:
    """Whether a site-stated end date such as ``"Jun 23"`` falls after ``target``."""

    if not stated:
        return None
    for fmt in ("%b %d %Y", "%B %d %Y"):
        try:
            day = datetime.strptime(f"{stated.strip()} {target.year}", fmt).date()
        except ValueError:
            continue
        return (day.month, day.day) != (target.month, target.day)
    return None


def _ends_next_day(end_time: str, sunrise: int, stated: Optional[bool] = None) -> bool:
    if stated is not None:
        return stated
    return _minutes(end_time, sunrise) < sunrise


def _next_name(table: Table, element: str, fields: FieldMap, sources: Dict[str, str]) -> str:
    """Use the scraped next name, else the table successor of the winning name."""

    if sources.get(f"{element}_next") == "scraped":
        return fields[f"{element}_next"]
    following = table.successor(fields.get(element)) if sources.get(element) == "scraped" else None
    return following or fields.get(f"{element}_next") or UNKNOWN


def _tithi_paksha(fields: FieldMap) -> str:
    return paksha_from_name(fields.get("tithi")) or normalize_paksha(fields.get("paksha")) or SHUKLA


def _tithi_next(fields: FieldMap, sources: Dict[str, str], paksha: str) -> str:
    if sources.get("tithi_next") == "scraped" or sources.get("tithi") != "scraped":
        return fields.get("tithi_next") or UNKNOWN
    day = lunar_day(fields.get("tithi"), paksha)
    if day is None:
        return fields.get("tithi_next") or UNKNOWN
    following = day % 30 + 1
    return tithi_name(following - 1, SHUKLA if following <= 15 else KRISHNA)


def _moon_rashi(fields: FieldMap, sources: Dict[str, str]) -> str:
    if sources.get("rashi") == "scraped":
        return fields["rashi"]
    derived = NAKSHATRA.metadata_for(fields.get("nakshatra"))["rashi"]
    return derived if derived != UNKNOWN else fields.get("rashi") or UNKNOWN


def _utc_offset(location: Dict[str, Any], target: date_cls) -> str:
    if location.get("utc_offset"):
        return location["utc_offset"]

    offset = datetime(target.year, target.month, target.day, 12, tzinfo=ZoneInfo(location["tz"])).utcoffset()
    total = int(offset.total_seconds() // 60) if offset else 0
    sign = "-" if total < 0 else "+"
    hours, mins = divmod(abs(total), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def build_record(
    target: date_cls,
    location: Dict[str, Any],
    fields: FieldMap,
    sources: Dict[str, str],
    status: str = "calculated",
    error: Optional[str] = None,
    notes: Optional[List[str]] = None,
) -> PanchangRecord:
    sunrise = _minutes(fields.get("sunrise"), 360)
    sunset = _minutes(fields.get("sunset"), 1080)
    day_length = sunset - sunrise if sunset > sunrise else sunset + MINUTES_PER_DAY - sunrise

    paksha = _tithi_paksha(fields)
    moon_day = lunar_day(fields.get("tithi"), paksha) or fields.get("lunar_day") or 1
    rashi = _moon_rashi(fields, sources)
    rashi_meta = RASHI.metadata_for(rashi)
    tithi_meta = TITHI.metadata_for(fields.get("tithi"))
    nak_meta = NAKSHATRA.metadata_for(fields.get("nakshatra"))
    yoga_meta = YOGA.metadata_for(fields.get("yoga"))
    karana_meta = KARANA.metadata_for(fields.get("karana"))

    def element(name: str) -> Dict[str, Any]:
        end_time = fields.get(f"{name}_end") or fields.get("sunrise") or "06:00"
        stated = _stated_next_day(fields.get(f"{name}_end_date"), target)
        return {
            "name": fields.get(name) or UNKNOWN,
            "end_time": end_time,
            "ends_next_day": _ends_next_day(end_time, sunrise, stated),
        }

    elements = {name: element(name) for name in ("tithi", "nakshatra", "yoga", "karana")}

    # intervals follow the record's own windows unless the page lists them
    if sources.get("dosha_intervals") == "scraped":
        triples = fields["dosha_intervals"]
    else:
        triples = triples_from_spans(fields)

    notes = list(notes or [])
    if status != "scraped":
        notes.append(NOTES_CALCULATED)
    if any(e["ends_next_day"] for e in elements.values()):
        notes.append(NOTE_ROLLOVER)

    return PanchangRecord(
        date=target.isoformat(),
        location=LocationVM(
            name=location.get("name") or location.get("city") or UNKNOWN,
            city=location.get("city") or UNKNOWN,
            country=location.get("country") or UNKNOWN,
            lat=float(location["lat"]),
            lon=float(location["lon"]),
            tz=location["tz"],
            utc_offset=_utc_offset(location, target),
        ),
        weekday=WEEKDAYS[target.weekday()],
        tithi=TithiVM(
            **elements["tithi"],
            next_name=_tithi_next(fields, sources, paksha),
            number=moon_day,
            paksha=paksha,
            deity=tithi_meta["deity"],
            sanskrit=tithi_meta["sanskrit"],
        ),
        nakshatra=NakshatraVM(
            **elements["nakshatra"],
            next_name=_next_name(NAKSHATRA, "nakshatra", fields, sources),
            lord=nak_meta["lord"],
            deity=nak_meta["deity"],
            sanskrit=nak_meta["sanskrit"],
        ),
        yoga=YogaVM(
            **elements["yoga"],
            next_name=_next_name(YOGA, "yoga", fields, sources),
            meaning=yoga_meta["meaning"],
            nature=yoga_meta["nature"],
            sanskrit=yoga_meta["sanskrit"],
        ),
        karana=KaranaVM(
            **elements["karana"],
            next_name=_next_name(KARANA, "karana", fields, sources),
            meaning=karana_meta["meaning"],
            kind=karana_meta["kind"],
            sanskrit=karana_meta["sanskrit"],
        ),
        timings=TimingsVM(
            sunrise=fields["sunrise"],
            sunset=fields["sunset"],
            moonrise=fields.get("moonrise") or UNKNOWN,
            moonset=fields.get("moonset") or UNKNOWN,
            solar_noon=minutes_to_time(solar_noon(sunrise, sunrise + day_length)),
            day_length=format_duration(day_length),
            night_length=format_duration(MINUTES_PER_DAY - day_length),
        ),
        moon_data=MoonDataVM(
            rashi=rashi,
            rashi_lord=rashi_meta["lord"],
            element=rashi_meta["element"],
            phase=moon_phase_for_lunar_day(moon_day),
            illumination_percent=illumination_for_lunar_day(moon_day),
        ),
        auspicious_times=AuspiciousTimesVM(
            abhijit_muhurat=fields["abhijit_muhurat"],
            amrit_kaal=fields["amrit_kaal"],
            brahma_muhurat=fields["brahma_muhurat"],
        ),
        inauspicious_times=InauspiciousTimesVM(
            rahu_kaal=fields["rahu_kaal"],
            yama_ganda_kaal=fields["yamaganda_kaal"],
            gulika_kaal=fields["gulika_kaal"],
            dur_muhurat=fields["dur_muhurat"],
        ),
        masa=MasaVM(
            name=fields.get("masa") or UNKNOWN,
            paksha=paksha,
            ayana=fields.get("ayana") or UNKNOWN,
            ritu=fields.get("ritu") or UNKNOWN,
        ),
        festivals=merge_names(fields.get("festivals")),
        vrats=merge_names(fields.get("vrats")),
        dosha_intervals=[DoshaIntervalVM(**item) for item in build_intervals(triples)],
        provenance=ProvenanceVM(
            status=status,
            sources={k: v for k, v in sorted(sources.items()) if k not in INTERNAL_FIELDS},
            error=error,
        ),
        notes=notes,
    )
