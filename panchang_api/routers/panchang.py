"""Panchang API endpoints."""

from __future__ import annotations

from datetime import date as date_cls, datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from ..schemas.panchang import CityVM, PanchangRangeVM, PanchangRecord
from ..services.location import CITY_DIRECTORY
from ..services.orchestrators.panchang_assembler import PanchangAssembler, get_assembler
from ..services.util.deadline import Deadline
from ..services.util.place_defaults import validate_tz


router = APIRouter(prefix="/v1/panchang", tags=["panchang"])

SOURCE_HEADER = "X-Panchang-Source"


class PanchangPlace(BaseModel):
    city: Optional[str] = None
    lat: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    lon: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    tz: Optional[str] = None


class PanchangRequest(BaseModel):
    date: Optional[str] = None
    place: Optional[PanchangPlace] = None


def _parse_date(value: Optional[str], field: str = "date") -> Optional[date_cls]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {field} {value!r}; expected YYYY-MM-DD") from exc


def _clamp_place(place: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    clamped = dict(place or {})

    if clamped.get("lat") is not None:
        clamped["lat"] = max(-89.9, min(89.9, float(clamped["lat"])))
    if clamped.get("lon") is not None:
        clamped["lon"] = max(-180.0, min(180.0, float(clamped["lon"])))

    tz_name = clamped.get("tz")
    if tz_name:
        try:
            validate_tz(tz_name)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return clamped


def _with_place_note(record: PanchangRecord, place: Dict[str, Any], flags: Dict[str, Any]) -> PanchangRecord:
    if not flags.get("place_defaults_used"):
        return record
    note = f"Place defaults used ({flags['default_reason']}): coordinates of {place['name']}."
    return record.model_copy(update={"notes": list(record.notes) + [note]})


def _panchang_for(
    assembler: PanchangAssembler,
    response: Response,
    target: Optional[date_cls],
    place_payload: Optional[Dict[str, Any]],
) -> PanchangRecord:
    payload = _clamp_place(place_payload)
    deadline = Deadline.from_env()
    try:
        place, flags = assembler.resolve(payload.get("city"), payload.get("lat"), payload.get("lon"), payload.get("tz"), deadline=deadline)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if target is None:
        target = datetime.now(ZoneInfo(place["tz"])).date()
    record = _with_place_note(assembler.assemble(target, place, deadline=deadline), place, flags)
    response.headers[SOURCE_HEADER] = record.provenance.status
    return record


@router.get(
    "",
    response_model=PanchangRecord,
    response_model_by_alias=True,
    summary="Panchang for a date and place",
)
def panchang_get(
    response: Response,
    date: Optional[str] = Query(None, example="2025-06-22", description="Date (YYYY-MM-DD); defaults to today"),
    city: Optional[str] = Query(None, example="Ujjain", description="City name"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, description="Longitude"),
    tz: Optional[str] = Query(None, description="IANA timezone"),
    assembler: PanchangAssembler = Depends(get_assembler),
):
    target = _parse_date(date)
    return _panchang_for(assembler, response, target, {"city": city, "lat": lat, "lon": lon, "tz": tz})


@router.get(
    "/today",
    response_model=PanchangRecord,
    response_model_by_alias=True,
    summary="Convenience endpoint for today's Panchang",
)
def panchang_today(
    response: Response,
    city: Optional[str] = Query(None, description="City name"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, example=19.076, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, example=72.8777, description="Longitude"),
    tz: Optional[str] = Query(None, description="IANA timezone"),
    assembler: PanchangAssembler = Depends(get_assembler),
):
    return _panchang_for(assembler, response, None, {"city": city, "lat": lat, "lon": lon, "tz": tz})


@router.post(
    "/compute",
    response_model=PanchangRecord,
    response_model_by_alias=True,
    summary="Compute Panchang for a specific date and location",
)
def panchang_compute(
    response: Response,
    req: PanchangRequest = Body(
        ...,
        examples={
            "ujjain": {
                "summary": "Ujjain explicit date",
                "value": {"date": "2025-06-22", "place": {"city": "Ujjain"}},
            },
            "coordinates": {
                "summary": "Coordinates with timezone",
                "value": {"date": "2025-06-22", "place": {"lat": 17.385, "lon": 78.4867, "tz": "Asia/Kolkata"}},
            },
            "defaults": {
                "summary": "No place provided",
                "description": "Uses the configured default place",
                "value": {"date": "2025-06-22"},
            },
        },
    ),
    assembler: PanchangAssembler = Depends(get_assembler),
):
    place_payload = req.place.model_dump(exclude_none=True) if req.place else None
    return _panchang_for(assembler, response, _parse_date(req.date), place_payload)


@router.get(
    "/range",
    response_model=PanchangRangeVM,
    response_model_by_alias=True,
    summary="Panchang for up to seven consecutive days",
)
def panchang_range(
    response: Response,
    start: str = Query(..., description="First date (YYYY-MM-DD)"),
    end: str = Query(..., description="Last date (YYYY-MM-DD), inclusive"),
    city: Optional[str] = Query(None, description="City name"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0, description="Longitude"),
    tz: Optional[str] = Query(None, description="IANA timezone"),
    assembler: PanchangAssembler = Depends(get_assembler),
):
    start_date = _parse_date(start, "start")
    end_date = _parse_date(end, "end")
    payload = _clamp_place({"city": city, "lat": lat, "lon": lon, "tz": tz})
    deadline = Deadline.from_env()
    try:
        place, _flags = assembler.resolve(payload.get("city"), payload.get("lat"), payload.get("lon"), payload.get("tz"), deadline=deadline)
        days = assembler.assemble_range(start_date, end_date, place, deadline=deadline)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    statuses = {record.provenance.status for record in days}
    response.headers[SOURCE_HEADER] = statuses.pop() if len(statuses) == 1 else "partial"
    return PanchangRangeVM(start=start_date.isoformat(), end=end_date.isoformat(), days=days)


@router.get(
    "/cities",
    response_model=List[CityVM],
    summary="Cities with built-in coordinates",
)
def panchang_cities():
    return [
        CityVM(name=name, lat=lat, lon=lon, tz=tz)
        for name, (lat, lon, tz, _country) in sorted(CITY_DIRECTORY.items())
    ]
