import pytest
import requests
from fastapi.testclient import TestClient

from conftest import FakeResponse, FakeSession, unreachable_assembler
from panchang_api.app import app
from panchang_api.services.location import (
    GeocodingError,
    ReverseGeocoder,
    lookup_city,
    nearest_city,
    resolve_place,
)
from panchang_api.services.orchestrators.panchang_assembler import get_assembler


client = TestClient(app)

BIGDATACLOUD_PAYLOAD = {
    "city": "",
    "locality": "Connaught Place",
    "principalSubdivision": "Delhi",
    "countryName": "India",
}


def test_lookup_city_handles_aliases_and_case():
    assert lookup_city("bangalore")["city"] == "Bengaluru"
    assert lookup_city("MUMBAI, India")["tz"] == "Asia/Kolkata"
    assert lookup_city("Atlantis") is None


def test_nearest_city_within_radius():
    assert nearest_city(28.65, 77.25) == "New Delhi"
    assert nearest_city(-33.87, 151.21) is None


def test_reverse_geocoder_prefers_city_then_locality():
    geocoder = ReverseGeocoder(FakeSession(FakeResponse(200, payload=BIGDATACLOUD_PAYLOAD)))
    found = geocoder.reverse(28.6315, 77.2167)
    assert found["city"] == "Connaught Place"
    assert found["country"] == "India"
    assert found["timezone"] == "Asia/Kolkata"


def test_reverse_geocoder_errors():
    with pytest.raises(GeocodingError):
        ReverseGeocoder(FakeSession(requests.ConnectionError("down"))).reverse(1.0, 2.0)
    with pytest.raises(GeocodingError):
        ReverseGeocoder(FakeSession(FakeResponse(200, payload={"countryName": "Nowhere"}))).reverse(1.0, 2.0)


def test_resolve_place_with_coordinates_infers_timezone():
    geocoder = ReverseGeocoder(FakeSession(FakeResponse(200, payload=BIGDATACLOUD_PAYLOAD)))
    place, flags = resolve_place(lat=28.6315, lon=77.2167, geocoder=geocoder)
    assert place["city"] == "Connaught Place"
    assert place["name"] == "Connaught Place, India"
    assert place["tz"] == "Asia/Kolkata"
    assert flags["tz_inferred"] is True
    assert flags["place_defaults_used"] is False


def test_resolve_place_without_city_for_remote_coordinates(monkeypatch):
    monkeypatch.setenv("PANCHANG_GEOCODE_ENABLED", "false")
    place, _ = resolve_place(lat=-33.87, lon=151.21)
    assert place["city"] is None
    assert place["tz"] == "Australia/Sydney"


def test_resolve_place_rejects_bad_timezone():
    with pytest.raises(ValueError):
        resolve_place(city="Ujjain", tz="Not/AZone")


def test_location_endpoint_reverse_geocodes():
    assembler = unreachable_assembler()
    assembler.geocoder = ReverseGeocoder(FakeSession(FakeResponse(200, payload=BIGDATACLOUD_PAYLOAD)))
    app.dependency_overrides[get_assembler] = lambda: assembler
    try:
        resp = client.get("/v1/location", params={"lat": 28.6315, "lon": 77.2167})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    assert resp.json() == {
        "city": "Connaught Place",
        "country": "India",
        "timezone": "Asia/Kolkata",
        "lat": 28.6315,
        "lon": 77.2167,
    }


def test_location_endpoint_falls_back_when_geocoder_fails():
    app.dependency_overrides[get_assembler] = lambda: unreachable_assembler()
    try:
        resp = client.get("/v1/location", params={"lat": 19.08, "lon": 72.88})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    assert resp.json()["city"] == "Mumbai"
