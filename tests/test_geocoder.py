import pytest
import requests

from petservices.etl import geocoder
from petservices.models import Coordinates


class FakeGeocoder:
    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response if response is not None else {"status": "ZERO_RESULTS", "results": []}
        self.error = error

    def __call__(self, address, api_key):
        self.calls.append((address, api_key))
        if self.error is not None:
            raise self.error
        return self.response


def _no_network(*args, **kwargs):
    raise AssertionError("geocode should not be called")


@pytest.mark.parametrize("name", ["JAKARTA", "jakarta", "Jakarta", " jakarta "])
def test_known_city_case_insensitive_without_network(name, monkeypatch):
    monkeypatch.setattr(geocoder.google_places, "geocode", _no_network)
    assert geocoder.resolve_coordinates(name, "key") == Coordinates(lat=-6.2088, lng=106.8456)


def test_every_known_city_resolves_from_table(monkeypatch):
    monkeypatch.setattr(geocoder.google_places, "geocode", _no_network)
    assert len(geocoder.CITY_COORDINATES) >= 6
    for name, expected in geocoder.CITY_COORDINATES.items():
        assert geocoder.resolve_coordinates(name.upper(), "key") == expected


def test_unknown_city_issues_one_call_and_returns_none(monkeypatch):
    fake = FakeGeocoder()
    monkeypatch.setattr(geocoder.google_places, "geocode", fake)

    assert geocoder.resolve_coordinates("Nonexistent City Name Xyz", "key") is None
    assert fake.calls == [("Nonexistent City Name Xyz", "key")]


def test_unknown_city_uses_first_candidate(monkeypatch):
    fake = FakeGeocoder(
        response={
            "status": "OK",
            "results": [
                {"geometry": {"location": {"lat": -0.9471, "lng": 100.4172}}},
                {"geometry": {"location": {"lat": 1.0, "lng": 2.0}}},
            ],
        }
    )
    monkeypatch.setattr(geocoder.google_places, "geocode", fake)

    assert geocoder.resolve_coordinates("Padang", "key") == Coordinates(lat=-0.9471, lng=100.4172)


@pytest.mark.parametrize(
    "fake",
    [
        FakeGeocoder(error=requests.ConnectionError("down")),
        FakeGeocoder(error=geocoder.google_places.GooglePlacesError("REQUEST_DENIED")),
        FakeGeocoder(response={"status": "OK", "results": []}),
        FakeGeocoder(response={"status": "OK", "results": [{"geometry": {}}]}),
    ],
)
def test_failures_return_none(fake, monkeypatch):
    monkeypatch.setattr(geocoder.google_places, "geocode", fake)
    assert geocoder.resolve_coordinates("Medan", "key") is None
    assert len(fake.calls) == 1


def test_blank_location_skips_network(monkeypatch):
    monkeypatch.setattr(geocoder.google_places, "geocode", _no_network)
    assert geocoder.resolve_coordinates("", "key") is None
    assert geocoder.resolve_coordinates("   ", "key") is None
