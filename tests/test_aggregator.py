import threading
import time

import pytest

from petservices.core.aggregator import ExternalPlatformsService, filter_by_sources
from petservices.models import Service, ServiceSource
from petservices.platforms import google_maps, mock
from petservices.platforms.base import PlatformAdapter


class StaticPlatform(PlatformAdapter):
    def __init__(self, name, source, count, enabled=True):
        super().__init__(enabled=enabled)
        self.name = name
        self.source = source
        self.count = count
        self.calls = []

    def _fetch_services(self, category, location):
        self.calls.append(("fetch", category, location))
        return [Service(id=f"{self.name}-{i}", name=f"{self.name} {i}", source=self.source) for i in range(self.count)]

    def _search_services(self, query, category, location):
        self.calls.append(("search", query, category, location))
        return [Service(id=f"{self.name}-q", name=query, source=self.source)]


class RejectingPlatform(StaticPlatform):
    """Raises past the base-class guard to exercise the aggregator's own isolation."""

    def fetch_services(self, category, location):
        raise RuntimeError("platform exploded")

    def search_services(self, query, category=None, location=None):
        raise RuntimeError("platform exploded")


class HangingPlatform(StaticPlatform):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.release = threading.Event()

    def _fetch_services(self, category, location):
        self.release.wait(5)
        return super()._fetch_services(category, location)


def _platforms():
    return [
        StaticPlatform("Instagram", ServiceSource.INSTAGRAM, 4),
        StaticPlatform("Facebook", ServiceSource.FACEBOOK, 4),
        StaticPlatform("Tokopedia", ServiceSource.TOKOPEDIA, 5),
        StaticPlatform("Shopee", ServiceSource.SHOPEE, 3),
    ]


def test_get_platforms_filters_disabled():
    platforms = _platforms()
    platforms[1].enabled = False
    service = ExternalPlatformsService(platforms, store=lambda row: row)

    assert [platform.name for platform in service.get_platforms()] == ["Instagram", "Tokopedia", "Shopee"]
    assert service.get_platform("shopee") is platforms[3]
    assert service.get_platform("Facebook") is None


def test_fetch_merges_all_enabled_platforms():
    platforms = _platforms()
    service = ExternalPlatformsService(platforms, store=lambda row: row)

    services = service.fetch_services_from_all("pet_shops", "jakarta")

    assert len(services) == 16
    assert all(platform.calls == [("fetch", "pet_shops", "jakarta")] for platform in platforms)


def test_rejecting_platform_is_isolated(caplog):
    platforms = _platforms() + [RejectingPlatform("Google Maps", ServiceSource.GOOGLE_MAPS, 0)]
    service = ExternalPlatformsService(platforms, store=lambda row: row)

    with caplog.at_level("ERROR"):
        services = service.fetch_services_from_all("pet_shops", "jakarta")
        searched = service.search_across_all("vet")

    assert len(services) == 16
    assert all(isinstance(item, Service) for item in services)
    assert len(searched) == 4
    assert "Google Maps" in " ".join(caplog.messages)


def test_report_exposes_per_source_status():
    platforms = _platforms() + [RejectingPlatform("Google Maps", ServiceSource.GOOGLE_MAPS, 0)]
    service = ExternalPlatformsService(platforms, store=lambda row: row)

    report = service.fetch_report("pet_shops", "jakarta")

    assert report.failed_sources == ["Google Maps"]
    assert report.sources["Google Maps"].error == "platform exploded"
    assert report.sources["Tokopedia"].ok is True
    assert report.sources["Tokopedia"].count == 5


def test_timeout_counts_as_failure():
    hanging = HangingPlatform("Google Maps", ServiceSource.GOOGLE_MAPS, 2)
    service = ExternalPlatformsService(_platforms() + [hanging], store=lambda row: row, timeout=0.2)

    try:
        report = service.fetch_report("pet_shops", "jakarta")
    finally:
        hanging.release.set()

    assert len(report.services) == 16
    assert report.sources["Google Maps"].ok is False
    assert report.sources["Google Maps"].error == "timeout"


def test_search_passes_arguments_through():
    platforms = _platforms()
    service = ExternalPlatformsService(platforms, store=lambda row: row)

    services = service.search_across_all("grooming", "grooming_services", "bali")

    assert len(services) == 4
    assert platforms[0].calls == [("search", "grooming", "grooming_services", "bali")]


def test_no_enabled_platforms_returns_empty():
    service = ExternalPlatformsService(
        [StaticPlatform("Instagram", ServiceSource.INSTAGRAM, 4, enabled=False)],
        store=lambda row: row,
    )
    assert service.fetch_services_from_all("all", "jakarta") == []


def test_filter_by_sources():
    services = [
        Service(id="1", name="a", source=ServiceSource.INSTAGRAM),
        Service(id="2", name="b", source=ServiceSource.GOOGLE_MAPS),
        Service(id="3", name="c", source=ServiceSource.SHOPEE),
    ]

    kept = filter_by_sources(services, ["Google Maps", "shopee", " "])

    assert [service.id for service in kept] == ["2", "3"]


def test_save_external_service_assigns_new_id():
    stored_rows = []

    def fake_store(row):
        stored_rows.append(row)
        return {**row, "id": "9b2e6c1e-0000-4000-8000-000000000001", "created_at": None}

    service = ExternalPlatformsService([], store=fake_store)
    external = Service(
        id="gmaps-ChIJ123",
        name="Happy Paws Vet",
        source=ServiceSource.GOOGLE_MAPS,
        address="Jl. Kemang Raya 10, Jakarta, Indonesia",
        city="Jakarta",
        category_id="veterinary_clinics",
        contact_phone="021 555 0101",
        website="https://happypaws.example",
        price_range=2,
        verified=True,
        external_id="ChIJ123",
    )

    stored = service.save_external_service(external)

    assert "id" not in stored_rows[0]
    assert stored_rows[0]["source"] == "google_maps"
    assert stored.id != external.id
    assert stored.id == "9b2e6c1e-0000-4000-8000-000000000001"
    for attr in ("name", "address", "city", "category_id", "contact_phone", "website"):
        assert getattr(stored, attr) == getattr(external, attr)
    assert stored.source is ServiceSource.GOOGLE_MAPS
    assert stored.external_id == "ChIJ123"


def test_save_external_service_returns_none_on_error(caplog):
    def broken_store(row):
        raise RuntimeError("DATABASE_URL is required for database connections")

    service = ExternalPlatformsService([], store=broken_store)

    with caplog.at_level("ERROR"):
        result = service.save_external_service(Service(id="ig-1", name="x", source=ServiceSource.INSTAGRAM))

    assert result is None
    assert "ig-1" in " ".join(caplog.messages)


def _fake_google_vendor(monkeypatch, results):
    monkeypatch.setattr(
        google_maps.google_places, "nearby_search", lambda **kwargs: {"status": "OK", "results": results}
    )
    monkeypatch.setattr(google_maps.google_places, "place_details", lambda **kwargs: {})

    def no_geocoding(*args, **kwargs):
        raise AssertionError("jakarta must resolve without a network call")

    monkeypatch.setattr("petservices.etl.geocoder.google_places.geocode", no_geocoding)


def _full_registry():
    return [
        google_maps.GoogleMapsPlatform("key"),
        mock.InstagramPlatform(),
        mock.FacebookPlatform(),
        mock.TokopediaPlatform(),
        mock.ShopeePlatform(),
    ]


def test_veterinary_clinics_in_jakarta_end_to_end(monkeypatch):
    _fake_google_vendor(
        monkeypatch,
        [
            {
                "place_id": "vet-1",
                "name": "Klinik Hewan Kemang",
                "vicinity": "Jl. Kemang 1, Jakarta Selatan, Indonesia",
                "geometry": {"location": {"lat": -6.26, "lng": 106.81}},
                "types": ["veterinary_care"],
            },
            {
                "place_id": "vet-2",
                "name": "Menteng Animal Hospital",
                "vicinity": "Jl. Menteng 2, Jakarta Pusat, Indonesia",
                "geometry": {"location": {"lat": -6.19, "lng": 106.83}},
                "types": ["hospital"],
            },
        ],
    )
    service = ExternalPlatformsService(_full_registry(), store=lambda row: row)

    services = service.fetch_services_from_all("veterinary_clinics", "jakarta")

    google = [item for item in services if item.source is ServiceSource.GOOGLE_MAPS]
    assert [item.id for item in google] == ["gmaps-vet-1", "gmaps-vet-2"]
    assert all(item.category_id == "veterinary_clinics" for item in google)
    for source in (ServiceSource.INSTAGRAM, ServiceSource.FACEBOOK, ServiceSource.TOKOPEDIA, ServiceSource.SHOPEE):
        count = sum(1 for item in services if item.source is source)
        assert 3 <= count <= 5


def test_ids_stable_for_google_and_unstable_for_mocks(monkeypatch):
    _fake_google_vendor(
        monkeypatch,
        [
            {
                "place_id": "same-place",
                "name": "Pet Mart",
                "geometry": {"location": {"lat": -6.2, "lng": 106.8}},
                "types": ["pet_store"],
            }
        ],
    )
    service = ExternalPlatformsService(_full_registry(), store=lambda row: row)

    first = service.fetch_services_from_all("pet_shops", "jakarta")
    second = service.fetch_services_from_all("pet_shops", "jakarta")

    def ids(batch, source):
        return [item.id for item in batch if item.source is source]

    assert ids(first, ServiceSource.GOOGLE_MAPS) == ids(second, ServiceSource.GOOGLE_MAPS) == ["gmaps-same-place"]
    assert set(ids(first, ServiceSource.INSTAGRAM)).isdisjoint(ids(second, ServiceSource.INSTAGRAM))


def test_slow_place_details_stay_within_platform_timeout(monkeypatch):
    results = [
        {
            "place_id": f"p{i}",
            "name": f"Pet Stop {i}",
            "geometry": {"location": {"lat": -6.2, "lng": 106.8}},
            "types": ["pet_store"],
        }
        for i in range(20)
    ]
    _fake_google_vendor(monkeypatch, results)

    def slow_details(**kwargs):
        time.sleep(0.1)
        return {}

    monkeypatch.setattr(google_maps.google_places, "place_details", slow_details)
    service = ExternalPlatformsService([google_maps.GoogleMapsPlatform("key")], store=lambda row: row, timeout=1.0)

    report = service.fetch_report("pet_shops", "jakarta")

    assert report.sources["Google Maps"].ok is True
    assert [item.id for item in report.services] == [f"gmaps-p{i}" for i in range(20)]


def test_timed_out_platform_runs_on_daemon_thread():
    hanging = HangingPlatform("Google Maps", ServiceSource.GOOGLE_MAPS, 2)
    service = ExternalPlatformsService([hanging], store=lambda row: row, timeout=0.1)

    try:
        started = time.monotonic()
        report = service.fetch_report("pet_shops", "jakarta")
        elapsed = time.monotonic() - started
        workers = [thread for thread in threading.enumerate() if thread.name == "platform-Google Maps"]

        assert report.failed_sources == ["Google Maps"]
        assert elapsed < 1.0
        assert workers and all(thread.daemon for thread in workers)
    finally:
        hanging.release.set()
