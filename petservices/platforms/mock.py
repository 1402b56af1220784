"""Simulated platforms for sources without a live integration.

Each platform produces plausible listings with its own id prefix, address and
phone templates, and its own spread of price, verification, rating and review
counts, so the aggregated feed mixes sources with different trust signals.
Ids carry a timestamp and change on every call.
"""

from __future__ import annotations

import itertools
import logging
import random
import time
from typing import List, Optional

from petservices.etl.categories import category_display_name
from petservices.models import Service, ServiceSource, utc_now_iso
from petservices.platforms.base import PlatformAdapter

logger = logging.getLogger(__name__)

SEARCH_RESULT_COUNT = 3
_SEQUENCE = itertools.count()


def _title(value: str) -> str:
    return value[:1].upper() + value[1:]


class MockPlatform(PlatformAdapter):
    id_prefix: str = ""
    fetch_count: int = 3
    street_number_base: int = 0
    street_suffix: str = "Street"
    phone_prefix: str = ""
    website_base: str = ""
    verified_threshold: float = 0.5
    rating_floor: float = 3.0
    rating_span: float = 2.0
    max_reviews: int = 100
    # Suffix shown in listing names; defaults to the platform name.
    listing_label: str = ""

    def __init__(self, enabled: bool = True, rng: Optional[random.Random] = None) -> None:
        super().__init__(enabled=enabled)
        self.rng = rng or random.Random()

    def _fetch_services(self, category: str, location: str) -> List[Service]:
        logger.debug("Simulating %s fetch for %s in %s", self.name, category, location)
        return self._generate(category, location, self.fetch_count)

    def _search_services(
        self,
        query: str,
        category: Optional[str],
        location: Optional[str],
    ) -> List[Service]:
        logger.debug("Simulating %s search for %r", self.name, query)
        return self._generate(category or "search", location or "nearby", SEARCH_RESULT_COUNT, query)

    def _display_category(self, category: str) -> str:
        return _title(category)

    def _generate(self, category: str, location: str, count: int, query: Optional[str] = None) -> List[Service]:
        rng = self.rng
        city = _title(location)
        search_term = f" {query}" if query else ""
        services: List[Service] = []
        for i in range(count):
            stamp = f"{time.time_ns()}{next(_SEQUENCE)}"
            now = utc_now_iso()
            service = Service(
                id=f"{self.id_prefix}-{category}-{i}-{stamp}",
                name=f"{self._display_category(category)}{search_term} #{i + 1} ({self.listing_label or self.name})",
                source=self.source,
                address=f"{i + self.street_number_base} {city} {self.street_suffix}",
                city=city,
                category_id=category,
                contact_phone=f"{self.phone_prefix}-{rng.randint(10000000, 99999999)}",
                website=f"{self.website_base}/example-{i}",
                price_range=rng.randint(1, 3),
                verified=rng.random() > self.verified_threshold,
                avg_rating=self.rating_floor + rng.random() * self.rating_span,
                review_count=rng.randrange(self.max_reviews),
                external_id=f"{self.id_prefix}-{i}-{stamp}",
                external_url=f"{self.website_base}/example-{i}",
                created_at=now,
                updated_at=now,
            )
            self._decorate(service)
            services.append(service)
        return services

    def _decorate(self, service: Service) -> None:
        """Hook for platform-specific extras."""


class MockGoogleMapsPlatform(MockPlatform):
    """Stand-in for Google Maps when no API key is configured."""

    name = "Google Maps"
    source = ServiceSource.GOOGLE_MAPS
    id_prefix = "gmaps"
    fetch_count = 6
    street_number_base = 100
    street_suffix = "Street"
    phone_prefix = "+62 821"
    website_base = "https://maps.google.com"
    verified_threshold = 0.3
    rating_floor = 3.0
    rating_span = 2.0
    max_reviews = 50
    listing_label = "Maps"

    def _display_category(self, category: str) -> str:
        return category_display_name(category)

    def _decorate(self, service: Service) -> None:
        service.category_name = category_display_name(service.category_id)
        service.latitude = -6.2 + self.rng.random() * 0.1
        service.longitude = 106.8 + self.rng.random() * 0.1


class InstagramPlatform(MockPlatform):
    name = "Instagram"
    source = ServiceSource.INSTAGRAM
    id_prefix = "ig"
    fetch_count = 4
    street_number_base = 200
    street_suffix = "Avenue"
    phone_prefix = "+62 822"
    website_base = "https://instagram.com"
    verified_threshold = 0.5
    rating_floor = 3.5
    rating_span = 1.5
    max_reviews = 100


class FacebookPlatform(MockPlatform):
    name = "Facebook"
    source = ServiceSource.FACEBOOK
    id_prefix = "fb"
    fetch_count = 4
    street_number_base = 400
    street_suffix = "Road"
    phone_prefix = "+62 824"
    website_base = "https://facebook.com"
    verified_threshold = 0.6
    rating_floor = 3.0
    rating_span = 2.0
    max_reviews = 150


class TokopediaPlatform(MockPlatform):
    name = "Tokopedia"
    source = ServiceSource.TOKOPEDIA
    id_prefix = "tokopedia"
    fetch_count = 5
    street_number_base = 300
    street_suffix = "Boulevard"
    phone_prefix = "+62 823"
    website_base = "https://tokopedia.com"
    verified_threshold = 0.4
    rating_floor = 4.0
    rating_span = 1.0
    max_reviews = 200


class ShopeePlatform(MockPlatform):
    name = "Shopee"
    source = ServiceSource.SHOPEE
    id_prefix = "shopee"
    fetch_count = 3
    street_number_base = 500
    street_suffix = "Lane"
    phone_prefix = "+62 825"
    website_base = "https://shopee.co.id"
    verified_threshold = 0.3
    rating_floor = 4.0
    rating_span = 1.0
    max_reviews = 300
