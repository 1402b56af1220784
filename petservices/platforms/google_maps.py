"""Google Maps platform backed by the Places API."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from petservices.etl import categories
from petservices.etl.geocoder import resolve_coordinates
from petservices.etl.transform import ID_PREFIX, normalize_place, normalize_review
from petservices.models import Review, Service, ServiceSource
from petservices.platforms.base import PlatformAdapter
from petservices.vendors import google_places

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 5000
SEARCH_SUFFIX = "pet services"
DETAILS_WORKERS = 8


class GoogleMapsPlatform(PlatformAdapter):
    name = "Google Maps"
    source = ServiceSource.GOOGLE_MAPS

    def __init__(self, api_key: str, radius: int = DEFAULT_RADIUS, enabled: bool = True) -> None:
        super().__init__(enabled=enabled)
        if not api_key:
            raise ValueError("api_key is required for the Google Maps platform")
        self.api_key = api_key
        self.radius = radius

    def _fetch_services(self, category: str, location: str) -> List[Service]:
        place_type = categories.to_provider_type(category)
        keyword = categories.to_provider_keyword(category)
        category_hint = category if categories.is_concrete(category) else None

        coordinates = resolve_coordinates(location, self.api_key)
        if coordinates is None:
            logger.warning("Could not resolve %r; searching by text instead of coordinates", location)
            query = " ".join(filter(None, [keyword, location])).strip()
            payload = google_places.text_search(query=query, api_key=self.api_key)
        else:
            payload = google_places.nearby_search(
                lat=coordinates.lat,
                lng=coordinates.lng,
                radius=self.radius,
                api_key=self.api_key,
                place_type=place_type or None,
                keyword=keyword or None,
            )

        services = self._normalize_results(payload, category_hint)
        logger.info("Google Maps returned %d places for category=%s location=%s", len(services), category, location)
        return services

    def _search_services(
        self,
        query: str,
        category: Optional[str],
        location: Optional[str],
    ) -> List[Service]:
        geo_bias = None
        if location:
            coordinates = resolve_coordinates(location, self.api_key)
            if coordinates is not None:
                geo_bias = f"{coordinates.lat},{coordinates.lng}"

        enhanced_query = query
        if category and categories.is_concrete(category):
            enhanced_query = f"{categories.to_provider_keyword(category)} {query}"
            category_hint = category
        else:
            category_hint = categories.infer_category_from_query(query)

        payload = google_places.text_search(
            query=f"{enhanced_query} {SEARCH_SUFFIX}",
            api_key=self.api_key,
            location=geo_bias,
            radius=self.radius if geo_bias else None,
        )
        services = self._normalize_results(payload, category_hint)
        logger.info("Google Maps returned %d places for query=%s", len(services), query)
        return services

    def _fetch_reviews(self, service_id: str) -> List[Review]:
        place_id = service_id[len(ID_PREFIX):] if service_id.startswith(ID_PREFIX) else service_id
        details = google_places.place_details(
            place_id=place_id,
            api_key=self.api_key,
            fields=google_places.REVIEW_DETAIL_FIELDS,
        )
        return [
            normalize_review(raw, service_id=f"{ID_PREFIX}{place_id}", index=index)
            for index, raw in enumerate(details.get("reviews") or [])
        ]

    def _normalize_results(self, payload: Dict[str, Any], category_hint: Optional[str]) -> List[Service]:
        places = payload.get("results") or []
        if not places:
            return []
        place_ids = [place.get("place_id") if isinstance(place, dict) else None for place in places]
        # Details lookups run concurrently; map() keeps them aligned with `places`.
        with ThreadPoolExecutor(
            max_workers=min(DETAILS_WORKERS, len(places)),
            thread_name_prefix="place-details",
        ) as executor:
            details = list(executor.map(self._details, place_ids))
        return [normalize_place(place, detail, category_hint) for place, detail in zip(places, details)]

    def _details(self, place_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not place_id:
            return None
        try:
            return google_places.place_details(place_id=place_id, api_key=self.api_key) or None
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to fetch details for %s: %s", place_id, exc)
            return None
