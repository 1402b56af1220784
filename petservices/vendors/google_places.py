"""Client utilities for the Google Places and Geocoding APIs."""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
_OK_STATUSES = {"OK", "ZERO_RESULTS"}

DEFAULT_DETAIL_FIELDS = (
    "place_id,name,formatted_address,geometry,rating,user_ratings_total,"
    "formatted_phone_number,website,price_level,opening_hours,types"
)
REVIEW_DETAIL_FIELDS = "place_id,name,reviews"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def _get(url: str, params: Dict[str, Any], operation: str) -> Dict[str, Any]:
    response = _SESSION.get(url, params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in _OK_STATUSES:
        logger.error("%s failed: status=%s, error_message=%s", operation, status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload


def nearby_search(
    lat: float,
    lng: float,
    radius: int,
    api_key: str,
    place_type: Optional[str] = None,
    keyword: Optional[str] = None,
) -> Dict[str, Any]:
    params = {"location": f"{lat},{lng}", "radius": radius, "key": api_key}
    if place_type:
        params["type"] = place_type
    if keyword:
        params["keyword"] = keyword
    return _get(f"{_BASE_URL}/nearbysearch/json", params, "nearby_search")


def text_search(
    query: str,
    api_key: str,
    location: Optional[str] = None,
    radius: Optional[int] = None,
) -> Dict[str, Any]:
    params = {"query": query, "key": api_key}
    if location:
        params["location"] = location
        if radius:
            params["radius"] = radius
    return _get(f"{_BASE_URL}/textsearch/json", params, "text_search")


def place_details(place_id: str, api_key: str, fields: str = DEFAULT_DETAIL_FIELDS) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": fields}
    payload = _get(f"{_BASE_URL}/details/json", params, "place_details")
    return payload.get("result", {})


def geocode(address: str, api_key: str) -> Dict[str, Any]:
    """Geocode a free-text address; returns the raw payload including its status."""
    params = {"address": address, "key": api_key}
    return _get(_GEOCODE_URL, params, "geocode")
