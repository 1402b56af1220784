"""Resolve a city name to coordinates, preferring a static table over geocoding."""

import logging
from typing import Optional

from petservices.models import Coordinates
from petservices.vendors import google_places

logger = logging.getLogger(__name__)

# Resolved locally without a Geocoding API call.
CITY_COORDINATES = {
    "jakarta": Coordinates(lat=-6.2088, lng=106.8456),
    "bandung": Coordinates(lat=-6.9175, lng=107.6191),
    "surabaya": Coordinates(lat=-7.2575, lng=112.7521),
    "yogyakarta": Coordinates(lat=-7.7972, lng=110.3688),
    "bali": Coordinates(lat=-8.3405, lng=115.0920),
    "denpasar": Coordinates(lat=-8.6705, lng=115.2126),
}


def resolve_coordinates(location: Optional[str], api_key: str) -> Optional[Coordinates]:
    """Return coordinates for ``location`` or ``None``; never raises."""
    if not location or not location.strip():
        return None

    known = CITY_COORDINATES.get(location.strip().lower())
    if known is not None:
        return known

    try:
        payload = google_places.geocode(location, api_key)
        if payload.get("status") != "OK":
            logger.info("No geocoding match for %r (status=%s)", location, payload.get("status"))
            return None
        results = payload.get("results") or []
        if not results:
            return None
        point = results[0]["geometry"]["location"]
        return Coordinates(lat=float(point["lat"]), lng=float(point["lng"]))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Geocoding failed for %r: %s", location, exc)
        return None
