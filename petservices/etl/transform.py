"""Utilities for transforming Google Places responses into Service records."""

import logging
import uuid
from typing import Any, Dict, Optional

from petservices.etl.categories import infer_category_from_types
from petservices.models import Review, Service, ServiceSource, utc_now_iso

logger = logging.getLogger(__name__)

ID_PREFIX = "gmaps-"
DEFAULT_PRICE_LEVEL = 2
UNKNOWN_CITY = "Unknown"
UNNAMED_PLACE = "Unnamed place"


def place_url(place_id: str) -> str:
    return f"https://www.google.com/maps/place/?q=place_id:{place_id}"


def parse_city(address: str) -> str:
    """Best-effort city from a formatted address: the second-to-last comma segment."""
    parts = (address or "").split(",")
    if len(parts) < 2:
        return UNKNOWN_CITY
    city = "".join(ch for ch in parts[-2] if not ch.isdigit()).strip()
    return city or UNKNOWN_CITY


def _operating_hours(place: Dict[str, Any]) -> str:
    opening_hours = place.get("opening_hours") or {}
    return ", ".join(opening_hours.get("weekday_text") or [])


def normalize_place(
    place: Dict[str, Any],
    details: Optional[Dict[str, Any]] = None,
    category_hint: Optional[str] = None,
) -> Service:
    """Merge a search result with its optional details payload into a Service."""
    try:
        merged = {**place, **details} if details else dict(place)
        place_id = merged["place_id"]
        name = merged.get("name")
        if not name:
            raise ValueError(f"place {place_id} has no name")

        address = merged.get("formatted_address") or merged.get("vicinity") or ""
        location = merged["geometry"]["location"]
        now = utc_now_iso()
        return Service(
            id=f"{ID_PREFIX}{place_id}",
            name=name,
            source=ServiceSource.GOOGLE_MAPS,
            address=address,
            city=parse_city(address),
            category_id=category_hint or infer_category_from_types(merged.get("types") or []),
            contact_phone=merged.get("formatted_phone_number") or "",
            website=merged.get("website") or place_url(place_id),
            operating_hours=_operating_hours(merged),
            price_range=merged.get("price_level") or DEFAULT_PRICE_LEVEL,
            latitude=location["lat"],
            longitude=location["lng"],
            verified=True,
            avg_rating=merged.get("rating") or 0,
            review_count=merged.get("user_ratings_total") or 0,
            external_id=place_id,
            external_url=place_url(place_id),
            created_at=now,
            updated_at=now,
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning("Falling back to minimal record for malformed place: %s", exc)
        return _minimal_service(place, category_hint)


def _minimal_service(place: Any, category_hint: Optional[str]) -> Service:
    raw = place if isinstance(place, dict) else {}
    place_id = raw.get("place_id")
    now = utc_now_iso()
    return Service(
        id=f"{ID_PREFIX}{place_id or uuid.uuid4().hex}",
        name=str(raw.get("name") or UNNAMED_PLACE),
        source=ServiceSource.GOOGLE_MAPS,
        address=str(raw.get("formatted_address") or raw.get("vicinity") or ""),
        city=UNKNOWN_CITY,
        category_id=category_hint or "unknown",
        price_range=DEFAULT_PRICE_LEVEL,
        verified=True,
        external_id=place_id,
        external_url=place_url(place_id) if place_id else None,
        created_at=now,
        updated_at=now,
    )


def normalize_review(raw: Dict[str, Any], service_id: str, index: int = 0) -> Review:
    """Map one review from a place details payload."""
    author = raw.get("author_name") or ""
    posted = raw.get("time")
    return Review(
        id=f"{service_id}-review-{posted or index}",
        service_id=service_id,
        overall_rating=float(raw.get("rating") or 0),
        source=ServiceSource.GOOGLE_MAPS,
        user_id=author,
        content=raw.get("text") or "",
        username=author or None,
        user_avatar=raw.get("profile_photo_url"),
        external_review_url=raw.get("author_url"),
    )
