"""Core data models shared by the platform adapters and the aggregator."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ServiceSource(str, Enum):
    """Origin platform of a listing."""

    INTERNAL = "internal"
    GOOGLE_MAPS = "google_maps"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TOKOPEDIA = "tokopedia"
    SHOPEE = "shopee"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ServiceSource.INTERNAL: "Our Database",
    ServiceSource.GOOGLE_MAPS: "Google Maps",
    ServiceSource.INSTAGRAM: "Instagram",
    ServiceSource.FACEBOOK: "Facebook",
    ServiceSource.TOKOPEDIA: "Tokopedia",
    ServiceSource.SHOPEE: "Shopee",
    ServiceSource.OTHER: "Other",
}

# Columns of the `services` table written when an external listing is imported.
_DB_COLUMNS = (
    "name",
    "description",
    "address",
    "city",
    "category_id",
    "contact_phone",
    "contact_email",
    "website",
    "operating_hours",
    "price_range",
    "latitude",
    "longitude",
    "verified",
    "source",
    "external_id",
    "external_url",
)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(slots=True)
class Service:
    """Canonical listing record produced by every platform adapter."""

    id: str
    name: str
    source: ServiceSource
    address: str = ""
    city: str = ""
    category_id: str = ""
    category_name: Optional[str] = None
    description: Optional[str] = None
    contact_phone: str = ""
    contact_email: Optional[str] = None
    website: str = ""
    operating_hours: str = ""
    price_range: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    verified: bool = False
    avg_rating: Optional[float] = None
    review_count: Optional[int] = None
    external_id: Optional[str] = None
    external_url: Optional[str] = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        return data

    def to_db_row(self) -> Dict[str, Any]:
        """Project onto the `services` table. The primary key is left to the datastore."""
        row = {column: getattr(self, column) for column in _DB_COLUMNS}
        row["source"] = self.source.value
        return row

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Service":
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in payload.items() if key in known}
        values["source"] = ServiceSource(values.get("source") or ServiceSource.OTHER.value)
        if not values.get("id"):
            raise ValueError("id is required")
        if not values.get("name"):
            raise ValueError("name is required")
        return cls(**values)

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> "Service":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            source=ServiceSource(row.get("source") or ServiceSource.INTERNAL.value),
            address=row.get("address") or "",
            city=row.get("city") or "",
            category_id=row.get("category_id") or "",
            category_name=row.get("category_name"),
            description=row.get("description"),
            contact_phone=row.get("contact_phone") or "",
            contact_email=row.get("contact_email"),
            website=row.get("website") or "",
            operating_hours=row.get("operating_hours") or "",
            price_range=row.get("price_range"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            verified=bool(row.get("verified")),
            avg_rating=row.get("avg_rating"),
            review_count=row.get("review_count"),
            external_id=row.get("external_id"),
            external_url=row.get("external_url"),
            created_at=_as_iso(row.get("created_at")),
            updated_at=_as_iso(row.get("updated_at")),
        )


@dataclass(slots=True)
class Review:
    id: str
    service_id: str
    overall_rating: float
    source: ServiceSource
    user_id: str = ""
    content: str = ""
    username: Optional[str] = None
    user_avatar: Optional[str] = None
    helpful_count: int = 0
    external_review_url: Optional[str] = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        return data


def _as_iso(value: Any) -> str:
    if value is None:
        return utc_now_iso()
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
