"""Mapping between internal pet-service categories and Google Places vocabulary."""

from typing import Iterable, Sequence, Union

ALL = "all"

VETERINARY_CLINICS = "veterinary_clinics"
PET_SHOPS = "pet_shops"
GROOMING_SERVICES = "grooming_services"
PET_HOTELS = "pet_hotels"
PET_CAFES = "pet_cafes"
PET_TRAINING = "pet_training"
PET_FRIENDLY_RESTAURANTS = "pet_friendly_restaurants"
PET_PARKS = "pet_parks"

CATEGORIES = (
    VETERINARY_CLINICS,
    PET_SHOPS,
    GROOMING_SERVICES,
    PET_HOTELS,
    PET_CAFES,
    PET_TRAINING,
    PET_FRIENDLY_RESTAURANTS,
    PET_PARKS,
)

DEFAULT_KEYWORD = "pet"

_PROVIDER_TYPES = {
    VETERINARY_CLINICS: "veterinary_care",
    PET_SHOPS: "pet_store",
    GROOMING_SERVICES: "pet_store",
    PET_HOTELS: "lodging",
    PET_CAFES: "cafe",
    PET_FRIENDLY_RESTAURANTS: "restaurant",
    PET_PARKS: "park",
    PET_TRAINING: "point_of_interest",
}

_PROVIDER_KEYWORDS = {
    VETERINARY_CLINICS: "veterinary clinic pet",
    PET_SHOPS: "pet shop store",
    GROOMING_SERVICES: "pet grooming salon",
    PET_HOTELS: "pet hotel boarding",
    PET_CAFES: "pet cafe",
    PET_FRIENDLY_RESTAURANTS: "pet friendly restaurant",
    PET_PARKS: "dog park",
    PET_TRAINING: "pet training school",
}

_DISPLAY_NAMES = {
    VETERINARY_CLINICS: "Veterinary Clinics",
    PET_SHOPS: "Pet Shops",
    GROOMING_SERVICES: "Grooming Services",
    PET_HOTELS: "Pet Hotels/Boarding",
    PET_CAFES: "Pet Cafés",
    PET_TRAINING: "Pet Training Centers",
    PET_FRIENDLY_RESTAURANTS: "Pet-friendly Restaurants",
    PET_PARKS: "Pet Parks/Recreation Areas",
    "search": "Various Services",
}

# Checked in order; earlier entries win.
_QUERY_KEYWORDS = (
    (("vet", "clinic", "dokter hewan"), VETERINARY_CLINICS),
    (("groom", "salon"), GROOMING_SERVICES),
    (("hotel", "boarding", "penginapan"), PET_HOTELS),
    (("cafe", "kafe"), PET_CAFES),
    (("park", "taman"), PET_PARKS),
    (("train", "school", "latih"), PET_TRAINING),
    (("restaurant", "restoran"), PET_FRIENDLY_RESTAURANTS),
)


def is_concrete(category_id: str) -> bool:
    return bool(category_id) and category_id != ALL


def to_provider_type(category_id: str) -> str:
    """Google place type for a category, or "" for no type filter."""
    if not is_concrete(category_id):
        return ""
    return _PROVIDER_TYPES.get(category_id, "")


def to_provider_keyword(category_id: str) -> str:
    if not is_concrete(category_id):
        return DEFAULT_KEYWORD
    return _PROVIDER_KEYWORDS.get(category_id, DEFAULT_KEYWORD)


def category_display_name(category_id: str) -> str:
    return _DISPLAY_NAMES.get(category_id, category_id)


def infer_category_from_types(types: Iterable[str]) -> str:
    tags = set(types or ())
    if "veterinary_care" in tags:
        return VETERINARY_CLINICS
    if "pet_store" in tags:
        return PET_SHOPS
    if "lodging" in tags and "point_of_interest" in tags:
        return PET_HOTELS
    if ("cafe" in tags or "restaurant" in tags) and "point_of_interest" in tags:
        return PET_CAFES
    if "park" in tags:
        return PET_PARKS
    if "restaurant" in tags:
        return PET_FRIENDLY_RESTAURANTS
    return PET_SHOPS


def infer_category_from_query(query: str) -> str:
    lowered = (query or "").lower()
    for keywords, category_id in _QUERY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category_id
    return PET_SHOPS


def infer_category(signal: Union[str, Sequence[str]]) -> str:
    """Guess a category from a free-text query or a list of Google place types."""
    if isinstance(signal, str):
        return infer_category_from_query(signal)
    return infer_category_from_types(signal)
