"""Category classification from OpenStreetMap tags.

Rules are an ordered list of (predicate, category) pairs; the first matching
predicate decides. Historic and religious places are matched before the
generic attraction rule.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Tuple

RESTAURANT = "restaurant"
HOTEL = "hotel"
ATTRACTION = "attraction"
NATURE = "nature"
SHOPPING = "shopping"

CATEGORIES: Tuple[str, ...] = (RESTAURANT, HOTEL, ATTRACTION, NATURE, SHOPPING)
DEFAULT_CATEGORY = ATTRACTION
ALL = "all"

CATEGORY_EMOJI: Dict[str, str] = {
    RESTAURANT: "🍽️",
    HOTEL: "🏨",
    ATTRACTION: "🏛️",
    NATURE: "🌳",
    SHOPPING: "🛍️",
}
DEFAULT_EMOJI = "📍"

FOOD_AMENITIES = {"restaurant", "cafe", "fast_food", "bar", "pub", "food_court", "ice_cream", "biergarten"}
LODGING_TOURISM = {"hotel", "hostel", "guest_house", "motel", "apartment", "chalet"}
RELIGIOUS_BUILDINGS = {"church", "cathedral", "mosque", "synagogue", "temple"}
LANDMARK_MAN_MADE = {"tower", "lighthouse"}
ATTRACTION_TOURISM = {"attraction", "museum", "gallery", "viewpoint", "artwork", "zoo", "aquarium", "theme_park"}
CULTURE_AMENITIES = {"theatre", "cinema", "arts_centre", "nightclub", "casino"}
NATURE_LEISURE = {"park", "garden", "nature_reserve", "beach_resort", "marina"}

Tags = Mapping[str, str]
Rule = Tuple[Callable[[Tags], bool], str]


def _has(tags: Tags, key: str) -> bool:
    return bool(tags.get(key))


def is_food(tags: Tags) -> bool:
    return tags.get("amenity") in FOOD_AMENITIES


def is_lodging(tags: Tags) -> bool:
    return tags.get("tourism") in LODGING_TOURISM


def is_historic(tags: Tags) -> bool:
    return (
        _has(tags, "historic")
        or _has(tags, "heritage")
        or _has(tags, "memorial")
        or tags.get("building") in RELIGIOUS_BUILDINGS
        or tags.get("amenity") == "place_of_worship"
        or tags.get("man_made") in LANDMARK_MAN_MADE
    )


def is_attraction(tags: Tags) -> bool:
    return tags.get("tourism") in ATTRACTION_TOURISM or tags.get("amenity") in CULTURE_AMENITIES


def is_nature(tags: Tags) -> bool:
    return (
        tags.get("leisure") in NATURE_LEISURE
        or _has(tags, "natural")
        or tags.get("tourism") == "picnic_site"
    )


def is_shopping(tags: Tags) -> bool:
    return _has(tags, "shop") or tags.get("amenity") == "marketplace"


CATEGORY_RULES: List[Rule] = [
    (is_food, RESTAURANT),
    (is_lodging, HOTEL),
    (is_historic, ATTRACTION),
    (is_attraction, ATTRACTION),
    (is_nature, NATURE),
    (is_shopping, SHOPPING),
]


def classify_tags(tags: Tags) -> str:
    for predicate, category in CATEGORY_RULES:
        if predicate(tags):
            return category
    return DEFAULT_CATEGORY


def category_emoji(category: str) -> str:
    return CATEGORY_EMOJI.get(category, DEFAULT_EMOJI)


def validate_category_filter(category: str) -> str:
    value = (category or ALL).strip().lower()
    if value != ALL and value not in CATEGORIES:
        raise ValueError(
            f"Unknown category: {category!r} (expected one of: {', '.join((ALL,) + CATEGORIES)})"
        )
    return value
