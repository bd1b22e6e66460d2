"""Place ingestion: raw Overpass elements to ranked Place records."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from . import config
from .categories import ALL, classify_tags, validate_category_filter
from .descriptions import describe_tags
from .geo import haversine_m
from .models import Place

logger = logging.getLogger(__name__)


class PlaceIngestor:
    """Holds the working list of nearby places for the current search.

    Each ingest replaces the list wholesale; nothing carries over between calls.
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit
        self.places: List[Place] = []

    def ingest(self, elements: Iterable[Dict[str, Any]], center_lat: float, center_lon: float) -> List[Place]:
        self.places = process_elements(elements, center_lat, center_lon, limit=self.limit)
        return self.places

    def replace(self, places: Iterable[Place]) -> List[Place]:
        self.places = list(places)
        return self.places

    def clear(self) -> None:
        self.places = []


def process_elements(
    elements: Iterable[Dict[str, Any]],
    center_lat: float,
    center_lon: float,
    limit: Optional[int] = None,
) -> List[Place]:
    if limit is None:
        limit = config.MAX_PLACES_PER_FETCH

    places: List[Place] = []
    seen_names: Set[str] = set()
    skipped_coords = 0
    skipped_unnamed = 0
    skipped_duplicates = 0

    for element in elements:
        lat, lon = element_coordinates(element)
        if lat is None or lon is None:
            skipped_coords += 1
            continue

        tags = element.get("tags") or {}
        name = element_name(tags)
        if not name:
            skipped_unnamed += 1
            continue

        name_key = normalize_name(name)
        if name_key in seen_names:
            skipped_duplicates += 1
            continue
        seen_names.add(name_key)

        places.append(build_place(element, name, lat, lon, tags, center_lat, center_lon))

    places.sort(key=lambda p: p.distance)
    logger.debug(
        "Ingested %s places (no coords=%s, unnamed=%s, duplicates=%s)",
        len(places),
        skipped_coords,
        skipped_unnamed,
        skipped_duplicates,
    )
    return places[:limit]


def element_coordinates(element: Dict[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    center = element.get("center") or {}
    lat = element.get("lat")
    lon = element.get("lon")
    if lat is None:
        lat = center.get("lat")
    if lon is None:
        lon = center.get("lon")
    if lat is None or lon is None:
        return None, None
    try:
        return float(lat), float(lon)
    except (TypeError, ValueError):
        return None, None


def element_name(tags: Dict[str, Any]) -> Optional[str]:
    for key in config.NAME_TAG_KEYS:
        value = tags.get(key)
        if value and str(value).strip():
            return str(value)
    return None


def normalize_name(name: str) -> str:
    return name.strip().lower()


def place_id_for(element: Dict[str, Any]) -> str:
    return f"osm_{element.get('id')}_{element.get('type') or 'node'}"


def build_place(
    element: Dict[str, Any],
    name: str,
    lat: float,
    lon: float,
    tags: Dict[str, Any],
    center_lat: float,
    center_lon: float,
) -> Place:
    str_tags = {str(k): str(v) for k, v in tags.items()}
    return Place(
        id=place_id_for(element),
        osm_id=element.get("id"),
        name=name,
        category=classify_tags(str_tags),
        description=describe_tags(str_tags),
        lat=lat,
        lng=lon,
        tags=str_tags,
        distance=haversine_m(center_lat, center_lon, lat, lon),
    )


def filter_places(
    places: Iterable[Place],
    category: str = ALL,
    query: str = "",
) -> List[Place]:
    """Category chip plus free-text search over name and description."""
    category = validate_category_filter(category)
    needle = (query or "").strip().lower()
    out: List[Place] = []
    for place in places:
        if category != ALL and place.category != category:
            continue
        if needle and needle not in place.name.lower() and needle not in (place.description or "").lower():
            continue
        out.append(place)
    return out
