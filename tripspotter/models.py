"""Domain records and their persisted (camelCase) JSON shapes."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .categories import DEFAULT_CATEGORY


@dataclass(frozen=True)
class Place:
    id: str
    name: str
    category: str
    description: str
    lat: float
    lng: float
    tags: Dict[str, str] = field(default_factory=dict)
    distance: float = 0.0
    osm_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "tags": dict(self.tags),
            "distance": self.distance,
        }
        if self.osm_id is not None:
            data["osmId"] = self.osm_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            description=str(data.get("description") or ""),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            tags=dict(data.get("tags") or {}),
            distance=float(data.get("distance") or 0.0),
            osm_id=data.get("osmId"),
        )


@dataclass(frozen=True)
class FavoritePlace:
    """Snapshot of a favorited place, kept after the search results are gone."""

    id: str
    name: str
    category: str
    description: str
    lat: float
    lng: float
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_place(cls, place: Place) -> "FavoritePlace":
        return cls(
            id=place.id,
            name=place.name,
            category=place.category,
            description=place.description,
            lat=place.lat,
            lng=place.lng,
            tags=dict(place.tags),
        )

    def to_place(self) -> Place:
        return Place(
            id=self.id,
            name=self.name,
            category=self.category,
            description=self.description,
            lat=self.lat,
            lng=self.lng,
            tags=dict(self.tags),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "tags": dict(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FavoritePlace":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            description=str(data.get("description") or ""),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            tags=dict(data.get("tags") or {}),
        )


@dataclass
class TripLocation:
    id: str
    name: str
    category: str
    lat: float
    lng: float
    order: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "lat": self.lat,
            "lng": self.lng,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TripLocation":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            order=int(data["order"]),
        )


@dataclass
class Trip:
    id: str
    name: str
    start_date: str
    end_date: str
    icon: str = ""
    notes: str = ""
    locations: List[TripLocation] = field(default_factory=list)
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "icon": self.icon,
            "notes": self.notes,
            "locations": [loc.to_dict() for loc in self.locations],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trip":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            start_date=str(data.get("startDate") or ""),
            end_date=str(data.get("endDate") or ""),
            icon=str(data.get("icon") or ""),
            notes=str(data.get("notes") or ""),
            locations=[TripLocation.from_dict(loc) for loc in data.get("locations") or []],
            created_at=str(data.get("createdAt") or ""),
        )

    def has_location(self, place_id: str) -> bool:
        return any(loc.id == place_id for loc in self.locations)


@dataclass(frozen=True)
class Notice:
    """A user-facing message; level is one of info, success, error."""

    level: str
    message: str
