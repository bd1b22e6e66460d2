"""Trips and favorites, persisted as one JSON blob after every mutation."""
from __future__ import annotations

import json
import logging
import random
import string
import time
from typing import Any, Dict, List, Optional

from . import config
from .models import FavoritePlace, Place, Trip, TripLocation
from .state import AppState
from .storage import LocalStorage, utc_now_iso

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


class TripValidationError(ValueError):
    pass


class DuplicateLocationError(ValueError):
    pass


class TripNotFoundError(ValueError):
    pass


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36) for _ in range(11))
    return "id_" + _to_base36(int(time.time() * 1000)) + suffix


class TripStore:
    def __init__(self, state: AppState, storage: LocalStorage, storage_key: Optional[str] = None) -> None:
        self.state = state
        self.storage = storage
        self.storage_key = storage_key or config.STORAGE_KEY_DATA

    # --- persistence ---

    def load(self) -> None:
        """Read the persisted blob; absent or corrupt data leaves empty collections."""
        raw = self.storage.get_item(self.storage_key)
        self.state.trips = []
        self.state.favorites = []
        self.state.favorite_places = []
        if not raw:
            return
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            trips = [Trip.from_dict(t) for t in data.get("trips") or []]
            favorites = [str(f) for f in data.get("favorites") or []]
            favorite_places = [FavoritePlace.from_dict(p) for p in data.get("favoritePlaces") or []]
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.error("Error loading data: %s", exc)
            return
        self.state.trips = trips
        self.state.favorites = favorites
        self.state.favorite_places = favorite_places

    def save(self) -> None:
        payload: Dict[str, Any] = {
            "trips": [t.to_dict() for t in self.state.trips],
            "favorites": list(self.state.favorites),
            "favoritePlaces": [p.to_dict() for p in self.state.favorite_places],
        }
        self.storage.set_item(self.storage_key, json.dumps(payload, ensure_ascii=False))

    # --- trips ---

    def get_trip(self, trip_id: str) -> Optional[Trip]:
        for trip in self.state.trips:
            if trip.id == trip_id:
                return trip
        return None

    def create_trip(
        self,
        name: str,
        start_date: str,
        end_date: str,
        icon: str = "",
        notes: str = "",
    ) -> Trip:
        name = (name or "").strip()
        start_date = (start_date or "").strip()
        end_date = (end_date or "").strip()
        if not name or not start_date or not end_date:
            raise TripValidationError("Please fill in required fields")

        trip = Trip(
            id=generate_id(),
            name=name,
            start_date=start_date,
            end_date=end_date,
            icon=icon or "",
            notes=(notes or "").strip(),
            locations=[],
            created_at=utc_now_iso(),
        )
        self.state.trips.append(trip)
        self.save()
        logger.info("Created trip %s (%s)", trip.id, trip.name)
        return trip

    def delete_trip(self, trip_id: str) -> bool:
        for idx, trip in enumerate(self.state.trips):
            if trip.id == trip_id:
                del self.state.trips[idx]
                if self.state.selected_trip is not None and self.state.selected_trip.id == trip_id:
                    self.state.selected_trip = None
                self.save()
                return True
        return False

    def add_place_to_trip(self, trip_id: str, place: Place) -> TripLocation:
        trip = self.get_trip(trip_id)
        if trip is None:
            raise TripNotFoundError(f"Trip not found: {trip_id}")
        if trip.has_location(place.id):
            raise DuplicateLocationError("Already in this trip!")

        location = TripLocation(
            id=place.id,
            name=place.name,
            category=place.category,
            lat=place.lat,
            lng=place.lng,
            order=len(trip.locations) + 1,
        )
        trip.locations.append(location)
        self.save()
        return location

    def remove_location_from_trip(self, trip_id: str, location_id: str) -> bool:
        trip = self.get_trip(trip_id)
        if trip is None:
            return False
        trip.locations = [loc for loc in trip.locations if loc.id != location_id]
        for idx, loc in enumerate(trip.locations):
            loc.order = idx + 1
        self.save()
        return True

    def is_place_in_any_trip(self, place_id: str) -> bool:
        return any(trip.has_location(place_id) for trip in self.state.trips)

    # --- favorites ---

    def is_favorite(self, place_id: str) -> bool:
        return place_id in self.state.favorites

    def toggle_favorite(self, place_id: str, place: Optional[Place] = None) -> bool:
        """Flip favorite status and return the new status.

        Adding snapshots ``place`` (when given) so it stays viewable after the
        search results are replaced.
        """
        if place_id in self.state.favorites:
            self.state.favorites.remove(place_id)
            self.state.favorite_places = [p for p in self.state.favorite_places if p.id != place_id]
            favorited = False
        else:
            self.state.favorites.append(place_id)
            if place is not None and not any(p.id == place_id for p in self.state.favorite_places):
                self.state.favorite_places.append(FavoritePlace.from_place(place))
            favorited = True
        self.save()
        return favorited

    def favorite_snapshots(self) -> List[FavoritePlace]:
        ids = set(self.state.favorites)
        return [p for p in self.state.favorite_places if p.id in ids]
