"""Top-level controller: owns the app state and wires fetcher, store and storage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from . import config
from .categories import validate_category_filter
from .fetcher import FetchResult, NearbyFetcher
from .http import HttpClient, RequestMetrics
from .models import Place, Trip, TripLocation
from .pipeline import PlaceIngestor, filter_places
from .places_client import OverpassClient
from .state import SECTION_EXPLORE, SECTION_FAVORITES, SECTION_TRIPS, AppState
from .storage import LocalStorage
from .store import TripNotFoundError, TripStore

logger = logging.getLogger(__name__)

QUICK_ADD_ADDED = "added"
QUICK_ADD_NEEDS_TRIP = "needs_trip"
QUICK_ADD_CHOOSE_TRIP = "choose_trip"


class PlaceNotFoundError(ValueError):
    pass


@dataclass
class QuickAddResult:
    status: str
    message: str
    location: Optional[TripLocation] = None
    trip: Optional[Trip] = None


def build_fetcher(metrics: Optional[RequestMetrics] = None) -> NearbyFetcher:
    http_client = HttpClient(timeout=config.HTTP_TIMEOUT_SECONDS)
    client = OverpassClient(http_client, metrics=metrics)
    return NearbyFetcher(client, PlaceIngestor(), metrics=metrics)


class TripSpotter:
    def __init__(
        self,
        storage: LocalStorage,
        fetcher: Optional[NearbyFetcher] = None,
        state: Optional[AppState] = None,
    ) -> None:
        self.state = state or AppState()
        self.storage = storage
        self.store = TripStore(self.state, storage)
        self.fetcher = fetcher or build_fetcher()

    def startup(self) -> None:
        self.load_theme()
        self.store.load()
        logger.debug(
            "Loaded %s trips and %s favorites", len(self.state.trips), len(self.state.favorites)
        )

    # --- explore ---

    def explore(self, lat: float, lon: float, radius_m: Optional[int] = None) -> Optional[FetchResult]:
        if radius_m is None:
            radius_m = self.state.search_radius
        self.state.search_radius = int(radius_m)
        self.state.current_section = SECTION_EXPLORE
        result = self.fetcher.fetch(lat, lon, self.state.search_radius)
        if result is not None:
            self.state.nearby_places = list(result.places)
        return result

    def clear_results(self) -> None:
        self.state.nearby_places = []
        self.state.selected_place = None
        self.fetcher.ingestor.clear()

    def set_category(self, category: str) -> None:
        self.state.current_category = validate_category_filter(category)

    def set_search(self, query: str) -> None:
        self.state.search_query = (query or "").strip()

    def visible_places(self) -> List[Place]:
        return filter_places(self.state.nearby_places, self.state.current_category, self.state.search_query)

    def find_place(self, place_id: str) -> Optional[Place]:
        for place in self.state.nearby_places:
            if place.id == place_id:
                return place
        for snapshot in self.state.favorite_places:
            if snapshot.id == place_id:
                return snapshot.to_place()
        return None

    def select_place(self, place_id: str) -> Place:
        place = self.find_place(place_id)
        if place is None:
            raise PlaceNotFoundError(f"Place not found: {place_id}")
        self.state.selected_place = place
        return place

    # --- trips ---

    def create_trip(
        self,
        name: str,
        start_date: str,
        end_date: str,
        icon: str = "",
        notes: str = "",
    ) -> Trip:
        trip = self.store.create_trip(name, start_date, end_date, icon=icon, notes=notes)
        pending = self.state.selected_place
        if pending is not None:
            self.store.add_place_to_trip(trip.id, pending)
            self.state.selected_place = None
        return trip

    def delete_trip(self, trip_id: str) -> bool:
        return self.store.delete_trip(trip_id)

    def add_place_to_trip(self, trip_id: str, place: Optional[Place] = None) -> TripLocation:
        place = place or self.state.selected_place
        if place is None:
            raise PlaceNotFoundError("No place selected")
        location = self.store.add_place_to_trip(trip_id, place)
        self.state.selected_place = None
        return location

    def remove_location_from_trip(self, trip_id: str, location_id: str) -> bool:
        return self.store.remove_location_from_trip(trip_id, location_id)

    def quick_add_to_trip(self, place: Place) -> QuickAddResult:
        """Add straight into the only trip, or report what the user must do first."""
        trips = self.state.trips
        if len(trips) != 1:
            # Held until the user creates or picks a trip.
            self.state.selected_place = place
            if not trips:
                return QuickAddResult(QUICK_ADD_NEEDS_TRIP, "Create a trip first!")
            return QuickAddResult(QUICK_ADD_CHOOSE_TRIP, "Choose a trip for this place")
        trip = trips[0]
        location = self.store.add_place_to_trip(trip.id, place)
        return QuickAddResult(
            QUICK_ADD_ADDED, f'Added "{place.name}" to "{trip.name}"!', location=location, trip=trip
        )

    def trip_stops(self, trip_id: str) -> List[Place]:
        trip = self.store.get_trip(trip_id)
        if trip is None:
            raise TripNotFoundError(f"Trip not found: {trip_id}")
        self.state.selected_trip = trip
        self.state.current_section = SECTION_TRIPS
        return [
            Place(
                id=loc.id,
                name=loc.name,
                category=loc.category,
                description=f"Stop #{loc.order} in {trip.name}",
                lat=loc.lat,
                lng=loc.lng,
            )
            for loc in sorted(trip.locations, key=lambda loc: loc.order)
        ]

    # --- favorites ---

    def toggle_favorite(self, place_id: str, place: Optional[Place] = None) -> bool:
        if place is None:
            place = next((p for p in self.state.nearby_places if p.id == place_id), None)
        return self.store.toggle_favorite(place_id, place)

    def favorites_view(self) -> List[Place]:
        self.state.current_section = SECTION_FAVORITES
        return [snapshot.to_place() for snapshot in self.store.favorite_snapshots()]

    # --- stats & theme ---

    def stats(self) -> Dict[str, int]:
        return {
            "places": sum(len(trip.locations) for trip in self.state.trips),
            "trips": len(self.state.trips),
            "favorites": len(self.state.favorites),
        }

    def load_theme(self) -> bool:
        self.state.is_dark_theme = self.storage.get_item(config.STORAGE_KEY_THEME) == config.THEME_DARK
        return self.state.is_dark_theme

    def set_theme(self, theme: str) -> None:
        if theme not in (config.THEME_DARK, config.THEME_LIGHT):
            raise ValueError(f"Unknown theme: {theme!r}")
        self.state.is_dark_theme = theme == config.THEME_DARK
        self.storage.set_item(config.STORAGE_KEY_THEME, theme)

    def toggle_theme(self) -> str:
        theme = config.THEME_LIGHT if self.state.is_dark_theme else config.THEME_DARK
        self.set_theme(theme)
        return theme


def format_date_range(start: str, end: str) -> str:
    """'Mar 3 - Mar 9, 2026' from ISO dates; raw values if they do not parse."""
    try:
        start_dt = datetime.strptime(start, "%Y-%m-%d")
        end_dt = datetime.strptime(end, "%Y-%m-%d")
    except (TypeError, ValueError):
        return f"{start} - {end}"
    return f"{start_dt:%b} {start_dt.day} - {end_dt:%b} {end_dt.day}, {end_dt.year}"
