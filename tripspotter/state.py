"""Application state owned by the top-level controller."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from . import config
from .categories import ALL
from .models import FavoritePlace, Place, Trip

SECTION_EXPLORE = "explore"
SECTION_TRIPS = "trips"
SECTION_FAVORITES = "favorites"


@dataclass
class AppState:
    nearby_places: List[Place] = field(default_factory=list)
    trips: List[Trip] = field(default_factory=list)
    favorites: List[str] = field(default_factory=list)
    favorite_places: List[FavoritePlace] = field(default_factory=list)
    selected_place: Optional[Place] = None
    selected_trip: Optional[Trip] = None
    current_category: str = ALL
    current_section: str = SECTION_EXPLORE
    search_query: str = ""
    is_dark_theme: bool = False
    search_radius: int = field(default_factory=lambda: config.DEFAULT_RADIUS_M)
