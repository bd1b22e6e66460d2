"""Project configuration.

Loads user overrides from tripspotter_config.json when available, falling
back to sensible defaults. Keep Overpass request shapes centralized here.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- Overpass API mirrors (tried in order) ---

_DEFAULT_OVERPASS_MIRRORS: List[str] = [
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
]
OVERPASS_MIRRORS: List[str] = list(_DEFAULT_OVERPASS_MIRRORS)

# --- Query shape ---

OVERPASS_SERVER_TIMEOUT_SECONDS = 45
OVERPASS_OUTPUT_LIMIT = 100

# (element type, tag filter). Rendered as `type[filter](around:r,lat,lon);`
OVERPASS_SELECTORS: List[Tuple[str, str]] = [
    # Food & drinks
    ("node", '"amenity"~"restaurant|cafe|fast_food|bar|pub|food_court|ice_cream|biergarten"'),
    ("way", '"amenity"~"restaurant|cafe|bar"'),
    # Accommodation
    ("node", '"tourism"~"hotel|hostel|guest_house|motel|apartment|chalet"'),
    ("way", '"tourism"~"hotel|hostel|guest_house|motel"'),
    # Tourist attractions
    ("node", '"tourism"~"attraction|museum|gallery|viewpoint|artwork|zoo|aquarium|theme_park|information"'),
    ("way", '"tourism"~"attraction|museum|gallery|zoo|aquarium|theme_park"'),
    ("relation", '"tourism"~"attraction|museum"'),
    # Historic places
    ("node", '"historic"'),
    ("way", '"historic"'),
    ("relation", '"historic"'),
    ("node", '"heritage"'),
    ("way", '"heritage"'),
    ("node", '"building"="church"'),
    ("node", '"building"="cathedral"'),
    ("node", '"building"="mosque"'),
    ("node", '"building"="synagogue"'),
    ("node", '"building"="temple"'),
    ("way", '"building"~"church|cathedral|mosque|synagogue|temple"'),
    ("node", '"amenity"~"place_of_worship"'),
    ("way", '"amenity"="place_of_worship"'),
    # Monuments & memorials
    ("node", '"memorial"'),
    ("node", '"man_made"~"tower|lighthouse|windmill"'),
    ("way", '"man_made"~"tower|lighthouse"'),
    # Entertainment & culture
    ("node", '"amenity"~"theatre|cinema|nightclub|casino|arts_centre|community_centre"'),
    ("way", '"amenity"~"theatre|cinema|arts_centre"'),
    # Nature & parks
    ("node", '"leisure"~"park|garden|nature_reserve|playground|beach_resort|marina"'),
    ("way", '"leisure"~"park|garden|nature_reserve|marina"'),
    ("node", '"natural"~"beach|peak|waterfall|cave_entrance|spring|hot_spring"'),
    ("way", '"natural"~"beach|wood"'),
    ("node", '"tourism"="picnic_site"'),
    # Shopping
    ("node", '"shop"~"mall|department_store|supermarket|clothes|gift|jewelry|antiques|art"'),
    ("way", '"shop"~"mall|department_store"'),
    ("node", '"amenity"="marketplace"'),
    ("way", '"amenity"="marketplace"'),
]

# --- Search defaults ---

DEFAULT_CENTER: Dict[str, float] = {"lat": 41.0082, "lon": 28.9784}  # Istanbul
DEFAULT_RADIUS_M = 1500
MIN_RADIUS_M = 100
MAX_RADIUS_M = 10000
MAX_PLACES_PER_FETCH = 50
NAME_TAG_KEYS: List[str] = ["name", "name:en", "name:tr"]

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 15
HTTP_USER_AGENT = "tripspotter/0.1"

# --- Synthetic fallback places ---

# (name, category, (lat offset, lon offset) per 1 km of radius)
DEMO_PLACES: List[Tuple[str, str, Tuple[float, float]]] = [
    ("Local Restaurant", "restaurant", (0.002, 0.003)),
    ("City Museum", "attraction", (-0.001, 0.002)),
    ("Grand Hotel", "hotel", (0.003, -0.001)),
    ("Central Park", "nature", (-0.002, -0.002)),
    ("Shopping Mall", "shopping", (0.001, -0.003)),
    ("Historic Cafe", "restaurant", (-0.003, 0.001)),
    ("Art Gallery", "attraction", (0.002, -0.002)),
    ("Boutique Hotel", "hotel", (-0.001, -0.001)),
    ("Beach Resort", "nature", (0.004, 0.001)),
    ("Fashion Store", "shopping", (-0.002, 0.003)),
]
DEMO_DESCRIPTION = "Sample place - Click to add to your trip"
DEMO_DISTANCE_MIN_SHARE = 0.1
DEMO_DISTANCE_SPAN_SHARE = 0.8

# --- Persistence ---

DB_PATH = "tripspotter.db"
STORAGE_KEY_DATA = "travelPlannerData"
STORAGE_KEY_THEME = "theme"
THEME_DARK = "dark"
THEME_LIGHT = "light"

# --- Outputs ---

OUTPUT_DIR = "out"
PLACES_EXPORT_NAME = "places.json"


def load_app_config(path: Optional[str] = None) -> bool:
    """Load overrides from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "tripspotter_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    globals_ref = globals()

    center = data.get("center", {})
    if center.get("lat") is not None and center.get("lon") is not None:
        globals_ref["DEFAULT_CENTER"] = {"lat": float(center["lat"]), "lon": float(center["lon"])}

    radius = data.get("radius_m")
    if radius is not None:
        globals_ref["DEFAULT_RADIUS_M"] = int(radius)

    mirrors = data.get("mirrors", [])
    if mirrors:
        globals_ref["OVERPASS_MIRRORS"] = [str(m) for m in mirrors]

    max_places = data.get("max_places")
    if max_places is not None:
        globals_ref["MAX_PLACES_PER_FETCH"] = int(max_places)

    timeout = data.get("http_timeout_seconds")
    if timeout is not None:
        globals_ref["HTTP_TIMEOUT_SECONDS"] = float(timeout)

    db_path = data.get("db_path")
    if db_path and not os.environ.get("TRIPSPOTTER_DB_PATH"):
        globals_ref["DB_PATH"] = str(db_path)

    return True
