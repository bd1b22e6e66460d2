"""Synthetic sample places shown when every Overpass mirror fails."""
from __future__ import annotations

import random
import time
from typing import List, Optional

from . import config
from .models import Place


def generate_demo_places(
    lat: float,
    lon: float,
    radius_m: int,
    rng: Optional[random.Random] = None,
    now_ms: Optional[int] = None,
) -> List[Place]:
    """Ten fixed places around the center, offsets scaled by the radius.

    Distances are random within [0.1, 0.9) of the radius, not measured.
    """
    rng = rng or random.Random()
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    scale = radius_m / 1000

    places = []
    for idx, (name, category, (dlat, dlon)) in enumerate(config.DEMO_PLACES):
        distance = (
            rng.random() * (radius_m * config.DEMO_DISTANCE_SPAN_SHARE)
            + radius_m * config.DEMO_DISTANCE_MIN_SHARE
        )
        places.append(
            Place(
                id=f"demo_{idx}_{now_ms}",
                name=name,
                category=category,
                description=config.DEMO_DESCRIPTION,
                lat=lat + dlat * scale,
                lng=lon + dlon * scale,
                distance=distance,
            )
        )
    places.sort(key=lambda p: p.distance)
    return places
