"""Nearby-place fetching across Overpass mirrors with a sample-data fallback."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import requests

from . import config
from .demo import generate_demo_places
from .geo import format_radius
from .http import HttpStatusError, RequestMetrics
from .mirrors import ATTEMPT_FAILED, ATTEMPT_OK, FAILED_ALL, START, initial_state, transition
from .models import Notice, Place
from .pipeline import PlaceIngestor
from .places_client import OverpassClient

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_EMPTY = "empty"
SOURCE_DEMO = "demo"

# Per-attempt failures that move on to the next mirror.
MIRROR_ERRORS = (requests.RequestException, HttpStatusError, ValueError)


@dataclass
class FetchResult:
    places: List[Place]
    source: str
    mirror: Optional[str] = None
    notices: List[Notice] = field(default_factory=list)


class NearbyFetcher:
    def __init__(
        self,
        client: OverpassClient,
        ingestor: Optional[PlaceIngestor] = None,
        mirrors: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self.client = client
        self.ingestor = ingestor or PlaceIngestor()
        self.mirrors = list(mirrors) if mirrors is not None else None
        self.rng = rng or random.Random()
        self.metrics = metrics
        self.is_loading = False

    def fetch(self, lat: float, lon: float, radius_m: Optional[int] = None) -> Optional[FetchResult]:
        """Fetch, ingest and rank places around a point.

        Returns None without doing anything when a fetch is already running.
        """
        if self.is_loading:
            logger.info("Fetch already in progress; ignoring request")
            if self.metrics is not None:
                self.metrics.inc("skipped_busy")
            return None

        self.is_loading = True
        try:
            return self._fetch(lat, lon, radius_m if radius_m is not None else config.DEFAULT_RADIUS_M)
        finally:
            self.is_loading = False

    def _fetch(self, lat: float, lon: float, radius_m: int) -> FetchResult:
        mirrors = self.mirrors if self.mirrors is not None else list(config.OVERPASS_MIRRORS)
        notices = [Notice("info", f"Searching places within {format_radius(radius_m)}...")]

        state = transition(initial_state(len(mirrors)), START)
        elements = None
        while not state.done:
            mirror = state.current_mirror(mirrors)
            try:
                elements = self.client.search_around(mirror, lat, lon, radius_m)
            except MIRROR_ERRORS as exc:
                logger.warning("Endpoint %s failed (%s), trying next...", mirror, exc)
                if self.metrics is not None:
                    self.metrics.inc("failure")
                state = transition(state, ATTEMPT_FAILED)
                continue
            if self.metrics is not None:
                self.metrics.inc("success")
            state = transition(state, ATTEMPT_OK)

        if state.phase == FAILED_ALL:
            logger.error("All API endpoints failed")
            if self.metrics is not None:
                self.metrics.inc("fallback")
            places = self.ingestor.replace(generate_demo_places(lat, lon, radius_m, rng=self.rng))
            notices.append(Notice("info", "Using sample data (API temporarily unavailable)"))
            return FetchResult(places=places, source=SOURCE_DEMO, notices=notices)

        mirror = state.current_mirror(mirrors)
        if not elements:
            self.ingestor.clear()
            notices.append(Notice("info", "No places found in this area. Try a larger radius!"))
            return FetchResult(places=[], source=SOURCE_EMPTY, mirror=mirror, notices=notices)

        places = self.ingestor.ingest(elements, lat, lon)
        if places:
            notices.append(Notice("success", f"Found {len(places)} places nearby!"))
        else:
            notices.append(Notice("info", "No places found. Try another area."))
        logger.info("Fetched %s elements from %s, kept %s places", len(elements), mirror, len(places))
        return FetchResult(places=places, source=SOURCE_REMOTE, mirror=mirror, notices=notices)
