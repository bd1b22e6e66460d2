"""Overpass API client: query building and response parsing."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

from . import config
from .http import HttpClient, RequestMetrics


class OverpassClient:
    def __init__(
        self,
        http_client: HttpClient,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self.http = http_client
        self.metrics = metrics

    def search_around(
        self,
        mirror_url: str,
        lat: float,
        lon: float,
        radius_m: int,
    ) -> List[Dict[str, Any]]:
        """Run the composite POI query against one mirror and return its elements.

        Raises on transport errors, non-200 statuses and non-JSON bodies; the
        caller decides whether to move on to the next mirror.
        """
        query = build_overpass_query(lat, lon, radius_m)
        if self.metrics is not None:
            self.metrics.inc("attempt")
        response = self.http.post_form(mirror_url, encode_query_body(query))
        return parse_elements(response)


def build_overpass_query(
    lat: float,
    lon: float,
    radius_m: int,
    selectors: Optional[Iterable[Tuple[str, str]]] = None,
) -> str:
    if selectors is None:
        selectors = config.OVERPASS_SELECTORS
    around = f"(around:{int(radius_m)},{lat},{lon})"
    lines = [f"[out:json][timeout:{config.OVERPASS_SERVER_TIMEOUT_SECONDS}];", "("]
    for element_type, tag_filter in selectors:
        lines.append(f"  {element_type}[{tag_filter}]{around};")
    lines.append(");")
    lines.append(f"out center {config.OVERPASS_OUTPUT_LIMIT};")
    return "\n".join(lines)


def encode_query_body(query: str) -> str:
    return "data=" + quote(query, safe="!*'()")


# Adapter for Overpass response elements

def parse_elements(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    elements = response.get("elements") or []
    parsed: List[Dict[str, Any]] = []
    for el in elements:
        if not isinstance(el, dict):
            continue
        center = el.get("center") or {}
        parsed.append(
            {
                "id": el.get("id"),
                "type": el.get("type") or "node",
                "lat": el.get("lat") if el.get("lat") is not None else center.get("lat"),
                "lon": el.get("lon") if el.get("lon") is not None else center.get("lon"),
                "tags": el.get("tags") or {},
            }
        )
    return parsed
