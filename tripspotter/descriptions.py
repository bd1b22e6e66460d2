"""Short human-readable summaries built from OpenStreetMap tags."""
from __future__ import annotations

from typing import Dict, List, Mapping

SEPARATOR = " • "
PLACEHOLDER = "Click + to add to your trip"
OPENING_HOURS_MAX_CHARS = 30

HISTORIC_LABELS: Dict[str, str] = {
    "monument": "🏛️ Monument",
    "memorial": "🎖️ Memorial",
    "castle": "🏰 Castle",
    "ruins": "🏚️ Historic Ruins",
    "archaeological_site": "🏺 Archaeological Site",
    "church": "⛪ Church",
    "mosque": "🕌 Mosque",
    "palace": "👑 Palace",
    "fort": "🏰 Fort",
    "tower": "🗼 Tower",
    "building": "🏛️ Historic Building",
}


def historic_label(value: str) -> str:
    return HISTORIC_LABELS.get(value, f"🏛️ Historic: {value}")


def describe_tags(tags: Mapping[str, str]) -> str:
    parts: List[str] = []

    historic = tags.get("historic")
    if historic:
        parts.append(historic_label(historic))
    if tags.get("heritage"):
        parts.append("🌟 Heritage Site")
    if tags.get("cuisine"):
        parts.append(f"🍴 {tags['cuisine']}")
    if tags.get("opening_hours"):
        parts.append(f"🕐 {tags['opening_hours'][:OPENING_HOURS_MAX_CHARS]}")
    if tags.get("phone"):
        parts.append(f"📞 {tags['phone']}")
    if tags.get("website"):
        parts.append("🌐 Website")
    if tags.get("wheelchair") == "yes":
        parts.append("♿ Accessible")
    if tags.get("stars"):
        parts.append(f"⭐ {tags['stars']} stars")
    if tags.get("addr:street"):
        parts.append(f"📍 {tags['addr:street']}")
    if tags.get("religion"):
        parts.append(f"🙏 {tags['religion']}")

    return SEPARATOR.join(parts) or PLACEHOLDER
