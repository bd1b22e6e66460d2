"""Output helpers for exported place lists and trips."""
from __future__ import annotations

import csv
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from .models import Place, Trip

PLACE_CSV_FIELDS = ["id", "name", "category", "distance", "lat", "lng", "description", "osmId"]


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _fsync_dir(path: str) -> None:
    try:
        dir_fd = os.open(path, os.O_DIRECTORY)
    except Exception:
        return
    try:
        os.fsync(dir_fd)
    except Exception:
        pass
    finally:
        os.close(dir_fd)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        _fsync_dir(dir_path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except Exception:
            pass
        raise


def write_json_object(path: str, payload: Dict[str, Any]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def write_places_json(path: str, places: Iterable[Place], center: Optional[Dict[str, Any]] = None) -> None:
    payload: Dict[str, Any] = {
        "center": center or {},
        "places": [p.to_dict() for p in places],
    }
    write_json_object(path, payload)


def read_places_json(path: str) -> List[Place]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    rows = data.get("places", []) if isinstance(data, dict) else data
    return [Place.from_dict(row) for row in rows]


def write_places_csv(path: str, places: Iterable[Place]) -> None:
    places = list(places)
    with atomic_writer(path, mode="w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=PLACE_CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for place in places:
            row = place.to_dict()
            row["distance"] = round(place.distance, 1)
            writer.writerow(row)


def write_trip_json(path: str, trip: Trip) -> None:
    write_json_object(path, trip.to_dict())
