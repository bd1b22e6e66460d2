"""CLI entrypoint."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from tripspotter import config
from tripspotter.app import (
    QUICK_ADD_ADDED,
    QUICK_ADD_CHOOSE_TRIP,
    QUICK_ADD_NEEDS_TRIP,
    TripSpotter,
    format_date_range,
)
from tripspotter.categories import ALL, CATEGORIES, category_emoji
from tripspotter.geo import format_distance
from tripspotter.models import Place
from tripspotter.reporting import (
    ensure_dir,
    read_places_json,
    write_places_csv,
    write_places_json,
    write_trip_json,
)
from tripspotter.storage import LocalStorage


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Discover nearby places and plan trips")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--explore", action="store_true", help="Fetch places around --lat/--lon")
    group.add_argument("--create-trip", type=str, metavar="NAME", help="Create a trip")
    group.add_argument("--delete-trip", type=str, metavar="TRIP_ID")
    group.add_argument("--add-to-trip", type=str, metavar="TRIP_ID", help="Add --place-id to a trip")
    group.add_argument(
        "--quick-add",
        type=str,
        metavar="PLACE_ID",
        help="Add a place to your only trip (asks for a trip otherwise)",
    )
    group.add_argument("--remove-from-trip", type=str, metavar="TRIP_ID", help="Remove --location-id")
    group.add_argument("--toggle-favorite", type=str, metavar="PLACE_ID")
    group.add_argument("--list-trips", action="store_true")
    group.add_argument("--show-trip", type=str, metavar="TRIP_ID", help="List the stops of a trip")
    group.add_argument("--list-favorites", action="store_true")
    group.add_argument("--stats", action="store_true")
    group.add_argument("--theme", choices=[config.THEME_DARK, config.THEME_LIGHT])
    group.add_argument("--toggle-theme", action="store_true")

    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument(
        "--radius",
        type=int,
        default=None,
        help=f"Search radius in meters (default: {config.DEFAULT_RADIUS_M})",
    )
    parser.add_argument(
        "--category",
        choices=[ALL, *CATEGORIES],
        default=ALL,
        help="Only list places of this category",
    )
    parser.add_argument("--search", type=str, default="", help="Text filter over name/description")
    parser.add_argument("--out", type=str, default=config.OUTPUT_DIR, help="Output directory")
    parser.add_argument(
        "--places-file",
        type=str,
        default=None,
        help="Places export to pick places from (default: <out>/places.json)",
    )
    parser.add_argument("--place-id", type=str, default=None)
    parser.add_argument("--location-id", type=str, default=None)
    parser.add_argument("--start", type=str, default="", help="Trip start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, default="", help="Trip end date (YYYY-MM-DD)")
    parser.add_argument("--icon", type=str, default="✈️")
    parser.add_argument("--notes", type=str, default="")
    parser.add_argument("--export-trip", type=str, default=None, help="Write --show-trip as JSON")
    parser.add_argument("--db-path", type=str, default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def _places_path(args: argparse.Namespace) -> Path:
    if args.places_file:
        return Path(args.places_file).expanduser().resolve()
    return (Path(args.out) / config.PLACES_EXPORT_NAME).resolve()


def _restore_places(app: TripSpotter, args: argparse.Namespace) -> None:
    path = _places_path(args)
    if path.exists():
        app.state.nearby_places = read_places_json(str(path))


def _format_place(place: Place, index: Optional[int] = None) -> str:
    prefix = f"{index:>2}. " if index is not None else "- "
    line = f"{prefix}{category_emoji(place.category)} {place.name} [{place.category}]"
    if place.distance:
        line += f" {format_distance(place.distance)}"
    return f"{line}\n      id={place.id}  {place.description}"


def _print_notices(notices) -> None:
    for notice in notices:
        print(f"[{notice.level}] {notice.message}")


def cmd_explore(app: TripSpotter, args: argparse.Namespace) -> int:
    lat = args.lat if args.lat is not None else config.DEFAULT_CENTER["lat"]
    lon = args.lon if args.lon is not None else config.DEFAULT_CENTER["lon"]
    radius = args.radius if args.radius is not None else config.DEFAULT_RADIUS_M
    if not (config.MIN_RADIUS_M <= radius <= config.MAX_RADIUS_M):
        print(
            f"--radius must be between {config.MIN_RADIUS_M} and {config.MAX_RADIUS_M} meters",
            file=sys.stderr,
        )
        return 1

    result = app.explore(lat, lon, radius)
    if result is None:
        print("A search is already running", file=sys.stderr)
        return 1
    _print_notices(result.notices)

    app.set_category(args.category)
    app.set_search(args.search)
    visible = app.visible_places()
    print(f"Nearby Places ({len(visible)})")
    for idx, place in enumerate(visible, start=1):
        marker = " ♥" if app.store.is_favorite(place.id) else ""
        print(_format_place(place, idx) + marker)

    ensure_dir(args.out)
    center = {"lat": lat, "lon": lon, "radius_m": radius, "source": result.source}
    write_places_json(str(Path(args.out) / config.PLACES_EXPORT_NAME), result.places, center=center)
    write_places_csv(str(Path(args.out) / "places.csv"), result.places)
    print(f"Results written to {args.out}/{config.PLACES_EXPORT_NAME} and {args.out}/places.csv")
    return 0


def cmd_create_trip(app: TripSpotter, args: argparse.Namespace) -> int:
    if args.place_id:
        _restore_places(app, args)
        app.select_place(args.place_id)
    trip = app.create_trip(args.create_trip, args.start, args.end, icon=args.icon, notes=args.notes)
    print("Trip created! 🎉")
    print(f"{trip.icon} {trip.name} ({format_date_range(trip.start_date, trip.end_date)}) id={trip.id}")
    for loc in trip.locations:
        print(f'Added "{loc.name}" to "{trip.name}"!')
    return 0


def cmd_list_trips(app: TripSpotter) -> int:
    if not app.state.trips:
        print("No trips yet. Create one with --create-trip.")
        return 0
    for trip in app.state.trips:
        print(
            f"{trip.icon} {trip.name}  {format_date_range(trip.start_date, trip.end_date)}  "
            f"{len(trip.locations)} places  id={trip.id}"
        )
        if trip.notes:
            print(f"    {trip.notes}")
    return 0


def cmd_show_trip(app: TripSpotter, args: argparse.Namespace) -> int:
    stops = app.trip_stops(args.show_trip)
    trip = app.state.selected_trip
    print(f'Viewing "{trip.name}"')
    for stop in stops:
        print(_format_place(stop))
    if args.export_trip:
        write_trip_json(args.export_trip, trip)
        print(f"Trip written to {args.export_trip}")
    return 0


def cmd_list_favorites(app: TripSpotter) -> int:
    places = app.favorites_view()
    if not places:
        print("No favorites yet")
        return 0
    for place in places:
        print(_format_place(place))
    return 0


def dispatch(app: TripSpotter, args: argparse.Namespace) -> int:
    if args.explore:
        return cmd_explore(app, args)
    if args.create_trip is not None:
        return cmd_create_trip(app, args)
    if args.delete_trip:
        if app.delete_trip(args.delete_trip):
            print("Trip deleted")
        else:
            print(f"Trip not found: {args.delete_trip}", file=sys.stderr)
            return 1
        return 0
    if args.add_to_trip:
        if not args.place_id:
            print("--add-to-trip requires --place-id", file=sys.stderr)
            return 1
        _restore_places(app, args)
        place = app.select_place(args.place_id)
        app.add_place_to_trip(args.add_to_trip, place)
        trip = app.store.get_trip(args.add_to_trip)
        print(f'Added "{place.name}" to "{trip.name}"!')
        return 0
    if args.quick_add:
        _restore_places(app, args)
        place = app.select_place(args.quick_add)
        result = app.quick_add_to_trip(place)
        print(f"[{'success' if result.status == QUICK_ADD_ADDED else 'info'}] {result.message}")
        if result.status == QUICK_ADD_NEEDS_TRIP:
            print(f"Run --create-trip NAME --start YYYY-MM-DD --end YYYY-MM-DD --place-id {place.id}")
        elif result.status == QUICK_ADD_CHOOSE_TRIP:
            for trip in app.state.trips:
                print(f"  --add-to-trip {trip.id} --place-id {place.id}   # {trip.name}")
        return 0
    if args.remove_from_trip:
        if not args.location_id:
            print("--remove-from-trip requires --location-id", file=sys.stderr)
            return 1
        if not app.remove_location_from_trip(args.remove_from_trip, args.location_id):
            print(f"Trip not found: {args.remove_from_trip}", file=sys.stderr)
            return 1
        print("Location removed from trip")
        return 0
    if args.toggle_favorite:
        _restore_places(app, args)
        if app.toggle_favorite(args.toggle_favorite):
            print("Added to favorites! ❤️")
        else:
            print("Removed from favorites")
        return 0
    if args.list_trips:
        return cmd_list_trips(app)
    if args.show_trip:
        return cmd_show_trip(app, args)
    if args.list_favorites:
        return cmd_list_favorites(app)
    if args.stats:
        stats = app.stats()
        print(f"Places in trips: {stats['places']}")
        print(f"Trips: {stats['trips']}")
        print(f"Favorites: {stats['favorites']}")
        return 0
    if args.theme:
        app.set_theme(args.theme)
        print(f"Theme: {args.theme}")
        return 0
    if args.toggle_theme:
        print(f"Theme: {app.toggle_theme()}")
        return 0
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    config.load_app_config()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    db_path = args.db_path or os.environ.get("TRIPSPOTTER_DB_PATH") or config.DB_PATH
    storage = LocalStorage(db_path)
    try:
        app = TripSpotter(storage)
        app.startup()
        return dispatch(app, args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        storage.close()


if __name__ == "__main__":
    raise SystemExit(main())
