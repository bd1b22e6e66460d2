import json

import pytest

from tripspotter import config
from tripspotter.models import Place
from tripspotter.state import AppState
from tripspotter.storage import LocalStorage
from tripspotter.store import (
    DuplicateLocationError,
    TripNotFoundError,
    TripStore,
    TripValidationError,
    generate_id,
)


def make_place(place_id, name="Galata Tower", category="attraction"):
    return Place(
        id=place_id,
        name=name,
        category=category,
        description="🗼 Tower",
        lat=41.0256,
        lng=28.9744,
        tags={"historic": "tower"},
        distance=120.0,
    )


@pytest.fixture
def storage(tmp_path):
    s = LocalStorage(str(tmp_path / "app.db"))
    yield s
    s.close()


@pytest.fixture
def store(storage):
    return TripStore(AppState(), storage)


def test_create_trip_assigns_id_and_persists(store, storage):
    trip = store.create_trip("  Istanbul  ", "2026-05-01", "2026-05-07", icon="🕌", notes="first visit")
    assert trip.id.startswith("id_")
    assert trip.name == "Istanbul"
    assert trip.locations == []
    assert trip.created_at
    saved = json.loads(storage.get_item(config.STORAGE_KEY_DATA))
    assert saved["trips"][0]["id"] == trip.id
    assert saved["trips"][0]["startDate"] == "2026-05-01"


def test_create_trip_requires_name_and_dates(store, storage):
    with pytest.raises(TripValidationError):
        store.create_trip("   ", "2026-05-01", "2026-05-07")
    with pytest.raises(TripValidationError):
        store.create_trip("Trip", "", "2026-05-07")
    assert store.state.trips == []
    assert storage.get_item(config.STORAGE_KEY_DATA) is None


def test_duplicate_add_is_rejected_without_mutation(store):
    trip = store.create_trip("Trip", "2026-05-01", "2026-05-02")
    store.add_place_to_trip(trip.id, make_place("osm_1_node"))
    with pytest.raises(DuplicateLocationError):
        store.add_place_to_trip(trip.id, make_place("osm_1_node"))
    assert len(trip.locations) == 1


def test_add_to_unknown_trip_raises(store):
    with pytest.raises(TripNotFoundError):
        store.add_place_to_trip("missing", make_place("osm_1_node"))


def test_remove_location_renumbers_contiguously(store):
    trip = store.create_trip("Trip", "2026-05-01", "2026-05-02")
    for i in (1, 2, 3):
        store.add_place_to_trip(trip.id, make_place(f"p{i}", name=f"Place {i}"))
    assert [loc.order for loc in trip.locations] == [1, 2, 3]

    assert store.remove_location_from_trip(trip.id, "p2")
    assert [loc.id for loc in trip.locations] == ["p1", "p3"]
    assert [loc.order for loc in trip.locations] == [1, 2]

    location = store.add_place_to_trip(trip.id, make_place("p4"))
    assert location.order == 3


def test_delete_trip(store):
    trip = store.create_trip("Trip", "2026-05-01", "2026-05-02")
    assert store.delete_trip(trip.id)
    assert store.state.trips == []
    assert not store.delete_trip(trip.id)


def test_toggle_favorite_adds_and_removes_snapshot_once(store):
    place = make_place("osm_9_node")
    assert store.toggle_favorite(place.id, place) is True
    assert store.state.favorites == ["osm_9_node"]
    assert [p.id for p in store.state.favorite_places] == ["osm_9_node"]
    assert store.state.favorite_places[0].tags == {"historic": "tower"}

    assert store.toggle_favorite(place.id, place) is False
    assert store.state.favorites == []
    assert store.state.favorite_places == []


def test_favorite_snapshot_not_duplicated(store):
    place = make_place("osm_9_node")
    store.toggle_favorite(place.id, place)
    store.state.favorites.remove(place.id)
    store.toggle_favorite(place.id, place)
    assert len(store.state.favorite_places) == 1


def test_state_survives_reload(store, storage):
    trip = store.create_trip("Trip", "2026-05-01", "2026-05-02", icon="🏖️")
    store.add_place_to_trip(trip.id, make_place("osm_1_node"))
    store.toggle_favorite("osm_1_node", make_place("osm_1_node"))

    reloaded = TripStore(AppState(), storage)
    reloaded.load()
    assert [t.to_dict() for t in reloaded.state.trips] == [trip.to_dict()]
    assert reloaded.state.favorites == ["osm_1_node"]
    assert reloaded.state.favorite_places[0].name == "Galata Tower"
    assert reloaded.is_place_in_any_trip("osm_1_node")
    assert not reloaded.is_place_in_any_trip("osm_2_node")


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '{"trips": [{"name": "no id"}]}'])
def test_corrupt_blob_loads_as_empty(storage, raw):
    storage.set_item(config.STORAGE_KEY_DATA, raw)
    store = TripStore(AppState(), storage)
    store.load()
    assert store.state.trips == []
    assert store.state.favorites == []
    assert store.state.favorite_places == []


def test_generate_id_shape():
    a = generate_id()
    b = generate_id()
    assert a.startswith("id_") and b.startswith("id_")
    assert a != b
