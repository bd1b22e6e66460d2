import random

from tripspotter.categories import CATEGORIES
from tripspotter.demo import generate_demo_places


def test_demo_places_scaled_by_radius():
    places = generate_demo_places(41.0, 29.0, 2000, rng=random.Random(1), now_ms=1700000000000)
    assert len(places) == 10
    by_name = {p.name: p for p in places}
    museum = by_name["City Museum"]
    assert museum.lat == 41.0 + (-0.001 * 2)
    assert museum.lng == 29.0 + (0.002 * 2)
    assert museum.id == "demo_1_1700000000000"
    assert museum.description == "Sample place - Click to add to your trip"
    assert all(p.category in CATEGORIES for p in places)
    assert all(p.tags == {} for p in places)


def test_demo_distances_within_band_and_sorted():
    for seed in range(20):
        places = generate_demo_places(0.0, 0.0, 1500, rng=random.Random(seed))
        distances = [p.distance for p in places]
        assert distances == sorted(distances)
        assert all(150 <= d < 1350 for d in distances)
