import json

import pytest

import run
from tripspotter import app as app_module
from tripspotter import config
from tripspotter.fetcher import SOURCE_DEMO, FetchResult
from tripspotter.models import Place
from tripspotter.pipeline import PlaceIngestor
from tripspotter.storage import LocalStorage


class FakeFetcher:
    def __init__(self):
        self.ingestor = PlaceIngestor()

    def fetch(self, lat, lon, radius_m=None):
        places = [
            Place(id="demo_0_1", name="Local Restaurant", category="restaurant", description="", lat=lat, lng=lon, distance=200.0),
            Place(id="demo_3_1", name="Central Park", category="nature", description="", lat=lat, lng=lon, distance=400.0),
        ]
        return FetchResult(places=places, source=SOURCE_DEMO)


@pytest.fixture
def cli(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "build_fetcher", lambda metrics=None: FakeFetcher())
    monkeypatch.setattr(run, "load_env", lambda *a, **k: None)
    monkeypatch.setattr(config, "load_app_config", lambda path=None: False)
    db = str(tmp_path / "cli.db")
    out = str(tmp_path / "out")

    def invoke(*argv):
        return run.main(["--db-path", db, "--out", out, *argv])

    invoke.db = db
    invoke.out = out
    return invoke


def test_explore_writes_exports(cli, capsys, tmp_path):
    assert cli("--explore", "--lat", "41.0", "--lon", "29.0", "--category", "nature") == 0
    output = capsys.readouterr().out
    assert "Nearby Places (1)" in output
    assert "Central Park" in output
    data = json.loads((tmp_path / "out" / "places.json").read_text(encoding="utf-8"))
    assert [p["id"] for p in data["places"]] == ["demo_0_1", "demo_3_1"]
    assert data["center"]["source"] == "demo"


def test_radius_out_of_range(cli, capsys):
    assert cli("--explore", "--radius", "50") == 1
    assert "--radius must be between" in capsys.readouterr().err


def test_trip_flow_through_cli(cli, capsys):
    assert cli("--explore") == 0
    assert cli("--create-trip", "Weekend", "--start", "2026-05-01", "--end", "2026-05-03", "--place-id", "demo_0_1") == 0
    assert cli("--toggle-favorite", "demo_3_1") == 0
    capsys.readouterr()

    assert cli("--stats") == 0
    stats = capsys.readouterr().out
    assert "Places in trips: 1" in stats
    assert "Trips: 1" in stats
    assert "Favorites: 1" in stats

    with LocalStorage(cli.db) as storage:
        data = json.loads(storage.get_item(config.STORAGE_KEY_DATA))
    trip_id = data["trips"][0]["id"]
    assert data["favoritePlaces"][0]["name"] == "Central Park"

    assert cli("--add-to-trip", trip_id, "--place-id", "demo_0_1") == 1
    assert "Already in this trip!" in capsys.readouterr().err

    assert cli("--quick-add", "demo_3_1") == 0
    assert 'Added "Central Park" to "Weekend"!' in capsys.readouterr().out

    assert cli("--remove-from-trip", trip_id, "--location-id", "demo_0_1") == 0
    assert cli("--show-trip", trip_id) == 0
    assert "Stop #1 in Weekend" in capsys.readouterr().out


def test_create_trip_validation_error(cli, capsys):
    assert cli("--create-trip", "Nameless", "--start", "2026-05-01") == 1
    assert "Please fill in required fields" in capsys.readouterr().err


def test_theme_commands(cli, capsys):
    assert cli("--theme", "dark") == 0
    assert cli("--toggle-theme") == 0
    assert "Theme: light" in capsys.readouterr().out


def test_env_loaded_by_main_sets_db_path_and_user_agent(tmp_path, monkeypatch):
    db = tmp_path / "from-dotenv.db"
    seen = {}

    def fake_load_env(*args, **kwargs):
        monkeypatch.setenv("TRIPSPOTTER_DB_PATH", str(db))
        monkeypatch.setenv("OVERPASS_USER_AGENT", "from-dotenv/1.0")

    def fake_build_fetcher(metrics=None):
        fetcher = real_build_fetcher(metrics)
        seen["user_agent"] = fetcher.client.http.user_agent
        return fetcher

    real_build_fetcher = app_module.build_fetcher
    monkeypatch.delenv("TRIPSPOTTER_DB_PATH", raising=False)
    monkeypatch.delenv("OVERPASS_USER_AGENT", raising=False)
    monkeypatch.setattr(run, "load_env", fake_load_env)
    monkeypatch.setattr(config, "load_app_config", lambda path=None: False)
    monkeypatch.setattr(app_module, "build_fetcher", fake_build_fetcher)

    assert run.main(["--theme", "dark"]) == 0

    assert seen["user_agent"] == "from-dotenv/1.0"
    with LocalStorage(str(db)) as storage:
        assert storage.get_item(config.STORAGE_KEY_THEME) == "dark"
