import pytest
import requests

from tripspotter.http import HttpClient, HttpStatusError, RequestMetrics
from tripspotter.places_client import OverpassClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.headers = {}

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, responses_by_url):
        self.responses_by_url = responses_by_url
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers})
        outcome = self.responses_by_url.get(url)
        if outcome is None:
            raise requests.ConnectionError(url)
        return outcome


def make_http_client(responses_by_url):
    client = HttpClient(timeout=1, user_agent="tripspotter-test")
    client.session = FakeSession(responses_by_url)
    return client


def test_attempts_counted_per_mirror_request():
    metrics = RequestMetrics()
    http_client = make_http_client({"https://ok.example/api": FakeResponse({"elements": []})})
    client = OverpassClient(http_client, metrics=metrics)

    client.search_around("https://ok.example/api", 41.0, 29.0, 500)
    with pytest.raises(requests.ConnectionError):
        client.search_around("https://down.example/api", 41.0, 29.0, 500)

    assert metrics.attempts == 2
    assert http_client.session.calls[0]["headers"]["User-Agent"] == "tripspotter-test"


def test_non_200_raises_status_error():
    http_client = make_http_client({"https://busy.example/api": FakeResponse({}, status_code=429)})
    with pytest.raises(HttpStatusError) as excinfo:
        http_client.post_form("https://busy.example/api", "data=x")
    assert excinfo.value.status_code == 429


def test_non_object_payload_rejected():
    http_client = make_http_client({"https://odd.example/api": FakeResponse([1, 2])})
    with pytest.raises(ValueError):
        http_client.post_form("https://odd.example/api", "data=x")


def test_unknown_metric_kind():
    metrics = RequestMetrics()
    metrics.inc("fallback")
    assert metrics.fallbacks == 1
    with pytest.raises(ValueError):
        metrics.inc("cache_hit")


def test_user_agent_read_from_environment_at_construction(monkeypatch):
    monkeypatch.setenv("OVERPASS_USER_AGENT", "from-dotenv/1.0")
    http_client = HttpClient(timeout=1)
    http_client.session = FakeSession({"https://ok.example/api": FakeResponse({"elements": []})})

    http_client.post_form("https://ok.example/api", "data=x")

    assert http_client.session.calls[0]["headers"]["User-Agent"] == "from-dotenv/1.0"


def test_explicit_user_agent_wins_over_environment(monkeypatch):
    monkeypatch.setenv("OVERPASS_USER_AGENT", "from-env/1.0")
    assert HttpClient(timeout=1, user_agent="explicit/2.0").user_agent == "explicit/2.0"
