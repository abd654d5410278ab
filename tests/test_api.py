import pytest
from fastapi.testclient import TestClient

from anagrammer.app.api import (
    GENERIC_FAILURE_MESSAGE,
    create_api,
    parse_optional_int,
    resolve_max_results,
    resolve_top_n,
)
from anagrammer.app.services.search_service import SearchService
from anagrammer.core import WordSource

from conftest import KeepOrder


class FailingService:
    default_max_results = 200

    def find_anagrams(self, *args, **kwargs):
        raise RuntimeError("word list exploded at /srv/secret/words.txt")


@pytest.fixture
def client(write_words):
    path = write_words(["listen", "silent", "enlist", "dirty", "room", "dormitory"])
    service = SearchService(word_source=WordSource(path), rng_factory=KeepOrder)
    return TestClient(create_api(service))


def test_anagrams_endpoint_returns_word_lists(client):
    response = client.get("/api/anagrams", params={"phrase": "listen"})

    assert response.status_code == 200
    assert response.json() == [["listen"], ["silent"], ["enlist"]]


def test_anagrams_endpoint_honours_with_and_without(client):
    response = client.get(
        "/api/anagrams",
        params={"phrase": "dormitory", "with": "room", "without": "dormitory"},
    )

    assert response.status_code == 200
    assert response.json() == [["dirty", "room"]]


def test_anagrams_endpoint_caps_results(client):
    response = client.get("/api/anagrams", params={"phrase": "listen", "max_results": "1"})

    assert response.json() == [["listen"]]


def test_non_numeric_parameters_fall_back_to_defaults(client):
    response = client.get(
        "/api/anagrams",
        params={"phrase": "listen", "max_results": "lots", "top_n": "many"},
    )

    assert response.status_code == 200
    assert len(response.json()) == 3


def test_missing_phrase_returns_an_empty_list(client):
    response = client.get("/api/anagrams")

    assert response.status_code == 200
    assert response.json() == []


def test_failures_return_a_generic_error():
    client = TestClient(create_api(FailingService()))

    response = client.get("/api/anagrams", params={"phrase": "listen"})

    assert response.status_code == 500
    assert response.json() == {"error": GENERIC_FAILURE_MESSAGE}
    assert "secret" not in response.text


def test_health_and_metrics_endpoints(client):
    assert client.get("/healthz").json() == {"status": "ok"}

    client.get("/api/anagrams", params={"phrase": "listen"})
    metrics = client.get("/metrics/")

    assert metrics.status_code == 200
    assert "anagram_search_requests_total" in metrics.text


@pytest.mark.parametrize(
    "raw, expected",
    [(None, None), ("", None), ("  12 ", 12), ("ten", None), ("-3", -3)],
)
def test_parse_optional_int(raw, expected):
    assert parse_optional_int(raw) == expected


def test_resolve_top_n_treats_non_positive_as_full_list():
    assert resolve_top_n("1000") == 1000
    assert resolve_top_n("0") is None
    assert resolve_top_n("-5") is None
    assert resolve_top_n("abc") is None


def test_resolve_max_results_uses_default_for_bad_values():
    assert resolve_max_results("25", 200) == 25
    assert resolve_max_results(None, 200) == 200
    assert resolve_max_results("many", 200) == 200
