from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from outings.app import (
    app,
    get_enricher,
    get_movie_suggester,
    get_pipeline,
    get_places_client,
)
from outings.chat.store import InMemoryChatStore
from outings.errors import PlacesAPIError
from outings.movies.analyzer import MovieTasteAnalyzer
from outings.movies.suggestions import MovieSuggester
from outings.movies.tmdb_client import LOCAL_MOVIES
from outings.recommendations.activities import ActivitySuggester
from outings.recommendations.enricher import DetailEnricher
from outings.recommendations.extractor import PreferenceExtractor
from outings.recommendations.gatherer import CandidateGatherer
from outings.recommendations.personalizer import Personalizer
from outings.recommendations.pipeline import RecommendationPipeline
from outings.recommendations.planner import StrategyPlanner

client = TestClient(app)

VALID_BODY = {
    "messages": [
        {"sender": "Ana", "content": "cheap Italian food?"},
        {"sender": "Ben", "content": "yes please", "timestamp": "2024-05-01T18:00:00Z"},
    ],
    "location": {"latitude": 41.9, "longitude": 12.5, "city": "Rome"},
    "radius": 3000,
}


class FailingAnalyzer:
    def generate(self, prompt: str) -> str:
        raise RuntimeError("backend down")


class FailingFinder:
    def search_nearby(self, *args, **kwargs):
        raise PlacesAPIError("Google Places API error: REQUEST_DENIED")

    def get_details(self, place_id):
        raise PlacesAPIError("Google Places API error: REQUEST_DENIED")

    def search_by_text(self, *args, **kwargs):
        raise PlacesAPIError("Google Places API error: REQUEST_DENIED")


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    app.dependency_overrides.clear()


def _use_offline_pipeline(finder) -> None:
    analyzer = FailingAnalyzer()
    pipeline = RecommendationPipeline(
        extractor=PreferenceExtractor(analyzer),
        planner=StrategyPlanner(analyzer),
        gatherer=CandidateGatherer(finder),
        enricher=DetailEnricher(finder),
        personalizer=Personalizer(analyzer),
        suggester=ActivitySuggester(analyzer),
    )
    app.dependency_overrides[get_pipeline] = lambda: pipeline


# ── Health & errors ──────────────────────────────────────────────────────


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_unknown_route_is_404():
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Not found"


# ── Recommendations ──────────────────────────────────────────────────────


class TestRecommendationsEndpoint:
    def test_all_searches_failing_still_succeeds(self):
        _use_offline_pipeline(FailingFinder())

        resp = client.post("/api/recommendations", json=VALID_BODY)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["places"] == []
        assert body["data"]["metadata"]["totalPlaces"] == 0
        assert body["data"]["metadata"]["searchRadius"] == 3000
        assert body["data"]["analysis"]["preferences"]["budget"] == "low"
        assert len(body["data"]["activities"]) == 2

    def test_radius_defaults_to_5000(self):
        _use_offline_pipeline(FailingFinder())
        body = {k: v for k, v in VALID_BODY.items() if k != "radius"}

        resp = client.post("/api/recommendations", json=body)

        assert resp.json()["data"]["metadata"]["searchRadius"] == 5000

    def test_empty_messages_rejected(self):
        resp = client.post("/api/recommendations", json=dict(VALID_BODY, messages=[]))

        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation error"
        assert resp.json()["details"]

    def test_latitude_out_of_range_rejected(self):
        body = dict(VALID_BODY, location={"latitude": 120, "longitude": 0})

        assert client.post("/api/recommendations", json=body).status_code == 400

    def test_radius_out_of_range_rejected(self):
        assert client.post("/api/recommendations", json=dict(VALID_BODY, radius=50)).status_code == 400


# ── Place lookups ────────────────────────────────────────────────────────


class TestPlaceEndpoints:
    def test_search_enriches_results(self):
        places_client = MagicMock()
        places_client.search_nearby.return_value = [{"place_id": "a", "name": "A", "rating": 4.0}]
        places_client.get_details.return_value = {"place_id": "a", "website": "https://a.example"}
        app.dependency_overrides[get_places_client] = lambda: places_client
        app.dependency_overrides[get_enricher] = lambda: DetailEnricher(places_client)

        resp = client.post(
            "/api/places/search",
            json={"location": {"latitude": 1, "longitude": 2}, "type": "cafe", "maxResults": 5},
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["places"][0]["website"] == "https://a.example"
        assert data["metadata"]["totalResults"] == 1
        assert places_client.search_nearby.call_args.kwargs["max_results"] == 5

    def test_search_backend_error_is_500(self):
        app.dependency_overrides[get_places_client] = FailingFinder
        app.dependency_overrides[get_enricher] = lambda: DetailEnricher(FailingFinder())

        resp = client.post("/api/places/search", json={"location": {"latitude": 1, "longitude": 2}})

        assert resp.status_code == 500
        assert resp.json()["error"] == "Internal server error"

    def test_unexpected_error_is_json_500(self):
        places_client = MagicMock()
        places_client.get_details.side_effect = KeyError("result")
        app.dependency_overrides[get_places_client] = lambda: places_client

        resp = TestClient(app, raise_server_exceptions=False).get("/api/places/a")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error", "message": "'result'"}

    def test_details(self):
        places_client = MagicMock()
        places_client.get_details.return_value = {"place_id": "a", "photos": [{"photo_reference": "r"}]}
        places_client.photo_url.return_value = "https://photo.example/r"
        app.dependency_overrides[get_places_client] = lambda: places_client

        resp = client.get("/api/places/a")

        assert resp.status_code == 200
        assert resp.json()["data"]["place"]["photo_url"] == "https://photo.example/r"

    def test_text_search_requires_query(self):
        assert client.post("/api/places/text-search", json={}).status_code == 400


# ── Movie suggestions ────────────────────────────────────────────────────


def _use_offline_movies() -> None:
    tmdb = MagicMock()
    tmdb.latest_movies.return_value = list(LOCAL_MOVIES)
    suggester = MovieSuggester(
        store=InMemoryChatStore(),
        analyzer=MovieTasteAnalyzer(FailingAnalyzer()),
        tmdb=tmdb,
    )
    app.dependency_overrides[get_movie_suggester] = lambda: suggester


def test_chat_suggestions():
    _use_offline_movies()

    resp = client.get("/api/suggestions/chat2")

    body = resp.json()
    assert resp.status_code == 200
    assert body["chatId"] == "chat2"
    assert "horror" in body["analysis"]["genres"]
    assert len(body["chatPreview"]) == 3


def test_sample_suggestions():
    _use_offline_movies()

    body = client.get("/api/suggestions").json()

    assert body["success"] is True
    assert body["analysis"]["genres"] == ["action", "comedy", "adventure"]
    assert "note" in body
