from __future__ import annotations

import threading

from outings.errors import PlacesAPIError
from outings.recommendations.gatherer import CandidateGatherer
from outings.recommendations.models import SearchPlan, SearchStrategy


class FakeFinder:
    def __init__(self, results=None, failing=()):
        self.results = results or {}
        self.failing = set(failing)
        self.calls: list[dict] = []
        self._lock = threading.Lock()

    def search_nearby(self, latitude, longitude, radius=5000, type=None, keyword=None, max_results=20):
        with self._lock:
            self.calls.append(
                {"type": type, "keyword": keyword, "max_results": max_results, "radius": radius}
            )
        key = type or keyword
        if key in self.failing:
            raise PlacesAPIError(f"Google Places API error: OVER_QUERY_LIMIT for {key}")
        return [dict(p) for p in self.results.get(key, [])]


def _plan(*strategies: tuple[str, str, int], keywords=("pizza", "pasta")) -> SearchPlan:
    return SearchPlan(
        search_strategies=[SearchStrategy(type=t, value=v, priority=p) for t, v, p in strategies],
        keywords=list(keywords),
    )


def test_all_strategies_failing_returns_empty():
    finder = FakeFinder(failing={"restaurant", "cafe", "bar"})
    plan = _plan(("place_type", "restaurant", 1), ("place_type", "cafe", 2), ("place_type", "bar", 3))

    assert CandidateGatherer(finder).gather(plan, 1.0, 2.0) == []
    assert len(finder.calls) == 3


def test_failed_strategy_keeps_other_results():
    finder = FakeFinder(
        results={"restaurant": [{"place_id": "r1"}], "bar": [{"place_id": "b1"}]},
        failing={"cafe"},
    )
    plan = _plan(("place_type", "restaurant", 1), ("place_type", "cafe", 2), ("place_type", "bar", 3))

    places = CandidateGatherer(finder).gather(plan, 1.0, 2.0)

    assert [p["place_id"] for p in places] == ["r1", "b1"]


def test_results_follow_priority_order():
    finder = FakeFinder(results={"museum": [{"place_id": "m1"}], "park": [{"place_id": "p1"}]})
    plan = _plan(("place_type", "park", 2), ("place_type", "museum", 1))

    places = CandidateGatherer(finder).gather(plan, 1.0, 2.0)

    assert [p["place_id"] for p in places] == ["m1", "p1"]


def test_duplicates_across_strategies_are_kept():
    shared = {"place_id": "same", "name": "Luigi's"}
    finder = FakeFinder(results={"restaurant": [shared], "food": [shared]})
    plan = _plan(("place_type", "restaurant", 1), ("place_type", "food", 2))

    places = CandidateGatherer(finder).gather(plan, 1.0, 2.0)

    assert [p["place_id"] for p in places] == ["same", "same"]


def test_per_strategy_cap_and_joined_keywords():
    finder = FakeFinder()
    plan = _plan(("place_type", "restaurant", 1), ("place_type", "food", 2), ("place_type", "cafe", 3))

    CandidateGatherer(finder).gather(plan, 1.0, 2.0, radius=1500)

    assert {c["max_results"] for c in finder.calls} == {6}
    assert {c["keyword"] for c in finder.calls} == {"pizza pasta"}
    assert {c["radius"] for c in finder.calls} == {1500}


def test_keyword_strategy_searches_without_type():
    finder = FakeFinder(results={"karaoke": [{"place_id": "k1"}]})
    plan = _plan(("keyword", "karaoke", 1), keywords=())

    places = CandidateGatherer(finder).gather(plan, 1.0, 2.0)

    assert finder.calls[0]["type"] is None
    assert finder.calls[0]["keyword"] == "karaoke"
    assert places == [{"place_id": "k1"}]
