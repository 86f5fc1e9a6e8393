from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from ..places.config import DEFAULT_PLACES_CONFIG
from ..places.google_client import PlaceFinder
from .models import SearchPlan, SearchStrategy

logger = logging.getLogger(__name__)

MAX_CANDIDATES = DEFAULT_PLACES_CONFIG.max_results


class CandidateGatherer:
    """
    Runs every search strategy of a plan against the place finder.

    Strategies run concurrently; results are concatenated in priority order.
    A failing strategy contributes nothing and never aborts the others.
    Places found by more than one strategy are kept once per strategy.
    """

    def __init__(self, finder: PlaceFinder, max_workers: int = 4) -> None:
        self.finder = finder
        self.max_workers = max_workers

    def _search(
        self,
        strategy: SearchStrategy,
        keywords: list[str],
        latitude: float,
        longitude: float,
        radius: int,
        max_results: int,
    ) -> list[dict[str, Any]]:
        place_type = strategy.value if strategy.type == "place_type" else None
        if strategy.type == "keyword" and strategy.value not in keywords:
            keywords = [strategy.value, *keywords]
        keyword = " ".join(keywords)
        try:
            return self.finder.search_nearby(
                latitude=latitude,
                longitude=longitude,
                radius=radius,
                type=place_type,
                keyword=keyword or None,
                max_results=max_results,
            )
        except Exception:
            logger.warning("Search for %s %r failed, skipping", strategy.type, strategy.value, exc_info=True)
            return []

    def gather(
        self,
        plan: SearchPlan,
        latitude: float,
        longitude: float,
        radius: int = 5000,
    ) -> list[dict[str, Any]]:
        strategies = sorted(plan.search_strategies, key=lambda s: s.priority)
        if not strategies:
            return []

        max_results = MAX_CANDIDATES // len(strategies)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(strategies))) as pool:
            batches = list(
                pool.map(
                    lambda s: self._search(s, plan.keywords, latitude, longitude, radius, max_results),
                    strategies,
                )
            )

        candidates = [place for batch in batches for place in batch]
        logger.info("Gathered %d candidates from %d strategies", len(candidates), len(strategies))
        return candidates
