from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Sequence

from ..chat.models import ChatMessage, Location
from .activities import ActivitySuggester
from .enricher import DetailEnricher
from .extractor import PreferenceExtractor
from .gatherer import CandidateGatherer
from .personalizer import Personalizer
from .planner import StrategyPlanner

logger = logging.getLogger(__name__)


class RecommendationPipeline:
    """
    Chains the recommendation stages for one request.

    Analysis -> planning -> gathering -> enrichment -> personalisation run in
    sequence. Activity suggestions only need the profile, so they run on a
    worker thread alongside the place stages and are joined at the end.
    """

    def __init__(
        self,
        extractor: PreferenceExtractor,
        planner: StrategyPlanner,
        gatherer: CandidateGatherer,
        enricher: DetailEnricher,
        personalizer: Personalizer,
        suggester: ActivitySuggester,
    ) -> None:
        self.extractor = extractor
        self.planner = planner
        self.gatherer = gatherer
        self.enricher = enricher
        self.personalizer = personalizer
        self.suggester = suggester

    def run(
        self,
        messages: Sequence[ChatMessage],
        location: Location,
        radius: int = 5000,
    ) -> dict[str, Any]:
        logger.info("Analyzing %d chat messages", len(messages))
        profile = self.extractor.analyze(messages, location.city or "Unknown location")

        logger.info("Planning place search")
        plan = self.planner.plan(profile, location.latitude, location.longitude, radius)

        with ThreadPoolExecutor(max_workers=1) as pool:
            activities_future = pool.submit(
                self.suggester.suggest, profile, location.city or "this location"
            )

            logger.info("Searching for places")
            candidates = self.gatherer.gather(plan, location.latitude, location.longitude, radius)

            logger.info("Enriching %d places", len(candidates))
            enriched = self.enricher.enrich_all(candidates)

            logger.info("Personalizing place descriptions")
            places = self.personalizer.personalize(enriched, profile)

            activities = activities_future.result()

        return {
            "analysis": profile.to_json_dict(),
            "recommendations": plan.to_json_dict(),
            "places": places,
            "activities": [a.to_json_dict() for a in activities],
            "metadata": {
                "totalPlaces": len(places),
                "searchRadius": radius,
                "location": location.model_dump(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        }
