from __future__ import annotations

import logging

from ..errors import UpstreamUnavailable
from ..llm.groq_client import TextAnalyzer
from ..llm.parsing import request_json
from .models import PreferenceProfile, SearchFilters, SearchPlan, SearchStrategy

logger = logging.getLogger(__name__)

PLANNING_PROMPT = """\
Based on the following analysis of a group chat conversation, plan a place search.

Analysis:
{analysis}

Location: {latitude}, {longitude}
Search radius: {radius} meters

Respond with a JSON object in exactly this shape:
{{
  "searchStrategies": [
    {{"type": "place_type | keyword", "value": "restaurant", "priority": 1,
      "reason": "why this type is recommended"}}
  ],
  "keywords": ["keyword1", "keyword2"],
  "filters": {{"priceLevel": "1-3", "rating": "4.0+", "openNow": true}},
  "recommendationReason": "Why these places are recommended for this group",
  "alternativeOptions": ["alternative1", "alternative2"],
  "tips": ["tip1", "tip2"]
}}
Priorities start at 1 (highest). Use Google Places types for place_type values."""

_PRICE_LEVELS = {"low": "1-2", "high": "4-5"}
_DEFAULT_PRICE_LEVEL = "1-3"


def price_level_for(budget: str) -> str:
    return _PRICE_LEVELS.get(budget, _DEFAULT_PRICE_LEVEL)


def fallback_plan(profile: PreferenceProfile) -> SearchPlan:
    """Build a search plan straight from the profile, without the model."""
    strategies = [
        SearchStrategy(
            type="place_type",
            value=place_type,
            priority=index,
            reason=f"Based on chat analysis: {profile.summary}",
        )
        for index, place_type in enumerate(profile.place_types, start=1)
    ]

    if profile.keywords:
        strategies.append(
            SearchStrategy(
                type="keyword",
                value=profile.keywords[0],
                priority=len(profile.place_types) + 1,
                reason=f"Keyword from chat: {profile.keywords[0]}",
            )
        )

    if not strategies:
        strategies.append(
            SearchStrategy(
                type="place_type",
                value="restaurant",
                priority=1,
                reason="Default recommendation for group dining",
            )
        )

    return SearchPlan(
        search_strategies=strategies,
        keywords=list(profile.keywords),
        filters=SearchFilters(
            price_level=price_level_for(profile.preferences.budget),
            rating="3.5+",
            open_now=True,
        ),
        recommendation_reason=profile.summary,
        alternative_options=list(profile.interests),
        tips=["Check opening hours", "Make reservations if needed"],
    )


class StrategyPlanner:
    """Turns a ``PreferenceProfile`` into an ordered ``SearchPlan``."""

    def __init__(self, analyzer: TextAnalyzer) -> None:
        self.analyzer = analyzer

    def plan(
        self,
        profile: PreferenceProfile,
        latitude: float,
        longitude: float,
        radius: int = 5000,
    ) -> SearchPlan:
        prompt = PLANNING_PROMPT.format(
            analysis=profile.model_dump_json(by_alias=True, indent=2),
            latitude=latitude,
            longitude=longitude,
            radius=radius,
        )
        try:
            return request_json(self.analyzer, prompt, SearchPlan)
        except UpstreamUnavailable:
            logger.warning("Search planning failed, using profile-based fallback", exc_info=True)
            return fallback_plan(profile)
