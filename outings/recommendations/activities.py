from __future__ import annotations

import logging

from ..errors import UpstreamUnavailable
from ..llm.groq_client import TextAnalyzer
from ..llm.parsing import request_json
from .models import ActivitySuggestion, PreferenceProfile

logger = logging.getLogger(__name__)

ACTIVITIES_PROMPT = """\
Based on the group's interests and preferences, suggest specific activities for {location}.

Group analysis:
{analysis}

Respond with a JSON object in exactly this shape:
{{
  "activities": [
    {{
      "activity": "Activity name",
      "description": "What this activity involves",
      "duration": "estimated time",
      "cost": "estimated cost range",
      "groupSize": "ideal group size",
      "whyRecommended": "Why this fits the group",
      "tips": ["tip1", "tip2"]
    }}
  ]
}}"""


def fallback_activities() -> list[ActivitySuggestion]:
    return [
        ActivitySuggestion(
            activity="Group Dining",
            description="Find a restaurant that can accommodate your group size",
            duration="1-2 hours",
            cost="$$",
            group_size="2-8 people",
            why_recommended="Essential for group outings",
            tips=["Make reservations", "Check group discounts"],
        ),
        ActivitySuggestion(
            activity="Local Attractions",
            description="Visit popular local attractions and landmarks",
            duration="2-4 hours",
            cost="$$$",
            group_size="2-10 people",
            why_recommended="Great for group photos and memories",
            tips=["Check group rates", "Plan for crowds"],
        ),
    ]


class ActivitySuggester:
    def __init__(self, analyzer: TextAnalyzer) -> None:
        self.analyzer = analyzer

    def suggest(self, profile: PreferenceProfile, location_label: str) -> list[ActivitySuggestion]:
        prompt = ACTIVITIES_PROMPT.format(
            location=location_label,
            analysis=profile.model_dump_json(by_alias=True, indent=2),
        )
        try:
            return request_json(self.analyzer, prompt, list[ActivitySuggestion], list_key="activities")
        except UpstreamUnavailable:
            logger.warning("Activity suggestion failed, using default activities", exc_info=True)
            return fallback_activities()
