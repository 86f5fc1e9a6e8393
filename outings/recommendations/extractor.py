from __future__ import annotations

import logging
from typing import Sequence

from ..chat.models import ChatMessage
from ..errors import UpstreamUnavailable
from ..llm.groq_client import TextAnalyzer
from ..llm.parsing import request_json
from .models import GroupInfo, PreferenceProfile, Preferences

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# LLM Prompt
# ---------------------------------------------------------------------------

ANALYSIS_PROMPT = """\
Analyze the following group chat conversation and extract:
1. Types of places they want to visit (restaurants, attractions, activities, etc.)
2. Preferences (budget, atmosphere, cuisine type, etc.)
3. Specific interests mentioned
4. Any constraints or requirements
5. Group size and demographics if mentioned

Chat conversation:
{chat}

User location: {location}

Respond with a JSON object in exactly this shape:
{{
  "interests": ["interest1", "interest2"],
  "placeTypes": ["restaurant", "tourist_attraction"],
  "preferences": {{
    "budget": "low | medium | high",
    "atmosphere": "casual / formal / family-friendly",
    "cuisine": ["cuisine1", "cuisine2"],
    "activities": ["activity1", "activity2"]
  }},
  "constraints": ["constraint1"],
  "groupInfo": {{"size": "estimated group size", "demographics": "age group or type"}},
  "keywords": ["keyword1", "keyword2"],
  "summary": "Brief summary of what the group is looking for"
}}
Use Google Places types for placeTypes."""

# ---------------------------------------------------------------------------
# Keyword fallback
# ---------------------------------------------------------------------------

FOOD_KEYWORDS = [
    "food", "eat", "restaurant", "dinner", "lunch", "breakfast", "cafe", "bar",
    "drink", "pizza", "burger", "sushi", "italian", "chinese", "mexican", "thai",
    "indian",
]
ACTIVITY_KEYWORDS = [
    "fun", "activity", "entertainment", "movie", "theater", "museum", "park",
    "beach", "hiking", "shopping", "mall", "game", "sports", "concert", "show",
]
ATTRACTION_KEYWORDS = [
    "visit", "see", "tourist", "attraction", "landmark", "monument", "gallery",
    "exhibition", "zoo", "aquarium", "theme park",
]
BUDGET_KEYWORDS = [
    "cheap", "expensive", "budget", "affordable", "luxury", "fancy", "casual", "formal",
]

_MAX_KEYWORDS = 5
_MAX_PREFERENCE_ITEMS = 3


def _matches(text: str, keywords: Sequence[str]) -> list[str]:
    return [k for k in keywords if k in text]


def fallback_profile(messages: Sequence[ChatMessage]) -> PreferenceProfile:
    """Derive a profile from plain keyword matches over the chat text."""
    text = " ".join(m.content.lower() for m in messages)

    food = _matches(text, FOOD_KEYWORDS)
    activity = _matches(text, ACTIVITY_KEYWORDS)
    attraction = _matches(text, ATTRACTION_KEYWORDS)
    tone = _matches(text, BUDGET_KEYWORDS)

    interests: list[str] = []
    place_types: list[str] = []
    keywords: list[str] = []

    if food:
        interests += ["food", "dining"]
        place_types += ["restaurant", "food"]
        keywords += food
    if activity:
        interests += ["activities", "entertainment"]
        place_types += ["amusement_park", "entertainment"]
        keywords += activity
    if attraction:
        interests += ["sightseeing", "attractions"]
        place_types += ["tourist_attraction", "museum"]
        keywords += attraction

    if "cheap" in tone or "affordable" in tone:
        budget = "low"
    elif "expensive" in tone or "luxury" in tone or "fancy" in tone:
        budget = "high"
    else:
        budget = "medium"

    atmosphere = "formal" if ("formal" in tone or "fancy" in tone) else "casual"

    if not interests:
        interests = ["food", "entertainment"]
        place_types = ["restaurant", "tourist_attraction"]
        keywords = ["fun", "good food"]

    return PreferenceProfile(
        interests=interests,
        place_types=place_types,
        preferences=Preferences(
            budget=budget,
            atmosphere=atmosphere,
            cuisine=food[:_MAX_PREFERENCE_ITEMS] or ["any"],
            activities=activity[:_MAX_PREFERENCE_ITEMS] or ["general"],
        ),
        constraints=[],
        group_info=GroupInfo(size="small group", demographics="mixed ages"),
        keywords=keywords[:_MAX_KEYWORDS],
        summary=f"Group looking for {' and '.join(interests)} based on chat conversation",
    )


class PreferenceExtractor:
    """Turns a chat transcript into a ``PreferenceProfile``."""

    def __init__(self, analyzer: TextAnalyzer) -> None:
        self.analyzer = analyzer

    def analyze(
        self,
        messages: Sequence[ChatMessage],
        location_hint: str = "",
    ) -> PreferenceProfile:
        chat = "\n".join(f"{m.sender}: {m.content}" for m in messages)
        prompt = ANALYSIS_PROMPT.format(chat=chat, location=location_hint or "unknown")
        try:
            return request_json(self.analyzer, prompt, PreferenceProfile)
        except UpstreamUnavailable:
            logger.warning("Chat analysis failed, using keyword fallback", exc_info=True)
            return fallback_profile(messages)
