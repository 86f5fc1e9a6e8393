from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from pydantic import ValidationError

from ..errors import UpstreamUnavailable
from ..llm.groq_client import TextAnalyzer
from ..llm.parsing import request_json
from .models import PlaceAnnotation, PreferenceProfile

logger = logging.getLogger(__name__)

MAX_ANNOTATED = 5
DEFAULT_MATCH_SCORE = 0.5
DEFAULT_GROUP_APPEAL = "Good option for groups"

PERSONALIZE_PROMPT = """\
Based on the group's preferences and interests, write personalized descriptions
for these places.

Group analysis:
{analysis}

Places:
{places}

Respond with a JSON object in exactly this shape:
{{
  "places": [
    {{
      "place_id": "place_id",
      "personalizedDescription": "Why this place is perfect for this group",
      "matchScore": 0.95,
      "highlights": ["highlight1", "highlight2"],
      "groupAppeal": "What makes this place appealing to this specific group"
    }}
  ]
}}
matchScore is between 0 and 1."""

_PROMPT_FIELDS = ("place_id", "name", "formatted_address", "rating", "price_level", "types")


def _prompt_view(place: dict[str, Any]) -> dict[str, Any]:
    return {key: place.get(key) for key in _PROMPT_FIELDS}


def _apply(place: dict[str, Any], note: PlaceAnnotation | None) -> dict[str, Any]:
    note = note or PlaceAnnotation(place_id=str(place.get("place_id") or ""))
    return {
        **place,
        "personalizedDescription": note.personalized_description or place.get("name"),
        "matchScore": DEFAULT_MATCH_SCORE if note.match_score is None else note.match_score,
        "highlights": note.highlights or [],
        "groupAppeal": note.group_appeal or DEFAULT_GROUP_APPEAL,
    }


class Personalizer:
    """Annotates enriched places with group-specific descriptions and scores."""

    def __init__(self, analyzer: TextAnalyzer) -> None:
        self.analyzer = analyzer

    def _annotations(
        self,
        places: Sequence[dict[str, Any]],
        profile: PreferenceProfile,
    ) -> dict[str, PlaceAnnotation]:
        if not places:
            return {}

        prompt = PERSONALIZE_PROMPT.format(
            analysis=profile.model_dump_json(by_alias=True, indent=2),
            places=json.dumps([_prompt_view(p) for p in places[:MAX_ANNOTATED]], indent=2, default=str),
        )
        try:
            entries = request_json(self.analyzer, prompt, list[dict[str, Any]], list_key="places")
        except UpstreamUnavailable:
            logger.warning("Personalisation failed, using default descriptions", exc_info=True)
            return {}

        by_id: dict[str, PlaceAnnotation] = {}
        for entry in entries:
            try:
                note = PlaceAnnotation.model_validate(entry)
            except ValidationError:
                logger.warning("Skipping malformed annotation %r", entry, exc_info=True)
                continue
            by_id.setdefault(note.place_id, note)
        return by_id

    def personalize(
        self,
        places: Sequence[dict[str, Any]],
        profile: PreferenceProfile,
    ) -> list[dict[str, Any]]:
        notes = self._annotations(places, profile)
        return [_apply(place, notes.get(place.get("place_id"))) for place in places]
