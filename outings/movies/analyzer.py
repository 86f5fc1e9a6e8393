from __future__ import annotations

import logging
from typing import Sequence

from ..chat.models import ChatMessage
from ..errors import UpstreamUnavailable
from ..llm.groq_client import TextAnalyzer
from ..llm.parsing import request_json
from .models import MoviePreferences

logger = logging.getLogger(__name__)

MOVIE_PROMPT = """\
Analyze this group chat conversation and work out what kinds of movies these
people would enjoy together. Look for genre preferences, mood, themes,
mentioned actors or directors, and the overall vibe.

Conversation:
{chat}

Respond with a JSON object in exactly this shape:
{{
  "genres": ["action", "comedy", "drama"],
  "themes": ["friendship", "adventure"],
  "mood": "light-hearted",
  "mentioned_movies": [],
  "summary": "brief summary of what the group wants"
}}"""

GENRE_KEYWORDS = [
    "action", "comedy", "drama", "horror", "thriller", "romance", "sci-fi",
    "adventure", "animation", "documentary", "fantasy", "mystery",
]
THEME_KEYWORDS = ["friendship", "adventure", "family", "love", "humor", "suspense"]
DEFAULT_GENRES = ["action", "comedy", "drama"]


def fallback_preferences(messages: Sequence[ChatMessage]) -> MoviePreferences:
    text = " ".join(m.content.lower() for m in messages)
    genres = [g for g in GENRE_KEYWORDS if g in text] or list(DEFAULT_GENRES)
    themes = [t for t in THEME_KEYWORDS if t in text] or ["adventure", "friendship"]
    return MoviePreferences(
        genres=genres,
        themes=themes,
        mood="entertaining",
        mentioned_movies=[],
        summary=f"Group looking for {' and '.join(genres)} movies together",
    )


class MovieTasteAnalyzer:
    def __init__(self, analyzer: TextAnalyzer) -> None:
        self.analyzer = analyzer

    def analyze(self, messages: Sequence[ChatMessage]) -> MoviePreferences:
        chat = "\n".join(f"{m.sender}: {m.content}" for m in messages)
        try:
            return request_json(self.analyzer, MOVIE_PROMPT.format(chat=chat), MoviePreferences)
        except UpstreamUnavailable:
            logger.warning("Movie taste analysis failed, using keyword fallback", exc_info=True)
            return fallback_preferences(messages)
