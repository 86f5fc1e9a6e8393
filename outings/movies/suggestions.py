from __future__ import annotations

import logging
import random
from typing import Any, Sequence

from ..chat.models import ChatMessage
from ..chat.store import ChatStore
from .analyzer import MovieTasteAnalyzer
from .models import Movie, MoviePreferences
from .tmdb_client import TMDbClient

logger = logging.getLogger(__name__)

MESSAGE_TEMPLATES = (
    'We found {count} perfect movies for your group! Based on your chat about "{summary}"',
    'These {count} movies match your group\'s vibe perfectly! You were discussing "{summary}"',
    'Great news! We\'ve picked {count} movies that align with your conversation about "{summary}"',
)


class SuggestionMessagePicker:
    """Picks one of the response templates; pass a seeded ``Random`` for repeatable output."""

    def __init__(self, rng: random.Random | None = None, templates: Sequence[str] = MESSAGE_TEMPLATES) -> None:
        self.rng = rng or random.Random()
        self.templates = tuple(templates)

    def pick(self, count: int, summary: str) -> str:
        return self.rng.choice(self.templates).format(count=count, summary=summary)


def select_movies(movies: Sequence[Movie], preferences: MoviePreferences, limit: int) -> list[Movie]:
    themes = [t.lower() for t in preferences.themes]
    matched = [
        movie
        for movie in movies
        if preferences.genres or any(t in movie.overview.lower() for t in themes)
    ]
    return matched[:limit] or list(movies[:limit])


class MovieSuggester:
    def __init__(
        self,
        store: ChatStore,
        analyzer: MovieTasteAnalyzer,
        tmdb: TMDbClient,
        picker: SuggestionMessagePicker | None = None,
    ) -> None:
        self.store = store
        self.analyzer = analyzer
        self.tmdb = tmdb
        self.picker = picker or SuggestionMessagePicker()

    def suggest_for_messages(self, messages: Sequence[ChatMessage], limit: int = 4) -> dict[str, Any]:
        preferences = self.analyzer.analyze(messages)
        movies = select_movies(self.tmdb.latest_movies(), preferences, limit)
        logger.info("Selected %d movie suggestions", len(movies))

        return {
            "success": True,
            "suggestions": [m.model_dump() for m in movies],
            "analysis": preferences.model_dump(),
            "message": self.picker.pick(len(movies), preferences.summary),
        }

    def suggest(self, chat_id: str, limit: int = 4) -> dict[str, Any]:
        messages = self.store.get_messages(chat_id)
        logger.info("Found %d chat messages for %s", len(messages), chat_id)

        result = self.suggest_for_messages(messages, limit)
        return {
            **result,
            "chatId": chat_id,
            "chatPreview": [f"{m.sender}: {m.content}" for m in messages[:3]],
        }
