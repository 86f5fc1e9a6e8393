from __future__ import annotations

import logging

import requests
from pydantic import ValidationError

from .config import DEFAULT_MOVIES_CONFIG, MoviesConfig
from .models import Movie

logger = logging.getLogger(__name__)

LOCAL_MOVIES: list[Movie] = [
    Movie(
        id=1,
        title="Sample Action Movie",
        overview="An exciting action adventure",
        genre_ids=[28, 12],
        release_date="2024-01-01",
        vote_average=7.5,
        poster_path="/sample-poster.jpg",
    ),
    Movie(
        id=2,
        title="Sample Comedy Film",
        overview="A hilarious comedy for everyone",
        genre_ids=[35, 10749],
        release_date="2024-01-02",
        vote_average=8.0,
        poster_path="/comedy-poster.jpg",
    ),
]


class TMDbClient:
    def __init__(
        self,
        config: MoviesConfig = DEFAULT_MOVIES_CONFIG,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def latest_movies(self) -> list[Movie]:
        """Now-playing movies, or the bundled sample list if TMDb is unreachable."""
        try:
            response = self.session.get(
                f"{self.config.base_url}/movie/now_playing",
                params={"api_key": self.config.api_key, "region": self.config.region, "page": 1},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            results = response.json().get("results") or []
            movies = [Movie.model_validate(m) for m in results[: self.config.page_size]]
        except (requests.RequestException, ValueError, ValidationError):
            logger.warning("TMDb request failed, using local movies", exc_info=True)
            return list(LOCAL_MOVIES)

        logger.info("Found %d movies from TMDb", len(movies))
        return movies
