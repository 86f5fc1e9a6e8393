from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class MoviesConfig:
    api_key: str = os.getenv("TMDB_API_KEY", "")
    base_url: str = "https://api.themoviedb.org/3"
    region: str = "IN"
    page_size: int = 10
    timeout: float = 10.0


DEFAULT_MOVIES_CONFIG = MoviesConfig()
