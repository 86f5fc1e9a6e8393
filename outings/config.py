from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .places.config import DEFAULT_PLACES_CONFIG, PlacesConfig

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class ServiceConfig:
    cors_origin: str = os.getenv("CORS_ORIGIN", "http://localhost:5173")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))


DEFAULT_SERVICE_CONFIG = ServiceConfig()


def check_credentials(
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    places_config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> None:
    """Raise ``ConfigurationError`` if a required API key is missing."""
    missing: list[str] = []
    if not llm_config.api_key:
        missing.append("GROQ_API_KEY")
    if not places_config.api_key:
        missing.append("GOOGLE_PLACES_API_KEY")
    if missing:
        raise ConfigurationError(
            f"{', '.join(missing)} environment variable(s) required"
        )
