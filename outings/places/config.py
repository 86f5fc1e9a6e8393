from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

DETAIL_FIELDS: tuple[str, ...] = (
    "place_id",
    "name",
    "formatted_address",
    "geometry",
    "rating",
    "user_ratings_total",
    "price_level",
    "photos",
    "opening_hours",
    "types",
    "website",
    "formatted_phone_number",
    "reviews",
    "business_status",
)


@dataclass(frozen=True)
class PlacesConfig:
    api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    base_url: str = "https://maps.googleapis.com/maps/api/place"
    timeout: float = 10.0
    default_radius: int = 5000
    max_results: int = 20
    detail_fields: tuple[str, ...] = field(default=DETAIL_FIELDS)
    enrichment_workers: int = 8


DEFAULT_PLACES_CONFIG = PlacesConfig()
