from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from ..places.google_client import PlaceFinder

logger = logging.getLogger(__name__)

# Field precedence when merging a nearby-search result with its details:
#
# | field                        | source                                |
# |------------------------------|---------------------------------------|
# | place_id                     | basic (identity is never overwritten) |
# | original_rating              | basic ``rating``                      |
# | original_user_ratings_total  | basic ``user_ratings_total``          |
# | any other field              | detail when present, even if null     |
_IDENTITY_FIELDS = frozenset({"place_id"})
_PRESERVED_FIELDS = {
    "original_rating": "rating",
    "original_user_ratings_total": "user_ratings_total",
}


def basic_projection(place: dict[str, Any]) -> dict[str, Any]:
    """Normalise a raw search result when no details can be fetched."""
    return {
        "place_id": place.get("place_id"),
        "name": place.get("name"),
        "vicinity": place.get("vicinity"),
        "geometry": place.get("geometry"),
        "rating": place.get("rating") or 0,
        "user_ratings_total": place.get("user_ratings_total") or 0,
        "price_level": place.get("price_level"),
        "types": place.get("types") or [],
        "photos": place.get("photos") or [],
        "business_status": place.get("business_status") or "OPERATIONAL",
        "formatted_address": place.get("vicinity"),
    }


def merge_details(basic: dict[str, Any], detail: dict[str, Any]) -> dict[str, Any]:
    merged = {**basic, **detail}
    for key in _IDENTITY_FIELDS:
        if key in basic:
            merged[key] = basic[key]
    for preserved, source in _PRESERVED_FIELDS.items():
        merged[preserved] = basic.get(source)
    return merged


class DetailEnricher:
    """Fetches place details for candidates, one request per candidate."""

    def __init__(self, finder: PlaceFinder, max_workers: int = 8) -> None:
        self.finder = finder
        self.max_workers = max_workers

    def enrich(self, candidate: dict[str, Any]) -> dict[str, Any]:
        place_id = candidate.get("place_id")
        if not place_id:
            return basic_projection(candidate)
        try:
            detail = self.finder.get_details(place_id)
        except Exception:
            logger.warning("Detail lookup for %s failed, using basic fields", place_id, exc_info=True)
            return basic_projection(candidate)
        return merge_details(candidate, detail)

    def enrich_all(self, candidates: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """Enrich every candidate concurrently, returning results in input order."""
        if not candidates:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates))) as pool:
            return list(pool.map(self.enrich, candidates))
