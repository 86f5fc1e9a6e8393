from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from ..errors import PlacesAPIError
from .config import DEFAULT_PLACES_CONFIG, PlacesConfig

logger = logging.getLogger(__name__)

_SEARCH_OK = ("OK", "ZERO_RESULTS")


class PlaceFinder(Protocol):
    def search_nearby(
        self,
        latitude: float,
        longitude: float,
        radius: int | None = None,
        type: str | None = None,
        keyword: str | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        ...

    def get_details(self, place_id: str) -> dict[str, Any]:
        ...

    def search_by_text(
        self,
        query: str,
        location: dict[str, float] | None = None,
        radius: int | None = None,
    ) -> list[dict[str, Any]]:
        ...


def format_place_details(place: dict[str, Any]) -> dict[str, Any]:
    """Project a Place Details result onto the fields the service exposes."""
    return {
        "place_id": place.get("place_id"),
        "name": place.get("name"),
        "formatted_address": place.get("formatted_address"),
        "geometry": place.get("geometry"),
        "rating": place.get("rating") or 0,
        "user_ratings_total": place.get("user_ratings_total") or 0,
        "price_level": place.get("price_level"),
        "types": place.get("types") or [],
        "photos": place.get("photos") or [],
        "opening_hours": place.get("opening_hours"),
        "website": place.get("website"),
        "formatted_phone_number": place.get("formatted_phone_number"),
        "reviews": place.get("reviews") or [],
        "business_status": place.get("business_status") or "OPERATIONAL",
    }


class GooglePlacesClient:
    """Thin client for the Google Places web service (JSON endpoints)."""

    def __init__(
        self,
        config: PlacesConfig = DEFAULT_PLACES_CONFIG,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: dict[str, Any], ok_statuses: tuple[str, ...]) -> dict:
        url = f"{self.config.base_url}/{endpoint}/json"
        try:
            response = self.session.get(
                url,
                params={**params, "key": self.config.api_key},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise PlacesAPIError(f"Google Places request to {endpoint} failed: {exc}") from exc

        status = data.get("status")
        if status not in ok_statuses:
            raise PlacesAPIError(f"Google Places API error: {status}")
        return data

    def search_nearby(
        self,
        latitude: float,
        longitude: float,
        radius: int | None = None,
        type: str | None = None,
        keyword: str | None = None,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        radius = radius or self.config.default_radius
        if max_results is None:
            max_results = self.config.max_results
        params: dict[str, Any] = {"location": f"{latitude},{longitude}", "radius": radius}
        if type:
            params["type"] = type
        if keyword:
            params["keyword"] = keyword

        data = self._get("nearbysearch", params, _SEARCH_OK)
        places = data.get("results") or []
        if max_results and len(places) > max_results:
            places = places[:max_results]

        logger.info("Nearby search type=%s keyword=%s returned %d places", type, keyword, len(places))
        return places

    def get_details(self, place_id: str) -> dict[str, Any]:
        params = {"place_id": place_id, "fields": ",".join(self.config.detail_fields)}
        data = self._get("details", params, ("OK",))
        return format_place_details(data.get("result") or {})

    def search_by_text(
        self,
        query: str,
        location: dict[str, float] | None = None,
        radius: int | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"query": query}
        if location:
            params["location"] = f"{location['latitude']},{location['longitude']}"
            params["radius"] = radius or self.config.default_radius

        data = self._get("textsearch", params, _SEARCH_OK)
        return data.get("results") or []

    def photo_url(
        self,
        photo: dict[str, Any] | None,
        max_width: int = 400,
        max_height: int = 400,
    ) -> str | None:
        if not photo or not photo.get("photo_reference"):
            return None
        return (
            f"{self.config.base_url}/photo?maxwidth={max_width}&maxheight={max_height}"
            f"&photo_reference={photo['photo_reference']}&key={self.config.api_key}"
        )
