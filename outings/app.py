from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .chat.models import (
    ChatMessage,
    PlaceSearchRequest,
    RecommendationRequest,
    TextSearchRequest,
)
from .chat.store import InMemoryChatStore
from .config import DEFAULT_SERVICE_CONFIG, check_credentials
from .errors import PlacesAPIError
from .llm.groq_client import GroqAnalyzer
from .movies.analyzer import MovieTasteAnalyzer
from .movies.suggestions import MovieSuggester
from .movies.tmdb_client import TMDbClient
from .places.config import DEFAULT_PLACES_CONFIG
from .places.google_client import GooglePlacesClient
from .recommendations.activities import ActivitySuggester
from .recommendations.enricher import DetailEnricher
from .recommendations.extractor import PreferenceExtractor
from .recommendations.gatherer import CandidateGatherer
from .recommendations.personalizer import Personalizer
from .recommendations.pipeline import RecommendationPipeline
from .recommendations.planner import StrategyPlanner

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_credentials()
    yield


app = FastAPI(title="Outing Suggestion API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[DEFAULT_SERVICE_CONFIG.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Wiring ───────────────────────────────────────────────────────────────


@lru_cache
def get_analyzer() -> GroqAnalyzer:
    return GroqAnalyzer()


@lru_cache
def get_places_client() -> GooglePlacesClient:
    return GooglePlacesClient()


@lru_cache
def get_enricher() -> DetailEnricher:
    return DetailEnricher(get_places_client(), DEFAULT_PLACES_CONFIG.enrichment_workers)


@lru_cache
def get_pipeline() -> RecommendationPipeline:
    analyzer = get_analyzer()
    return RecommendationPipeline(
        extractor=PreferenceExtractor(analyzer),
        planner=StrategyPlanner(analyzer),
        gatherer=CandidateGatherer(get_places_client()),
        enricher=get_enricher(),
        personalizer=Personalizer(analyzer),
        suggester=ActivitySuggester(analyzer),
    )


@lru_cache
def get_movie_suggester() -> MovieSuggester:
    return MovieSuggester(
        store=InMemoryChatStore(),
        analyzer=MovieTasteAnalyzer(get_analyzer()),
        tmdb=TMDbClient(),
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _server_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


# ── Error handlers ───────────────────────────────────────────────────────


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Validation error", "details": details})


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "Not found", "message": "The requested endpoint does not exist"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _server_error(exc)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict:
    return {
        "status": "healthy",
        "timestamp": _now(),
        "services": {"places": "active", "recommendations": "active", "movies": "active"},
    }


# ── Recommendation pipeline ──────────────────────────────────────────────


@app.post("/api/recommendations")
def recommendations(
    body: RecommendationRequest,
    pipeline: RecommendationPipeline = Depends(get_pipeline),
) -> dict:
    data = pipeline.run(body.messages, body.location, body.radius)
    return {"success": True, "data": data}


# ── Direct place lookups ─────────────────────────────────────────────────


@app.post("/api/places/search")
def places_search(
    body: PlaceSearchRequest,
    client: GooglePlacesClient = Depends(get_places_client),
    enricher: DetailEnricher = Depends(get_enricher),
):
    try:
        raw = client.search_nearby(
            latitude=body.location.latitude,
            longitude=body.location.longitude,
            radius=body.radius,
            type=body.type,
            keyword=body.keyword,
            max_results=body.max_results,
        )
    except PlacesAPIError as exc:
        logger.error("Nearby search failed: %s", exc)
        return _server_error(exc)

    places = enricher.enrich_all(raw)
    return {
        "success": True,
        "data": {
            "places": places,
            "metadata": {
                "totalResults": len(places),
                "searchRadius": body.radius,
                "location": body.location.model_dump(),
                "timestamp": _now(),
            },
        },
    }


@app.get("/api/places/{place_id}")
def place_details(
    place_id: str,
    client: GooglePlacesClient = Depends(get_places_client),
):
    try:
        place = client.get_details(place_id)
    except PlacesAPIError as exc:
        logger.error("Detail lookup for %s failed: %s", place_id, exc)
        return _server_error(exc)

    photos = place.get("photos") or []
    place["photo_url"] = client.photo_url(photos[0]) if photos else None
    return {"success": True, "data": {"place": place, "timestamp": _now()}}


@app.post("/api/places/text-search")
def places_text_search(
    body: TextSearchRequest,
    client: GooglePlacesClient = Depends(get_places_client),
    enricher: DetailEnricher = Depends(get_enricher),
):
    location = body.location.model_dump() if body.location else None
    try:
        raw = client.search_by_text(body.query, location, body.radius)
    except PlacesAPIError as exc:
        logger.error("Text search for %r failed: %s", body.query, exc)
        return _server_error(exc)

    places = enricher.enrich_all(raw)
    return {
        "success": True,
        "data": {
            "places": places,
            "metadata": {
                "query": body.query,
                "totalResults": len(places),
                "location": location,
                "timestamp": _now(),
            },
        },
    }


# ── Movie suggestions ────────────────────────────────────────────────────

_SAMPLE_MESSAGES = [
    ChatMessage(sender="TestUser1", content="I love action and comedy movies!"),
    ChatMessage(sender="TestUser2", content="Something with adventure would be great"),
]


@app.get("/api/suggestions")
def sample_suggestions(suggester: MovieSuggester = Depends(get_movie_suggester)) -> dict:
    result = suggester.suggest_for_messages(_SAMPLE_MESSAGES, limit=3)
    return {**result, "note": "Use /api/suggestions/chat1 for specific chat analysis"}


@app.get("/api/suggestions/{chat_id}")
def chat_suggestions(
    chat_id: str,
    suggester: MovieSuggester = Depends(get_movie_suggester),
) -> dict:
    return suggester.suggest(chat_id)


def run() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=DEFAULT_SERVICE_CONFIG.host, port=DEFAULT_SERVICE_CONFIG.port)


if __name__ == "__main__":
    run()
