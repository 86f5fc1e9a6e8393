from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    timestamp: datetime | None = None


class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    city: str | None = None


class RecommendationRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)
    location: Location
    radius: int = Field(default=5000, ge=100, le=50000)


class PlaceSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    location: Location
    radius: int = Field(default=5000, ge=100, le=50000)
    type: str | None = None
    keyword: str | None = None
    max_results: int = Field(default=20, ge=1, le=50, alias="maxResults")


class TextSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    location: Location | None = None
    radius: int = Field(default=5000, ge=100, le=50000)
