from __future__ import annotations

from pydantic import BaseModel, Field


class MoviePreferences(BaseModel):
    genres: list[str] = Field(..., min_length=1)
    themes: list[str] = Field(default_factory=list)
    mood: str = "entertaining"
    mentioned_movies: list[str] = Field(default_factory=list)
    summary: str = "Group looking for enjoyable movies together"


class Movie(BaseModel):
    id: int
    title: str
    overview: str = ""
    genre_ids: list[int] = Field(default_factory=list)
    release_date: str | None = None
    vote_average: float | None = None
    poster_path: str | None = None
