from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

Budget = Literal["low", "medium", "high"]
BUDGETS: tuple[str, ...] = ("low", "medium", "high")


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Preference profile
# ---------------------------------------------------------------------------


class Preferences(CamelModel):
    budget: Budget = "medium"
    atmosphere: str = "casual"
    cuisine: list[str] = Field(default_factory=list)
    activities: list[str] = Field(default_factory=list)

    @field_validator("budget", mode="before")
    @classmethod
    def _normalize_budget(cls, value: Any) -> str:
        text = str(value or "").strip().lower()
        return text if text in BUDGETS else "medium"


class GroupInfo(CamelModel):
    size: str = "small group"
    demographics: str = "mixed ages"


class PreferenceProfile(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    interests: list[str]
    place_types: list[str]
    preferences: Preferences
    constraints: list[str] = Field(default_factory=list)
    group_info: GroupInfo = Field(default_factory=GroupInfo)
    keywords: list[str] = Field(default_factory=list)
    summary: str


# ---------------------------------------------------------------------------
# Search plan
# ---------------------------------------------------------------------------


class SearchStrategy(CamelModel):
    type: Literal["place_type", "keyword"]
    value: str = Field(..., min_length=1)
    priority: int = Field(..., ge=1)
    reason: str = ""


class SearchFilters(CamelModel):
    price_level: str = "1-3"
    rating: str = "3.5+"
    open_now: bool = True

    @field_validator("price_level", "rating", mode="before")
    @classmethod
    def _as_text(cls, value: Any, info: ValidationInfo) -> str:
        if value is None:
            return cls.model_fields[info.field_name].default
        return str(value)


class SearchPlan(CamelModel):
    search_strategies: list[SearchStrategy] = Field(..., min_length=1)
    keywords: list[str] = Field(default_factory=list)
    filters: SearchFilters = Field(default_factory=SearchFilters)
    recommendation_reason: str = ""
    alternative_options: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _order_by_priority(self) -> "SearchPlan":
        # sorted() is stable, so equal priorities keep their given order
        self.search_strategies = sorted(self.search_strategies, key=lambda s: s.priority)
        return self


# ---------------------------------------------------------------------------
# Personalisation & activities
# ---------------------------------------------------------------------------


class PlaceAnnotation(CamelModel):
    place_id: str = Field(..., alias="place_id")
    personalized_description: str | None = None
    match_score: float | None = None
    highlights: list[str] | None = None
    group_appeal: str | None = None

    @field_validator("match_score")
    @classmethod
    def _clamp_score(cls, value: float | None) -> float | None:
        if value is None:
            return None
        return max(0.0, min(1.0, value))


class ActivitySuggestion(CamelModel):
    activity: str
    description: str = ""
    duration: str = ""
    cost: str = ""
    group_size: str = ""
    why_recommended: str = ""
    tips: list[str] = Field(default_factory=list)
