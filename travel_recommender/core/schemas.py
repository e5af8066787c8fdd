"""Pydantic data models for the travel recommendation pipeline.

This module holds every structure that crosses a component boundary:

- ParsedPreferences: what the extraction model understood from the user
- Hotel / FactSheetEntry: deterministic facts computed before prompting
- RecommendationPayload (+ per-mode variants): the loose shape model output is
  validated against before normalization
- Destination / Recommendation: the trusted, normalized result
- FollowUpMode / Tone: closed enumerations selected per request

Field names are snake_case in Python and camelCase on the wire; every model
accepts both spellings on input.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, model_validator

from travel_recommender.core.types import NonNegMoney, Role, Score, StrictNumber


class FollowUpMode(str, Enum):
    """Minimal response shape requested for the current turn."""

    NONE = "none"
    CLIMATE = "climate"
    COSTS = "costs"
    FLIGHTS = "flights"
    HOTELS = "hotels"
    HIGHLIGHTS = "highlights"
    TIPS = "tips"
    FUN = "fun"
    FOOD = "food"


class Tone(str, Enum):
    """Phrasing styles offered to the user. Tone never changes facts or schema."""

    SURFER = "surfer"
    FRIENDLY = "friendly"
    FORMAL = "formal"
    CONCISE = "concise"
    ENTHUSIASTIC = "enthusiastic"
    LUXURY = "luxury"
    ADVENTURE = "adventure"
    DARIA = "90s-daria"
    HANK_HILL = "hank-hill"


class ChatMessage(BaseModel):
    """Single prior conversation turn."""

    role: Role
    content: str


class TripDates(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class ParsedPreferences(BaseModel):
    """Structured travel intent extracted from one user turn.

    Every field is optional; absence means "unknown" and is never guessed.
    Budget and duration are strict numbers so that a string such as "cheap"
    fails validation instead of being silently dropped.
    """

    region: Optional[str] = None
    destination_type: Optional[str] = Field(default=None, alias="destinationType")
    budget_usd: Optional[StrictNumber] = Field(default=None, alias="budgetUsd")
    duration_days: Optional[StrictNumber] = Field(default=None, alias="durationDays")
    month: Optional[str] = None
    dates: Optional[TripDates] = None
    activities: Optional[List[str]] = None
    weather: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_prompt_dict(self) -> Dict[str, Any]:
        """Return the camelCase view embedded in prompts."""

        return self.model_dump(by_alias=True, exclude_none=True)


class Hotel(BaseModel):
    name: str
    price_per_night: NonNegMoney = Field(alias="pricePerNight")
    rating: Optional[float] = None
    type: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class FactSheetEntry(BaseModel):
    """Deterministic facts for one candidate destination.

    These numbers are authoritative: prompts tell the model never to alter
    them and rendering prefers them over anything the model restates.
    """

    name: str
    country: str
    weather_summary: str
    flight_price_usd: int
    est_cost_usd: int
    hotels: List[Hotel] = Field(default_factory=list)
    fun_score: Optional[Score] = None
    food_score: Optional[Score] = None

    model_config = ConfigDict(frozen=True)

    @property
    def place(self) -> str:
        return f"{self.name}, {self.country}"


# ---------------------------------------------------------------------------
# Model output: loose payload validated first, then normalized
# ---------------------------------------------------------------------------


class DestinationPayload(BaseModel):
    """Destination as the model emits it, before repair."""

    name: str
    country: Optional[str] = None
    best_month: Optional[str] = Field(default=None, alias="bestMonth")
    best_time_to_visit: Optional[str] = Field(default=None, alias="bestTimeToVisit")
    est_cost_usd: Optional[float] = Field(default=None, alias="estCostUsd")
    flight_price_usd: Optional[float] = Field(default=None, alias="flightPriceUsd")
    weather_summary: Optional[str] = Field(default=None, alias="weatherSummary")
    highlights: List[str] = Field(default_factory=list)
    fun_score: Optional[float] = Field(default=None, alias="funScore")
    food_score: Optional[float] = Field(default=None, alias="foodScore")
    hotels: Optional[List[Any]] = None
    cultural_insights: Optional[List[Optional[str]]] = Field(default=None, alias="culturalInsights")
    why: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)


class RecommendationPayload(BaseModel):
    """Base recommendation shape shared by every follow-up mode."""

    destinations: List[DestinationPayload] = Field(default_factory=list)
    tips: Optional[List[str]] = None

    model_config = ConfigDict(extra="ignore")


def _require_attr_when_destinations(payload: RecommendationPayload, attr: str, label: str) -> None:
    if payload.destinations and not any(getattr(d, attr) is not None for d in payload.destinations):
        raise ValueError(f"At least one destination should include {label}")


class FunRecommendationPayload(RecommendationPayload):
    """Fun mode: some destination must carry a funScore."""

    @model_validator(mode="after")
    def _has_fun_score(self) -> "FunRecommendationPayload":
        _require_attr_when_destinations(self, "fun_score", "funScore")
        return self


class FoodRecommendationPayload(RecommendationPayload):
    """Food mode: some destination must carry a foodScore."""

    @model_validator(mode="after")
    def _has_food_score(self) -> "FoodRecommendationPayload":
        _require_attr_when_destinations(self, "food_score", "foodScore")
        return self


MODE_SCHEMAS: Dict[FollowUpMode, Type[RecommendationPayload]] = {
    FollowUpMode.NONE: RecommendationPayload,
    FollowUpMode.CLIMATE: RecommendationPayload,
    FollowUpMode.COSTS: RecommendationPayload,
    FollowUpMode.FLIGHTS: RecommendationPayload,
    FollowUpMode.HOTELS: RecommendationPayload,
    FollowUpMode.HIGHLIGHTS: RecommendationPayload,
    FollowUpMode.TIPS: RecommendationPayload,
    FollowUpMode.FUN: FunRecommendationPayload,
    FollowUpMode.FOOD: FoodRecommendationPayload,
}


def schema_for(mode: FollowUpMode) -> Type[RecommendationPayload]:
    """Return the validation model for the requested follow-up mode."""

    return MODE_SCHEMAS[mode]


# ---------------------------------------------------------------------------
# Trusted output
# ---------------------------------------------------------------------------


class Destination(BaseModel):
    """Normalized destination returned to callers."""

    name: str
    country: Optional[str] = None
    best_month: Optional[str] = Field(default=None, alias="bestMonth")
    best_time_to_visit: Optional[str] = Field(default=None, alias="bestTimeToVisit")
    est_cost_usd: Optional[float] = Field(default=None, alias="estCostUsd")
    flight_price_usd: Optional[float] = Field(default=None, alias="flightPriceUsd")
    weather_summary: Optional[str] = Field(default=None, alias="weatherSummary")
    highlights: List[str] = Field(default_factory=list)
    fun_score: Optional[Score] = Field(default=None, alias="funScore")
    food_score: Optional[Score] = Field(default=None, alias="foodScore")
    hotels: Optional[List[Hotel]] = None
    cultural_insights: Optional[List[str]] = Field(default=None, alias="culturalInsights")
    why: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def place(self) -> str:
        return f"{self.name}, {self.country}" if self.country else self.name


class Recommendation(BaseModel):
    destinations: List[Destination] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "Recommendation":
        return cls(destinations=[], tips=[])


__all__ = [
    "ChatMessage",
    "Destination",
    "DestinationPayload",
    "FactSheetEntry",
    "FollowUpMode",
    "FoodRecommendationPayload",
    "FunRecommendationPayload",
    "Hotel",
    "MODE_SCHEMAS",
    "ParsedPreferences",
    "Recommendation",
    "RecommendationPayload",
    "Tone",
    "TripDates",
    "schema_for",
]
