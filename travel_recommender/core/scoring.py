"""Heuristic fun/food scores derived from weather text and requested activities."""
from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from travel_recommender.core.schemas import Hotel

BASE_SCORE = 70
UPSCALE_NIGHTLY_USD = 250

_WARM = re.compile(r"warm|sunny|breeze|pleasant", re.IGNORECASE)
_DRY = re.compile(r"dry|low rain|low-rain|limited rain", re.IGNORECASE)
_WET_OR_COLD = re.compile(r"rain|cold|cool", re.IGNORECASE)
_NIGHTLIFE = re.compile(r"nightlife|party|bars?|music", re.IGNORECASE)
_BEACH = re.compile(r"beach|swim|sun", re.IGNORECASE)
_OUTDOORS = re.compile(r"hik(e|ing)|adventure|boat|sail(ing)?", re.IGNORECASE)
_FOOD = re.compile(r"food|foodie|cuisine|dining|restaurants?|eat(ing)?|gastronomy|culinary", re.IGNORECASE)
_FINE_DINING = re.compile(r"fine[- ]dining|michelin|tasting", re.IGNORECASE)


def clamp_score(value: float) -> int:
    """Round to an integer inside [0, 100]."""

    return int(min(100, max(0, round(value))))


def _any_match(pattern: re.Pattern[str], activities: Iterable[str]) -> bool:
    return any(pattern.search(activity) for activity in activities)


def _has_upscale_hotel(hotels: Sequence[Hotel]) -> bool:
    return any(hotel.price_per_night > UPSCALE_NIGHTLY_USD for hotel in hotels)


def fun_score(
    weather_summary: str,
    activities: Optional[Sequence[str]] = None,
    hotels: Sequence[Hotel] = (),
) -> int:
    activities = activities or []
    score = BASE_SCORE
    if _WARM.search(weather_summary):
        score += 8
    if _DRY.search(weather_summary):
        score += 5
    if _WET_OR_COLD.search(weather_summary):
        score -= 6
    if _any_match(_NIGHTLIFE, activities):
        score += 8
    if _any_match(_BEACH, activities):
        score += 6
    if _any_match(_OUTDOORS, activities):
        score += 4
    if _has_upscale_hotel(hotels):
        score += 2
    return clamp_score(score)


def food_score(
    activities: Optional[Sequence[str]] = None,
    hotels: Sequence[Hotel] = (),
) -> int:
    activities = activities or []
    score = BASE_SCORE
    if _any_match(_FOOD, activities):
        score += 10
    if _any_match(_FINE_DINING, activities):
        score += 6
    if _has_upscale_hotel(hotels):
        score += 2
    return clamp_score(score)
