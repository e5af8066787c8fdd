"""Deterministic flight and trip cost estimates."""
from __future__ import annotations

from typing import Dict, Optional

from travel_recommender.core.types import Comfort

BASE_FLIGHT_USD = 700  # crude EU round-trip proxy
DEFAULT_DURATION_DAYS = 5
NIGHTLY_RATE_USD: Dict[str, int] = {"budget": 80, "mid": 150, "premium": 300}

PEAK_MONTHS = ("june", "july", "august", "december")
SHOULDER_MONTHS = ("april", "may", "september", "october")
PEAK_MULTIPLIER = 1.4
SHOULDER_MULTIPLIER = 1.15

BUDGET_TIER_BELOW_USD = 1500
PREMIUM_TIER_ABOVE_USD = 3000


def _seasonal_multiplier(month: Optional[str]) -> float:
    if not month:
        return 1.0
    lowered = month.lower()
    if any(peak in lowered for peak in PEAK_MONTHS):
        return PEAK_MULTIPLIER
    if any(shoulder in lowered for shoulder in SHOULDER_MONTHS):
        return SHOULDER_MULTIPLIER
    return 1.0


def estimate_flight_price_usd(destination: str, month: Optional[str] = None) -> int:
    """Base round-trip fare scaled for peak (x1.4) or shoulder (x1.15) months."""

    return round(BASE_FLIGHT_USD * _seasonal_multiplier(month))


def estimate_trip_cost_usd(
    destination: str,
    duration_days: Optional[float] = None,
    comfort: Comfort = "mid",
    flight_price: Optional[int] = None,
) -> int:
    """Flight plus ``max(1, days - 1)`` nights at the comfort tier's nightly rate."""

    flight = BASE_FLIGHT_USD if flight_price is None else flight_price
    nights = max(1, (duration_days or DEFAULT_DURATION_DAYS) - 1)
    return round(flight + nights * NIGHTLY_RATE_USD[comfort])


def comfort_for_budget(budget_usd: Optional[float]) -> Comfort:
    """Derive the comfort tier from a stated budget; unknown or zero budgets are mid."""

    if budget_usd and budget_usd < BUDGET_TIER_BELOW_USD:
        return "budget"
    if budget_usd and budget_usd > PREMIUM_TIER_ABOVE_USD:
        return "premium"
    return "mid"
