"""Deterministic fact providers for candidate destinations.

Public API:
    - FactEngine: Weather, flight, cost and hotel facts with TTL caching
    - estimate_flight_price_usd / estimate_trip_cost_usd: Pure pricing helpers
    - comfort_for_budget: Budget to comfort-tier mapping
    - hotel_suggestions: Uncached catalog lookup
"""
from travel_recommender.services.facts.engine import (
    PLACE_COORDINATES,
    FactEngine,
    degraded_weather_sentence,
    generic_weather_sentence,
    summarize_forecast,
)
from travel_recommender.services.facts.hotels import HOTEL_CATALOG, hotel_suggestions
from travel_recommender.services.facts.pricing import (
    comfort_for_budget,
    estimate_flight_price_usd,
    estimate_trip_cost_usd,
)

__all__ = [
    "FactEngine",
    "HOTEL_CATALOG",
    "PLACE_COORDINATES",
    "comfort_for_budget",
    "degraded_weather_sentence",
    "estimate_flight_price_usd",
    "estimate_trip_cost_usd",
    "generic_weather_sentence",
    "hotel_suggestions",
    "summarize_forecast",
]
