"""Fact providers used by the recommendation pipeline.

This package provides the deterministic data attached to each candidate
destination before the language model is prompted:

- Weather: Open-Meteo compatible forecast client
- Facts: flight/trip pricing, hotel catalog, and the caching FactEngine

Example Usage:
    >>> from travel_recommender.services import FactEngine, create_weather_client
    >>> from travel_recommender.core.config import ApiSettings
    >>>
    >>> settings = ApiSettings.from_env()
    >>> engine = FactEngine(create_weather_client(settings.weather_api_base))
"""

from travel_recommender.services.facts import (
    FactEngine,
    comfort_for_budget,
    estimate_flight_price_usd,
    estimate_trip_cost_usd,
)
from travel_recommender.services.weather import (
    Coordinates,
    WeatherClient,
    create_weather_client,
)

__all__ = [
    # Facts
    "FactEngine",
    "comfort_for_budget",
    "estimate_flight_price_usd",
    "estimate_trip_cost_usd",
    # Weather
    "Coordinates",
    "WeatherClient",
    "create_weather_client",
]
