"""Weather forecast integration.

Public API:
    - WeatherClient: Async HTTP client for an Open-Meteo compatible endpoint
    - create_weather_client: Factory returning a client or ``None`` when unconfigured
    - Coordinates / DailyForecast: Pydantic request and response shapes
"""
from travel_recommender.services.weather.client import (
    Coordinates,
    DailyForecast,
    WeatherClient,
    create_weather_client,
)

__all__ = [
    "Coordinates",
    "DailyForecast",
    "WeatherClient",
    "create_weather_client",
]
