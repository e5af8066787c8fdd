"""FactEngine: cached weather summaries plus deterministic pricing and hotels."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from travel_recommender.core.cache import (
    TTL_HOTELS,
    TTL_WEATHER_FALLBACK,
    TTL_WEATHER_LIVE,
    InMemoryTTLCache,
    TTLCache,
)
from travel_recommender.core.errors import ExternalFetchError
from travel_recommender.core.schemas import Hotel
from travel_recommender.core.types import Comfort
from travel_recommender.services.facts.hotels import hotel_suggestions
from travel_recommender.services.facts.pricing import (
    estimate_flight_price_usd,
    estimate_trip_cost_usd,
)
from travel_recommender.services.weather import Coordinates, DailyForecast, WeatherClient

logger = logging.getLogger(__name__)

PLACE_COORDINATES: Dict[str, Coordinates] = {
    "Lisbon, Portugal": Coordinates(lat=38.7223, lng=-9.1393),
    "Canary Islands, Spain": Coordinates(lat=28.2916, lng=-16.6291),
    "Crete, Greece": Coordinates(lat=35.2401, lng=24.8093),
    "Nice, France": Coordinates(lat=43.7102, lng=7.2620),
}


def _month_hint(month: Optional[str]) -> str:
    return f" in {month}" if month else ""


def generic_weather_sentence(month: Optional[str] = None) -> str:
    """Seasonal sentence used when no weather source or coordinates are available."""

    return f"Typically mild to warm{_month_hint(month)}; expect 65–80°F, low rain."


def degraded_weather_sentence(month: Optional[str] = None) -> str:
    """Sentence used when a configured weather source fails."""

    return f"Seasonal: pleasant{_month_hint(month)}, moderate temps, limited rain."


def _mean(values: List[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def summarize_forecast(forecast: DailyForecast) -> str:
    """Reduce a daily forecast to an average-high/low/precipitation sentence."""

    avg_high = _mean(forecast.temperature_2m_max)
    avg_low = _mean(forecast.temperature_2m_min)
    avg_precip = _mean(forecast.precipitation_sum)
    if avg_high is None or avg_low is None:
        raise ExternalFetchError("Forecast is missing temperature data")
    return (
        f"Avg highs {avg_high:.0f}°F / lows {avg_low:.0f}°F; "
        f"precipitation {(avg_precip or 0.0):.1f}mm/day."
    )


class FactEngine:
    """Deterministic weather, flight, cost and hotel facts with TTL caching.

    The cache is injected so that callers can share one store per process or
    swap it for another backend; entries are keyed by deterministic strings
    and never mutated after being written.
    """

    def __init__(
        self,
        weather_client: Optional[WeatherClient] = None,
        cache: Optional[TTLCache] = None,
    ) -> None:
        self.weather_client = weather_client
        self.cache: TTLCache = cache if cache is not None else InMemoryTTLCache()

    async def aclose(self) -> None:
        if self.weather_client is not None:
            await self.weather_client.aclose()

    async def get_weather_summary(self, place: str, month: Optional[str] = None) -> str:
        """Return a one-sentence weather summary; never raises."""

        key = f"weather:{place}:{month or ''}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        coords = PLACE_COORDINATES.get(place)
        if self.weather_client is None or coords is None:
            summary = generic_weather_sentence(month)
            self.cache.set(key, summary, TTL_WEATHER_FALLBACK)
            return summary

        try:
            forecast = await self.weather_client.fetch_daily(coords)
            summary = summarize_forecast(forecast)
        except Exception as exc:
            logger.warning(f"Weather summary for {place} degraded to seasonal text: {exc}")
            return degraded_weather_sentence(month)

        self.cache.set(key, summary, TTL_WEATHER_LIVE)
        return summary

    def estimate_flight_price_usd(self, destination: str, month: Optional[str] = None) -> int:
        return estimate_flight_price_usd(destination, month)

    def estimate_trip_cost_usd(
        self,
        destination: str,
        duration_days: Optional[float] = None,
        comfort: Comfort = "mid",
        flight_price: Optional[int] = None,
    ) -> int:
        return estimate_trip_cost_usd(destination, duration_days, comfort, flight_price)

    def get_hotel_suggestions(self, destination: str, comfort: Comfort) -> List[Hotel]:
        key = f"hotels:{destination}:{comfort}"
        cached = self.cache.get(key)
        if cached is None:
            cached = hotel_suggestions(destination, comfort)
            self.cache.set(key, cached, TTL_HOTELS)
        return [hotel.model_copy() for hotel in cached]
