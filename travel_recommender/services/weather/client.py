"""Async httpx client for Open-Meteo style daily forecasts."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from travel_recommender.core.errors import ExternalFetchError
from travel_recommender.core.types import Lat, Lon

logger = logging.getLogger(__name__)


class Coordinates(BaseModel):
    lat: Lat
    lng: Lon


class DailyForecast(BaseModel):
    """Subset of the Open-Meteo ``daily`` block the fact engine reads."""

    temperature_2m_max: List[Optional[float]] = Field(default_factory=list)
    temperature_2m_min: List[Optional[float]] = Field(default_factory=list)
    precipitation_sum: List[Optional[float]] = Field(default_factory=list)


class WeatherClient:
    """Thin async wrapper around an Open-Meteo compatible forecast endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        forecast_days: int = 7,
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.forecast_days = forecast_days
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s, connect=5.0),
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTPX client."""

        await self._client.aclose()

    async def __aenter__(self) -> "WeatherClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.aclose()

    async def fetch_daily(self, coords: Coordinates) -> DailyForecast:
        """Fetch a short-range daily forecast; raise ExternalFetchError on any failure."""

        params: Dict[str, Any] = {
            "latitude": coords.lat,
            "longitude": coords.lng,
            "daily": "temperature_2m_max,temperature_2m_min,precipitation_sum",
            "forecast_days": self.forecast_days,
            "timezone": "auto",
            "temperature_unit": "fahrenheit",
        }
        try:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
            return DailyForecast.model_validate(data.get("daily") or {})
        except Exception as exc:
            logger.warning(f"Weather fetch failed for {coords.lat},{coords.lng}: {exc}")
            raise ExternalFetchError(str(exc)) from exc


def create_weather_client(base_url: Optional[str]) -> Optional[WeatherClient]:
    """Return a client when a weather source is configured, otherwise ``None``."""

    if not base_url:
        logger.info("WEATHER_API_BASE not set; weather summaries use seasonal fallback text")
        return None
    return WeatherClient(base_url)
