"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MIN_MISSING_GROUPS = 3


def _clamp_missing_groups(raw: Optional[str]) -> int:
    """Parse the clarifying-question threshold and keep it inside 1..3."""

    try:
        parsed = int(raw or DEFAULT_MIN_MISSING_GROUPS)
    except ValueError:
        logger.warning(f"Invalid MIN_MISSING_GROUPS value {raw!r}; using {DEFAULT_MIN_MISSING_GROUPS}")
        return DEFAULT_MIN_MISSING_GROUPS
    return min(3, max(1, parsed))


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for the language model and weather settings."""

    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model: str = DEFAULT_MODEL
    weather_api_base: Optional[str] = None
    min_missing_groups: int = DEFAULT_MIN_MISSING_GROUPS
    sentry_dsn: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from environment variables."""

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
            weather_api_base=os.getenv("WEATHER_API_BASE") or None,
            min_missing_groups=_clamp_missing_groups(os.getenv("MIN_MISSING_GROUPS")),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
        )

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value
