"""Exception hierarchy shared by the pipelines and the API surface."""
from __future__ import annotations

from typing import Any, List, Optional


class TravelRecommenderError(Exception):
    """Base class for all recommender failures."""


class UpstreamFormatError(TravelRecommenderError):
    """The language model returned text that is not a usable JSON object."""

    def __init__(self, message: str, *, raw_output: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_output = raw_output


class PreferenceValidationError(TravelRecommenderError):
    """Normalized preferences still do not match the ParsedPreferences shape."""

    def __init__(self, message: str, *, errors: Optional[List[Any]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ModelInvocationError(TravelRecommenderError):
    """The language model call itself failed (network, HTTP, provider error)."""


class ExternalFetchError(TravelRecommenderError):
    """A weather lookup failed; always recovered inside the fact engine."""


class StreamTransportError(TravelRecommenderError):
    """The token stream broke after output had started flowing."""
