"""Normalization, validation and repair of language-model output.

Model output is never trusted as-is. Every payload goes through three steps:

1. ``extract_json_object``: tolerant parsing that accepts code fences and
   surrounding prose, but requires a JSON object in the end.
2. A normalization pass with explicit per-field coercion rules
   (``normalize_preferences_payload``), run before validation.
3. Pydantic validation, followed for recommendations by a clean-up pass
   (``normalize_recommendation``) and fact pinning (``pin_facts``).
"""
import json
import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from travel_recommender.core.errors import PreferenceValidationError, UpstreamFormatError
from travel_recommender.core.schemas import (
    Destination,
    DestinationPayload,
    FactSheetEntry,
    FollowUpMode,
    Hotel,
    ParsedPreferences,
    Recommendation,
    RecommendationPayload,
    schema_for,
)
from travel_recommender.core.scoring import clamp_score

logger = logging.getLogger(__name__)

_CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_ACTIVITY_SPLIT = re.compile(r"\s*(?:,|&|\band\b)\s*", re.IGNORECASE)
MAX_WEATHER_CHARS = 200


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------


def extract_json_object(raw_output: Optional[str], *, empty_as_object: bool = False) -> Dict[str, Any]:
    """Extract a JSON object from raw LLM output with tolerant parsing of extra wrappers.

    Raises:
        UpstreamFormatError: no candidate parses, or the parsed value is not an object.
    """
    stripped = (raw_output or "").strip()
    if not stripped:
        if empty_as_object:
            return {}
        raise UpstreamFormatError("Model returned an empty response", raw_output=raw_output)

    candidates: List[str] = [stripped]

    # Extract code-fenced JSON blocks if present (```json ... ```)
    for match in _CODE_BLOCK_PATTERN.finditer(stripped):
        block = match.group(1).strip()
        if block:
            candidates.append(block)

    # Attempt to isolate the outermost object within the text
    start_idx = stripped.find("{")
    end_idx = stripped.rfind("}")
    if start_idx != -1 and end_idx > start_idx:
        candidates.append(stripped[start_idx : end_idx + 1])

    last_error: Optional[json.JSONDecodeError] = None
    for candidate in dict.fromkeys(candidates):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        if isinstance(parsed, dict):
            return parsed
        logger.warning(f"Model output parsed to {type(parsed).__name__}, expected an object")

    message = f"Model output is not a JSON object: {last_error}" if last_error else "Model output is not a JSON object"
    raise UpstreamFormatError(message, raw_output=raw_output)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


def _flatten_weather(value: Any) -> Optional[str]:
    """Join a list/dict weather description into one short sentence."""

    try:
        if isinstance(value, Mapping):
            parts = [f"{key}: {item}" for key, item in value.items() if item not in (None, "")]
        else:
            parts = [str(item).strip() for item in value if item not in (None, "")]
        joined = ", ".join(part for part in parts if part)
    except (TypeError, ValueError) as exc:
        logger.debug(f"Could not flatten weather value {value!r}: {exc}")
        return None
    return joined[:MAX_WEATHER_CHARS] or None


def split_activities(text: str) -> List[str]:
    """Split "hiking, food and museums & beach" into trimmed pieces."""

    return [piece.strip() for piece in _ACTIVITY_SPLIT.split(text) if piece and piece.strip()]


def normalize_preferences_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply the documented coercion rules before schema validation.

    - ``weather``: list or dict values are flattened to a string of at most
      200 characters; ``None`` when flattening fails or yields nothing.
    - ``activities``: a string is split on commas, "and", and "&"; anything
      that is neither a string nor a list becomes ``None``.
    """
    normalized = dict(data)

    weather = normalized.get("weather")
    if isinstance(weather, (list, tuple, dict)):
        normalized["weather"] = _flatten_weather(weather)

    activities = normalized.get("activities")
    if isinstance(activities, str):
        normalized["activities"] = split_activities(activities)
    elif activities is not None and not isinstance(activities, list):
        normalized["activities"] = None

    return normalized


def validate_preferences(data: Mapping[str, Any]) -> ParsedPreferences:
    """Normalize then validate; structural failures are surfaced, never defaulted."""

    normalized = normalize_preferences_payload(data)
    try:
        return ParsedPreferences.model_validate(normalized)
    except ValidationError as exc:
        logger.warning(f"Extracted preferences failed validation: {exc.error_count()} error(s)")
        raise PreferenceValidationError(
            "Extracted preferences do not match the expected shape",
            errors=exc.errors(include_url=False, include_context=False),
        ) from exc


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def validate_recommendation(data: Mapping[str, Any], mode: FollowUpMode) -> RecommendationPayload:
    """Validate model output against the schema variant for ``mode``."""

    schema = schema_for(mode)
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        logger.warning(f"Recommendation output failed {mode.value} schema: {exc.error_count()} error(s)")
        raise UpstreamFormatError(f"Recommendation does not match the {mode.value} schema: {exc}") from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _clean_strings(values: Optional[Sequence[Any]], *, dedupe: bool = False) -> List[str]:
    cleaned: List[str] = []
    seen: set[str] = set()
    for value in values or []:
        if not value or not isinstance(value, str):
            continue
        text = value.strip()
        if not text:
            continue
        key = text.lower()
        if dedupe and key in seen:
            continue
        seen.add(key)
        cleaned.append(text)
    return cleaned


def clean_hotels(raw_hotels: Optional[Sequence[Any]]) -> Optional[List[Hotel]]:
    """Keep only entries with a string name and a numeric nightly price."""

    if raw_hotels is None:
        return None
    hotels: List[Hotel] = []
    for item in raw_hotels:
        if isinstance(item, Hotel):
            hotels.append(item)
            continue
        if not isinstance(item, Mapping):
            continue
        name = item.get("name")
        price = item.get("pricePerNight", item.get("price_per_night"))
        if not isinstance(name, str) or not name.strip() or not _is_number(price) or price < 0:
            logger.debug(f"Dropping malformed hotel entry: {item!r}")
            continue
        rating = item.get("rating")
        hotel_type = item.get("type")
        hotels.append(
            Hotel(
                name=name.strip(),
                price_per_night=price,
                rating=rating if _is_number(rating) else None,
                type=hotel_type if isinstance(hotel_type, str) else None,
            )
        )
    return hotels


def _normalize_destination(payload: DestinationPayload) -> Destination:
    insights = payload.cultural_insights
    return Destination(
        name=payload.name.strip(),
        country=payload.country,
        best_month=payload.best_month,
        best_time_to_visit=payload.best_time_to_visit,
        est_cost_usd=payload.est_cost_usd,
        flight_price_usd=payload.flight_price_usd,
        weather_summary=payload.weather_summary,
        highlights=_clean_strings(payload.highlights, dedupe=True),
        fun_score=clamp_score(payload.fun_score) if payload.fun_score is not None else None,
        food_score=clamp_score(payload.food_score) if payload.food_score is not None else None,
        hotels=clean_hotels(payload.hotels),
        cultural_insights=_clean_strings(insights) if insights is not None else None,
        why=payload.why,
    )


def normalize_recommendation(payload: RecommendationPayload) -> Recommendation:
    """Post-validation clean-up: dedupe/trim highlights, filter hotels,
    clamp and round scores, drop falsy cultural insights and tips."""

    return Recommendation(
        destinations=[_normalize_destination(d) for d in payload.destinations],
        tips=_clean_strings(payload.tips),
    )


def match_fact(name: str, facts: Sequence[FactSheetEntry]) -> Optional[FactSheetEntry]:
    """Find the fact-sheet entry a model-named destination refers to."""

    wanted = name.strip().lower()
    for entry in facts:
        if wanted in (entry.name.lower(), entry.place.lower()):
            return entry
    for entry in facts:
        if re.search(rf"\b{re.escape(entry.name.lower())}\b", wanted):
            return entry
    return None


def pin_facts(recommendation: Recommendation, facts: Sequence[FactSheetEntry]) -> Recommendation:
    """Overwrite any fact the model restated with the computed value.

    Only fields the model actually emitted are replaced, so a minimal
    per-mode answer stays minimal.
    """

    pinned: List[Destination] = []
    for destination in recommendation.destinations:
        entry = match_fact(destination.name, facts)
        if entry is None:
            pinned.append(destination)
            continue
        updates: Dict[str, Any] = {}
        if not destination.country:
            updates["country"] = entry.country
        if destination.est_cost_usd is not None:
            updates["est_cost_usd"] = entry.est_cost_usd
        if destination.flight_price_usd is not None:
            updates["flight_price_usd"] = entry.flight_price_usd
        if destination.weather_summary is not None:
            updates["weather_summary"] = entry.weather_summary
        if destination.fun_score is not None and entry.fun_score is not None:
            updates["fun_score"] = entry.fun_score
        if destination.food_score is not None and entry.food_score is not None:
            updates["food_score"] = entry.food_score
        if destination.hotels is not None and entry.hotels:
            updates["hotels"] = [hotel.model_copy() for hotel in entry.hotels]
        pinned.append(destination.model_copy(update=updates))
    return Recommendation(destinations=pinned, tips=list(recommendation.tips))
