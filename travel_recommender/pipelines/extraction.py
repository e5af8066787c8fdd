"""Preference extraction: free text (plus history) to ParsedPreferences."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Sequence

from travel_recommender.core.llm import ChatModelGateway
from travel_recommender.core.post_processing import extract_json_object, validate_preferences
from travel_recommender.core.prompts import build_extraction_prompt
from travel_recommender.core.schemas import ChatMessage, ParsedPreferences

logger = logging.getLogger(__name__)

EXTRACTION_TEMPERATURE = 0.2
HISTORY_LIMIT = 8


def trim_history(
    history: Optional[Sequence[ChatMessage]],
    *,
    limit: int = HISTORY_LIMIT,
    pending_text: Optional[str] = None,
) -> List[ChatMessage]:
    """Keep the last ``limit`` turns, dropping a trailing copy of the pending user text."""

    turns = list(history or [])
    if pending_text is not None and turns and turns[-1].role == "user" and turns[-1].content == pending_text:
        turns = turns[:-1]
    return turns[-limit:] if limit > 0 else []


def missing_preference_groups(preferences: ParsedPreferences) -> List[str]:
    """Critical preference groups the user has not stated yet."""

    missing: List[str] = []
    if not preferences.region and not preferences.destination_type:
        missing.append("region or destination type")
    if not preferences.month:
        missing.append("target month")
    if preferences.budget_usd is None and preferences.duration_days is None:
        missing.append("budget or trip length")
    return missing


def clarifying_question(preferences: ParsedPreferences, min_missing: int) -> Optional[str]:
    """Return a short follow-up question once ``min_missing`` groups are missing."""

    missing = missing_preference_groups(preferences)
    if len(missing) < min_missing:
        return None
    return f"Quick check: could you share your {', '.join(missing)}?"


class PreferenceExtractor:
    """Asks the model for a preferences object and validates what comes back.

    Raises ``UpstreamFormatError`` when the reply is not a JSON object,
    ``PreferenceValidationError`` when it is an object of the wrong shape,
    and ``ModelInvocationError`` when the model call itself fails.
    """

    def __init__(
        self,
        gateway: ChatModelGateway,
        *,
        temperature: float = EXTRACTION_TEMPERATURE,
        history_limit: int = HISTORY_LIMIT,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.gateway = gateway
        self.temperature = temperature
        self.history_limit = history_limit
        self._today = today

    async def extract(
        self,
        text: str,
        history: Optional[Sequence[ChatMessage]] = None,
    ) -> ParsedPreferences:
        turns = trim_history(history, limit=self.history_limit, pending_text=text)
        logger.info(f"Extracting preferences from {len(text)} chars with {len(turns)} prior turn(s)")

        system_prompt = build_extraction_prompt(self._today().strftime("%B %d, %Y"))
        raw_output = await self.gateway.complete(
            system_prompt,
            turns,
            text,
            temperature=self.temperature,
            json_mode=True,
        )
        logger.debug(f"Raw extraction output: {raw_output}")

        data = extract_json_object(raw_output, empty_as_object=True)
        preferences = validate_preferences(data)
        logger.info(f"Extracted preferences: {preferences.to_prompt_dict()}")
        return preferences
