"""Recommendation generation: facts, prompts, model call, repair, rendering."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from travel_recommender.core.candidates import CandidateDestination, select_candidates
from travel_recommender.core.errors import StreamTransportError, UpstreamFormatError
from travel_recommender.core.followups import classify, latest_user_message
from travel_recommender.core.llm import ChatModelGateway
from travel_recommender.core.post_processing import (
    extract_json_object,
    normalize_recommendation,
    pin_facts,
    validate_recommendation,
)
from travel_recommender.core.prompts import build_system_prompt, build_user_message
from travel_recommender.core.rendering import (
    STREAM_ERROR_NOTICE,
    error_markdown,
    render_markdown,
    stream_prelude,
)
from travel_recommender.core.schemas import (
    ChatMessage,
    FactSheetEntry,
    FollowUpMode,
    ParsedPreferences,
    Recommendation,
    Tone,
)
from travel_recommender.core.scoring import food_score, fun_score
from travel_recommender.core.tones import resolve_tone
from travel_recommender.core.types import Comfort
from travel_recommender.pipelines.extraction import HISTORY_LIMIT, trim_history
from travel_recommender.services.facts import FactEngine, comfort_for_budget

logger = logging.getLogger(__name__)

RECOMMEND_TEMPERATURE = 0.4


@dataclass
class RecommendationResult:
    """Validated recommendation plus the markdown view rendered for its mode."""

    recommendation: Recommendation
    markdown: str
    mode: FollowUpMode
    facts: List[FactSheetEntry] = field(default_factory=list)
    degraded: bool = False


class RecommendationGenerator:
    """Orchestrates candidate selection, fact computation and the model call.

    Per request:
    1. select candidates and compute their facts concurrently
    2. classify the latest user turn into a follow-up mode
    3. build the system prompt (base + mode minimization + tone)
    4. build the user message (preferences, fact lines, task)
    5. invoke the model (JSON for ``recommend``, text for ``stream``)
    6. validate and repair JSON output, pinning computed facts
    7. render the mode-specific markdown
    """

    def __init__(
        self,
        gateway: ChatModelGateway,
        fact_engine: FactEngine,
        *,
        temperature: float = RECOMMEND_TEMPERATURE,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self.gateway = gateway
        self.fact_engine = fact_engine
        self.temperature = temperature
        self.history_limit = history_limit

    async def _facts_for(
        self,
        candidate: CandidateDestination,
        preferences: ParsedPreferences,
        comfort: Comfort,
    ) -> FactSheetEntry:
        place = candidate.place
        month = preferences.month or None
        weather = await self.fact_engine.get_weather_summary(place, month)

        flight_price = self.fact_engine.estimate_flight_price_usd(place, month)
        est_cost = self.fact_engine.estimate_trip_cost_usd(
            place,
            duration_days=preferences.duration_days,
            comfort=comfort,
            flight_price=flight_price,
        )
        hotels = self.fact_engine.get_hotel_suggestions(place, comfort)
        activities = preferences.activities or []
        return FactSheetEntry(
            name=candidate.name,
            country=candidate.country,
            weather_summary=weather,
            flight_price_usd=flight_price,
            est_cost_usd=est_cost,
            hotels=hotels,
            fun_score=fun_score(weather, activities, hotels),
            food_score=food_score(activities, hotels),
        )

    async def build_fact_sheet(self, preferences: ParsedPreferences) -> List[FactSheetEntry]:
        """Compute facts for every selected candidate in parallel, then join."""

        candidates = select_candidates(preferences)
        comfort = comfort_for_budget(preferences.budget_usd)
        logger.info(
            f"Building facts for {len(candidates)} candidate(s) "
            f"({', '.join(c.name for c in candidates) or 'none'}), comfort={comfort}"
        )
        return list(
            await asyncio.gather(*(self._facts_for(c, preferences, comfort) for c in candidates))
        )

    def _prepare(
        self,
        preferences: ParsedPreferences,
        history: Optional[Sequence[ChatMessage]],
        tone: Optional[Union[str, Tone]],
    ) -> Tuple[List[ChatMessage], Optional[str], FollowUpMode, Tone]:
        turns = trim_history(history, limit=self.history_limit)
        latest = latest_user_message(history)
        mode = classify(latest)
        resolved_tone = resolve_tone(tone)
        logger.info(f"Follow-up mode={mode.value}, tone={resolved_tone.value}")
        return turns, latest, mode, resolved_tone

    async def recommend(
        self,
        preferences: ParsedPreferences,
        history: Optional[Sequence[ChatMessage]] = None,
        tone: Optional[Union[str, Tone]] = None,
    ) -> RecommendationResult:
        """Batch variant. Model call failures propagate; bad output degrades."""

        turns, latest, mode, resolved_tone = self._prepare(preferences, history, tone)
        facts = await self.build_fact_sheet(preferences)

        raw_output = await self.gateway.complete(
            build_system_prompt(mode, resolved_tone),
            turns,
            build_user_message(preferences, facts, mode),
            temperature=self.temperature,
            json_mode=True,
        )
        logger.debug(f"Raw recommendation output: {raw_output}")

        try:
            payload = validate_recommendation(extract_json_object(raw_output), mode)
            recommendation = pin_facts(normalize_recommendation(payload), facts)
        except (UpstreamFormatError, ValidationError) as exc:
            logger.warning(f"Returning degraded recommendation: {exc}")
            return RecommendationResult(
                recommendation=Recommendation.empty(),
                markdown=error_markdown("the assistant's answer was not in the expected format"),
                mode=mode,
                facts=facts,
                degraded=True,
            )

        markdown = render_markdown(
            recommendation,
            mode,
            facts=facts,
            preferences=preferences,
            tone=resolved_tone,
            latest_message=latest,
        )
        logger.info(f"Recommendation ready: {len(recommendation.destinations)} destination(s)")
        return RecommendationResult(recommendation=recommendation, markdown=markdown, mode=mode, facts=facts)

    async def stream(
        self,
        preferences: ParsedPreferences,
        history: Optional[Sequence[ChatMessage]] = None,
        tone: Optional[Union[str, Tone]] = None,
    ) -> AsyncIterator[str]:
        """Streaming variant: markdown fragments forwarded as they arrive.

        A transport failure appends a visible retry notice and ends the
        stream. Cancellation by the consumer closes the upstream stream.
        """

        turns, _, mode, resolved_tone = self._prepare(preferences, history, tone)
        facts = await self.build_fact_sheet(preferences)

        if mode is FollowUpMode.NONE:
            prelude = stream_prelude(preferences, resolved_tone, facts[0].place if facts else None)
            if prelude:
                yield prelude

        tokens = self.gateway.stream(
            build_system_prompt(mode, resolved_tone, streaming=True),
            turns,
            build_user_message(preferences, facts, mode),
            temperature=self.temperature,
        )
        forwarded = 0
        try:
            async for token in tokens:
                forwarded += 1
                yield token
        except StreamTransportError as exc:
            logger.error(f"Stream ended with an error after {forwarded} fragment(s): {exc}")
            yield STREAM_ERROR_NOTICE
        finally:
            await tokens.aclose()
        logger.info(f"Stream finished after {forwarded} fragment(s)")
