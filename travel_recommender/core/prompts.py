"""Prompt templates for preference extraction and recommendation generation."""
from __future__ import annotations

import json
from typing import Dict, Sequence

from travel_recommender.core.followups import TASK_FOR
from travel_recommender.core.schemas import FactSheetEntry, FollowUpMode, ParsedPreferences, Tone
from travel_recommender.core.tones import tone_directive

extraction_system_prompt = """You extract structured travel preferences from a short user message.
Use the earlier conversation turns for context; the latest message wins when they disagree.
Return ONLY JSON matching this schema:
{{
  "region": string | undefined,
  "destinationType": string | undefined,
  "budgetUsd": number | null | undefined,
  "durationDays": number | null | undefined,
  "month": string | undefined,
  "dates": {{ "start"?: string, "end"?: string }} | undefined,
  "activities": string[] | undefined,
  "weather": string | undefined
}}
Rules:
- Leave a field out when the user did not state it; never guess.
- budget can be parsed from phrases like 'under $2000'
- month: map relative like 'next month' to a month name if possible, else keep original phrase (today is {today})
- activities: split by commas/and phrases (adventure, food, hiking, museums, nightlife, beach, etc.)
"""

recommendation_system_prompt = """You are a concise travel recommender. Use provided facts; avoid fabrications.
Facts supplied by the user message (flight prices, total costs, weather, hotels, fun and food scores)
are authoritative: copy them exactly and never alter the numbers.
Output JSON ONLY with this schema:
{
  "destinations": [
    {
      "name": string,
      "country": string,
      "bestMonth"?: string,
      "bestTimeToVisit"?: string,
      "estCostUsd"?: number,
      "flightPriceUsd"?: number,
      "weatherSummary"?: string,
      "highlights": string[],
      "funScore"?: number,
      "foodScore"?: number,
      "hotels"?: [{ "name": string, "pricePerNight": number, "rating"?: number, "type"?: string }],
      "culturalInsights"?: string[],
      "why"?: string
    }
  ],
  "tips"?: string[]
}"""

stream_system_prompt = """You are a knowledgeable travel recommender. Respond in concise Markdown only (no JSON).
Use provided facts; avoid fabrications. Facts supplied by the user message are authoritative:
quote flight prices, total costs, weather, hotels and scores exactly as given."""

# Minimization directive per follow-up mode; keeps answers to what was asked.
MODE_DIRECTIVES: Dict[FollowUpMode, str] = {
    FollowUpMode.NONE: "Give well-rounded recommendations: why it fits, weather, costs, flights, hotels, highlights and tips.",
    FollowUpMode.CLIMATE: (
        "Reply minimally with weatherSummary plus a one-sentence appeal per destination; "
        "avoid flights/costs/hotels/tips."
    ),
    FollowUpMode.COSTS: "Reply minimally with estCostUsd per destination; avoid weather/hotels/highlights/tips.",
    FollowUpMode.FLIGHTS: "Reply minimally with flightPriceUsd per destination; avoid weather/costs/hotels/tips.",
    FollowUpMode.HOTELS: "Reply minimally with 1-2 hotels (name + pricePerNight) per destination; avoid everything else.",
    FollowUpMode.HIGHLIGHTS: "Reply minimally with 2-3 highlights per destination; avoid costs/flights/hotels/weather.",
    FollowUpMode.TIPS: (
        "Reply minimally with 2-3 culturalInsights per destination and optional general tips; "
        "avoid costs/flights/hotels."
    ),
    FollowUpMode.FUN: "Reply minimally with funScore (0-100, copied from the facts) per destination plus a short why.",
    FollowUpMode.FOOD: "Reply minimally with foodScore (0-100, copied from the facts) per destination plus a short why.",
}

recommendation_user_prompt = """User preferences: {preferences}

Facts to include exactly as given (do not alter numbers):
{facts}

Task: {task}"""


def build_extraction_prompt(today: str) -> str:
    return extraction_system_prompt.format(today=today)


def build_system_prompt(mode: FollowUpMode, tone: Tone, *, streaming: bool = False) -> str:
    """Base instructions, then the mode's minimization rule, then the tone directive."""

    base = stream_system_prompt if streaming else recommendation_system_prompt
    return "\n\n".join([base, f"Mode: {MODE_DIRECTIVES[mode]}", tone_directive(tone)])


def fact_line(index: int, entry: FactSheetEntry) -> str:
    """``#N place | flightUSD=X | totalCostUSD=Y | weather='Z' | fun=F | food=D | hotels=JSON``"""

    hotels = json.dumps([hotel.model_dump(by_alias=True, exclude_none=True) for hotel in entry.hotels])
    return (
        f"#{index} {entry.place} | flightUSD={entry.flight_price_usd} | totalCostUSD={entry.est_cost_usd} "
        f"| weather='{entry.weather_summary}' | fun={entry.fun_score} | food={entry.food_score} | hotels={hotels}"
    )


def build_user_message(
    preferences: ParsedPreferences,
    facts: Sequence[FactSheetEntry],
    mode: FollowUpMode,
) -> str:
    fact_lines = "\n".join(fact_line(i, entry) for i, entry in enumerate(facts, start=1))
    return recommendation_user_prompt.format(
        preferences=json.dumps(preferences.to_prompt_dict()),
        facts=fact_lines or "(no candidate destinations matched)",
        task=TASK_FOR[mode],
    )
