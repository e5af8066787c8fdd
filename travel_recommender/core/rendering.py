"""Mode-specific markdown views over a validated recommendation.

Derived numbers (scores, prices, weather, hotels) are read from the fact sheet
whenever a destination matches a computed candidate, so model-restated values
never leak into rankings or lists.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import quote, quote_plus

from travel_recommender.core.followups import wants_top_activities
from travel_recommender.core.post_processing import match_fact
from travel_recommender.core.schemas import (
    Destination,
    FactSheetEntry,
    FollowUpMode,
    Hotel,
    ParsedPreferences,
    Recommendation,
    Tone,
)
from travel_recommender.core.tones import RECAP_OPENERS

logger = logging.getLogger(__name__)

MAX_TOP_ACTIVITIES = 15
NO_MATCHES = "_No destinations matched your preferences yet. Try widening the region or trip type._"
STREAM_ERROR_NOTICE = "\n\n(Streaming ended with an error, please retry)"


def _usd(value: Optional[float]) -> str:
    return f"${value:,.0f}" if value is not None else "n/a"


def _hotel_list(hotels: Optional[Sequence[Hotel]]) -> str:
    if not hotels:
        return "n/a"
    return ", ".join(f"{hotel.name} ({_usd(hotel.price_per_night)}/night)" for hotel in hotels)


class _View:
    """A destination joined with its fact-sheet entry, facts first."""

    def __init__(self, destination: Destination, fact: Optional[FactSheetEntry]) -> None:
        self.destination = destination
        self.fact = fact

    @property
    def place(self) -> str:
        return self.fact.place if self.fact else self.destination.place

    @property
    def weather(self) -> Optional[str]:
        return self.fact.weather_summary if self.fact else self.destination.weather_summary

    @property
    def cost(self) -> Optional[float]:
        return self.fact.est_cost_usd if self.fact else self.destination.est_cost_usd

    @property
    def flight(self) -> Optional[float]:
        return self.fact.flight_price_usd if self.fact else self.destination.flight_price_usd

    @property
    def hotels(self) -> Optional[List[Hotel]]:
        if self.fact and self.fact.hotels:
            return list(self.fact.hotels)
        return self.destination.hotels

    @property
    def fun_score(self) -> Optional[int]:
        if self.fact and self.fact.fun_score is not None:
            return self.fact.fun_score
        return self.destination.fun_score

    @property
    def food_score(self) -> Optional[int]:
        if self.fact and self.fact.food_score is not None:
            return self.fact.food_score
        return self.destination.food_score


def _views(recommendation: Recommendation, facts: Sequence[FactSheetEntry]) -> List[_View]:
    return [_View(d, match_fact(d.name, facts)) for d in recommendation.destinations]


# ---------------------------------------------------------------------------
# Recap, links, errors
# ---------------------------------------------------------------------------


def recap_line(preferences: ParsedPreferences, tone: Tone) -> Optional[str]:
    """One personalized line summarising what we understood, phrased per tone."""

    parts: List[str] = []
    if preferences.destination_type and preferences.region:
        parts.append(f"{preferences.destination_type} in {preferences.region}")
    elif preferences.destination_type or preferences.region:
        parts.append(preferences.destination_type or preferences.region)
    if preferences.month:
        parts.append(preferences.month)
    if preferences.duration_days:
        parts.append(f"{preferences.duration_days:g} days")
    if preferences.budget_usd:
        parts.append(f"about {_usd(preferences.budget_usd)}")
    if preferences.activities:
        parts.append("into " + ", ".join(preferences.activities))
    if preferences.weather:
        parts.append(f"{preferences.weather} weather")
    if not parts:
        return None
    return f"{RECAP_OPENERS[tone]} Planning around {'; '.join(parts)}."


def image_reference(place: str) -> str:
    return f"![{place}](https://source.unsplash.com/featured/1200x600/?{quote(place)})"


def helpful_links(place: str) -> List[str]:
    q = quote_plus(place)
    return [
        f"[Flights to {place}](https://www.google.com/travel/flights?q=flights%20to%20{quote(place)})",
        f"[Hotels in {place}](https://www.booking.com/searchresults.html?ss={q})",
        f"[Things to do in {place}](https://www.tripadvisor.com/Search?q={q})",
        f"[Map of {place}](https://www.google.com/maps/search/?api=1&query={q})",
    ]


def stream_prelude(preferences: ParsedPreferences, tone: Tone, first_place: Optional[str]) -> str:
    """Recap, one image, and search links emitted before streamed tokens."""

    blocks: List[str] = []
    recap = recap_line(preferences, tone)
    if recap:
        blocks.append(recap)
    if first_place:
        blocks.append(image_reference(first_place))
        blocks.append("**Helpful links**\n" + "\n".join(f"- {link}" for link in helpful_links(first_place)))
    return "\n\n".join(blocks) + "\n\n" if blocks else ""


def error_markdown(reason: str) -> str:
    return (
        "**Sorry, I couldn't put recommendations together this time.**\n\n"
        f"- Reason: {reason}\n"
        "- Please try again or rephrase your request."
    )


# ---------------------------------------------------------------------------
# Per-mode views
# ---------------------------------------------------------------------------


def _ranked(views: List[_View], title: str, score: Callable[[_View], Optional[int]]) -> str:
    scored = [view for view in views if score(view) is not None]
    scored.sort(key=lambda view: score(view), reverse=True)
    if not scored:
        return NO_MATCHES
    lines = [f"**{title}**"]
    for rank, view in enumerate(scored, start=1):
        why = f" ({view.destination.why})" if view.destination.why else ""
        lines.append(f"{rank}. **{view.place}**: {score(view)}/100{why}")
    return "\n".join(lines)


def _bare(views: List[_View], title: str, value: Callable[[_View], str]) -> str:
    if not views:
        return NO_MATCHES
    return "\n".join([f"**{title}**"] + [f"- **{view.place}**: {value(view)}" for view in views])


def _climate_line(view: _View) -> str:
    weather = view.weather or "n/a"
    return f"{weather} {view.destination.why}" if view.destination.why else weather


def _highlights(views: List[_View], latest_message: Optional[str]) -> str:
    if not views:
        return NO_MATCHES
    if wants_top_activities(latest_message):
        seen: set = set()
        top: List[str] = []
        for view in views:
            for highlight in view.destination.highlights:
                key = highlight.lower()
                if key not in seen:
                    seen.add(key)
                    top.append(highlight)
        if not top:
            return NO_MATCHES
        return "\n".join(["**Top activities**"] + [f"- {item}" for item in top[:MAX_TOP_ACTIVITIES]])
    return _bare(views, "Highlights", lambda v: ", ".join(v.destination.highlights) or "n/a")


def _tips(views: List[_View], tips: Sequence[str]) -> str:
    lines: List[str] = []
    with_insights = [view for view in views if view.destination.cultural_insights]
    if with_insights:
        lines.append("**Travel tips**")
        lines.extend(f"- **{v.place}**: {'; '.join(v.destination.cultural_insights)}" for v in with_insights)
    if tips:
        if lines:
            lines.append("")
        lines.append("**General tips**")
        lines.extend(f"- {tip}" for tip in tips)
    return "\n".join(lines) if lines else NO_MATCHES


def _card(view: _View) -> str:
    d = view.destination
    lines = [
        f"### {view.place}",
        f"- **Why**: {d.why or 'Great fit for your stated interests and weather prefs.'}",
        f"- **Weather**: {view.weather or 'n/a'}",
        f"- **Est. total**: {_usd(view.cost)}",
        f"- **Flight**: {_usd(view.flight)}",
    ]
    if view.hotels:
        lines.append(f"- **Hotels**: {_hotel_list(view.hotels)}")
    lines.append(f"- **Highlights**: {', '.join(d.highlights) or 'n/a'}")
    if view.fun_score is not None or view.food_score is not None:
        fun = view.fun_score if view.fun_score is not None else "n/a"
        food = view.food_score if view.food_score is not None else "n/a"
        lines.append(f"- **Fun / Food**: {fun} / {food}")
    if d.best_month:
        lines.append(f"- **Best month**: {d.best_month}")
    elif d.best_time_to_visit:
        lines.append(f"- **Best time to visit**: {d.best_time_to_visit}")
    if d.cultural_insights:
        lines.append(f"- **Cultural insights**: {'; '.join(d.cultural_insights)}")
    return "\n".join(lines)


def _full(
    views: List[_View],
    tips: Sequence[str],
    preferences: Optional[ParsedPreferences],
    tone: Tone,
) -> str:
    blocks: List[str] = []
    recap = recap_line(preferences, tone) if preferences is not None else None
    if recap:
        blocks.append(recap)
    if not views:
        blocks.append(NO_MATCHES)
        return "\n\n".join(blocks)
    blocks.append("**Top picks** (based on your prefs):")
    blocks.extend(_card(view) for view in views)
    if tips:
        blocks.append("**Tips**\n" + "\n".join(f"- {tip}" for tip in tips))
    return "\n\n".join(blocks)


def render_markdown(
    recommendation: Recommendation,
    mode: FollowUpMode,
    *,
    facts: Sequence[FactSheetEntry] = (),
    preferences: Optional[ParsedPreferences] = None,
    tone: Tone = Tone.SURFER,
    latest_message: Optional[str] = None,
) -> str:
    """Render the view that matches ``mode``."""

    views = _views(recommendation, facts)
    renderers: Dict[FollowUpMode, Callable[[], str]] = {
        FollowUpMode.FUN: lambda: _ranked(views, "Fun ranking", lambda v: v.fun_score),
        FollowUpMode.FOOD: lambda: _ranked(views, "Food ranking", lambda v: v.food_score),
        FollowUpMode.CLIMATE: lambda: _bare(views, "Climate", _climate_line),
        FollowUpMode.COSTS: lambda: _bare(views, "Estimated total cost", lambda v: _usd(v.cost)),
        FollowUpMode.FLIGHTS: lambda: _bare(views, "Round-trip flights", lambda v: _usd(v.flight)),
        FollowUpMode.HOTELS: lambda: _bare(views, "Hotels", lambda v: _hotel_list(v.hotels)),
        FollowUpMode.HIGHLIGHTS: lambda: _highlights(views, latest_message),
        FollowUpMode.TIPS: lambda: _tips(views, recommendation.tips),
        FollowUpMode.NONE: lambda: _full(views, recommendation.tips, preferences, tone),
    }
    logger.debug(f"Rendering {len(views)} destination(s) in {mode.value} mode")
    return renderers[mode]()
