"""Follow-up intent classification for the latest user turn."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from travel_recommender.core.schemas import ChatMessage, FollowUpMode

# Order matters: categories overlap, so flights must be tested before costs
# ("flight prices" is a flights question).
_PATTERNS: List[Tuple[FollowUpMode, Pattern[str]]] = [
    (FollowUpMode.CLIMATE, re.compile(r"(climate|weather|temperature)")),
    (FollowUpMode.FLIGHTS, re.compile(r"(flight|airfare|plane|airline)")),
    (FollowUpMode.COSTS, re.compile(r"(cost|price|budget|how much|estimate)")),
    (FollowUpMode.HOTELS, re.compile(r"(hotel|stay|accommodation)")),
    (
        FollowUpMode.HIGHLIGHTS,
        re.compile(r"(highlight|what to do|things to do|must[- ]see|attraction|activities|best activities)"),
    ),
    (FollowUpMode.TIPS, re.compile(r"(tip|advice|insight|etiquette|safety)")),
    (FollowUpMode.FUN, re.compile(r"(fun|most fun|lively|vibe|party)")),
    (FollowUpMode.FOOD, re.compile(r"(best food|food scene|cuisine|restaurants?|dining|eat)")),
]

_TOP_ACTIVITIES = re.compile(r"\b(best|top)\b")

TASK_FOR: Dict[FollowUpMode, str] = {
    FollowUpMode.NONE: "Return well-rounded recommendations.",
    FollowUpMode.CLIMATE: "Return concise climate summary per destination only.",
    FollowUpMode.COSTS: "Return concise total cost estimate per destination only.",
    FollowUpMode.FLIGHTS: "Return concise flight price per destination only.",
    FollowUpMode.HOTELS: "Return 1-2 concise hotel suggestions (name + pricePerNight) per destination only.",
    FollowUpMode.HIGHLIGHTS: "Return 2-3 concise activity highlights per destination only.",
    FollowUpMode.TIPS: "Return 2-3 concise travel/cultural tips per destination only.",
    FollowUpMode.FUN: "Return concise fun rating per destination only (0-100).",
    FollowUpMode.FOOD: "Return concise food rating per destination only (0-100).",
}


def classify(content: Optional[str]) -> FollowUpMode:
    """Map the latest user message to a follow-up mode; first match wins."""

    if not content:
        return FollowUpMode.NONE
    lowered = content.lower()
    for mode, pattern in _PATTERNS:
        if pattern.search(lowered):
            return mode
    return FollowUpMode.NONE


def latest_user_message(history: Optional[Sequence[ChatMessage]]) -> Optional[str]:
    """Return the content of the most recent user turn, if any."""

    for message in reversed(history or []):
        if message.role == "user":
            return message.content
    return None


def wants_top_activities(content: Optional[str]) -> bool:
    """True when the user asked for the best/top activities overall."""

    return bool(content) and bool(_TOP_ACTIVITIES.search(content.lower()))
