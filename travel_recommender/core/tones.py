"""Tone directives: phrasing styles that never touch facts or schema."""
from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from travel_recommender.core.schemas import Tone

logger = logging.getLogger(__name__)

DEFAULT_TONE = Tone.SURFER

TONE_DIRECTIVES: Dict[Tone, str] = {
    Tone.SURFER: "Write like a laid-back surfer: relaxed slang (stoked, gnarly, rad), upbeat and chill.",
    Tone.FRIENDLY: "Write in a warm, friendly voice, like a well-travelled friend giving advice.",
    Tone.FORMAL: "Write in a formal, polished register. No slang, no exclamation marks.",
    Tone.CONCISE: "Be as brief as possible: short fragments, no filler, no pleasantries.",
    Tone.ENTHUSIASTIC: "Write with high energy and genuine excitement, but keep it readable.",
    Tone.LUXURY: "Write like a luxury travel editorial: refined, evocative, understated elegance.",
    Tone.ADVENTURE: "Write like a seasoned adventure guide: bold, practical, outdoorsy.",
    Tone.DARIA: "Write with deadpan, dry 90s teen sarcasm, unimpressed yet still helpful.",
    Tone.HANK_HILL: "Write like a plain-spoken Texan propane salesman: folksy, earnest, practical.",
}

# Opening words for the personalized recap line.
RECAP_OPENERS: Dict[Tone, str] = {
    Tone.SURFER: "Right on, dude!",
    Tone.FRIENDLY: "Sounds lovely!",
    Tone.FORMAL: "Understood.",
    Tone.CONCISE: "Noted:",
    Tone.ENTHUSIASTIC: "Oh, this is going to be amazing!",
    Tone.LUXURY: "A splendid brief.",
    Tone.ADVENTURE: "Adventure logged.",
    Tone.DARIA: "Fine.",
    Tone.HANK_HILL: "I tell you what,",
}


def resolve_tone(value: Optional[Union[str, Tone]]) -> Tone:
    """Map a free-form tone string onto the closed enumeration.

    Unknown or empty values fall back to the default tone.
    """

    if isinstance(value, Tone):
        return value
    if not value:
        return DEFAULT_TONE
    try:
        return Tone(value.strip().lower())
    except ValueError:
        logger.warning(f"Unknown tone {value!r}; using {DEFAULT_TONE.value}")
        return DEFAULT_TONE


def tone_directive(tone: Tone) -> str:
    return f"Tone: {TONE_DIRECTIVES[tone]} Tone affects phrasing only; never change facts, numbers, or the output format."
