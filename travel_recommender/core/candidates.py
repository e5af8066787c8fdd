"""Static destination pool and the preference filter applied to it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from travel_recommender.core.schemas import ParsedPreferences

MAX_CANDIDATES = 3
_EUROPE_MARKERS = ("europe", "eu")


@dataclass(frozen=True, slots=True)
class CandidateDestination:
    name: str
    country: str
    type: str

    @property
    def place(self) -> str:
        return f"{self.name}, {self.country}"


DESTINATION_POOL: Tuple[CandidateDestination, ...] = (
    CandidateDestination("Lisbon", "Portugal", "city+beach"),
    CandidateDestination("Canary Islands", "Spain", "beach"),
    CandidateDestination("Crete", "Greece", "beach+adventure"),
    CandidateDestination("Nice", "France", "city+beach"),
)


def _matches_region(candidate: CandidateDestination, region: str) -> bool:
    if not region:
        return True
    if any(marker in region for marker in _EUROPE_MARKERS):
        return True
    return candidate.country.lower() in region or candidate.name.lower() in region


def select_candidates(preferences: ParsedPreferences) -> List[CandidateDestination]:
    """Filter the pool by destination type and region, keeping pool order."""

    wanted_type = (preferences.destination_type or "").lower()
    region = (preferences.region or "").lower()
    picks = [
        candidate
        for candidate in DESTINATION_POOL
        if (not wanted_type or wanted_type in candidate.type) and _matches_region(candidate, region)
    ]
    return picks[:MAX_CANDIDATES]
