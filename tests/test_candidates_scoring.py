"""Tests for candidate selection and the fun/food heuristics."""
from __future__ import annotations

import pytest

from travel_recommender.core.candidates import DESTINATION_POOL, select_candidates
from travel_recommender.core.schemas import Hotel, ParsedPreferences
from travel_recommender.core.scoring import clamp_score, food_score, fun_score
from travel_recommender.services.facts import degraded_weather_sentence, generic_weather_sentence


def _names(preferences: ParsedPreferences):
    return [candidate.name for candidate in select_candidates(preferences)]


def test_select_candidates_without_preferences_keeps_pool_order():
    assert _names(ParsedPreferences()) == ["Lisbon", "Canary Islands", "Crete"]


def test_select_candidates_filters_by_type():
    assert _names(ParsedPreferences(destination_type="adventure")) == ["Crete"]
    assert _names(ParsedPreferences(destination_type="City")) == ["Lisbon", "Nice"]


def test_select_candidates_filters_by_region():
    assert _names(ParsedPreferences(region="Europe", destination_type="beach")) == [
        "Lisbon",
        "Canary Islands",
        "Crete",
    ]
    assert _names(ParsedPreferences(region="Greece")) == ["Crete"]
    assert _names(ParsedPreferences(region="Japan")) == []


def test_pool_places_are_unique():
    places = [candidate.place for candidate in DESTINATION_POOL]
    assert len(places) == len(set(places))
    assert "Nice, France" in places


def test_fun_score_for_generic_weather():
    # warm (+8), low rain (+5) and the "rain" penalty (-6) all apply
    assert fun_score(generic_weather_sentence("July")) == 77
    assert fun_score(degraded_weather_sentence("July")) == 77


def test_fun_score_rewards_activities_and_upscale_hotels():
    weather = generic_weather_sentence("July")
    assert fun_score(weather, ["nightlife", "beach"]) == 91
    assert fun_score(weather, ["hiking"]) == 81
    upscale = [Hotel(name="Blue palace", price_per_night=450)]
    assert fun_score(weather, ["nightlife", "beach"], upscale) == 93


def test_fun_score_neutral_forecast():
    assert fun_score("Avg highs 75°F / lows 60°F; precipitation 0.5mm/day.") == 70


def test_food_score():
    assert food_score([]) == 70
    assert food_score(["food", "hiking"]) == 80
    assert food_score(["fine dining"]) == 86
    assert food_score(["museums"], [Hotel(name="Pestana palace", price_per_night=320)]) == 72


@pytest.mark.parametrize(
    "value, expected",
    [(120.4, 100), (-3, 0), (55.4, 55), (81, 81)],
)
def test_clamp_score(value, expected):
    assert clamp_score(value) == expected
