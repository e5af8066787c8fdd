"""Tests for prompt assembly and the mode-specific markdown views."""
from __future__ import annotations

from typing import List

from travel_recommender.core.followups import TASK_FOR
from travel_recommender.core.prompts import (
    MODE_DIRECTIVES,
    build_extraction_prompt,
    build_system_prompt,
    build_user_message,
    fact_line,
)
from travel_recommender.core.rendering import (
    NO_MATCHES,
    error_markdown,
    helpful_links,
    recap_line,
    render_markdown,
    stream_prelude,
)
from travel_recommender.core.schemas import (
    Destination,
    FactSheetEntry,
    FollowUpMode,
    Hotel,
    ParsedPreferences,
    Recommendation,
    Tone,
)
from travel_recommender.core.tones import TONE_DIRECTIVES


def _facts() -> List[FactSheetEntry]:
    return [
        FactSheetEntry(
            name="Lisbon",
            country="Portugal",
            weather_summary="Sunny and dry",
            flight_price_usd=980,
            est_cost_usd=1880,
            hotels=[Hotel(name="Memmo alfama", price_per_night=210, rating=4.7, type="boutique")],
            fun_score=90,
            food_score=70,
        ),
        FactSheetEntry(
            name="Crete",
            country="Greece",
            weather_summary="Hot and breezy",
            flight_price_usd=980,
            est_cost_usd=1580,
            hotels=[],
            fun_score=60,
            food_score=85,
        ),
    ]


def _preferences() -> ParsedPreferences:
    return ParsedPreferences(
        region="Europe",
        destination_type="beach",
        month="July",
        duration_days=5,
        budget_usd=2000,
    )


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def test_extraction_prompt_carries_today_and_schema():
    prompt = build_extraction_prompt("October 18, 2026")

    assert "today is October 18, 2026" in prompt
    assert '"budgetUsd"' in prompt
    assert "{{" not in prompt


def test_system_prompt_layers_mode_and_tone():
    prompt = build_system_prompt(FollowUpMode.FUN, Tone.FORMAL)

    assert MODE_DIRECTIVES[FollowUpMode.FUN] in prompt
    assert TONE_DIRECTIVES[Tone.FORMAL] in prompt
    assert "JSON ONLY" in prompt
    assert prompt.index("Mode:") < prompt.index("Tone:")

    streaming = build_system_prompt(FollowUpMode.NONE, Tone.SURFER, streaming=True)
    assert "Markdown only" in streaming
    assert "JSON ONLY" not in streaming


def test_fact_line_format():
    line = fact_line(1, _facts()[0])

    assert line.startswith(
        "#1 Lisbon, Portugal | flightUSD=980 | totalCostUSD=1880 | weather='Sunny and dry' "
        "| fun=90 | food=70 | hotels=["
    )
    assert '"pricePerNight"' in line
    assert '"Memmo alfama"' in line


def test_user_message_includes_preferences_facts_and_task():
    message = build_user_message(_preferences(), _facts(), FollowUpMode.COSTS)

    assert '"budgetUsd": 2000' in message
    assert '"destinationType": "beach"' in message
    assert "#1 Lisbon, Portugal" in message
    assert "#2 Crete, Greece" in message
    assert message.endswith(f"Task: {TASK_FOR[FollowUpMode.COSTS]}")

    empty = build_user_message(ParsedPreferences(), [], FollowUpMode.NONE)
    assert "(no candidate destinations matched)" in empty


# ---------------------------------------------------------------------------
# Markdown views
# ---------------------------------------------------------------------------


def test_fun_ranking_uses_fact_scores():
    recommendation = Recommendation(
        destinations=[
            Destination(name="Crete", fun_score=99, why="Beach bars"),
            Destination(name="Lisbon", fun_score=10),
        ]
    )

    markdown = render_markdown(recommendation, FollowUpMode.FUN, facts=_facts())

    assert markdown.splitlines() == [
        "**Fun ranking**",
        "1. **Lisbon, Portugal**: 90/100",
        "2. **Crete, Greece**: 60/100 (Beach bars)",
    ]


def test_food_ranking_without_facts_uses_model_scores():
    recommendation = Recommendation(
        destinations=[
            Destination(name="Nice", food_score=75),
            Destination(name="Rome", country="Italy", food_score=95),
            Destination(name="Oslo"),
        ]
    )

    markdown = render_markdown(recommendation, FollowUpMode.FOOD)

    assert markdown.splitlines() == [
        "**Food ranking**",
        "1. **Rome, Italy**: 95/100",
        "2. **Nice**: 75/100",
    ]


def test_bare_views_show_only_the_requested_fact():
    recommendation = Recommendation(
        destinations=[Destination(name="Lisbon", flight_price_usd=1, est_cost_usd=2)]
    )

    flights = render_markdown(recommendation, FollowUpMode.FLIGHTS, facts=_facts())
    costs = render_markdown(recommendation, FollowUpMode.COSTS, facts=_facts())
    hotels = render_markdown(recommendation, FollowUpMode.HOTELS, facts=_facts())
    climate = render_markdown(recommendation, FollowUpMode.CLIMATE, facts=_facts())

    assert flights == "**Round-trip flights**\n- **Lisbon, Portugal**: $980"
    assert costs == "**Estimated total cost**\n- **Lisbon, Portugal**: $1,880"
    assert hotels == "**Hotels**\n- **Lisbon, Portugal**: Memmo alfama ($210/night)"
    assert climate == "**Climate**\n- **Lisbon, Portugal**: Sunny and dry"


def test_highlights_aggregate_when_user_asks_for_top():
    recommendation = Recommendation(
        destinations=[
            Destination(name="Lisbon", highlights=["Surfing", "Tram 28"]),
            Destination(name="Crete", highlights=["surfing", "Samaria Gorge"]),
        ]
    )

    top = render_markdown(
        recommendation,
        FollowUpMode.HIGHLIGHTS,
        facts=_facts(),
        latest_message="What are the top things to do?",
    )
    per_place = render_markdown(recommendation, FollowUpMode.HIGHLIGHTS, facts=_facts())

    assert top.splitlines() == ["**Top activities**", "- Surfing", "- Tram 28", "- Samaria Gorge"]
    assert "- **Crete, Greece**: surfing, Samaria Gorge" in per_place


def test_tips_view():
    recommendation = Recommendation(
        destinations=[Destination(name="Lisbon", cultural_insights=["Say obrigado", "Tip lightly"])],
        tips=["Book early"],
    )

    markdown = render_markdown(recommendation, FollowUpMode.TIPS, facts=_facts())

    assert "**Travel tips**" in markdown
    assert "- **Lisbon, Portugal**: Say obrigado; Tip lightly" in markdown
    assert markdown.endswith("**General tips**\n- Book early")
    assert render_markdown(Recommendation.empty(), FollowUpMode.TIPS) == NO_MATCHES


def test_full_view_has_recap_cards_and_tips():
    recommendation = Recommendation(
        destinations=[Destination(name="Lisbon", why="Beaches and food", highlights=["Belem"], best_month="June")],
        tips=["Pack sunscreen"],
    )

    markdown = render_markdown(
        recommendation,
        FollowUpMode.NONE,
        facts=_facts(),
        preferences=_preferences(),
        tone=Tone.SURFER,
    )

    assert markdown.startswith("Right on, dude! Planning around beach in Europe; July; 5 days; about $2,000.")
    assert "### Lisbon, Portugal" in markdown
    assert "- **Est. total**: $1,880" in markdown
    assert "- **Hotels**: Memmo alfama ($210/night)" in markdown
    assert "- **Fun / Food**: 90 / 70" in markdown
    assert "- **Best month**: June" in markdown
    assert markdown.endswith("**Tips**\n- Pack sunscreen")


def test_empty_recommendation_renders_no_matches():
    for mode in FollowUpMode:
        assert NO_MATCHES in render_markdown(Recommendation.empty(), mode)


def test_recap_line_and_prelude():
    assert recap_line(ParsedPreferences(), Tone.FORMAL) is None
    assert recap_line(ParsedPreferences(activities=["food"]), Tone.FORMAL) == "Understood. Planning around into food."

    prelude = stream_prelude(_preferences(), Tone.SURFER, "Lisbon, Portugal")
    assert prelude.startswith("Right on, dude!")
    assert "source.unsplash.com" in prelude
    assert "**Helpful links**" in prelude
    assert prelude.endswith("\n\n")
    assert stream_prelude(ParsedPreferences(), Tone.SURFER, None) == ""


def test_helpful_links_cover_flights_hotels_activities_and_maps():
    links = helpful_links("Nice, France")

    assert len(links) == 4
    assert "google.com/travel/flights" in links[0]
    assert "booking.com" in links[1]
    assert "Nice%2C+France" in links[1]
    assert "tripadvisor.com" in links[2]
    assert "google.com/maps" in links[3]


def test_error_markdown_mentions_reason():
    markdown = error_markdown("upstream timeout")
    assert "Reason: upstream timeout" in markdown
