import pytest

from travel_recommender.core.errors import PreferenceValidationError, UpstreamFormatError
from travel_recommender.core.post_processing import (
    clean_hotels,
    extract_json_object,
    match_fact,
    normalize_preferences_payload,
    normalize_recommendation,
    pin_facts,
    split_activities,
    validate_preferences,
    validate_recommendation,
)
from travel_recommender.core.schemas import (
    Destination,
    FactSheetEntry,
    FollowUpMode,
    Hotel,
    Recommendation,
)


def _lisbon_facts() -> FactSheetEntry:
    return FactSheetEntry(
        name="Lisbon",
        country="Portugal",
        weather_summary="Typically mild to warm in July; expect 65–80°F, low rain.",
        flight_price_usd=980,
        est_cost_usd=1580,
        hotels=[Hotel(name="Memmo alfama", price_per_night=210, rating=4.7, type="boutique")],
        fun_score=81,
        food_score=80,
    )


@pytest.mark.parametrize(
    "raw",
    [
        '{"region": "Europe"}',
        '  ```json\n{"region": "Europe"}\n```  ',
        'Sure! Here you go: {"region": "Europe"} hope it helps',
    ],
)
def test_extract_json_object_tolerates_wrappers(raw):
    assert extract_json_object(raw) == {"region": "Europe"}


def test_extract_json_object_keeps_nested_objects():
    assert extract_json_object('prefix {"a": {"b": 2}} suffix') == {"a": {"b": 2}}


@pytest.mark.parametrize("raw", ["[1, 2]", "not json at all", '"just a string"', ""])
def test_extract_json_object_rejects_non_objects(raw):
    with pytest.raises(UpstreamFormatError):
        extract_json_object(raw)


def test_extract_json_object_empty_as_object():
    assert extract_json_object("   ", empty_as_object=True) == {}
    assert extract_json_object(None, empty_as_object=True) == {}


def test_split_activities():
    assert split_activities("hiking, food and museums & beach") == ["hiking", "food", "museums", "beach"]
    assert split_activities("sandboarding") == ["sandboarding"]


def test_normalize_preferences_payload_coerces_fields():
    normalized = normalize_preferences_payload(
        {
            "weather": ["sunny", None, "warm"],
            "activities": "hiking, food and museums",
            "region": "Europe",
        }
    )

    assert normalized["weather"] == "sunny, warm"
    assert normalized["activities"] == ["hiking", "food", "museums"]
    assert normalized["region"] == "Europe"


def test_normalize_preferences_payload_edge_cases():
    assert normalize_preferences_payload({"weather": {"temp": "warm", "rain": None}})["weather"] == "temp: warm"
    assert normalize_preferences_payload({"weather": []})["weather"] is None
    assert len(normalize_preferences_payload({"weather": ["x" * 150, "y" * 150]})["weather"]) == 200
    assert normalize_preferences_payload({"activities": 42})["activities"] is None


def test_validate_preferences_accepts_both_spellings():
    camel = validate_preferences({"destinationType": "beach", "budgetUsd": 2000, "durationDays": 5})
    snake = validate_preferences({"destination_type": "beach", "budget_usd": 2000})

    assert camel.destination_type == "beach"
    assert camel.budget_usd == 2000
    assert camel.duration_days == 5
    assert snake.destination_type == "beach"


def test_validate_preferences_rejects_non_numeric_budget():
    with pytest.raises(PreferenceValidationError) as excinfo:
        validate_preferences({"budgetUsd": "2000"})

    assert excinfo.value.errors
    assert any(error["loc"][0] == "budgetUsd" for error in excinfo.value.errors)


def test_validate_recommendation_fun_mode_requires_score():
    data = {"destinations": [{"name": "Lisbon", "why": "Lively"}]}

    with pytest.raises(UpstreamFormatError):
        validate_recommendation(data, FollowUpMode.FUN)

    payload = validate_recommendation({"destinations": [{"name": "Lisbon", "funScore": 80}]}, FollowUpMode.FUN)
    assert payload.destinations[0].fun_score == 80
    assert validate_recommendation({"destinations": []}, FollowUpMode.FOOD).destinations == []


def test_validate_recommendation_rejects_wrong_shape():
    with pytest.raises(UpstreamFormatError):
        validate_recommendation({"destinations": "Lisbon"}, FollowUpMode.NONE)
    with pytest.raises(UpstreamFormatError):
        validate_recommendation({"destinations": [{"country": "Portugal"}]}, FollowUpMode.COSTS)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_validate_recommendation_rejects_non_finite_scores(value):
    data = {"destinations": [{"name": "Crete", "funScore": value}]}

    with pytest.raises(UpstreamFormatError):
        validate_recommendation(data, FollowUpMode.FUN)
    with pytest.raises(UpstreamFormatError):
        validate_recommendation({"destinations": [{"name": "Crete", "estCostUsd": value}]}, FollowUpMode.NONE)


def test_clean_hotels_drops_non_finite_prices():
    hotels = clean_hotels(
        [
            {"name": "Nan inn", "pricePerNight": float("nan")},
            {"name": "Endless suites", "pricePerNight": float("inf")},
            {"name": "Casa do bairro", "pricePerNight": 95, "rating": float("nan")},
        ]
    )

    assert [(h.name, h.price_per_night, h.rating) for h in hotels] == [("Casa do bairro", 95, None)]


def test_normalize_recommendation_repairs_payload():
    payload = validate_recommendation(
        {
            "destinations": [
                {
                    "name": " Lisbon ",
                    "highlights": ["Tram 28", "tram 28", " ", "Belem"],
                    "funScore": 104.6,
                    "foodScore": 79.6,
                    "hotels": [
                        {"name": "Memmo alfama", "pricePerNight": 210},
                        {"name": "No price"},
                        {"name": "", "pricePerNight": 50},
                        "junk",
                        {"name": "Negative", "pricePerNight": -5},
                    ],
                    "culturalInsights": ["Say obrigado", None, ""],
                }
            ],
            "tips": ["", "Book early"],
        },
        FollowUpMode.NONE,
    )

    recommendation = normalize_recommendation(payload)
    destination = recommendation.destinations[0]

    assert destination.name == "Lisbon"
    assert destination.highlights == ["Tram 28", "Belem"]
    assert destination.fun_score == 100
    assert destination.food_score == 80
    assert [h.name for h in destination.hotels] == ["Memmo alfama"]
    assert destination.cultural_insights == ["Say obrigado"]
    assert recommendation.tips == ["Book early"]


def test_match_fact():
    facts = [_lisbon_facts()]

    assert match_fact("Lisbon", facts) is facts[0]
    assert match_fact("lisbon, portugal", facts) is facts[0]
    assert match_fact("Old town Lisbon", facts) is facts[0]
    assert match_fact("Paris", facts) is None


def test_match_fact_requires_whole_word_names():
    nice = FactSheetEntry(
        name="Nice",
        country="France",
        weather_summary="Warm",
        flight_price_usd=980,
        est_cost_usd=1580,
    )

    assert match_fact("Venice", [nice]) is None
    assert match_fact("Old town Nice", [nice]) is nice

    venice = Recommendation(destinations=[Destination(name="Venice", country="Italy", est_cost_usd=4000)])
    pinned = pin_facts(venice, [nice])
    assert pinned.destinations[0].est_cost_usd == 4000
    assert pinned.destinations[0].country == "Italy"


def test_pin_facts_overrides_only_emitted_fields():
    recommendation = Recommendation(
        destinations=[
            Destination(name="Lisbon", flight_price_usd=500, fun_score=10),
            Destination(name="Paris", flight_price_usd=300),
        ],
        tips=["Book early"],
    )

    pinned = pin_facts(recommendation, [_lisbon_facts()])
    lisbon, paris = pinned.destinations

    assert lisbon.flight_price_usd == 980
    assert lisbon.fun_score == 81
    assert lisbon.country == "Portugal"
    assert lisbon.est_cost_usd is None
    assert lisbon.hotels is None
    assert lisbon.food_score is None
    assert paris.flight_price_usd == 300
    assert pinned.tips == ["Book early"]


def test_pin_facts_replaces_model_hotels_with_catalog_hotels():
    recommendation = Recommendation(
        destinations=[Destination(name="Lisbon", hotels=[Hotel(name="Imaginary", price_per_night=1)])]
    )

    pinned = pin_facts(recommendation, [_lisbon_facts()])

    assert [h.name for h in pinned.destinations[0].hotels] == ["Memmo alfama"]
