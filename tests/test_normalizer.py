import json

import pytest

from travelplanner.errors import InvalidShapeError, ParseError
from travelplanner.llm.itinerary_prompt import EXAMPLE_ITINERARY
from travelplanner.llm.normalizer import normalize_itinerary, strip_code_fences


def test_repairs_missing_day_fields():
    result = normalize_itinerary(json.dumps({"itinerary": [{"activities": ["x"]}]}))

    assert result.model_dump()["itinerary"][0] == {
        "day": 1,
        "title": "Day 1",
        "activities": ["x"],
        "travelIntensity": "Medium",
        "estimatedCost": 0,
    }
    assert result.budgetBreakdown is None
    assert result.tips == []


def test_repairs_use_position_and_coerce_values():
    raw = json.dumps(
        {
            "itinerary": [
                {"day": 1, "title": "Arrive", "activities": "beach", "travelIntensity": "Extreme", "estimatedCost": 1200.5},
                {"title": "", "activities": [{"name": "Fort visit"}, "Market"], "travelIntensity": "High", "estimatedCost": "lots"},
                {"day": 3, "estimatedCost": -40},
            ],
            "tips": ["Carry water", 42],
        }
    )

    days = normalize_itinerary(raw).itinerary

    assert days[0].activities == []
    assert days[0].travelIntensity == "Medium"
    assert days[0].estimatedCost == 1201
    assert days[1].day == 2
    assert days[1].title == "Day 2"
    assert days[1].activities == ["Fort visit", "Market"]
    assert days[1].travelIntensity == "High"
    assert days[1].estimatedCost == 0
    assert days[2].estimatedCost == 0


def test_strips_markdown_fences():
    raw = "```json\n" + json.dumps(EXAMPLE_ITINERARY) + "\n```"

    result = normalize_itinerary(raw)

    assert result.itinerary[0].travelIntensity == "Low"
    assert result.budgetBreakdown.stay == 8000
    assert strip_code_fences("```\n{}\n```") == "{}"


def test_extracts_json_block_from_prose():
    raw = "Here is your plan!\n" + json.dumps(EXAMPLE_ITINERARY) + "\nEnjoy your trip."

    result = normalize_itinerary(raw)

    assert result.itinerary[0].title == "Arrival and Local Sightseeing"
    assert result.tips == EXAMPLE_ITINERARY["tips"]


def test_unparseable_text_raises_parse_error_with_raw():
    with pytest.raises(ParseError) as info:
        normalize_itinerary("Sorry, I cannot help with that.")

    assert info.value.raw == "Sorry, I cannot help with that."
    assert info.value.status_code == 500


@pytest.mark.parametrize("payload", [{"days": []}, {"itinerary": "day one"}, [1, 2, 3]])
def test_wrong_shape_raises_invalid_shape(payload):
    with pytest.raises(InvalidShapeError):
        normalize_itinerary(json.dumps(payload))


def test_budget_breakdown_passes_through():
    raw = json.dumps({"itinerary": [], "budgetBreakdown": {"stay": 100, "insurance": 20}})

    result = normalize_itinerary(raw)

    assert result.budgetBreakdown.stay == 100
    assert result.budgetBreakdown.model_dump()["insurance"] == 20


def test_normalizing_twice_is_idempotent():
    first = normalize_itinerary(json.dumps(EXAMPLE_ITINERARY))
    second = normalize_itinerary(json.dumps(first.model_dump()))

    assert second == first


def test_strict_mode_rejects_entries_needing_repair():
    raw = json.dumps({"itinerary": [{"activities": ["x"]}]})

    with pytest.raises(InvalidShapeError):
        normalize_itinerary(raw, strict=True)

    assert normalize_itinerary(json.dumps(EXAMPLE_ITINERARY), strict=True).itinerary[0].day == 1


def test_budget_breakdown_values_are_not_coerced():
    breakdown = {"stay": "8000 INR", "food": "5000", "transport": None, "extras": {"visa": 1200}}
    raw = json.dumps({"itinerary": [], "budgetBreakdown": breakdown})

    result = normalize_itinerary(raw)

    dumped = result.budgetBreakdown.model_dump()
    assert result.budgetBreakdown.stay == "8000 INR"
    assert result.budgetBreakdown.food == "5000"
    assert dumped["transport"] is None
    assert dumped["extras"] == {"visa": 1200}


def test_integers_too_large_for_float_are_repaired():
    huge = "1" + "0" * 400
    raw = '{"itinerary": [{"day": %s, "title": "Beach", "estimatedCost": %s}]}' % (huge, huge)

    day = normalize_itinerary(raw).itinerary[0]

    assert day.day == 1
    assert day.estimatedCost == 0
