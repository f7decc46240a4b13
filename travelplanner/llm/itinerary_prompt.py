import json
from langchain_core.prompts import PromptTemplate

FAMILY_TYPE_DESCRIPTIONS = {
    "solo": "solo traveler",
    "couple": "couple",
    "family-kids": "family with children",
    "family-elder": "family with elderly members",
}

# Target schema shown to the model; tests reuse it as a canned response
EXAMPLE_ITINERARY = {
    "itinerary": [
        {
            "day": 1,
            "title": "Arrival and Local Sightseeing",
            "activities": [
                "Hotel check-in",
                "Visit local park",
                "Evening leisure walk",
            ],
            "travelIntensity": "Low",
            "estimatedCost": 3000,
        }
    ],
    "budgetBreakdown": {
        "stay": 8000,
        "transport": 6000,
        "food": 5000,
        "activities": 4000,
        "totalEstimatedCost": 23000,
        "perDayCost": 3500,
    },
    "tips": [
        "Start early to avoid crowds",
        "Keep buffer time for rest",
    ],
}


def _escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


itinerary_prompt = PromptTemplate.from_template(
    """Context: The user is planning a short trip and wants a realistic, budget-friendly itinerary that fits their family type.

Role: You are a professional travel planner AI experienced in planning trips for solo travelers, couples, families with kids, and families with elders.

Instruction: Generate a day-wise travel itinerary based on the given input.

Input:
- From City: {from_city}
- Destination: {destination}
- Number of Days: {days}
- Total Budget: {budget}
- Family Type: {family_type} ({family_description})

Constraints:
- Activities must match the family type.
- Plan exactly {days} days, numbered from 1.
- Travel intensity must be Low, Medium, or High.
- Estimated costs must be numeric.
- The total cost should not exceed the given budget of {budget}.
- Avoid luxury options unless budget allows.

Performance:
- Output must be practical and realistic.
- The itinerary should balance sightseeing and rest.
- Budget distribution should be reasonable and believable.

Example:
"""
    + _escape_braces(json.dumps(EXAMPLE_ITINERARY, indent=2))
    + """

Return ONLY valid JSON in the exact same structure as the example.
Do not include any explanations, extra text, or markdown code fences."""
)


def _format_amount(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_itinerary_prompt(from_city: str, destination: str, days: int, budget, family_type: str) -> str:
    """Render the Gemini instruction for one trip request."""
    family_type = getattr(family_type, "value", family_type)
    return itinerary_prompt.format(
        from_city=from_city,
        destination=destination,
        days=days,
        budget=_format_amount(budget),
        family_type=family_type,
        family_description=FAMILY_TYPE_DESCRIPTIONS.get(family_type, family_type),
    )
