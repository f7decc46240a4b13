from typing import List

from travelplanner.planner.budget_splitter import split_budget
from travelplanner.schemas.itinerary_schema import DayPlan, Itinerary, TripRequest


BASE_ACTIVITIES = {
    "solo": ["Explore local markets", "Visit historical sites", "Try local cuisine", "Photography tour"],
    "couple": ["Romantic dinner", "Scenic walk", "Couple spa session", "Sunset cruise"],
    "family-kids": ["Amusement park", "Zoo visit", "Beach activities", "Interactive museum"],
    "family-elder": ["Gentle city tour", "Historical sites", "Comfortable restaurant", "Scenic viewpoints"],
}

MOCK_TIPS = [
    "Start early to avoid crowds",
    "Keep buffer time for rest",
    "Carry a copy of your travel documents",
]


# -------------------------------------------------------------------
# 🎯 Intensity label
# -------------------------------------------------------------------
def travel_intensity(activity_count: int) -> str:
    if activity_count <= 2:
        return "Low"
    if activity_count <= 4:
        return "Medium"
    return "High"


def _activities_for_day(day: int, total_days: int) -> int:
    # arrival day and departure day are lighter
    if day == 1:
        return 3
    if day == total_days:
        return 2
    return 4


# -------------------------------------------------------------------
# 🧩 Day Plan Builder
# -------------------------------------------------------------------
def build_day(day: int, destination: str, activities: List[str], cost: float) -> DayPlan:
    return DayPlan(
        day=day,
        title=f"Day {day} in {destination}",
        activities=activities,
        travelIntensity=travel_intensity(len(activities)),
        estimatedCost=cost,
    )


def generate_mock_itinerary(request: TripRequest) -> Itinerary:
    """
    Deterministic itinerary used when the AI provider is disabled or down.
    Every day gets an equal share of the budget.
    """
    total_days = request.numberOfDays
    activities = BASE_ACTIVITIES.get(request.familyType, BASE_ACTIVITIES["solo"])
    daily_cost = round(request.budget / total_days)

    days = [
        build_day(
            day=day,
            destination=request.destination,
            activities=activities[: _activities_for_day(day, total_days)],
            cost=daily_cost,
        )
        for day in range(1, total_days + 1)
    ]

    return Itinerary(
        itinerary=days,
        budgetBreakdown=split_budget(request.budget, total_days),
        tips=list(MOCK_TIPS),
    )
