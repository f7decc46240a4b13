import pytest

from travelplanner.planner.budget_splitter import split_budget
from travelplanner.planner.mock_planner import BASE_ACTIVITIES, generate_mock_itinerary, travel_intensity
from travelplanner.schemas.itinerary_schema import TripRequest


def _request(days=4, budget=1000, family_type="solo"):
    return TripRequest(fromCity="Delhi", destination="Agra", numberOfDays=days, budget=budget, familyType=family_type)


def test_days_are_contiguous_with_equal_cost():
    itinerary = generate_mock_itinerary(_request(days=4, budget=1000))

    assert [d.day for d in itinerary.itinerary] == [1, 2, 3, 4]
    assert all(d.estimatedCost == 250 for d in itinerary.itinerary)


def test_arrival_and_departure_days_are_lighter():
    days = generate_mock_itinerary(_request(days=4)).itinerary

    assert [len(d.activities) for d in days] == [3, 4, 4, 2]
    assert [d.travelIntensity for d in days] == ["Medium", "Medium", "Medium", "Low"]


@pytest.mark.parametrize("family_type", sorted(BASE_ACTIVITIES))
def test_activities_follow_family_type(family_type):
    day_one = generate_mock_itinerary(_request(family_type=family_type)).itinerary[0]

    assert day_one.activities == BASE_ACTIVITIES[family_type][:3]


def test_single_day_trip():
    days = generate_mock_itinerary(_request(days=1, budget=999.6)).itinerary

    assert len(days) == 1
    assert days[0].estimatedCost == 1000


@pytest.mark.parametrize("count, label", [(0, "Low"), (2, "Low"), (3, "Medium"), (4, "Medium"), (5, "High")])
def test_travel_intensity_thresholds(count, label):
    assert travel_intensity(count) == label


def test_budget_breakdown_split():
    breakdown = split_budget(10000, 4)

    assert breakdown.stay == 4000
    assert breakdown.transport == 2000
    assert breakdown.food == 2500
    assert breakdown.activities == 1500
    assert breakdown.totalEstimatedCost == 10000
    assert breakdown.perDayCost == 2500
