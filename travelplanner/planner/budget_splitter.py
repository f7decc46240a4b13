from travelplanner.schemas.itinerary_schema import BudgetBreakdown


def split_budget(total_budget: float, days: int) -> BudgetBreakdown:
    """
    Split total budget into structured allocations:
      - 40% → stay
      - 20% → transport
      - 25% → food
      - 15% → activities
    Returns a BudgetBreakdown model (not a dict).
    """
    days = max(1, days)

    return BudgetBreakdown(
        stay=round(total_budget * 0.40),
        transport=round(total_budget * 0.20),
        food=round(total_budget * 0.25),
        activities=round(total_budget * 0.15),
        totalEstimatedCost=round(total_budget),
        perDayCost=round(total_budget / days),
    )
