from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================
# 🎒 Trip Request (input schema)
# ============================================================
class FamilyType(str, Enum):
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY_KIDS = "family-kids"
    FAMILY_ELDER = "family-elder"


class TripRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    fromCity: str
    destination: str
    numberOfDays: int = Field(..., gt=0)
    budget: float = Field(..., gt=0)
    familyType: FamilyType

    # -------------------- Validators --------------------
    @field_validator("fromCity", "destination", mode="before")
    @classmethod
    def strip_city(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("fromCity", "destination")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


# ============================================================
# 📅 Daily Plan
# ============================================================
class TravelIntensity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class DayPlan(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    day: int = Field(..., ge=1)
    title: str
    activities: List[str] = Field(default_factory=list)
    travelIntensity: TravelIntensity = "Medium"
    estimatedCost: float = Field(0, ge=0)


# ============================================================
# 💰 Budget Breakdown
# ============================================================
class BudgetBreakdown(BaseModel):
    # Model output is passed through as-is: values stay untyped and unknown keys are kept
    model_config = ConfigDict(extra="allow")

    stay: Any = None
    transport: Any = None
    food: Any = None
    activities: Any = None
    totalEstimatedCost: Any = None
    perDayCost: Any = None


# ============================================================
# 🧳 Itinerary (generation result)
# ============================================================
class Itinerary(BaseModel):
    itinerary: List[DayPlan]
    budgetBreakdown: Optional[BudgetBreakdown] = None
    tips: List[str] = Field(default_factory=list)

    @property
    def total_estimated_cost(self) -> float:
        return sum(d.estimatedCost for d in self.itinerary)


# ============================================================
# 🗺️ /api/plan-trip envelope
# ============================================================
class PlanTripData(TripRequest, Itinerary):
    totalEstimatedCost: float = 0


class PlanTripResponse(BaseModel):
    success: bool = True
    data: PlanTripData
