from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from travelplanner.schemas.itinerary_schema import DayPlan, Itinerary, TripRequest


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# 💾 Saved Trip (request form + generated itinerary)
# ============================================================
class TripCreate(TripRequest, Itinerary):
    itinerary: List[DayPlan] = Field(default_factory=list)
    generatedAt: Optional[datetime] = None
    userId: str = "guest"

    def to_document(self) -> dict:
        doc = self.model_dump()
        if doc["generatedAt"] is None:
            doc["generatedAt"] = _utcnow()
        return doc

    @property
    def dedup_key(self) -> dict:
        return {
            "destination": self.destination,
            "fromCity": self.fromCity,
            "numberOfDays": self.numberOfDays,
            "budget": self.budget,
            "familyType": self.familyType,
        }


class TripRecord(TripCreate):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(..., alias="_id")
    generatedAt: datetime

    @classmethod
    def from_document(cls, doc: dict) -> "TripRecord":
        doc = dict(doc)
        doc["_id"] = str(doc["_id"])
        return cls.model_validate(doc)


class TripSavedResponse(BaseModel):
    message: str
    trip: TripRecord


class MessageResponse(BaseModel):
    message: str
