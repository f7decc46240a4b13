from fastapi import APIRouter, Depends, Request

from travelplanner.schemas.itinerary_schema import Itinerary, PlanTripResponse, TripRequest
from travelplanner.services.itinerary_service import ItineraryService

router = APIRouter(prefix="/api", tags=["AI Itinerary"])


def get_itinerary_service(request: Request) -> ItineraryService:
    return request.app.state.itinerary_service


@router.post("/generate-itinerary", response_model=Itinerary)
async def generate_itinerary(
    trip_request: TripRequest,
    service: ItineraryService = Depends(get_itinerary_service),
):
    """
    Generate an AI-powered day-by-day itinerary.
    Provider failures are rendered by the app's TravelPlannerError handler.
    """
    return await service.plan(trip_request)


@router.post("/plan-trip", response_model=PlanTripResponse)
async def plan_trip(
    trip_request: TripRequest,
    service: ItineraryService = Depends(get_itinerary_service),
):
    data = await service.plan_trip(trip_request)
    return PlanTripResponse(success=True, data=data)
