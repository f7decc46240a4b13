from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from travelplanner.db.mongo import get_collection
from travelplanner.schemas.trip_schema import MessageResponse, TripCreate, TripRecord, TripSavedResponse
from travelplanner.services.trip_service import TripStore

router = APIRouter(prefix="/api/trips", tags=["Trips"])


def get_trip_store(request: Request) -> TripStore:
    state = request.app.state
    # Mongo handle is created on first use, not at import time
    if state.trip_store is None:
        settings = state.settings
        state.trip_store = TripStore(get_collection(settings.COLL_TRIPS, settings), dedupe=settings.TRIP_DEDUP)
    return state.trip_store


@router.post("", response_model=TripSavedResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(trip: TripCreate, response: Response, store: TripStore = Depends(get_trip_store)):
    record, created = await store.create(trip)
    if not created:
        response.status_code = status.HTTP_200_OK
        return TripSavedResponse(message="Trip already saved", trip=record)
    return TripSavedResponse(message="Trip saved successfully", trip=record)


@router.get("", response_model=List[TripRecord])
async def list_trips(store: TripStore = Depends(get_trip_store)):
    return await store.list()


@router.get("/{trip_id}", response_model=TripRecord)
async def get_trip(trip_id: str, store: TripStore = Depends(get_trip_store)):
    return await store.get(trip_id)


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(trip_id: str, store: TripStore = Depends(get_trip_store)):
    await store.delete(trip_id)
    return MessageResponse(message="Trip deleted successfully")
