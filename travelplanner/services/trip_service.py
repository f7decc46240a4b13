import logging
from typing import List, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection

from travelplanner.errors import NotFoundError
from travelplanner.schemas.trip_schema import TripCreate, TripRecord

logger = logging.getLogger(__name__)


def _object_id(trip_id: str) -> ObjectId:
    # Malformed ids cannot match any trip
    if not ObjectId.is_valid(trip_id):
        raise NotFoundError("Trip not found")
    return ObjectId(trip_id)


class TripStore:
    """Saved trips in a single Mongo collection. Records are never updated."""

    def __init__(self, collection: AsyncIOMotorCollection, dedupe: bool = False):
        self.collection = collection
        self.dedupe = dedupe

    async def create(self, trip: TripCreate) -> Tuple[TripRecord, bool]:
        """Insert a trip. Returns (record, created); created is False for a dedup hit."""
        if self.dedupe:
            existing = await self.collection.find_one(trip.dedup_key)
            if existing is not None:
                logger.info("Trip already saved as %s.", existing["_id"])
                return TripRecord.from_document(existing), False

        doc = trip.to_document()
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return TripRecord.from_document(doc), True

    async def list(self) -> List[TripRecord]:
        # _id breaks ties between trips saved in the same millisecond
        cursor = self.collection.find({}, sort=[("generatedAt", -1), ("_id", -1)])
        docs = await cursor.to_list(length=None)
        return [TripRecord.from_document(d) for d in docs]

    async def get(self, trip_id: str) -> TripRecord:
        doc = await self.collection.find_one({"_id": _object_id(trip_id)})
        if doc is None:
            raise NotFoundError("Trip not found")
        return TripRecord.from_document(doc)

    async def delete(self, trip_id: str) -> None:
        result = await self.collection.delete_one({"_id": _object_id(trip_id)})
        if result.deleted_count == 0:
            raise NotFoundError("Trip not found")
