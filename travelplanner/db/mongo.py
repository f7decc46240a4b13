# -------------------------------------------------------------
# 🌍 MongoDB Connection Manager (Truthiness-safe)
# -------------------------------------------------------------
import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from travelplanner.config import Settings

logger = logging.getLogger(__name__)

_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_db: Optional[AsyncIOMotorDatabase] = None
_lock = asyncio.Lock()


def _mask_uri(uri: str) -> str:
    # Mask credentials in logs
    return uri.split("@")[-1] if uri else "<hidden>"


async def init_mongo(settings: Settings) -> AsyncIOMotorDatabase:
    """
    Initialize the MongoDB connection exactly once (idempotent).
    Safe to call multiple times concurrently.
    """
    global _mongo_client, _mongo_db

    async with _lock:
        if _mongo_db is not None:
            return _mongo_db

        logger.info("🧩 Connecting to MongoDB: %s", _mask_uri(settings.MONGO_URI))
        client = _mongo_client or AsyncIOMotorClient(settings.MONGO_URI)
        db = client[settings.MONGO_DB]

        # Lightweight connectivity check
        try:
            await db.command("ping")
        except Exception:
            logger.exception("❌ MongoDB connection failed.")
            raise

        _mongo_client = client
        _mongo_db = db
        logger.info("✅ MongoDB connection established successfully.")

    return _mongo_db


def get_mongo_client(settings: Settings) -> AsyncIOMotorDatabase:
    """
    Synchronous getter.

    - If already initialized (via await init_mongo()), returns the live DB.
    - If not yet initialized, returns a *lazy* DB handle (no ping performed).
      Callers that need guaranteed connectivity should `await init_mongo()` first.
    """
    global _mongo_client

    if _mongo_db is not None:
        return _mongo_db

    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(settings.MONGO_URI)
    return _mongo_client[settings.MONGO_DB]


def get_collection(name: str, settings: Settings) -> AsyncIOMotorCollection:
    """
    Returns an AsyncIOMotorCollection for the given name.
    Example:
        trips = get_collection("trips", settings)
    """
    if not name:
        raise ValueError("Collection name is required")
    db = get_mongo_client(settings)
    return db[name]
