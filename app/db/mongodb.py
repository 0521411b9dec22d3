# app/db/mongodb.py

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from app.core.config import MONGO_URI, MONGO_DB
from app.utiles.logger import get_logger

logger = get_logger(__name__)

# Collection names
COL_VEHICLES = "vehicles"
COL_BOOKINGS = "bookings"

# Global client and db instances
client = AsyncIOMotorClient(MONGO_URI)
db = client[MONGO_DB]


async def connect_to_mongo():
    """Connect to MongoDB when app starts."""
    await ensure_indexes()
    logger.info("✅ MongoDB connection established")


async def close_mongo_connection():
    """Close MongoDB connection when app shuts down."""
    if client:
        client.close()
        logger.warning("⚠️ MongoDB connection closed")


async def ensure_indexes():
    """Create necessary indexes for collections."""
    # ---------------- Vehicles ----------------
    await db[COL_VEHICLES].create_index("vehicle_id", unique=True)
    await db[COL_VEHICLES].create_index("vehicle_number", unique=True)
    await db[COL_VEHICLES].create_index("status")

    # ---------------- Bookings ----------------
    await db[COL_BOOKINGS].create_index("booking_id", unique=True)
    await db[COL_BOOKINGS].create_index("booking_number", unique=True)
    # Conflict and buffer lookups filter by vehicle + status and range over the stored windows
    await db[COL_BOOKINGS].create_index(
        [("vehicle_id", ASCENDING), ("status", ASCENDING), ("start_datetime", ASCENDING)]
    )
    await db[COL_BOOKINGS].create_index(
        [("vehicle_id", ASCENDING), ("status", ASCENDING), ("end_datetime", DESCENDING)]
    )
    # Calendar and date-range searches
    await db[COL_BOOKINGS].create_index([("start_date", ASCENDING)])
    await db[COL_BOOKINGS].create_index([("created_at", DESCENDING)])

    logger.info("✅ Indexes ensured for vehicles and bookings collections")
