# app/services/conflict_service.py
from datetime import datetime
from typing import Optional, Dict, Any
from app.db.mongodb import db, COL_BOOKINGS
from app.utiles.logger import get_logger

logger = get_logger(__name__)


async def find_conflicting_booking(
    vehicle_id: str,
    start_dt: datetime,
    end_dt: datetime,
    exclude_booking_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Return one confirmed booking of ``vehicle_id`` whose stored window
    (start_datetime to end_datetime) overlaps [start_dt, end_dt], or None.
    Boundaries are inclusive: a booking ending at start_dt still conflicts.
    """
    query = {
        "vehicle_id": vehicle_id,
        "status": "confirmed",
        "start_datetime": {"$lte": end_dt},
        "end_datetime": {"$gte": start_dt},
    }
    if exclude_booking_id:
        query["booking_id"] = {"$ne": exclude_booking_id}

    conflict = await db[COL_BOOKINGS].find_one(query, {"_id": 0})
    if conflict:
        logger.info("Date conflict for vehicle %s → booking %s", vehicle_id, conflict.get("booking_number"))
    return conflict
