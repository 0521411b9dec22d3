# app/services/travel_buffer_service.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from pymongo import ASCENDING, DESCENDING
from app.db.mongodb import db, COL_BOOKINGS
from app.services.travel_time_service import TravelTimeOracle, travel_time_oracle
from app.utiles.custom_helpers import _combine_date_time, MIDNIGHT
from app.utiles.logger import get_logger

logger = get_logger(__name__)

# A completed trip still sits in the vehicle's recent travel history
PREDECESSOR_STATUSES = ["confirmed", "completed"]
SUCCESSOR_STATUSES = ["confirmed"]


@dataclass
class BufferViolation:
    message: str
    conflicting_booking: Optional[str]


def _hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600


async def _nearest_predecessor(vehicle_id: str, start_dt: datetime, exclude_booking_id: Optional[str]):
    query = {
        "vehicle_id": vehicle_id,
        "status": {"$in": PREDECESSOR_STATUSES},
        "end_datetime": {"$lte": start_dt},
    }
    if exclude_booking_id:
        query["booking_id"] = {"$ne": exclude_booking_id}
    return await db[COL_BOOKINGS].find_one(query, {"_id": 0}, sort=[("end_datetime", DESCENDING)])


async def _nearest_successor(vehicle_id: str, end_dt: datetime, exclude_booking_id: Optional[str]):
    query = {
        "vehicle_id": vehicle_id,
        "status": {"$in": SUCCESSOR_STATUSES},
        "start_datetime": {"$gte": end_dt},
    }
    if exclude_booking_id:
        query["booking_id"] = {"$ne": exclude_booking_id}
    return await db[COL_BOOKINGS].find_one(query, {"_id": 0}, sort=[("start_datetime", ASCENDING)])


async def check_travel_buffer(
    vehicle_id: str,
    start_dt: datetime,
    end_dt: datetime,
    pickup_location: Optional[str],
    drop_location: Optional[str],
    exclude_booking_id: Optional[str] = None,
    oracle: Optional[TravelTimeOracle] = None,
) -> Optional[BufferViolation]:
    """
    Check the idle time around a candidate trip against the vehicle's
    neighbouring bookings. Returns the first violation found, or None.
    """
    oracle = oracle or travel_time_oracle

    # 1. Nearest booking whose stored window closes before the candidate starts
    previous = await _nearest_predecessor(vehicle_id, start_dt, exclude_booking_id)
    if previous:
        # Gap runs from the drop time, or from midnight of the end date without one
        previous_end = _combine_date_time(previous["end_date"], previous.get("drop_time"), MIDNIGHT)
        required = await oracle.resolve_buffer_hours(previous.get("drop_location"), pickup_location)
        gap = _hours_between(previous_end, start_dt)
        if gap < required:
            logger.info(
                "Buffer violation before trip: vehicle=%s gap=%.2fh required=%sh (after %s)",
                vehicle_id, gap, required, previous.get("booking_number"),
            )
            return BufferViolation(
                message=(
                    f"Vehicle requires {required} hours of travel time from "
                    f"{previous.get('drop_location') or 'previous drop location'} "
                    f"after booking {previous.get('booking_number')}"
                ),
                conflicting_booking=previous.get("booking_number"),
            )

    # 2. Nearest confirmed booking starting after the candidate ends
    following = await _nearest_successor(vehicle_id, end_dt, exclude_booking_id)
    if following:
        following_start = _combine_date_time(following["start_date"], following.get("pickup_time"), MIDNIGHT)
        required = await oracle.resolve_buffer_hours(drop_location, following.get("pickup_location"))
        gap = _hours_between(end_dt, following_start)
        if gap < required:
            logger.info(
                "Buffer violation after trip: vehicle=%s gap=%.2fh required=%sh (before %s)",
                vehicle_id, gap, required, following.get("booking_number"),
            )
            return BufferViolation(
                message=(
                    f"Vehicle requires {required} hours of travel time to reach "
                    f"{following.get('pickup_location')} for booking {following.get('booking_number')}"
                ),
                conflicting_booking=following.get("booking_number"),
            )

    return None
