# app/services/availability_service.py
import asyncio
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from app.db.mongodb import db, COL_VEHICLES
from app.models.availability import VehicleAvailability
from app.services.conflict_service import find_conflicting_booking
from app.services.travel_buffer_service import check_travel_buffer
from app.services.travel_time_service import TravelTimeOracle
from app.utiles.custom_helpers import _combine_date_time, DEFAULT_PICKUP_TIME, DEFAULT_DROP_TIME
from app.utiles.logger import get_logger

logger = get_logger(__name__)


def booking_window(
    start_date: date,
    end_date: date,
    pickup_time: Optional[str] = None,
    drop_time: Optional[str] = None,
) -> tuple:
    """
    Candidate [start, end] datetimes. Missing times span the whole day
    (00:00 → 23:59), which keeps the overlap check conservative.
    """
    return (
        _combine_date_time(start_date, pickup_time, DEFAULT_PICKUP_TIME),
        _combine_date_time(end_date, drop_time, DEFAULT_DROP_TIME),
    )


async def _vehicle_verdict(
    vehicle: Dict[str, Any],
    start_dt: datetime,
    end_dt: datetime,
    pickup_location: Optional[str],
    drop_location: Optional[str],
    exclude_booking_id: Optional[str],
    oracle: Optional[TravelTimeOracle],
) -> VehicleAvailability:
    base = {
        "vehicle_id": vehicle["vehicle_id"],
        "vehicle_number": vehicle["vehicle_number"],
        "type": vehicle.get("type"),
    }

    conflict = await find_conflicting_booking(vehicle["vehicle_id"], start_dt, end_dt, exclude_booking_id)
    if conflict:
        return VehicleAvailability(
            **base,
            available=False,
            reason="booked",
            message=(
                f"Vehicle is already booked from {conflict['start_date']:%d/%m/%Y} "
                f"to {conflict['end_date']:%d/%m/%Y}"
            ),
            conflicting_booking=conflict.get("booking_number"),
        )

    violation = await check_travel_buffer(
        vehicle["vehicle_id"], start_dt, end_dt, pickup_location, drop_location,
        exclude_booking_id=exclude_booking_id, oracle=oracle,
    )
    if violation:
        return VehicleAvailability(
            **base,
            available=False,
            reason="travel_time_buffer",
            message=violation.message,
            conflicting_booking=violation.conflicting_booking,
        )

    return VehicleAvailability(**base, available=True)


async def check_fleet_availability(
    start_date: date,
    end_date: date,
    pickup_time: Optional[str] = None,
    drop_time: Optional[str] = None,
    pickup_location: Optional[str] = None,
    drop_location: Optional[str] = None,
    exclude_booking_id: Optional[str] = None,
    oracle: Optional[TravelTimeOracle] = None,
) -> List[VehicleAvailability]:
    """
    Evaluate one proposed booking against every non-inactive vehicle.
    - Direct date overlap → unavailable/booked (buffer check skipped)
    - Insufficient travel time around neighbouring trips → unavailable/travel_time_buffer
    Store errors propagate to the caller.
    """
    logger.info(
        "Checking fleet availability → %s %s to %s %s (%s → %s)",
        start_date, pickup_time, end_date, drop_time, pickup_location, drop_location,
    )

    vehicles = await db[COL_VEHICLES].find({"status": {"$ne": "inactive"}}, {"_id": 0}).to_list(None)
    start_dt, end_dt = booking_window(start_date, end_date, pickup_time, drop_time)

    verdicts = await asyncio.gather(*[
        _vehicle_verdict(v, start_dt, end_dt, pickup_location, drop_location, exclude_booking_id, oracle)
        for v in vehicles
    ])

    logger.info(
        "Fleet availability computed: %s of %s vehicles available",
        sum(1 for v in verdicts if v.available), len(verdicts),
    )
    return list(verdicts)
