# app/endpoints/availability_endpoint.py
from datetime import date
from typing import Optional
from fastapi import APIRouter, Query
from app.models.availability import FleetAvailabilityOut
from app.models.booking import TIME_PATTERN
from app.services.availability_service import check_fleet_availability
from app.utiles.decoratores import handle_exceptions
from app.utiles.exceptions import InvalidRequestError
from app.utiles.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Vehicle Availability"])


@router.get("/check_availability", response_model=FleetAvailabilityOut)
@handle_exceptions
async def check_availability(
    start_date: date,
    end_date: date,
    pickup_time: Optional[str] = Query(default=None, pattern=TIME_PATTERN),
    drop_time: Optional[str] = Query(default=None, pattern=TIME_PATTERN),
    pickup_location: Optional[str] = None,
    drop_location: Optional[str] = None,
    exclude_booking_id: Optional[str] = None,
):
    """
    Endpoint: Per-vehicle availability for a proposed booking window.
    Inactive vehicles are not listed.
    """
    logger.info("API Request → Check Availability: %s to %s", start_date, end_date)
    if end_date < start_date:
        raise InvalidRequestError("End date cannot be before start date")

    verdicts = await check_fleet_availability(
        start_date, end_date, pickup_time, drop_time, pickup_location, drop_location,
        exclude_booking_id=exclude_booking_id,
    )
    logger.info("API Response → Availability computed for %s vehicles", len(verdicts))
    return {"vehicles": verdicts}
