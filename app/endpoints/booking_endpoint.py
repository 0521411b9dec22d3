# app/endpoints/booking_endpoint.py

from fastapi import APIRouter
from datetime import date
from typing import List, Optional
from app.models.booking import BookingCreate, BookingUpdate, BookingOut, BookingStatusUpdate
from app.services import booking_service
from app.utiles.decoratores import handle_exceptions
from app.utiles.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])

# ======================================================
# Booking Routes
# Create/update run the fleet availability check before committing
# ======================================================


# ---------------- Create Booking ----------------
@router.post("/create_booking", response_model=BookingOut, status_code=201)
@handle_exceptions
async def create_booking(booking: BookingCreate):
    """
    Endpoint: Create a booking.
    409 when the vehicle is already booked or lacks travel time.
    """
    logger.info("API Request → Create Booking: vehicle_id=%s", booking.vehicle_id)
    result = await booking_service.create_booking(booking)
    logger.info("API Response → Booking created: %s", result.booking_number)
    return result


# ---------------- Search Bookings ----------------
@router.get("/search_bookings", response_model=List[BookingOut])
@handle_exceptions
async def search_bookings(
    status: Optional[str] = None,
    vehicle_id: Optional[str] = None,
    search: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 100,
    skip: int = 0,
):
    logger.info("API Request → Search Bookings: status=%s, vehicle_id=%s, search=%s", status, vehicle_id, search)
    return await booking_service.search_bookings(
        status, vehicle_id, search, start_date=start_date, end_date=end_date, limit=limit, skip=skip
    )


# ---------------- Calendar ----------------
# Declared before /{booking_id} so "calendar" is not taken as an id
@router.get("/calendar", response_model=List[BookingOut])
@handle_exceptions
async def calendar_bookings(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    vehicle_id: Optional[str] = None,
):
    logger.info("API Request → Calendar: %s to %s, vehicle_id=%s", start_date, end_date, vehicle_id)
    return await booking_service.calendar_bookings(start_date, end_date, vehicle_id)


# ---------------- Update Booking ----------------
@router.put("/update_booking/{booking_id}", response_model=BookingOut)
@handle_exceptions
async def update_booking(booking_id: str, update: BookingUpdate):
    logger.info("API Request → Update Booking: booking_id=%s", booking_id)
    return await booking_service.update_booking(booking_id, update)


# ---------------- Update Booking Status ----------------
@router.put("/update_status/{booking_id}", response_model=BookingOut)
@handle_exceptions
async def update_booking_status(booking_id: str, payload: BookingStatusUpdate):
    logger.info("API Request → Update Booking Status: booking_id=%s → %s", booking_id, payload.status)
    return await booking_service.update_booking_status(booking_id, payload.status)


# ---------------- Get Booking ----------------
@router.get("/{booking_id}", response_model=BookingOut)
@handle_exceptions
async def get_booking(booking_id: str):
    logger.info("API Request → Get Booking: booking_id=%s", booking_id)
    return await booking_service.get_booking(booking_id)


# ---------------- Delete Booking ----------------
@router.delete("/{booking_id}", response_model=dict)
@handle_exceptions
async def delete_booking(booking_id: str):
    logger.info("API Request → Delete Booking: booking_id=%s", booking_id)
    await booking_service.delete_booking(booking_id)
    return {"status": "success", "message": "Booking deleted successfully"}
