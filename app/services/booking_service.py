# app/services/booking_service.py
import asyncio
import contextlib
from datetime import date
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument, ASCENDING, DESCENDING

from app.core import config
from app.db.mongodb import db, COL_BOOKINGS, COL_VEHICLES
from app.models.booking import BookingCreate, BookingUpdate, BookingOut
from app.services.availability_service import booking_window, check_fleet_availability
from app.services.travel_time_service import TravelTimeOracle
from app.utiles.custom_helpers import (
    _now_utc,
    _date_to_datetime,
    _gen_booking_id,
    _format_booking_number,
)
from app.utiles.exceptions import InvalidRequestError, NotFoundError, VehicleUnavailableError
from app.utiles.logger import get_logger

logger = get_logger(__name__)

# Fields whose change requires the availability check to run again
SCHEDULE_FIELDS = {"vehicle_id", "start_date", "end_date", "pickup_time", "drop_time", "pickup_location", "drop_location"}

# Fields the stored start_datetime / end_datetime window is derived from
WINDOW_FIELDS = {"start_date", "end_date", "pickup_time", "drop_time"}

# confirmed is the only non-terminal status
ALLOWED_TRANSITIONS = {
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

# Per-vehicle commit locks, only used when SERIALIZE_BOOKING_COMMITS is on.
# An entry lives only while some request holds or waits on it.
_vehicle_locks: Dict[str, asyncio.Lock] = {}
_lock_users: Dict[str, int] = {}


@contextlib.asynccontextmanager
async def _vehicle_lock(vehicle_id: str):
    lock = _vehicle_locks.setdefault(vehicle_id, asyncio.Lock())
    _lock_users[vehicle_id] = _lock_users.get(vehicle_id, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _lock_users[vehicle_id] -= 1
        if _lock_users[vehicle_id] == 0:
            del _lock_users[vehicle_id]
            del _vehicle_locks[vehicle_id]


def _commit_guard(vehicle_id: str):
    """
    Serialization point for check-then-write on one vehicle.
    Without it two concurrent requests can both pass the availability check
    and double-book the vehicle. The lock is process-local.
    """
    if config.SERIALIZE_BOOKING_COMMITS:
        return _vehicle_lock(vehicle_id)
    return contextlib.nullcontext()


def _validate_dates(start_date: date, end_date: date):
    if end_date < start_date:
        logger.warning("Booking rejected: end date %s before start date %s", end_date, start_date)
        raise InvalidRequestError("End date cannot be before start date")


async def _get_vehicle_or_404(vehicle_id: str) -> Dict[str, Any]:
    vehicle = await db[COL_VEHICLES].find_one({"vehicle_id": vehicle_id}, {"_id": 0})
    if not vehicle:
        logger.warning("Vehicle not found: vehicle_id=%s", vehicle_id)
        raise NotFoundError("Vehicle not found")
    return vehicle


async def _ensure_vehicle_available(
    vehicle_id: str,
    start_date: date,
    end_date: date,
    pickup_time: Optional[str],
    drop_time: Optional[str],
    pickup_location: Optional[str],
    drop_location: Optional[str],
    exclude_booking_id: Optional[str] = None,
    oracle: Optional[TravelTimeOracle] = None,
):
    """Run the fleet check and raise VehicleUnavailableError unless ``vehicle_id`` is free."""
    verdicts = await check_fleet_availability(
        start_date, end_date, pickup_time, drop_time, pickup_location, drop_location,
        exclude_booking_id=exclude_booking_id, oracle=oracle,
    )
    verdict = next((v for v in verdicts if v.vehicle_id == vehicle_id), None)

    if verdict is None:
        # Inactive vehicles are left out of the fleet check altogether
        raise VehicleUnavailableError("Vehicle is inactive and cannot be booked", reason="booked")
    if verdict.available:
        return

    if verdict.reason == "travel_time_buffer":
        message = f"Vehicle requires travel time: {verdict.message}"
    else:
        message = verdict.message or "Vehicle is already booked"
    logger.warning("Vehicle %s unavailable (%s) → %s", vehicle_id, verdict.reason, verdict.conflicting_booking)
    raise VehicleUnavailableError(message, reason=verdict.reason, conflicting_booking=verdict.conflicting_booking)


async def _next_booking_number() -> str:
    # Running total over all bookings, not reset per year
    count = await db[COL_BOOKINGS].count_documents({})
    return _format_booking_number(_now_utc().year, count + 1)


# ------------------------
# Create Booking
# ------------------------
async def create_booking(booking: BookingCreate, oracle: Optional[TravelTimeOracle] = None) -> BookingOut:
    """
    Create a booking after the availability check passes.
    Assigns the booking number and the initial 'confirmed' status.
    """
    logger.info(
        "Creating booking → vehicle=%s, %s to %s, customer=%s",
        booking.vehicle_id, booking.start_date, booking.end_date, booking.customer_name,
    )
    _validate_dates(booking.start_date, booking.end_date)
    await _get_vehicle_or_404(booking.vehicle_id)

    async with _commit_guard(booking.vehicle_id):
        await _ensure_vehicle_available(
            booking.vehicle_id, booking.start_date, booking.end_date,
            booking.pickup_time, booking.drop_time, booking.pickup_location, booking.drop_location,
            oracle=oracle,
        )

        now = _now_utc()
        start_dt, end_dt = booking_window(booking.start_date, booking.end_date, booking.pickup_time, booking.drop_time)
        doc = booking.model_dump()
        doc.update({
            "booking_id": _gen_booking_id(),
            "booking_number": await _next_booking_number(),
            "start_date": _date_to_datetime(booking.start_date),
            "end_date": _date_to_datetime(booking.end_date),
            "start_datetime": start_dt,
            "end_datetime": end_dt,
            "status": "confirmed",
            "created_at": now,
            "updated_at": now,
        })
        await db[COL_BOOKINGS].insert_one(doc)

    # Trip already under way → mark the vehicle as out on hire
    if booking.start_date <= now.date():
        await db[COL_VEHICLES].update_one(
            {"vehicle_id": booking.vehicle_id},
            {"$set": {"status": "booked", "updated_at": now}},
        )

    logger.info("Booking created: booking_number=%s, booking_id=%s", doc["booking_number"], doc["booking_id"])
    return BookingOut(**doc)


# ------------------------
# Get Booking by ID
# ------------------------
async def get_booking(booking_id: str) -> BookingOut:
    doc = await db[COL_BOOKINGS].find_one({"booking_id": booking_id}, {"_id": 0})
    if not doc:
        logger.warning("Booking not found: booking_id=%s", booking_id)
        raise NotFoundError("Booking not found")
    return BookingOut(**doc)


# ------------------------
# Search Bookings
# ------------------------
async def search_bookings(
    status: Optional[str] = None,
    vehicle_id: Optional[str] = None,
    search: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 100,
    skip: int = 0,
) -> List[BookingOut]:
    """
    Search bookings, newest first.
    ``search`` matches booking number, customer name or phone (case-insensitive).
    ``start_date`` / ``end_date`` keep bookings that start on or after / end on
    or before the given day.
    """
    logger.debug(
        "Searching bookings: status=%s, vehicle_id=%s, search=%s, range=%s..%s",
        status, vehicle_id, search, start_date, end_date,
    )

    query: Dict[str, Any] = {}
    if status:
        query["status"] = status
    if vehicle_id:
        query["vehicle_id"] = vehicle_id
    if start_date:
        query["start_date"] = {"$gte": _date_to_datetime(start_date)}
    if end_date:
        query["end_date"] = {"$lte": _date_to_datetime(end_date)}
    if search:
        query["$or"] = [
            {"booking_number": {"$regex": search, "$options": "i"}},
            {"customer_name": {"$regex": search, "$options": "i"}},
            {"customer_phone": {"$regex": search, "$options": "i"}},
        ]

    cursor = db[COL_BOOKINGS].find(
        query, {"_id": 0}, sort=[("created_at", DESCENDING)], skip=skip, limit=limit
    )
    results = [BookingOut(**doc) async for doc in cursor]
    logger.info("Search completed. Found %s bookings", len(results))
    return results


# ------------------------
# Calendar View
# ------------------------
async def calendar_bookings(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    vehicle_id: Optional[str] = None,
) -> List[BookingOut]:
    """Bookings starting within [start_date, end_date], any status, earliest first."""
    query: Dict[str, Any] = {}
    if start_date or end_date:
        query["start_date"] = {}
        if start_date:
            query["start_date"]["$gte"] = _date_to_datetime(start_date)
        if end_date:
            query["start_date"]["$lte"] = _date_to_datetime(end_date)
    if vehicle_id:
        query["vehicle_id"] = vehicle_id

    cursor = db[COL_BOOKINGS].find(query, {"_id": 0}, sort=[("start_datetime", ASCENDING)])
    results = [BookingOut(**doc) async for doc in cursor]
    logger.info("Calendar %s..%s → %s bookings", start_date, end_date, len(results))
    return results


# ------------------------
# Update Booking
# ------------------------
async def update_booking(
    booking_id: str,
    update: BookingUpdate,
    oracle: Optional[TravelTimeOracle] = None,
) -> BookingOut:
    """
    Update booking details.
    Any change to vehicle, dates, times or locations re-runs the availability
    check with this booking excluded so it cannot conflict with itself.
    """
    logger.info("Updating booking: booking_id=%s", booking_id)

    current = await db[COL_BOOKINGS].find_one({"booking_id": booking_id}, {"_id": 0})
    if not current:
        logger.warning("Booking update failed: booking_id=%s not found", booking_id)
        raise NotFoundError("Booking not found")

    changes = update.model_dump(exclude_unset=True)
    merged = {**current, **changes}
    start_date = merged["start_date"]
    end_date = merged["end_date"]
    start_date = start_date.date() if hasattr(start_date, "date") else start_date
    end_date = end_date.date() if hasattr(end_date, "date") else end_date

    guard = contextlib.nullcontext()
    if SCHEDULE_FIELDS & changes.keys():
        _validate_dates(start_date, end_date)
        if "vehicle_id" in changes:
            await _get_vehicle_or_404(merged["vehicle_id"])
        guard = _commit_guard(merged["vehicle_id"])

    async with guard:
        if SCHEDULE_FIELDS & changes.keys():
            await _ensure_vehicle_available(
                merged["vehicle_id"], start_date, end_date,
                merged.get("pickup_time"), merged.get("drop_time"),
                merged.get("pickup_location"), merged.get("drop_location"),
                exclude_booking_id=booking_id, oracle=oracle,
            )

        if "start_date" in changes:
            changes["start_date"] = _date_to_datetime(start_date)
        if "end_date" in changes:
            changes["end_date"] = _date_to_datetime(end_date)
        if WINDOW_FIELDS & changes.keys():
            changes["start_datetime"], changes["end_datetime"] = booking_window(
                start_date, end_date, merged.get("pickup_time"), merged.get("drop_time")
            )
        changes["updated_at"] = _now_utc()

        result = await db[COL_BOOKINGS].find_one_and_update(
            {"booking_id": booking_id},
            {"$set": changes},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    if not result:
        raise NotFoundError("Booking not found")
    logger.info("Booking updated successfully: booking_id=%s", booking_id)
    return BookingOut(**result)


# ------------------------
# Update Booking Status
# ------------------------
async def update_booking_status(booking_id: str, status: str) -> BookingOut:
    """
    Move a confirmed booking to completed or cancelled.
    Frees the vehicle's stored status once it has no other confirmed bookings.
    """
    logger.info("Updating booking status: booking_id=%s → %s", booking_id, status)

    current = await db[COL_BOOKINGS].find_one({"booking_id": booking_id}, {"_id": 0})
    if not current:
        raise NotFoundError("Booking not found")

    if status not in ALLOWED_TRANSITIONS.get(current["status"], set()):
        logger.warning("Invalid status transition %s → %s for booking %s", current["status"], status, booking_id)
        raise InvalidRequestError(f"Cannot change booking status from {current['status']} to {status}")

    now = _now_utc()
    result = await db[COL_BOOKINGS].find_one_and_update(
        {"booking_id": booking_id, "status": current["status"]},
        {"$set": {"status": status, "updated_at": now}},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER,
    )
    if not result:
        # Status changed underneath us
        raise InvalidRequestError("Booking status was changed by another request")

    active = await db[COL_BOOKINGS].count_documents({
        "vehicle_id": result["vehicle_id"],
        "status": "confirmed",
        "booking_id": {"$ne": booking_id},
    })
    if active == 0:
        await db[COL_VEHICLES].update_one(
            {"vehicle_id": result["vehicle_id"], "status": "booked"},
            {"$set": {"status": "available", "updated_at": now}},
        )
        logger.info("Vehicle %s has no confirmed bookings left → available", result["vehicle_id"])

    logger.info("Booking status updated: booking_id=%s, status=%s", booking_id, status)
    return BookingOut(**result)


# ------------------------
# Delete Booking
# ------------------------
async def delete_booking(booking_id: str) -> bool:
    """Permanently remove a booking."""
    logger.info("Deleting booking: booking_id=%s", booking_id)
    result = await db[COL_BOOKINGS].delete_one({"booking_id": booking_id})
    if result.deleted_count == 0:
        logger.warning("Booking deletion failed: booking_id=%s not found", booking_id)
        raise NotFoundError("Booking not found")
    logger.info("Booking deleted: booking_id=%s", booking_id)
    return True
