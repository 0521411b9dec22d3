# app/services/vehicle_service.py
from typing import Optional
from pymongo import ReturnDocument, DESCENDING
from app.db.mongodb import db, COL_VEHICLES
from app.models.vehicle import VehicleCreate, VehicleUpdate, VehicleOut
from app.utiles.custom_helpers import _now_utc, _gen_vehicle_id, _normalize_id
from app.utiles.exceptions import DuplicateVehicleError, NotFoundError
from app.utiles.logger import get_logger

logger = get_logger(__name__)


# ---------------- Service: Register Vehicle ----------------
async def register_vehicle_service(vehicle: VehicleCreate) -> VehicleOut:
    """
    Register a new vehicle.
    - Registration number is stored uppercased and must be unique
    - Assigns vehicle_id and timestamps
    """
    logger.info("Attempting to add vehicle → Number=%s, Type=%s", vehicle.vehicle_number, vehicle.type)

    exists = await db[COL_VEHICLES].find_one({"vehicle_number": vehicle.vehicle_number})
    if exists:
        logger.warning("Vehicle add failed: duplicate vehicle_number %s", vehicle.vehicle_number)
        raise DuplicateVehicleError()

    now = _now_utc()
    doc = vehicle.model_dump()
    doc.update({"vehicle_id": _gen_vehicle_id(), "created_at": now, "updated_at": now})
    await db[COL_VEHICLES].insert_one(doc)
    logger.info("Vehicle registered successfully: vehicle_id=%s", doc["vehicle_id"])
    return VehicleOut(**doc)


# ---------------- Service: Get Vehicle ----------------
async def get_vehicle_service(vehicle_id: str) -> VehicleOut:
    doc = await db[COL_VEHICLES].find_one({"vehicle_id": _normalize_id(vehicle_id)}, {"_id": 0})
    if not doc:
        logger.warning("Vehicle not found → vehicle_id=%s", vehicle_id)
        raise NotFoundError("Vehicle not found")
    return VehicleOut(**doc)


# ---------------- Service: Update Vehicle ----------------
async def update_vehicle_service(update: VehicleUpdate) -> VehicleOut:
    """
    Update vehicle details.
    - Rejects a registration number already used by another vehicle
    """
    vehicle_id = _normalize_id(update.vehicle_id)
    logger.info("Updating vehicle → vehicle_id=%s", vehicle_id)

    changes = update.model_dump(exclude_unset=True, exclude={"vehicle_id"})
    if changes.get("vehicle_number"):
        duplicate = await db[COL_VEHICLES].find_one({
            "vehicle_number": changes["vehicle_number"],
            "vehicle_id": {"$ne": vehicle_id},
        })
        if duplicate:
            logger.warning("Vehicle update failed: number %s already used", changes["vehicle_number"])
            raise DuplicateVehicleError()

    result = await db[COL_VEHICLES].find_one_and_update(
        {"vehicle_id": vehicle_id},
        {"$set": {**changes, "updated_at": _now_utc()}},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER,
    )
    if not result:
        logger.error("Vehicle update failed: Vehicle not found → vehicle_id=%s", vehicle_id)
        raise NotFoundError("Vehicle not found")
    logger.info("Vehicle updated successfully: vehicle_id=%s", vehicle_id)
    return VehicleOut(**result)


# ---------------- Service: Delete Vehicle ----------------
async def delete_vehicle_service(vehicle_id: str):
    """Remove a vehicle permanently."""
    vehicle_id = _normalize_id(vehicle_id)
    logger.info("Deleting vehicle → vehicle_id=%s", vehicle_id)

    result = await db[COL_VEHICLES].delete_one({"vehicle_id": vehicle_id})
    if result.deleted_count == 0:
        logger.error("Delete failed: Vehicle not found → vehicle_id=%s", vehicle_id)
        raise NotFoundError("Vehicle not found")

    logger.info("Vehicle deleted successfully → vehicle_id=%s", vehicle_id)
    return {"message": "Vehicle deleted successfully"}


# ---------------- Service: Search Vehicle ----------------
async def search_vehicle_service(search: Optional[str] = None, status: Optional[str] = None, type: Optional[str] = None):
    """
    Search vehicles.
    - ``search`` matches registration number, brand or model (case-insensitive)
    - No filters lists the whole fleet
    - Returns up to 100 results, newest first
    """
    logger.debug("Searching vehicles → search=%s, status=%s, type=%s", search, status, type)

    query = {}
    if search:
        query["$or"] = [
            {"vehicle_number": {"$regex": search, "$options": "i"}},
            {"brand": {"$regex": search, "$options": "i"}},
            {"model": {"$regex": search, "$options": "i"}},
        ]
    if status: query["status"] = status
    if type: query["type"] = type

    vehicles = await db[COL_VEHICLES].find(query, {"_id": 0}, sort=[("created_at", DESCENDING)]).to_list(100)
    logger.info("Search completed. Found %s vehicles", len(vehicles))
    return {"vehicles": [VehicleOut(**v) for v in vehicles]}
