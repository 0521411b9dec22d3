# app/endpoints/vehicle_endpoint.py
from typing import Optional
from fastapi import APIRouter
from app.models.vehicle import VehicleCreate, VehicleUpdate, VehicleOut
from app.services.vehicle_service import (
    register_vehicle_service,
    get_vehicle_service,
    update_vehicle_service,
    delete_vehicle_service,
    search_vehicle_service,
)
from app.utiles.decoratores import handle_exceptions
from app.utiles.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/vehicles", tags=["Vehicle Management"])

# ======================================================
# Vehicle Routes
# Exposes REST endpoints for fleet records
# ======================================================


# ---------------- Register Vehicle ----------------
@router.post("/register_vehicle", response_model=VehicleOut, status_code=201)
@handle_exceptions
async def register_vehicle(vehicle: VehicleCreate):
    """
    Endpoint: Register a new vehicle.
    Calls service layer → register_vehicle_service.
    """
    logger.info("API Request → Register Vehicle: Number=%s", vehicle.vehicle_number)
    response = await register_vehicle_service(vehicle)
    logger.info("API Response → Vehicle registered: vehicle_id=%s", response.vehicle_id)
    return response


# ---------------- Update Vehicle ----------------
@router.put("/update_vehicle", response_model=VehicleOut)
@handle_exceptions
async def update_vehicle(update: VehicleUpdate):
    logger.info("API Request → Update Vehicle: vehicle_id=%s", update.vehicle_id)
    return await update_vehicle_service(update)


# ---------------- Delete Vehicle ----------------
@router.delete("/delete_vehicle/{vehicle_id}", response_model=dict)
@handle_exceptions
async def delete_vehicle(vehicle_id: str):
    logger.info("API Request → Delete Vehicle: vehicle_id=%s", vehicle_id)
    return await delete_vehicle_service(vehicle_id)


# ---------------- Search Vehicle ----------------
@router.get("/search_vehicle", response_model=dict)
@handle_exceptions
async def search_vehicle(search: Optional[str] = None, status: Optional[str] = None, type: Optional[str] = None):
    """
    Endpoint: Search vehicles with optional filters.
    Calls service layer → search_vehicle_service.
    """
    logger.info("API Request → Search Vehicle (search=%s, status=%s, type=%s)", search, status, type)
    response = await search_vehicle_service(search, status, type)
    logger.info("API Response → Search completed, found=%s vehicles", len(response.get("vehicles", [])))
    return response


# ---------------- Get Vehicle ----------------
@router.get("/{vehicle_id}", response_model=VehicleOut)
@handle_exceptions
async def get_vehicle(vehicle_id: str):
    logger.info("API Request → Get Vehicle: vehicle_id=%s", vehicle_id)
    return await get_vehicle_service(vehicle_id)
