# app/models/availability.py
from pydantic import BaseModel
from typing import Optional, Literal, List

UnavailableReason = Literal["booked", "travel_time_buffer"]


class VehicleAvailability(BaseModel):
    """Verdict for one vehicle against one proposed booking window."""
    vehicle_id: str
    vehicle_number: str
    type: Optional[str] = None
    available: bool
    reason: Optional[UnavailableReason] = None
    message: Optional[str] = None
    conflicting_booking: Optional[str] = None


class FleetAvailabilityOut(BaseModel):
    vehicles: List[VehicleAvailability]
