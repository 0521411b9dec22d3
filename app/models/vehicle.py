# app/models/vehicle.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

VehicleType = Literal["Sedan", "SUV", "Mini Bus", "Bus", "Luxury Car", "Tempo Traveller", "Other"]
VehicleStatus = Literal["available", "booked", "maintenance", "inactive"]


def _normalize_number(value: Optional[str]) -> Optional[str]:
    return value.strip().upper() if value is not None else value


class VehicleBase(BaseModel):
    vehicle_number: str = Field(..., min_length=1, examples=["MH-12-AB-1234"])
    type: VehicleType = "Sedan"
    brand: Optional[str] = None
    model: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    color: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900)
    notes: Optional[str] = None

    @field_validator("vehicle_number")
    @classmethod
    def uppercase_number(cls, v):
        return _normalize_number(v)


class VehicleCreate(VehicleBase):
    status: VehicleStatus = "available"


class VehicleUpdate(BaseModel):
    vehicle_id: str
    vehicle_number: Optional[str] = None
    type: Optional[VehicleType] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    color: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900)
    notes: Optional[str] = None
    status: Optional[VehicleStatus] = None

    @field_validator("vehicle_number")
    @classmethod
    def uppercase_number(cls, v):
        return _normalize_number(v)


class VehicleOut(VehicleBase):
    vehicle_id: str
    status: str
    created_at: datetime
    updated_at: datetime
