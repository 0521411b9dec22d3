# app/models/booking.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import date, datetime

BookingStatus = Literal["confirmed", "completed", "cancelled"]

# HH:MM, 24h clock
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# ---------------------------
# Create Schema
# ---------------------------
class BookingCreate(BaseModel):
    vehicle_id: str = Field(..., description="Vehicle the booking is made for")
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    customer_email: Optional[str] = None
    start_date: date
    end_date: date
    pickup_location: str = Field(..., min_length=1)
    pickup_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    drop_location: Optional[str] = None
    drop_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    purpose: Optional[str] = None
    total_amount: Optional[float] = Field(default=None, ge=0)
    advance_amount: float = Field(default=0, ge=0)
    notes: Optional[str] = None

    @field_validator("customer_name", "customer_phone", "pickup_location", "drop_location", "purpose", "notes")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("customer_email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if v else v


# ---------------------------
# Update Schema
# ---------------------------
class BookingUpdate(BaseModel):
    vehicle_id: Optional[str] = None
    customer_name: Optional[str] = Field(default=None, min_length=1)
    customer_phone: Optional[str] = Field(default=None, min_length=1)
    customer_email: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    pickup_location: Optional[str] = Field(default=None, min_length=1)
    pickup_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    drop_location: Optional[str] = None
    drop_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    purpose: Optional[str] = None
    total_amount: Optional[float] = Field(default=None, ge=0)
    advance_amount: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    # Fields that may be left out but never cleared
    @field_validator(
        "vehicle_id", "customer_name", "customer_phone", "start_date", "end_date", "pickup_location", "advance_amount"
    )
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("customer_name", "customer_phone", "pickup_location", "drop_location", "purpose", "notes")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("customer_email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if v else v


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


# Output schema
class BookingOut(BaseModel):
    booking_id: str
    booking_number: str
    vehicle_id: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    start_date: datetime
    end_date: datetime
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    pickup_location: str
    pickup_time: Optional[str] = None
    drop_location: Optional[str] = None
    drop_time: Optional[str] = None
    purpose: Optional[str] = None
    status: BookingStatus
    total_amount: Optional[float] = None
    advance_amount: float = 0
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
