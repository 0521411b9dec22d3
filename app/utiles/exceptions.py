# app/utiles/exceptions.py
"""
Exceptions raised by the service layer.
All of them are HTTPExceptions so handle_exceptions passes them straight through
to the client, while store failures surface as 500s.
"""
from typing import Optional
from fastapi import HTTPException


class InvalidRequestError(HTTPException):
    """Request rejected before any availability computation."""

    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)


class DuplicateVehicleError(HTTPException):
    def __init__(self, detail: str = "Vehicle with this number already exists"):
        super().__init__(status_code=409, detail=detail)


class VehicleUnavailableError(HTTPException):
    """Normal negative outcome of the availability check, not a system fault."""

    def __init__(self, message: str, reason: str, conflicting_booking: Optional[str] = None):
        self.message = message
        self.reason = reason
        self.conflicting_booking = conflicting_booking
        super().__init__(
            status_code=409,
            detail={
                "message": message,
                "reason": reason,
                "conflicting_booking": conflicting_booking,
            },
        )
