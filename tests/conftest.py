"""Shared fixtures: in-memory MongoDB patched over the services and seed helpers."""
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from mongomock_motor import AsyncMongoMockClient

from app.services import (
    availability_service,
    booking_service,
    conflict_service,
    travel_buffer_service,
    vehicle_service,
)
from app.services.availability_service import booking_window
from app.services.travel_time_service import TravelTimeOracle

DB_MODULES = [availability_service, booking_service, conflict_service, travel_buffer_service, vehicle_service]


@pytest.fixture
def mock_db(monkeypatch):
    """Fresh in-memory database wired into every service module."""
    database = AsyncMongoMockClient()[f"tour_booking_test_{uuid4().hex}"]
    for module in DB_MODULES:
        monkeypatch.setattr(module, "db", database)
    # Default oracle never reaches the network: same locale → 1h, otherwise 4h
    monkeypatch.setattr(travel_buffer_service, "travel_time_oracle", TravelTimeOracle(api_key=None))
    return database


class Seeder:
    """Writes vehicles and bookings straight into the store."""

    def __init__(self, database):
        self.db = database
        self._count = 0

    async def vehicle(self, number="MH12AB1234", status="available", type="Sedan"):
        vehicle_id = str(uuid4())
        now = datetime.now(timezone.utc)
        await self.db["vehicles"].insert_one({
            "vehicle_id": vehicle_id,
            "vehicle_number": number,
            "type": type,
            "status": status,
            "created_at": now,
            "updated_at": now,
        })
        return vehicle_id

    async def booking(
        self,
        vehicle_id,
        start,
        end,
        pickup_location="Pune",
        pickup_time=None,
        drop_location=None,
        drop_time=None,
        status="confirmed",
        booking_number=None,
    ):
        self._count += 1
        now = datetime.now(timezone.utc)
        start_dt, end_dt = booking_window(start, end, pickup_time, drop_time)
        doc = {
            "booking_id": str(uuid4()),
            "booking_number": booking_number or f"BK2024{self._count:05d}",
            "vehicle_id": vehicle_id,
            "customer_name": "Asha Patil",
            "customer_phone": "9800000000",
            "start_date": datetime(start.year, start.month, start.day),
            "end_date": datetime(end.year, end.month, end.day),
            "start_datetime": start_dt,
            "end_datetime": end_dt,
            "pickup_location": pickup_location,
            "pickup_time": pickup_time,
            "drop_location": drop_location,
            "drop_time": drop_time,
            "status": status,
            "advance_amount": 0,
            "created_at": now,
            "updated_at": now,
        }
        await self.db["bookings"].insert_one(doc)
        return doc


@pytest.fixture
def seed(mock_db):
    return Seeder(mock_db)


def fixed_oracle(hours_by_pair=None, default_seconds=3 * 3600):
    """
    Oracle whose lookup answers from a table of (from, to) → drive seconds.
    3h of driving resolves to a 4h buffer.
    """
    table = hours_by_pair or {}

    async def lookup(origin, destination):
        return table.get((origin.lower(), destination.lower()), default_seconds)

    return TravelTimeOracle(lookup=lookup)


@pytest.fixture
def oracle():
    return fixed_oracle()


@pytest.fixture
def make_oracle():
    return fixed_oracle
