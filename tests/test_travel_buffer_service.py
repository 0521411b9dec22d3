"""Tests for travel-time buffers around neighbouring bookings."""
from datetime import date, datetime

from app.services.travel_buffer_service import check_travel_buffer


class TestPredecessorBuffer:
    async def test_gap_shorter_than_required(self, seed, oracle):
        """Drop in Pune at 17:00, pickup in Mumbai at 19:00 with 4h needed."""
        vehicle_id = await seed.vehicle()
        previous = await seed.booking(
            vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune", drop_time="17:00"
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 19, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", "Mumbai", oracle=oracle,
        )

        assert violation is not None
        assert violation.conflicting_booking == previous["booking_number"]
        assert "4 hours" in violation.message
        assert "Pune" in violation.message

    async def test_gap_longer_than_required(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune", drop_time="17:00")

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 22, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", "Mumbai", oracle=oracle,
        )
        assert violation is None

    async def test_gap_equal_to_required_is_enough(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune", drop_time="17:00")

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 21, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", "Mumbai", oracle=oracle,
        )
        assert violation is None

    async def test_missing_drop_time_means_midnight(self, seed, make_oracle):
        """Without a drop time the gap is measured from midnight of the end date."""
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune")
        # 27h drive → 28h buffer
        oracle = make_oracle({("pune", "goa"): 27 * 3600})

        too_soon = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 2, 2, 0), datetime(2024, 6, 2, 23, 59),
            "Goa", None, oracle=oracle,
        )
        in_time = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 2, 5, 0), datetime(2024, 6, 2, 23, 59),
            "Goa", None, oracle=oracle,
        )

        assert too_soon is not None
        assert in_time is None

    async def test_overlapping_booking_is_not_a_predecessor(self, seed, oracle):
        """A booking still running at the candidate's start is left to the overlap check."""
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune", drop_time="20:00")

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 19, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", None, oracle=oracle,
        )
        assert violation is None

    async def test_completed_predecessor_counts(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(
            vehicle_id, date(2024, 5, 30), date(2024, 6, 1),
            drop_location="Pune", drop_time="17:00", status="completed",
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 19, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", None, oracle=oracle,
        )
        assert violation is not None

    async def test_cancelled_predecessor_ignored(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(
            vehicle_id, date(2024, 5, 30), date(2024, 6, 1),
            drop_location="Pune", drop_time="17:00", status="cancelled",
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 19, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", None, oracle=oracle,
        )
        assert violation is None

    async def test_nearest_predecessor_is_used(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 5, 1), date(2024, 5, 2), drop_location="Goa")
        nearest = await seed.booking(
            vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Nashik", drop_time="18:00"
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 20, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", None, oracle=oracle,
        )
        assert violation.conflicting_booking == nearest["booking_number"]

    async def test_same_locale_needs_one_hour(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune", drop_time="17:00")

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 18, 0), datetime(2024, 6, 2, 23, 59),
            "pune station", None, oracle=oracle,
        )
        assert violation is None

    async def test_excluded_booking_is_not_its_own_predecessor(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        existing = await seed.booking(
            vehicle_id, date(2024, 5, 30), date(2024, 6, 1), drop_location="Pune", drop_time="17:00"
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 19, 0), datetime(2024, 6, 2, 23, 59),
            "Mumbai", None, exclude_booking_id=existing["booking_id"], oracle=oracle,
        )
        assert violation is None


class TestSuccessorBuffer:
    async def test_gap_shorter_than_required(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        following = await seed.booking(
            vehicle_id, date(2024, 6, 6), date(2024, 6, 8), pickup_location="Goa", pickup_time="02:00"
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 4, 8, 0), datetime(2024, 6, 5, 23, 0),
            "Mumbai", "Mumbai", oracle=oracle,
        )

        assert violation is not None
        assert violation.conflicting_booking == following["booking_number"]
        assert "Goa" in violation.message

    async def test_gap_long_enough(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 6, 6), date(2024, 6, 8), pickup_location="Goa", pickup_time="09:00")

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 4, 8, 0), datetime(2024, 6, 5, 23, 0),
            "Mumbai", "Mumbai", oracle=oracle,
        )
        assert violation is None

    async def test_completed_successor_ignored(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        await seed.booking(
            vehicle_id, date(2024, 6, 6), date(2024, 6, 8),
            pickup_location="Goa", pickup_time="02:00", status="completed",
        )

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 4, 8, 0), datetime(2024, 6, 5, 23, 0),
            "Mumbai", "Mumbai", oracle=oracle,
        )
        assert violation is None

    async def test_uses_route_specific_duration(self, seed, make_oracle):
        """A long drive between drop and next pickup widens the buffer."""
        vehicle_id = await seed.vehicle()
        await seed.booking(vehicle_id, date(2024, 6, 6), date(2024, 6, 8), pickup_location="Goa", pickup_time="08:00")
        oracle = make_oracle({("mumbai", "goa"): 10 * 3600})

        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 4, 8, 0), datetime(2024, 6, 5, 23, 0),
            "Mumbai", "Mumbai", oracle=oracle,
        )
        # 9h gap against an 11h requirement
        assert violation is not None
        assert "11 hours" in violation.message


class TestNoNeighbours:
    async def test_empty_history(self, seed, oracle):
        vehicle_id = await seed.vehicle()
        violation = await check_travel_buffer(
            vehicle_id, datetime(2024, 6, 1, 8, 0), datetime(2024, 6, 2, 20, 0), "Pune", "Mumbai", oracle=oracle,
        )
        assert violation is None
