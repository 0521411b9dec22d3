"""Tests for fleet record management."""
import pytest

from app.models.vehicle import VehicleCreate, VehicleUpdate
from app.services import vehicle_service
from app.utiles.exceptions import DuplicateVehicleError, NotFoundError


class TestRegisterVehicle:
    async def test_number_is_uppercased(self, mock_db):
        vehicle = await vehicle_service.register_vehicle_service(
            VehicleCreate(vehicle_number=" mh12ab1234 ", type="SUV", brand="Toyota", model="Innova")
        )
        assert vehicle.vehicle_number == "MH12AB1234"
        assert vehicle.status == "available"
        assert vehicle.vehicle_id

    async def test_duplicate_number_any_case(self, mock_db):
        await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB1234"))
        with pytest.raises(DuplicateVehicleError) as exc:
            await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="mh12ab1234"))
        assert exc.value.status_code == 409


class TestUpdateVehicle:
    async def test_update_status(self, mock_db):
        created = await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB1234"))
        updated = await vehicle_service.update_vehicle_service(
            VehicleUpdate(vehicle_id=created.vehicle_id, status="maintenance")
        )
        assert updated.status == "maintenance"
        assert updated.vehicle_number == "MH12AB1234"

    async def test_number_taken_by_another_vehicle(self, mock_db):
        await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0001"))
        second = await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0002"))

        with pytest.raises(DuplicateVehicleError):
            await vehicle_service.update_vehicle_service(
                VehicleUpdate(vehicle_id=second.vehicle_id, vehicle_number="mh12ab0001")
            )

    async def test_keeping_own_number(self, mock_db):
        created = await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0001"))
        updated = await vehicle_service.update_vehicle_service(
            VehicleUpdate(vehicle_id=created.vehicle_id, vehicle_number="MH12AB0001", color="White")
        )
        assert updated.color == "White"

    async def test_unknown_vehicle(self, mock_db):
        with pytest.raises(NotFoundError):
            await vehicle_service.update_vehicle_service(VehicleUpdate(vehicle_id="missing", color="Red"))


class TestSearchAndDelete:
    async def test_no_filters_lists_whole_fleet(self, mock_db):
        first = await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0001"))
        second = await vehicle_service.register_vehicle_service(
            VehicleCreate(vehicle_number="MH12AB0002", status="inactive")
        )

        result = await vehicle_service.search_vehicle_service()
        assert {v.vehicle_id for v in result["vehicles"]} == {first.vehicle_id, second.vehicle_id}

    async def test_empty_fleet(self, mock_db):
        assert await vehicle_service.search_vehicle_service() == {"vehicles": []}

    async def test_search_by_brand(self, mock_db):
        await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0001", brand="Toyota"))
        await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0002", brand="Force"))

        result = await vehicle_service.search_vehicle_service(search="toyo")
        assert [v.brand for v in result["vehicles"]] == ["Toyota"]

    async def test_get_and_delete(self, mock_db):
        created = await vehicle_service.register_vehicle_service(VehicleCreate(vehicle_number="MH12AB0001"))
        fetched = await vehicle_service.get_vehicle_service(created.vehicle_id)
        assert fetched.vehicle_number == "MH12AB0001"

        await vehicle_service.delete_vehicle_service(created.vehicle_id)
        with pytest.raises(NotFoundError):
            await vehicle_service.get_vehicle_service(created.vehicle_id)

    async def test_delete_unknown(self, mock_db):
        with pytest.raises(NotFoundError):
            await vehicle_service.delete_vehicle_service("missing")
