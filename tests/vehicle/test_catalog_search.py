"""Tests for searching the vehicle catalog."""

from datetime import datetime, timedelta

import pytest

from carrental.errors import ValidationError
from carrental.models.vehicle import (
    FuelType,
    Transmission,
    Vehicle,
    VehicleCategory,
    VehicleStatus,
)


@pytest.fixture
def fleet(catalog):
    """Four vehicles created a minute apart, oldest first."""
    base = datetime(2029, 6, 1, 9, 0)
    specs = [
        ("Toyota", "Yaris", "ECO001", VehicleCategory.ECONOMY, 35, 5, Transmission.MANUAL, FuelType.PETROL),
        ("Honda", "Civic", "CMP001", VehicleCategory.COMPACT, 50, 5, Transmission.AUTOMATIC, FuelType.HYBRID),
        ("Ford", "Explorer", "SUV001", VehicleCategory.SUV, 90, 7, Transmission.AUTOMATIC, FuelType.DIESEL),
        ("Tesla", "Model S", "LUX001", VehicleCategory.LUXURY, 150, 5, Transmission.AUTOMATIC, FuelType.ELECTRIC),
    ]
    vehicles = []
    for offset, (brand, model, plate, category, rate, seats, transmission, fuel) in enumerate(specs):
        vehicles.append(catalog.create(Vehicle(
            brand=brand,
            model=model,
            year=2022,
            license_plate=plate,
            category=category,
            daily_rate=rate,
            seats=seats,
            transmission=transmission,
            fuel_type=fuel,
            created_at=base + timedelta(minutes=offset),
        )))
    return vehicles


def _plates(vehicles):
    return [vehicle.license_plate for vehicle in vehicles]


class TestCatalogList:
    """Test class for catalog listing and filters."""

    def test_newest_first(self, catalog, fleet):
        vehicles, pagination = catalog.list()

        assert _plates(vehicles) == ["LUX001", "SUV001", "CMP001", "ECO001"]
        assert pagination == {"page": 1, "limit": 12, "total": 4, "pages": 1}

    def test_filter_by_category_label_or_name(self, catalog, fleet):
        by_label, _ = catalog.list(category="SUV")
        by_name, _ = catalog.list(category="luxury")

        assert _plates(by_label) == ["SUV001"]
        assert _plates(by_name) == ["LUX001"]

    def test_filter_by_price_bounds(self, catalog, fleet):
        vehicles, _ = catalog.list(min_price=50, max_price=90)

        assert _plates(vehicles) == ["SUV001", "CMP001"]

    def test_filter_by_seats_transmission_and_fuel(self, catalog, fleet):
        seven_seaters, _ = catalog.list(seats=7)
        manual, _ = catalog.list(transmission="Manual")
        electric, _ = catalog.list(fuel_type="electric")

        assert _plates(seven_seaters) == ["SUV001"]
        assert _plates(manual) == ["ECO001"]
        assert _plates(electric) == ["LUX001"]

    def test_unknown_category_rejected(self, catalog, fleet):
        with pytest.raises(ValidationError):
            catalog.list(category="Spaceship")

    def test_pagination(self, catalog, fleet):
        first, pagination = catalog.list(page=1, limit=3)
        second, _ = catalog.list(page=2, limit=3)
        beyond, _ = catalog.list(page=5, limit=3)

        assert _plates(first) == ["LUX001", "SUV001", "CMP001"]
        assert _plates(second) == ["ECO001"]
        assert beyond == []
        assert pagination["pages"] == 2
        assert pagination["total"] == 4

    def test_date_range_filter_applies_before_paging(self, catalog, coordinator, fleet, customer, make_range):
        coordinator.request_booking(fleet[3].id, customer, make_range(0, 3))
        coordinator.request_booking(fleet[2].id, customer, make_range(2, 4))

        vehicles, pagination = catalog.list(date_range=make_range(1, 2), limit=2)

        assert _plates(vehicles) == ["CMP001", "ECO001"]
        assert pagination["total"] == 2
        assert pagination["pages"] == 1

    def test_filter_by_status(self, catalog, coordinator, fleet):
        coordinator.set_vehicle_status(fleet[0].id, VehicleStatus.MAINTENANCE)

        vehicles, _ = catalog.list(status="Maintenance")

        assert _plates(vehicles) == ["ECO001"]


class TestAvailableFor:
    """Test class for date-range availability search."""

    def test_excludes_booked_and_maintenance(self, catalog, coordinator, fleet, customer, make_range):
        coordinator.request_booking(fleet[3].id, customer, make_range(0, 3))
        coordinator.set_vehicle_status(fleet[0].id, "Maintenance")

        vehicles = catalog.available_for(make_range(1, 2))

        assert _plates(vehicles) == ["SUV001", "CMP001"]

    def test_rented_vehicle_not_offered_for_later_dates(self, catalog, coordinator, fleet, customer, make_range):
        booking = coordinator.request_booking(fleet[3].id, customer, make_range(0, 3))

        assert catalog.available_for(make_range(5, 7), category="Luxury") == []

        coordinator.return_vehicle(booking["id"])
        vehicles = catalog.available_for(make_range(5, 7), category="Luxury")

        assert _plates(vehicles) == ["LUX001"]

    def test_finished_bookings_do_not_block(self, catalog, coordinator, fleet, customer, make_range):
        booking = coordinator.request_booking(fleet[1].id, customer, make_range(0, 3))
        coordinator.return_vehicle(booking["id"])

        vehicles = catalog.available_for(make_range(1, 2), max_price=60)

        assert _plates(vehicles) == ["CMP001", "ECO001"]


class TestCategoryStats:
    """Test class for per-category statistics."""

    def test_stats(self, catalog, fleet):
        catalog.create(Vehicle(
            brand="Toyota",
            model="Aygo",
            year=2021,
            license_plate="ECO002",
            category=VehicleCategory.ECONOMY,
            daily_rate=30,
        ))

        stats = catalog.category_stats()

        assert stats[0] == {
            "category": "Economy",
            "count": 2,
            "avg_price": 32.5,
            "min_price": 30,
            "max_price": 35,
        }
        assert {row["category"] for row in stats} == {"Economy", "Compact", "SUV", "Luxury"}

    def test_empty_catalog(self, catalog):
        assert catalog.category_stats() == []
