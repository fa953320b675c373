"""Shared fixtures for the car rental tests."""

from datetime import datetime, timedelta

import pytest

from carrental.models.booking import Booking, Customer, DateRange, Pricing
from carrental.models.vehicle import Vehicle, VehicleCategory
from carrental.services import build_services
from carrental.storage.json_store import JsonStore

# All test rentals are placed relative to this day
DAY_ZERO = datetime(2030, 1, 1, 10, 0)


@pytest.fixture
def store():
    """In-memory store."""
    return JsonStore()


@pytest.fixture
def services(store):
    return build_services(store)


@pytest.fixture
def catalog(services):
    return services.catalog


@pytest.fixture
def ledger(services):
    return services.ledger


@pytest.fixture
def coordinator(services):
    return services.coordinator


@pytest.fixture
def make_range():
    """Build a DateRange from day offsets relative to DAY_ZERO."""
    def _make_range(start_day, end_day):
        return DateRange(DAY_ZERO + timedelta(days=start_day), DAY_ZERO + timedelta(days=end_day))
    return _make_range


@pytest.fixture
def customer():
    return Customer(name="Alice", email="alice@example.com", phone="1234567890")


@pytest.fixture
def vehicle(catalog):
    """An available Economy car at 40 per day."""
    return catalog.create(Vehicle(
        brand="Toyota",
        model="Corolla",
        year=2020,
        license_plate="TOY100",
        category=VehicleCategory.ECONOMY,
        daily_rate=40,
    ))


@pytest.fixture
def second_vehicle(catalog):
    return catalog.create(Vehicle(
        brand="BMW",
        model="3 Series",
        year=2022,
        license_plate="BMW300",
        category=VehicleCategory.LUXURY,
        daily_rate=120,
    ))


@pytest.fixture
def recorded_booking(ledger, vehicle, customer, make_range):
    """Write a Confirmed booking straight to the ledger, leaving the vehicle Available."""
    counter = iter(range(1000))

    def _record(start_day, end_day):
        date_range = make_range(start_day, end_day)
        return ledger.create(Booking(
            vehicle_id=vehicle.id,
            booking_code=f"CRRECORDED{next(counter)}",
            customer=customer,
            rental=date_range,
            pricing=Pricing.quote(vehicle.daily_rate, date_range.total_days()),
        ))
    return _record
