"""Entity models for the car rental application."""
from carrental.models.vehicle import (
    Vehicle,
    VehicleStatus,
    VehicleCategory,
    FuelType,
    Transmission,
)
from carrental.models.booking import (
    Booking,
    BookingStatus,
    BookingNotes,
    Customer,
    DateRange,
    Pricing,
    OPEN_STATUSES,
    TERMINAL_STATUSES,
)


__all__ = [
    'Vehicle',
    'VehicleStatus',
    'VehicleCategory',
    'FuelType',
    'Transmission',
    'Booking',
    'BookingStatus',
    'BookingNotes',
    'Customer',
    'DateRange',
    'Pricing',
    'OPEN_STATUSES',
    'TERMINAL_STATUSES',
]
