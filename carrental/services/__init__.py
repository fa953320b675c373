"""Services for the car rental application."""

from dataclasses import dataclass

from carrental.services.booking_codes import BookingCodeIssuer
from carrental.services.catalog_service import VehicleCatalog
from carrental.services.ledger_service import BookingLedger
from carrental.services.reservation_service import ReservationCoordinator
from carrental.services.vehicle_locks import VehicleLocks
from carrental.storage.json_store import JsonStore


@dataclass
class RentalServices:
    """The catalog, ledger and coordinator sharing one store and lock registry."""
    store: JsonStore
    catalog: VehicleCatalog
    ledger: BookingLedger
    coordinator: ReservationCoordinator


def build_services(store: JsonStore) -> RentalServices:
    locks = VehicleLocks()
    ledger = BookingLedger(store)
    catalog = VehicleCatalog(store, ledger, locks)
    coordinator = ReservationCoordinator(store, catalog, ledger, locks, BookingCodeIssuer(ledger))
    return RentalServices(store=store, catalog=catalog, ledger=ledger, coordinator=coordinator)


__all__ = [
    'RentalServices',
    'build_services',
    'BookingCodeIssuer',
    'BookingLedger',
    'ReservationCoordinator',
    'VehicleCatalog',
    'VehicleLocks',
]
