"""Vehicle catalog for the car rental application."""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from carrental.config import DEFAULT_VEHICLE_PAGE_SIZE
from carrental.errors import NotFoundError, VehicleInUseError
from carrental.models.booking import DateRange
from carrental.models.vehicle import (
    FuelType,
    Transmission,
    Vehicle,
    VehicleCategory,
    VehicleStatus,
)
from carrental.services.ledger_service import BookingLedger
from carrental.services.vehicle_locks import VehicleLocks
from carrental.storage.json_store import JsonStore, Transaction
from carrental.utils import paginate

logger = logging.getLogger(__name__)

# Fields catalog updates may never touch
PROTECTED_FIELDS = ("id", "created_at", "updated_at", "status")


class VehicleCatalog:
    """Stores vehicles and answers catalog searches."""

    COLLECTION = "vehicles"

    def __init__(self, store: JsonStore, ledger: BookingLedger, locks: VehicleLocks):
        self.store = store
        self.ledger = ledger
        self.locks = locks

    def get(self, vehicle_id: str) -> Vehicle:
        """
        Get a vehicle by its ID.

        Raises:
            NotFoundError: If no vehicle has this ID
        """
        document = self.store.get(self.COLLECTION, vehicle_id)
        if document is None:
            raise NotFoundError(f"Vehicle with ID {vehicle_id} not found")
        return Vehicle.from_dict(document)

    def get_many(self, vehicle_ids: Iterable[str]) -> Dict[str, Vehicle]:
        wanted = set(vehicle_ids)
        documents = self.store.find(self.COLLECTION, lambda document: document["id"] in wanted)
        return {document["id"]: Vehicle.from_dict(document) for document in documents}

    def find_by_license_plate(self, license_plate: str) -> Optional[Vehicle]:
        plate = license_plate.strip().upper()
        documents = self.store.find(self.COLLECTION, lambda document: document["license_plate"] == plate)
        return Vehicle.from_dict(documents[0]) if documents else None

    def _filter(self, category: Optional[str] = None, min_price: Optional[float] = None,
                max_price: Optional[float] = None, status: Optional[str] = None,
                seats: Optional[int] = None, transmission: Optional[str] = None,
                fuel_type: Optional[str] = None) -> List[Vehicle]:
        category_label = VehicleCategory.parse(category).value if category else None
        status_label = VehicleStatus.parse(status).value if status else None
        transmission_label = Transmission.parse(transmission).value if transmission else None
        fuel_label = FuelType.parse(fuel_type).value if fuel_type else None

        def matches(document):
            if category_label and document["category"] != category_label:
                return False
            if status_label and document["status"] != status_label:
                return False
            if min_price is not None and document["daily_rate"] < min_price:
                return False
            if max_price is not None and document["daily_rate"] > max_price:
                return False
            if seats is not None and document["seats"] != seats:
                return False
            if transmission_label and document["transmission"] != transmission_label:
                return False
            if fuel_label and document["fuel_type"] != fuel_label:
                return False
            return True

        vehicles = [Vehicle.from_dict(document) for document in self.store.find(self.COLLECTION, matches)]
        vehicles.sort(key=lambda vehicle: vehicle.created_at, reverse=True)
        return vehicles

    def _without_conflicts(self, vehicles: List[Vehicle], date_range: DateRange) -> List[Vehicle]:
        booked = self.ledger.conflicting_vehicle_ids([vehicle.id for vehicle in vehicles], date_range)
        return [vehicle for vehicle in vehicles if vehicle.id not in booked]

    def list(self, category: Optional[str] = None, min_price: Optional[float] = None,
             max_price: Optional[float] = None, status: Optional[str] = None,
             seats: Optional[int] = None, transmission: Optional[str] = None,
             fuel_type: Optional[str] = None, date_range: Optional[DateRange] = None,
             page: int = 1, limit: int = DEFAULT_VEHICLE_PAGE_SIZE) -> Tuple[List[Vehicle], Dict[str, int]]:
        """
        Search the catalog, newest vehicles first.

        When a date range is given, vehicles with an open booking
        overlapping it are dropped before paging.

        Returns:
            Tuple: (vehicles, pagination)
        """
        vehicles = self._filter(category, min_price, max_price, status, seats, transmission, fuel_type)
        if date_range is not None:
            vehicles = self._without_conflicts(vehicles, date_range)
        return paginate(vehicles, page, limit)

    def available_for(self, date_range: DateRange, category: Optional[str] = None,
                      min_price: Optional[float] = None, max_price: Optional[float] = None) -> List[Vehicle]:
        """Available vehicles with no open booking overlapping the range."""
        vehicles = self._filter(category, min_price, max_price, status=VehicleStatus.AVAILABLE.value)
        return self._without_conflicts(vehicles, date_range)

    def create(self, vehicle: Vehicle) -> Vehicle:
        """
        Add a vehicle to the catalog.

        Raises:
            DuplicateKeyError: If the license plate is already registered
        """
        self.store.insert(self.COLLECTION, vehicle.to_dict())
        logger.info(f"Vehicle {vehicle.license_plate} added with ID {vehicle.id}")
        return vehicle

    def update(self, vehicle_id: str, updates: Dict[str, Any]) -> Vehicle:
        """
        Update a vehicle's catalog fields.

        The status and identity fields are skipped; the daily rate of
        existing bookings is unaffected.

        Raises:
            NotFoundError: If the vehicle does not exist
            DuplicateKeyError: If the new license plate is taken
        """
        with self.locks.hold(vehicle_id):
            document = self.get(vehicle_id).to_dict()

            for key, value in updates.items():
                if key in PROTECTED_FIELDS:
                    continue
                document[key] = value

            vehicle = replace(Vehicle.from_dict(document), updated_at=datetime.now())
            self.store.update(self.COLLECTION, vehicle.to_dict())

        logger.info(f"Vehicle {vehicle_id} updated")
        return vehicle

    def set_status(self, vehicle: Vehicle, status: VehicleStatus, txn: Optional[Transaction] = None) -> Vehicle:
        """Write a new status; callers hold the vehicle's lock."""
        updated = replace(vehicle, status=status, updated_at=datetime.now())
        if txn is None:
            self.store.update(self.COLLECTION, updated.to_dict())
        else:
            txn.update(self.COLLECTION, updated.to_dict())
        return updated

    def delete(self, vehicle_id: str) -> None:
        """
        Remove a vehicle from the catalog.

        Runs under the vehicle's lock so no booking can be created for it
        between the check and the removal.

        Raises:
            NotFoundError: If the vehicle does not exist
            VehicleInUseError: If it has a confirmed or active booking
        """
        with self.locks.hold(vehicle_id):
            self.get(vehicle_id)

            if self.ledger.has_open_bookings(vehicle_id):
                raise VehicleInUseError("Cannot delete vehicle with active bookings")

            self.store.delete(self.COLLECTION, vehicle_id)

        self.locks.discard(vehicle_id)
        logger.info(f"Vehicle {vehicle_id} deleted")

    def category_stats(self) -> List[Dict[str, Any]]:
        """Vehicle count and daily rate spread per category, largest first."""
        rates = defaultdict(list)
        for document in self.store.all(self.COLLECTION):
            rates[document["category"]].append(document["daily_rate"])

        stats = [
            {
                "category": category,
                "count": len(values),
                "avg_price": round(sum(values) / len(values), 2),
                "min_price": min(values),
                "max_price": max(values),
            }
            for category, values in rates.items()
        ]
        stats.sort(key=lambda row: row["count"], reverse=True)
        return stats
