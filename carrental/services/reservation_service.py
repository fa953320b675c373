"""Reservation coordinator for the car rental application."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Optional

from carrental.config import BOOKING_CODE_ATTEMPTS, DEFAULT_LOCATION
from carrental.errors import (
    DateConflictError,
    DuplicateKeyError,
    InvalidTransitionError,
    VehicleUnavailableError,
)
from carrental.models.booking import (
    Booking,
    BookingNotes,
    BookingStatus,
    Customer,
    DateRange,
    Pricing,
)
from carrental.models.vehicle import Vehicle, VehicleStatus
from carrental.services.booking_codes import BookingCodeIssuer
from carrental.services.catalog_service import VehicleCatalog
from carrental.services.ledger_service import BookingLedger
from carrental.services.vehicle_locks import VehicleLocks
from carrental.storage.json_store import JsonStore

logger = logging.getLogger(__name__)

# Targets reachable from each non-terminal status. Active -> Active is an
# idempotent re-activation.
ALLOWED_TRANSITIONS = {
    BookingStatus.CONFIRMED: {
        BookingStatus.ACTIVE,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.NO_SHOW,
    },
    BookingStatus.ACTIVE: {
        BookingStatus.ACTIVE,
        BookingStatus.COMPLETED,
    },
}

VEHICLE_STATUS_AFTER = {
    BookingStatus.ACTIVE: VehicleStatus.RENTED,
    BookingStatus.COMPLETED: VehicleStatus.AVAILABLE,
    BookingStatus.CANCELLED: VehicleStatus.AVAILABLE,
    BookingStatus.NO_SHOW: VehicleStatus.AVAILABLE,
}


def quote_price(daily_rate: float, date_range: DateRange) -> Pricing:
    """Price a rental: started days x rate, plus tax and the processing fee."""
    return Pricing.quote(daily_rate, date_range.total_days())


def present_booking(booking: Booking, vehicle: Optional[Vehicle]) -> Dict[str, Any]:
    """Booking payload with the vehicle summary attached."""
    data = booking.to_dict()
    data["vehicle"] = vehicle.summary() if vehicle is not None else None
    return data


class ReservationCoordinator:
    """
    Owns every change that touches a booking and its vehicle together.

    Each operation runs inside the vehicle's lock: the checks read fresh
    state and the booking and vehicle writes commit in one store
    transaction. A failed check raises before anything is staged.
    """

    def __init__(self, store: JsonStore, catalog: VehicleCatalog, ledger: BookingLedger,
                 locks: VehicleLocks, codes: Optional[BookingCodeIssuer] = None):
        self.store = store
        self.catalog = catalog
        self.ledger = ledger
        self.locks = locks
        self.codes = codes or BookingCodeIssuer(ledger)

    def is_vehicle_available(self, vehicle_id: str, date_range: DateRange) -> bool:
        """
        True when no confirmed or active booking on the vehicle overlaps the range.

        Raises:
            NotFoundError: If the vehicle does not exist
        """
        self.catalog.get(vehicle_id)
        return not self.ledger.conflicts(vehicle_id, date_range)

    def request_booking(self, vehicle_id: str, customer: Customer, date_range: DateRange,
                        notes: Optional[str] = None, pickup_location: Optional[str] = None,
                        return_location: Optional[str] = None) -> Dict[str, Any]:
        """
        Reserve a vehicle for a date range.

        Args:
            vehicle_id: ID of the vehicle to reserve
            customer: Renter contact details
            date_range: Rental period
            notes: Optional customer notes
            pickup_location: Pickup branch, defaults to the main branch
            return_location: Return branch, defaults to the main branch

        Returns:
            Dict: Booking data with the vehicle summary

        Raises:
            NotFoundError: If the vehicle does not exist
            VehicleUnavailableError: If the vehicle is not Available
            DateConflictError: If an open booking overlaps the dates
        """
        with self.locks.hold(vehicle_id):
            vehicle = self.catalog.get(vehicle_id)

            if vehicle.status != VehicleStatus.AVAILABLE:
                logger.warning(f"Booking rejected: vehicle {vehicle_id} is {vehicle.status.value}")
                raise VehicleUnavailableError("Car is not available for booking")

            conflicts = self.ledger.conflicts(vehicle_id, date_range)
            if conflicts:
                logger.warning(
                    f"Booking rejected: vehicle {vehicle_id} already booked by "
                    f"{', '.join(booking.booking_code for booking in conflicts)}"
                )
                raise DateConflictError("Car is not available for the selected dates")

            pricing = quote_price(vehicle.daily_rate, date_range)

            for _ in range(BOOKING_CODE_ATTEMPTS):
                booking = Booking(
                    vehicle_id=vehicle_id,
                    booking_code=self.codes.issue(),
                    customer=customer,
                    rental=date_range,
                    pricing=pricing,
                    notes=BookingNotes(customer_notes=notes or ""),
                    pickup_location=pickup_location or DEFAULT_LOCATION,
                    return_location=return_location or DEFAULT_LOCATION,
                )
                try:
                    with self.store.transaction() as txn:
                        self.ledger.create(booking, txn)
                        vehicle = self.catalog.set_status(vehicle, VehicleStatus.RENTED, txn)
                    break
                except DuplicateKeyError:
                    logger.warning(f"Booking code {booking.booking_code} collided, issuing another")
            else:
                raise DuplicateKeyError("Could not issue a unique booking code")

        logger.info(
            f"Booking {booking.booking_code} confirmed for vehicle {vehicle_id} "
            f"({date_range.start.isoformat()} - {date_range.end.isoformat()}, total {pricing.total_amount})"
        )
        return present_booking(booking, vehicle)

    def activate(self, booking_id: str) -> Dict[str, Any]:
        """Hand the vehicle over: Confirmed -> Active."""
        return self._transition(booking_id, BookingStatus.ACTIVE, eligible=(BookingStatus.CONFIRMED,))

    def return_vehicle(self, booking_id: str, damage_notes: Optional[str] = None,
                       admin_notes: Optional[str] = None) -> Dict[str, Any]:
        """Take the vehicle back: Confirmed/Active -> Completed."""
        def record(booking: Booking, now: datetime) -> Booking:
            notes = replace(
                booking.notes,
                damage_notes=damage_notes or "",
                admin_notes=admin_notes or f"Returned at {now.isoformat()}",
            )
            return replace(booking, notes=notes)

        return self._transition(
            booking_id,
            BookingStatus.COMPLETED,
            eligible=(BookingStatus.CONFIRMED, BookingStatus.ACTIVE),
            annotate=record,
        )

    def cancel(self, booking_id: str) -> Dict[str, Any]:
        """Cancel a booking that has not started: Confirmed -> Cancelled."""
        def record(booking: Booking, now: datetime) -> Booking:
            return replace(booking, notes=replace(booking.notes, admin_notes=f"Cancelled at {now.isoformat()}"))

        return self._transition(
            booking_id,
            BookingStatus.CANCELLED,
            eligible=(BookingStatus.CONFIRMED,),
            annotate=record,
        )

    def set_status(self, booking_id: str, status: Any) -> Dict[str, Any]:
        """
        Move a booking to any status the state machine allows.

        Raises:
            NotFoundError: If the booking does not exist
            InvalidTransitionError: If the move is not allowed
            ValidationError: If the status is unknown
        """
        return self._transition(booking_id, BookingStatus.parse(status))

    def set_vehicle_status(self, vehicle_id: str, status: Any) -> Vehicle:
        """
        Administrative status change, e.g. sending a vehicle to maintenance.

        Rented is only ever set through bookings, and a vehicle with a
        confirmed or active booking keeps the status its bookings gave it.

        Raises:
            NotFoundError: If the vehicle does not exist
            InvalidTransitionError: If the target is Rented or the vehicle is booked
        """
        target = VehicleStatus.parse(status)
        if target == VehicleStatus.RENTED:
            raise InvalidTransitionError("Vehicles become Rented through bookings only")

        with self.locks.hold(vehicle_id):
            vehicle = self.catalog.get(vehicle_id)
            if vehicle.status != target:
                if self.ledger.has_open_bookings(vehicle_id):
                    logger.warning(f"Vehicle {vehicle_id} has open bookings; cannot set {target.value}")
                    raise InvalidTransitionError("Cannot change the status of a vehicle with active bookings")
                vehicle = self.catalog.set_status(vehicle, target)

        logger.info(f"Vehicle {vehicle_id} status set to {target.value}")
        return vehicle

    def _transition(self, booking_id: str, target: BookingStatus, eligible=None, annotate=None) -> Dict[str, Any]:
        vehicle_id = self.ledger.get(booking_id).vehicle_id

        with self.locks.hold(vehicle_id):
            booking = self.ledger.get(booking_id)
            current = booking.status

            if booking.is_terminal:
                logger.warning(f"Booking {booking.booking_code} is {current.value}; cannot move to {target.value}")
                raise InvalidTransitionError(f"Booking is {current.value} and can no longer change status")

            if eligible is not None and current not in eligible:
                logger.warning(f"Booking {booking.booking_code} is {current.value}; cannot move to {target.value}")
                raise InvalidTransitionError(f"Booking cannot be moved to {target.value} from {current.value}")

            if target not in ALLOWED_TRANSITIONS[current]:
                logger.warning(f"Booking {booking.booking_code} is {current.value}; cannot move to {target.value}")
                raise InvalidTransitionError(f"Booking cannot be moved to {target.value} from {current.value}")

            vehicle = self.catalog.get(vehicle_id)
            vehicle_status = VEHICLE_STATUS_AFTER[target]

            if target == current:
                # Re-activation only re-asserts the vehicle status
                if vehicle.status != vehicle_status:
                    vehicle = self.catalog.set_status(vehicle, vehicle_status)
                return present_booking(booking, vehicle)

            now = datetime.now()
            updated = replace(booking, status=target, updated_at=now)
            if target == BookingStatus.COMPLETED:
                updated = replace(updated, actual_return_date=now)
            if annotate is not None:
                updated = annotate(updated, now)

            with self.store.transaction() as txn:
                self.ledger.save(updated, txn)
                if vehicle.status != vehicle_status:
                    vehicle = self.catalog.set_status(vehicle, vehicle_status, txn)

        logger.info(f"Booking {updated.booking_code} moved from {current.value} to {target.value}")
        return present_booking(updated, vehicle)
