"""Booking ledger for the car rental application."""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from carrental.config import DEFAULT_BOOKING_PAGE_SIZE, MONTHLY_STATS_LIMIT
from carrental.errors import NotFoundError
from carrental.models.booking import Booking, BookingStatus, DateRange, OPEN_STATUSES
from carrental.storage.json_store import JsonStore, Transaction
from carrental.utils import paginate

logger = logging.getLogger(__name__)


class BookingLedger:
    """Stores bookings and answers lookups and reporting queries over them."""

    COLLECTION = "bookings"

    def __init__(self, store: JsonStore):
        self.store = store

    def _bookings(self, predicate=None) -> List[Booking]:
        documents = self.store.find(self.COLLECTION, predicate or (lambda document: True))
        return [Booking.from_dict(document) for document in documents]

    def get(self, booking_id: str) -> Booking:
        """
        Get a booking by its ID.

        Raises:
            NotFoundError: If no booking has this ID
        """
        document = self.store.get(self.COLLECTION, booking_id)
        if document is None:
            raise NotFoundError(f"Booking with ID {booking_id} not found")
        return Booking.from_dict(document)

    def code_exists(self, booking_code: str) -> bool:
        return bool(self.store.find(self.COLLECTION, lambda document: document.get("booking_code") == booking_code))

    def list_by_vehicle(self, vehicle_id: str, statuses: Optional[Iterable[BookingStatus]] = None) -> List[Booking]:
        """Bookings on one vehicle, optionally restricted to some statuses."""
        wanted = {status.value for status in statuses} if statuses is not None else None

        def matches(document):
            if document.get("vehicle_id") != vehicle_id:
                return False
            return wanted is None or document.get("status") in wanted

        return self._bookings(matches)

    def has_open_bookings(self, vehicle_id: str) -> bool:
        return bool(self.list_by_vehicle(vehicle_id, OPEN_STATUSES))

    def conflicts(self, vehicle_id: str, date_range: DateRange) -> List[Booking]:
        """Open bookings on the vehicle whose dates overlap the range."""
        return [
            booking for booking in self.list_by_vehicle(vehicle_id, OPEN_STATUSES)
            if booking.rental.overlaps(date_range)
        ]

    def conflicting_vehicle_ids(self, vehicle_ids: Iterable[str], date_range: DateRange) -> set:
        """
        IDs among vehicle_ids that have an open booking overlapping the range.

        One pass over the ledger, whatever the number of vehicles.
        """
        candidates = set(vehicle_ids)
        open_labels = {status.value for status in OPEN_STATUSES}
        bookings = self._bookings(
            lambda document: document.get("vehicle_id") in candidates and document.get("status") in open_labels
        )
        return {booking.vehicle_id for booking in bookings if booking.rental.overlaps(date_range)}

    def list_by_customer_email(self, email: str) -> List[Booking]:
        email = email.strip().lower()
        bookings = self._bookings(lambda document: document["customer"]["email"].lower() == email)
        return sorted(bookings, key=lambda booking: booking.created_at, reverse=True)

    def list(self, status: Optional[str] = None, email: Optional[str] = None,
             vehicle_id: Optional[str] = None, start_date: Optional[datetime] = None,
             end_date: Optional[datetime] = None, page: int = 1,
             limit: int = DEFAULT_BOOKING_PAGE_SIZE) -> Tuple[List[Booking], Dict[str, int]]:
        """
        Filter bookings, newest first, one page at a time.

        Args:
            status: Only bookings in this status
            email: Case-insensitive substring of the customer email
            vehicle_id: Only bookings on this vehicle
            start_date: With end_date, only rentals starting inside the window
            end_date: See start_date
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple: (bookings, pagination)
        """
        status_label = BookingStatus.parse(status).value if status else None
        needle = email.strip().lower() if email else None

        def matches(document):
            if status_label and document.get("status") != status_label:
                return False
            if needle and needle not in document["customer"]["email"].lower():
                return False
            if vehicle_id and document.get("vehicle_id") != vehicle_id:
                return False
            return True

        bookings = self._bookings(matches)
        if start_date and end_date:
            bookings = [
                booking for booking in bookings
                if start_date <= booking.rental.start <= end_date
            ]

        bookings.sort(key=lambda booking: booking.created_at, reverse=True)
        return paginate(bookings, page, limit)

    def create(self, booking: Booking, txn: Optional[Transaction] = None) -> Booking:
        if txn is None:
            self.store.insert(self.COLLECTION, booking.to_dict())
        else:
            txn.insert(self.COLLECTION, booking.to_dict())
        return booking

    def save(self, booking: Booking, txn: Optional[Transaction] = None) -> Booking:
        if txn is None:
            self.store.update(self.COLLECTION, booking.to_dict())
        else:
            txn.update(self.COLLECTION, booking.to_dict())
        return booking

    # Reporting

    def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in BookingStatus}
        for document in self.store.all(self.COLLECTION):
            counts[document["status"]] = counts.get(document["status"], 0) + 1
        return counts

    def revenue(self, status: BookingStatus = BookingStatus.COMPLETED) -> float:
        return round(sum(
            document["pricing"]["total_amount"]
            for document in self.store.all(self.COLLECTION)
            if document["status"] == status.value
        ), 2)

    def monthly_stats(self, limit: int = MONTHLY_STATS_LIMIT) -> List[Dict[str, Any]]:
        """Booking count and booked amount per (year, month) of creation, newest first."""
        groups = defaultdict(lambda: {"bookings": 0, "revenue": 0.0})
        for booking in self._bookings():
            key = (booking.created_at.year, booking.created_at.month)
            groups[key]["bookings"] += 1
            groups[key]["revenue"] += booking.pricing.total_amount

        rows = []
        for (year, month) in sorted(groups, reverse=True)[:limit]:
            rows.append({
                "year": year,
                "month": month,
                "bookings": groups[(year, month)]["bookings"],
                "revenue": round(groups[(year, month)]["revenue"], 2),
            })
        return rows

    def dashboard(self) -> Dict[str, Any]:
        counts = self.count_by_status()
        return {
            "overview": {
                "total_bookings": sum(counts.values()),
                "active_bookings": sum(counts[status.value] for status in OPEN_STATUSES),
                "completed_bookings": counts[BookingStatus.COMPLETED.value],
                "cancelled_bookings": counts[BookingStatus.CANCELLED.value],
                "total_revenue": self.revenue(BookingStatus.COMPLETED),
            },
            "monthly_stats": self.monthly_stats(),
        }
