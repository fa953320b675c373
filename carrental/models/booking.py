"""Booking entity for the car rental application."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from carrental.config import DEFAULT_LOCATION, PROCESSING_FEE, TAX_RATE
from carrental.errors import ValidationError
from carrental.models.choices import ChoiceEnum
from carrental.utils import format_datetime, parse_datetime, parse_optional_datetime

SECONDS_PER_DAY = 24 * 60 * 60


class BookingStatus(ChoiceEnum):
    """Possible statuses for a booking."""
    CONFIRMED = "Confirmed"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "No-Show"


# Bookings that still hold the vehicle for their date range
OPEN_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.ACTIVE)

TERMINAL_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW)


@dataclass(frozen=True)
class DateRange:
    """
    A rental period.

    Both endpoints are inclusive: two ranges that share only an endpoint
    still overlap.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValidationError("End date must be after start date")

    @classmethod
    def parse(cls, start: Any, end: Any) -> "DateRange":
        return cls(parse_datetime(start, "start date"), parse_datetime(end, "end date"))

    def overlaps(self, other: "DateRange") -> bool:
        return self.start <= other.end and self.end >= other.start

    def total_days(self) -> int:
        """Started days between start and end, never less than one."""
        seconds = (self.end - self.start).total_seconds()
        return max(1, math.ceil(seconds / SECONDS_PER_DAY))


@dataclass(frozen=True)
class Pricing:
    """
    Price breakdown fixed when the booking is created.

    Attributes:
        daily_rate: Vehicle daily rate at booking time
        total_days: Billed days
        base_amount: total_days x daily_rate
        taxes: Tax on the base amount
        fees: Flat processing fee
        total_amount: base_amount + taxes + fees
    """
    daily_rate: float
    total_days: int
    base_amount: float
    taxes: float
    fees: float
    total_amount: float

    @classmethod
    def quote(cls, daily_rate: float, total_days: int,
              tax_rate: float = TAX_RATE, fee: float = PROCESSING_FEE) -> "Pricing":
        base_amount = round(total_days * daily_rate, 2)
        taxes = round(base_amount * tax_rate, 2)
        return cls(
            daily_rate=daily_rate,
            total_days=total_days,
            base_amount=base_amount,
            taxes=taxes,
            fees=fee,
            total_amount=round(base_amount + taxes + fee, 2),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daily_rate": self.daily_rate,
            "total_days": self.total_days,
            "base_amount": self.base_amount,
            "taxes": self.taxes,
            "fees": self.fees,
            "total_amount": self.total_amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pricing":
        return cls(
            daily_rate=float(data["daily_rate"]),
            total_days=int(data["total_days"]),
            base_amount=float(data["base_amount"]),
            taxes=float(data.get("taxes", 0)),
            fees=float(data.get("fees", 0)),
            total_amount=float(data["total_amount"]),
        )


@dataclass
class Customer:
    """Contact details of the renter."""
    name: str
    email: str
    phone: str
    license_number: Optional[str] = None
    license_expiry: Optional[datetime] = None

    def __post_init__(self):
        self.name = self.name.strip()
        self.email = self.email.strip().lower()
        self.phone = self.phone.strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "license": {
                "number": self.license_number,
                "expiry_date": format_datetime(self.license_expiry),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Customer":
        license_info = data.get("license") or {}
        return cls(
            name=data["name"],
            email=data["email"],
            phone=data["phone"],
            license_number=license_info.get("number"),
            license_expiry=parse_optional_datetime(license_info.get("expiry_date"), "license expiry date"),
        )


@dataclass
class BookingNotes:
    customer_notes: str = ""
    admin_notes: str = ""
    damage_notes: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "customer_notes": self.customer_notes,
            "admin_notes": self.admin_notes,
            "damage_notes": self.damage_notes,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "BookingNotes":
        data = data or {}
        return cls(
            customer_notes=data.get("customer_notes") or "",
            admin_notes=data.get("admin_notes") or "",
            damage_notes=data.get("damage_notes") or "",
        )


@dataclass
class Booking:
    """
    Represents a reservation of one vehicle for a date range.

    Attributes:
        id: Unique identifier for the booking
        booking_code: Human readable unique code
        vehicle_id: ID of the reserved vehicle, never changes
        customer: Renter contact details
        rental: Reserved date range
        pricing: Price breakdown snapshotted at creation
        status: Current status of the booking
        notes: Customer, admin and damage notes
        pickup_location: Branch where the vehicle is collected
        return_location: Branch where the vehicle is returned
        actual_return_date: When the vehicle was actually returned
        created_at: When the booking was made
        updated_at: When the booking was last changed
    """
    vehicle_id: str
    booking_code: str
    customer: Customer
    rental: DateRange
    pricing: Pricing
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: BookingNotes = field(default_factory=BookingNotes)
    pickup_location: str = DEFAULT_LOCATION
    return_location: str = DEFAULT_LOCATION
    actual_return_date: Optional[datetime] = None
    id: str = None
    created_at: datetime = None
    updated_at: datetime = None

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = datetime.now()
        if self.updated_at is None:
            self.updated_at = self.created_at

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "booking_code": self.booking_code,
            "vehicle_id": self.vehicle_id,
            "customer": self.customer.to_dict(),
            "rental": {
                "start_date": format_datetime(self.rental.start),
                "end_date": format_datetime(self.rental.end),
                "actual_return_date": format_datetime(self.actual_return_date),
                "pickup_location": self.pickup_location,
                "return_location": self.return_location,
            },
            "pricing": self.pricing.to_dict(),
            "status": self.status.value,
            "notes": self.notes.to_dict(),
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Booking":
        rental = data["rental"]
        return cls(
            id=data.get("id"),
            booking_code=data["booking_code"],
            vehicle_id=data["vehicle_id"],
            customer=Customer.from_dict(data["customer"]),
            rental=DateRange.parse(rental["start_date"], rental["end_date"]),
            pricing=Pricing.from_dict(data["pricing"]),
            status=BookingStatus.parse(data.get("status") or BookingStatus.CONFIRMED),
            notes=BookingNotes.from_dict(data.get("notes")),
            pickup_location=rental.get("pickup_location") or DEFAULT_LOCATION,
            return_location=rental.get("return_location") or DEFAULT_LOCATION,
            actual_return_date=parse_optional_datetime(rental.get("actual_return_date")),
            created_at=parse_optional_datetime(data.get("created_at")),
            updated_at=parse_optional_datetime(data.get("updated_at")),
        )
