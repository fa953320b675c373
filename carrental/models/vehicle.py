"""Vehicle entity for the car rental application."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from carrental.config import DEFAULT_LOCATION
from carrental.models.choices import ChoiceEnum
from carrental.utils import format_datetime, parse_optional_datetime


class VehicleStatus(ChoiceEnum):
    """Operational status of a vehicle."""
    AVAILABLE = "Available"
    RENTED = "Rented"
    MAINTENANCE = "Maintenance"


class VehicleCategory(ChoiceEnum):
    """Rental categories offered by the fleet."""
    ECONOMY = "Economy"
    COMPACT = "Compact"
    SUV = "SUV"
    LUXURY = "Luxury"
    SPORTS = "Sports"


class FuelType(ChoiceEnum):
    PETROL = "Petrol"
    DIESEL = "Diesel"
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"


class Transmission(ChoiceEnum):
    MANUAL = "Manual"
    AUTOMATIC = "Automatic"


def normalize_plate(license_plate: str) -> str:
    """Plates are stored trimmed and upper-cased."""
    return license_plate.strip().upper()


@dataclass
class Vehicle:
    """
    Represents a rentable vehicle in the catalog.

    Attributes:
        id: Unique identifier for the vehicle
        brand: Vehicle manufacturer
        model: Vehicle model
        year: Model year
        license_plate: License plate, unique across the catalog
        category: Rental category
        daily_rate: Price per rental day
        seats: Seating capacity
        fuel_type: Fuel type
        transmission: Transmission type
        features: Free-form feature list
        image_url: Optional picture of the vehicle
        location: Branch where the vehicle is kept
        mileage: Odometer reading
        status: Operational status, changed by the reservation coordinator
        created_at: When the vehicle was added
        updated_at: When the vehicle was last changed
    """
    brand: str
    model: str
    year: int
    license_plate: str
    category: VehicleCategory
    daily_rate: float
    seats: int = 5
    fuel_type: FuelType = FuelType.PETROL
    transmission: Transmission = Transmission.MANUAL
    features: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    location: str = DEFAULT_LOCATION
    mileage: int = 0
    status: VehicleStatus = VehicleStatus.AVAILABLE
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
        self.license_plate = normalize_plate(self.license_plate)

    def summary(self) -> Dict[str, Any]:
        """Vehicle detail attached to booking payloads."""
        return {
            "id": self.id,
            "brand": self.brand,
            "model": self.model,
            "license_plate": self.license_plate,
            "category": self.category.value,
            "daily_rate": self.daily_rate,
            "image_url": self.image_url,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "brand": self.brand,
            "model": self.model,
            "year": self.year,
            "license_plate": self.license_plate,
            "category": self.category.value,
            "daily_rate": self.daily_rate,
            "seats": self.seats,
            "fuel_type": self.fuel_type.value,
            "transmission": self.transmission.value,
            "features": list(self.features),
            "image_url": self.image_url,
            "location": self.location,
            "mileage": self.mileage,
            "status": self.status.value,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vehicle":
        return cls(
            id=data.get("id"),
            brand=data["brand"],
            model=data["model"],
            year=int(data["year"]),
            license_plate=data["license_plate"],
            category=VehicleCategory.parse(data["category"]),
            daily_rate=float(data["daily_rate"]),
            seats=int(data.get("seats", 5)),
            fuel_type=FuelType.parse(data.get("fuel_type") or FuelType.PETROL),
            transmission=Transmission.parse(data.get("transmission") or Transmission.MANUAL),
            features=list(data.get("features") or []),
            image_url=data.get("image_url"),
            location=data.get("location") or DEFAULT_LOCATION,
            mileage=int(data.get("mileage") or 0),
            status=VehicleStatus.parse(data.get("status") or VehicleStatus.AVAILABLE),
            created_at=parse_optional_datetime(data.get("created_at")),
            updated_at=parse_optional_datetime(data.get("updated_at")),
        )
