"""Request payload validation for the car rental API."""

import re
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from carrental.errors import ValidationError
from carrental.models.booking import Customer, DateRange
from carrental.models.vehicle import FuelType, Transmission, VehicleCategory
from carrental.utils import parse_optional_datetime

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
URL_PATTERN = re.compile(r"^https?://\S+$")

MIN_YEAR = 2000
MIN_SEATS = 2
MAX_SEATS = 8


def _require_mapping(data: Any, name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{name} must be an object")
    return data


def _string(data: Dict[str, Any], key: str, required: bool = True) -> Optional[str]:
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be a non-empty string")
    return value.strip()


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{key} must be a number")
    return value


def _integer(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    return value


def validate_vehicle_payload(data: Any, partial: bool = False) -> Dict[str, Any]:
    """
    Check a vehicle payload and return the cleaned fields.

    Args:
        data: Decoded JSON body
        partial: Only check the fields present (updates)

    Returns:
        Dict: Cleaned vehicle fields, enum values as their labels

    Raises:
        ValidationError: On the first invalid field
    """
    data = _require_mapping(data, "Vehicle")
    cleaned = {}

    for key in ("brand", "model", "license_plate"):
        if key in data or not partial:
            cleaned[key] = _string(data, key)

    if "year" in data or not partial:
        if "year" not in data:
            raise ValidationError("year is required")
        year = _integer(data["year"], "year")
        if not MIN_YEAR <= year <= datetime.now().year + 1:
            raise ValidationError(f"year must be between {MIN_YEAR} and {datetime.now().year + 1}")
        cleaned["year"] = year

    if "category" in data or not partial:
        if "category" not in data:
            raise ValidationError("category is required")
        cleaned["category"] = VehicleCategory.parse(data["category"]).value

    if "daily_rate" in data or not partial:
        if "daily_rate" not in data:
            raise ValidationError("daily_rate is required")
        rate = _number(data["daily_rate"], "daily_rate")
        if rate <= 0:
            raise ValidationError("daily_rate must be positive")
        cleaned["daily_rate"] = float(rate)

    if "fuel_type" in data:
        cleaned["fuel_type"] = FuelType.parse(data["fuel_type"]).value
    if "transmission" in data:
        cleaned["transmission"] = Transmission.parse(data["transmission"]).value

    if "seats" in data:
        seats = _integer(data["seats"], "seats")
        if not MIN_SEATS <= seats <= MAX_SEATS:
            raise ValidationError(f"seats must be between {MIN_SEATS} and {MAX_SEATS}")
        cleaned["seats"] = seats

    if "features" in data:
        features = data["features"]
        if not isinstance(features, list) or not all(isinstance(item, str) for item in features):
            raise ValidationError("features must be a list of strings")
        cleaned["features"] = features

    if "image_url" in data:
        image_url = data["image_url"]
        if image_url is not None and (not isinstance(image_url, str) or not URL_PATTERN.match(image_url)):
            raise ValidationError("image_url must be a valid URL")
        cleaned["image_url"] = image_url

    if "location" in data:
        cleaned["location"] = _string(data, "location")

    if "mileage" in data:
        mileage = _number(data["mileage"], "mileage")
        if mileage < 0:
            raise ValidationError("mileage cannot be negative")
        cleaned["mileage"] = int(mileage)

    return cleaned


def validate_customer(data: Any) -> Customer:
    data = _require_mapping(data, "customer")

    email = _string(data, "email")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email")

    license_info = data.get("license") or {}
    _require_mapping(license_info, "license")

    return Customer(
        name=_string(data, "name"),
        email=email,
        phone=_string(data, "phone"),
        license_number=_string(license_info, "number", required=False),
        license_expiry=parse_optional_datetime(license_info.get("expiry_date"), "license expiry date"),
    )


def validate_booking_payload(data: Any, vehicle_id: Optional[str] = None) -> Tuple[str, Customer, DateRange, Dict[str, Any]]:
    """
    Check a booking request.

    Args:
        data: Decoded JSON body
        vehicle_id: Vehicle taken from the URL, overrides the body

    Returns:
        Tuple: (vehicle_id, customer, date_range, extras) where extras holds
        notes, pickup_location and return_location

    Raises:
        ValidationError: On the first invalid field
    """
    data = _require_mapping(data, "Booking")

    vehicle_id = vehicle_id or data.get("vehicle_id") or data.get("carId")
    if not vehicle_id or not isinstance(vehicle_id, str):
        raise ValidationError("vehicle_id is required")

    customer = validate_customer(data.get("customer"))

    rental = _require_mapping(data.get("rental"), "rental")
    if rental.get("start_date") is None:
        raise ValidationError("start_date is required")
    if rental.get("end_date") is None:
        raise ValidationError("end_date is required")
    date_range = DateRange.parse(rental["start_date"], rental["end_date"])

    notes = data.get("notes")
    if isinstance(notes, dict):
        notes = notes.get("customer_notes")
    if notes is not None and not isinstance(notes, str):
        raise ValidationError("notes must be a string")

    extras = {
        "notes": notes,
        "pickup_location": _string(rental, "pickup_location", required=False),
        "return_location": _string(rental, "return_location", required=False),
    }
    return vehicle_id, customer, date_range, extras
