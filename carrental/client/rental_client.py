"""Client for the car rental API."""

from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.utils import quote

from carrental.config import BASE_URL

REQUEST_TIMEOUT = 10


class RentalClientError(Exception):
    """Raised when the API cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _params(**filters) -> Dict[str, Any]:
    return {key: value for key, value in filters.items() if value is not None}


class RentalClient:
    """Calls the car rental API on behalf of the CLI."""

    @staticmethod
    def _request(method: str, path: str, **kwargs) -> Dict[str, Any]:
        """
        Send a request and unwrap the API envelope.

        Returns:
            Dict: Decoded response body

        Raises:
            RentalClientError: On connection errors and non-2xx replies
        """
        try:
            response = requests.request(method, f"{BASE_URL}{path}", timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise RentalClientError(f"Could not reach the rental API: {str(e)}")

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            message = body.get("message") if isinstance(body, dict) else None
            raise RentalClientError(
                message or f"Request failed with status {response.status_code}",
                response.status_code,
            )

        return body

    # Vehicles

    @staticmethod
    def list_vehicles(category: Optional[str] = None, min_price: Optional[float] = None,
                      max_price: Optional[float] = None, status: Optional[str] = None,
                      seats: Optional[int] = None, transmission: Optional[str] = None,
                      fuel_type: Optional[str] = None, start_date: Optional[str] = None,
                      end_date: Optional[str] = None, page: int = 1,
                      limit: int = 12) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
        """
        Search the catalog.

        Returns:
            Tuple: (vehicles, pagination)
        """
        body = RentalClient._request("GET", "/cars", params=_params(
            category=category, min_price=min_price, max_price=max_price, status=status,
            seats=seats, transmission=transmission, fuel_type=fuel_type,
            start_date=start_date, end_date=end_date, page=page, limit=limit,
        ))
        return body.get("data", []), body.get("pagination", {})

    @staticmethod
    def get_vehicle(vehicle_id: str) -> Dict[str, Any]:
        return RentalClient._request("GET", f"/cars/{vehicle_id}")["data"]

    @staticmethod
    def create_vehicle(vehicle: Dict[str, Any]) -> Dict[str, Any]:
        return RentalClient._request("POST", "/cars", json=vehicle)["data"]

    @staticmethod
    def update_vehicle(vehicle_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return RentalClient._request("PUT", f"/cars/{vehicle_id}", json=updates)["data"]

    @staticmethod
    def delete_vehicle(vehicle_id: str) -> bool:
        RentalClient._request("DELETE", f"/cars/{vehicle_id}")
        return True

    @staticmethod
    def set_vehicle_status(vehicle_id: str, status: str) -> Dict[str, Any]:
        return RentalClient._request("PUT", f"/cars/{vehicle_id}/status", json={"status": status})["data"]

    @staticmethod
    def available_vehicles(start_date: str, end_date: str, category: Optional[str] = None,
                           min_price: Optional[float] = None,
                           max_price: Optional[float] = None) -> List[Dict[str, Any]]:
        body = RentalClient._request(
            "GET", f"/cars/available/{start_date}/{end_date}",
            params=_params(category=category, min_price=min_price, max_price=max_price),
        )
        return body.get("data", [])

    @staticmethod
    def is_vehicle_available(vehicle_id: str, start_date: str, end_date: str) -> bool:
        body = RentalClient._request(
            "GET", f"/cars/{vehicle_id}/availability",
            params={"start_date": start_date, "end_date": end_date},
        )
        return body["data"]["available"]

    @staticmethod
    def category_stats() -> List[Dict[str, Any]]:
        return RentalClient._request("GET", "/cars/stats/categories").get("data", [])

    # Bookings

    @staticmethod
    def create_booking(vehicle_id: str, name: str, email: str, phone: str,
                       start_date: str, end_date: str, notes: Optional[str] = None,
                       license_number: Optional[str] = None,
                       pickup_location: Optional[str] = None,
                       return_location: Optional[str] = None) -> Dict[str, Any]:
        """
        Book a vehicle.

        Returns:
            Dict: The created booking with its vehicle summary

        Raises:
            RentalClientError: If the vehicle is missing, unavailable or already booked
        """
        customer = {"name": name, "email": email, "phone": phone}
        if license_number:
            customer["license"] = {"number": license_number}

        payload = {
            "customer": customer,
            "rental": _params(
                start_date=start_date,
                end_date=end_date,
                pickup_location=pickup_location,
                return_location=return_location,
            ),
        }
        if notes:
            payload["notes"] = notes

        return RentalClient._request("POST", f"/cars/{vehicle_id}/bookings", json=payload)["data"]

    @staticmethod
    def list_bookings(status: Optional[str] = None, email: Optional[str] = None,
                      vehicle_id: Optional[str] = None, start_date: Optional[str] = None,
                      end_date: Optional[str] = None, page: int = 1,
                      limit: int = 10) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
        body = RentalClient._request("GET", "/bookings", params=_params(
            status=status, email=email, vehicle_id=vehicle_id,
            start_date=start_date, end_date=end_date, page=page, limit=limit,
        ))
        return body.get("data", []), body.get("pagination", {})

    @staticmethod
    def get_booking(booking_id: str) -> Dict[str, Any]:
        return RentalClient._request("GET", f"/bookings/{booking_id}")["data"]

    @staticmethod
    def customer_bookings(email: str) -> List[Dict[str, Any]]:
        return RentalClient._request("GET", f"/bookings/customer/{quote(email, safe='')}").get("data", [])

    @staticmethod
    def activate_booking(booking_id: str) -> Dict[str, Any]:
        return RentalClient._request("PUT", f"/bookings/{booking_id}/activate")["data"]

    @staticmethod
    def cancel_booking(booking_id: str) -> Dict[str, Any]:
        return RentalClient._request("PUT", f"/bookings/{booking_id}/cancel")["data"]

    @staticmethod
    def return_booking(booking_id: str, damage_notes: Optional[str] = None,
                       admin_notes: Optional[str] = None) -> Dict[str, Any]:
        payload = _params(damage_notes=damage_notes, admin_notes=admin_notes)
        return RentalClient._request("PUT", f"/bookings/{booking_id}/return", json=payload)["data"]

    @staticmethod
    def set_booking_status(booking_id: str, status: str) -> Dict[str, Any]:
        return RentalClient._request("PUT", f"/bookings/{booking_id}/status", json={"status": status})["data"]

    @staticmethod
    def dashboard() -> Dict[str, Any]:
        return RentalClient._request("GET", "/bookings/stats/dashboard")["data"]
