"""Shared helpers for the API blueprints."""

from typing import Any, Dict, Iterable, List, Optional

from flask import current_app, jsonify, request

from carrental.models.booking import Booking, DateRange
from carrental.services import RentalServices
from carrental.services.reservation_service import present_booking


def get_services() -> RentalServices:
    return current_app.extensions["carrental"]


def respond(data: Any = None, message: Optional[str] = None, status: int = 200,
            pagination: Optional[Dict[str, int]] = None):
    """Build the {"success": true, ...} envelope every endpoint answers with."""
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status


def json_body() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def date_range_arg() -> Optional[DateRange]:
    """Date range from start_date/end_date query parameters, if both are given."""
    start = request.args.get("start_date") or request.args.get("startDate")
    end = request.args.get("end_date") or request.args.get("endDate")
    if start and end:
        return DateRange.parse(start, end)
    return None


def present_bookings(bookings: Iterable[Booking]) -> List[Dict[str, Any]]:
    """Booking payloads with their vehicle summaries, fetched in one lookup."""
    bookings = list(bookings)
    vehicles = get_services().catalog.get_many({booking.vehicle_id for booking in bookings})
    return [present_booking(booking, vehicles.get(booking.vehicle_id)) for booking in bookings]
