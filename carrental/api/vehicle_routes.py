"""Vehicle endpoints."""

from flask import Blueprint, request

from carrental.api.helpers import date_range_arg, get_services, json_body, respond
from carrental.api.validation import validate_booking_payload, validate_vehicle_payload
from carrental.errors import ValidationError
from carrental.models.booking import DateRange
from carrental.models.vehicle import Vehicle


vehicles_bp = Blueprint("vehicles", __name__)


@vehicles_bp.route("/cars", methods=["GET"])
def list_vehicles():
    """Filter the catalog, optionally keeping only vehicles free for a date range."""
    vehicles, pagination = get_services().catalog.list(
        category=request.args.get("category"),
        min_price=request.args.get("min_price", type=float),
        max_price=request.args.get("max_price", type=float),
        status=request.args.get("status"),
        seats=request.args.get("seats", type=int),
        transmission=request.args.get("transmission"),
        fuel_type=request.args.get("fuel_type"),
        date_range=date_range_arg(),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 12, type=int),
    )
    return respond([vehicle.to_dict() for vehicle in vehicles], pagination=pagination)


@vehicles_bp.route("/cars/<vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id):
    return respond(get_services().catalog.get(vehicle_id).to_dict())


@vehicles_bp.route("/cars", methods=["POST"])
def create_vehicle():
    fields = validate_vehicle_payload(json_body())
    vehicle = get_services().catalog.create(Vehicle.from_dict(fields))
    return respond(vehicle.to_dict(), "Car created successfully", 201)


@vehicles_bp.route("/cars/<vehicle_id>", methods=["PUT"])
def update_vehicle(vehicle_id):
    fields = validate_vehicle_payload(json_body(), partial=True)
    vehicle = get_services().catalog.update(vehicle_id, fields)
    return respond(vehicle.to_dict(), "Car updated successfully")


@vehicles_bp.route("/cars/<vehicle_id>", methods=["DELETE"])
def delete_vehicle(vehicle_id):
    get_services().catalog.delete(vehicle_id)
    return respond(message="Car deleted successfully")


@vehicles_bp.route("/cars/<vehicle_id>/status", methods=["PUT"])
def set_vehicle_status(vehicle_id):
    status = json_body().get("status")
    if not status:
        raise ValidationError("status is required")
    vehicle = get_services().coordinator.set_vehicle_status(vehicle_id, status)
    return respond(vehicle.to_dict(), "Car status updated successfully")


@vehicles_bp.route("/cars/<vehicle_id>/availability", methods=["GET"])
def vehicle_availability(vehicle_id):
    date_range = date_range_arg()
    if date_range is None:
        raise ValidationError("start_date and end_date are required")
    available = get_services().coordinator.is_vehicle_available(vehicle_id, date_range)
    return respond({"vehicle_id": vehicle_id, "available": available})


@vehicles_bp.route("/cars/available/<start_date>/<end_date>", methods=["GET"])
def available_vehicles(start_date, end_date):
    vehicles = get_services().catalog.available_for(
        DateRange.parse(start_date, end_date),
        category=request.args.get("category"),
        min_price=request.args.get("min_price", type=float),
        max_price=request.args.get("max_price", type=float),
    )
    return respond([vehicle.to_dict() for vehicle in vehicles])


@vehicles_bp.route("/cars/stats/categories", methods=["GET"])
def category_stats():
    return respond(get_services().catalog.category_stats())


@vehicles_bp.route("/cars/<vehicle_id>/bookings", methods=["POST"])
def book_vehicle(vehicle_id):
    vehicle_id, customer, date_range, extras = validate_booking_payload(json_body(), vehicle_id)
    booking = get_services().coordinator.request_booking(vehicle_id, customer, date_range, **extras)
    return respond(booking, "Booking created successfully", 201)
