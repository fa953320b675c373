"""Booking endpoints."""

from flask import Blueprint, request

from carrental.api.helpers import get_services, json_body, present_bookings, respond
from carrental.api.validation import validate_booking_payload
from carrental.errors import ValidationError
from carrental.utils import parse_optional_datetime


bookings_bp = Blueprint("bookings", __name__)


@bookings_bp.route("/bookings", methods=["GET"])
def list_bookings():
    bookings, pagination = get_services().ledger.list(
        status=request.args.get("status"),
        email=request.args.get("email"),
        vehicle_id=request.args.get("vehicle_id") or request.args.get("carId"),
        start_date=parse_optional_datetime(request.args.get("start_date"), "start date"),
        end_date=parse_optional_datetime(request.args.get("end_date"), "end date"),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
    )
    return respond(present_bookings(bookings), pagination=pagination)


@bookings_bp.route("/bookings/<booking_id>", methods=["GET"])
def get_booking(booking_id):
    booking = get_services().ledger.get(booking_id)
    return respond(present_bookings([booking])[0])


@bookings_bp.route("/bookings/customer/<path:email>", methods=["GET"])
def customer_bookings(email):
    return respond(present_bookings(get_services().ledger.list_by_customer_email(email)))


@bookings_bp.route("/bookings", methods=["POST"])
def create_booking():
    vehicle_id, customer, date_range, extras = validate_booking_payload(json_body())
    booking = get_services().coordinator.request_booking(vehicle_id, customer, date_range, **extras)
    return respond(booking, "Booking created successfully", 201)


@bookings_bp.route("/bookings/<booking_id>/status", methods=["PUT"])
def set_booking_status(booking_id):
    status = json_body().get("status")
    if not status:
        raise ValidationError("status is required")
    booking = get_services().coordinator.set_status(booking_id, status)
    return respond(booking, "Booking status updated successfully")


@bookings_bp.route("/bookings/<booking_id>/activate", methods=["PUT"])
def activate_booking(booking_id):
    booking = get_services().coordinator.activate(booking_id)
    return respond(booking, "Booking activated successfully")


@bookings_bp.route("/bookings/<booking_id>/cancel", methods=["PUT"])
def cancel_booking(booking_id):
    booking = get_services().coordinator.cancel(booking_id)
    return respond(booking, "Booking cancelled successfully")


@bookings_bp.route("/bookings/<booking_id>/return", methods=["PUT"])
def return_booking(booking_id):
    body = json_body()
    booking = get_services().coordinator.return_vehicle(
        booking_id,
        damage_notes=body.get("damage_notes"),
        admin_notes=body.get("admin_notes"),
    )
    return respond(booking, "Car returned successfully")


@bookings_bp.route("/bookings/stats/dashboard", methods=["GET"])
def dashboard():
    return respond(get_services().ledger.dashboard())
