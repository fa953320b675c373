"""Tests for the API client used by the CLI."""

import json

import pytest
import requests
import responses

from carrental.client.rental_client import BASE_URL, RentalClient, RentalClientError


@pytest.fixture
def vehicle_data():
    return {
        "id": "vehicle-1",
        "brand": "Toyota",
        "model": "Corolla",
        "license_plate": "TOY100",
        "category": "Economy",
        "daily_rate": 40.0,
        "status": "Available",
    }


class TestVehicleCalls:
    """Test class for vehicle requests."""

    @responses.activate
    def test_list_vehicles_sends_only_given_filters(self, vehicle_data):
        responses.add(
            responses.GET,
            f"{BASE_URL}/cars",
            json={"success": True, "data": [vehicle_data], "pagination": {"page": 2, "limit": 5, "total": 6, "pages": 2}},
            status=200,
        )

        vehicles, pagination = RentalClient.list_vehicles(category="Economy", page=2, limit=5)

        assert vehicles == [vehicle_data]
        assert pagination["pages"] == 2
        query = responses.calls[0].request.params
        assert query == {"category": "Economy", "page": "2", "limit": "5"}

    @responses.activate
    def test_get_vehicle_not_found(self):
        responses.add(
            responses.GET,
            f"{BASE_URL}/cars/missing",
            json={"success": False, "message": "Vehicle with ID missing not found"},
            status=404,
        )

        with pytest.raises(RentalClientError) as excinfo:
            RentalClient.get_vehicle("missing")

        assert str(excinfo.value) == "Vehicle with ID missing not found"
        assert excinfo.value.status_code == 404

    @responses.activate
    def test_non_json_error(self):
        responses.add(responses.DELETE, f"{BASE_URL}/cars/vehicle-1", body="Bad Gateway", status=502)

        with pytest.raises(RentalClientError, match="Request failed with status 502"):
            RentalClient.delete_vehicle("vehicle-1")

    @responses.activate
    def test_connection_error(self):
        responses.add(responses.GET, f"{BASE_URL}/cars/stats/categories",
                      body=requests.ConnectionError("refused"))

        with pytest.raises(RentalClientError, match="Could not reach the rental API"):
            RentalClient.category_stats()

    @responses.activate
    def test_set_vehicle_status(self, vehicle_data):
        responses.add(
            responses.PUT,
            f"{BASE_URL}/cars/vehicle-1/status",
            json={"success": True, "data": {**vehicle_data, "status": "Maintenance"}},
            status=200,
        )

        vehicle = RentalClient.set_vehicle_status("vehicle-1", "Maintenance")

        assert vehicle["status"] == "Maintenance"
        assert json.loads(responses.calls[0].request.body) == {"status": "Maintenance"}

    @responses.activate
    def test_is_vehicle_available(self):
        responses.add(
            responses.GET,
            f"{BASE_URL}/cars/vehicle-1/availability",
            json={"success": True, "data": {"vehicle_id": "vehicle-1", "available": False}},
            status=200,
        )

        assert RentalClient.is_vehicle_available("vehicle-1", "2030-01-01", "2030-01-03") is False
        assert responses.calls[0].request.params == {"start_date": "2030-01-01", "end_date": "2030-01-03"}


class TestBookingCalls:
    """Test class for booking requests."""

    @responses.activate
    def test_create_booking_payload(self):
        responses.add(
            responses.POST,
            f"{BASE_URL}/cars/vehicle-1/bookings",
            json={"success": True, "data": {"id": "booking-1", "booking_code": "CRABC", "status": "Confirmed"}},
            status=201,
        )

        booking = RentalClient.create_booking(
            "vehicle-1", "Alice", "alice@example.com", "1234567890",
            "2030-01-01", "2030-01-04", license_number="DL123", pickup_location="Airport",
        )

        assert booking["booking_code"] == "CRABC"
        assert json.loads(responses.calls[0].request.body) == {
            "customer": {
                "name": "Alice",
                "email": "alice@example.com",
                "phone": "1234567890",
                "license": {"number": "DL123"},
            },
            "rental": {"start_date": "2030-01-01", "end_date": "2030-01-04", "pickup_location": "Airport"},
        }

    @responses.activate
    def test_create_booking_conflict(self):
        responses.add(
            responses.POST,
            f"{BASE_URL}/cars/vehicle-1/bookings",
            json={"success": False, "message": "Car is not available for the selected dates"},
            status=400,
        )

        with pytest.raises(RentalClientError, match="Car is not available for the selected dates"):
            RentalClient.create_booking("vehicle-1", "Alice", "alice@example.com", "1", "2030-01-01", "2030-01-04")

    @responses.activate
    def test_return_booking_sends_notes(self):
        responses.add(
            responses.PUT,
            f"{BASE_URL}/bookings/booking-1/return",
            json={"success": True, "data": {"id": "booking-1", "status": "Completed"}},
            status=200,
        )

        booking = RentalClient.return_booking("booking-1", damage_notes="Dent on door")

        assert booking["status"] == "Completed"
        assert json.loads(responses.calls[0].request.body) == {"damage_notes": "Dent on door"}

    @responses.activate
    def test_dashboard(self):
        stats = {"overview": {"total_bookings": 3}, "monthly_stats": []}
        responses.add(responses.GET, f"{BASE_URL}/bookings/stats/dashboard",
                      json={"success": True, "data": stats}, status=200)

        assert RentalClient.dashboard() == stats

    @responses.activate
    def test_customer_bookings_encodes_email(self):
        responses.add(
            responses.GET,
            f"{BASE_URL}/bookings/customer/alice%2Btrips%40example.com",
            json={"success": True, "data": [{"id": "booking-1"}]},
            status=200,
        )

        bookings = RentalClient.customer_bookings("alice+trips@example.com")

        assert bookings == [{"id": "booking-1"}]
        assert responses.calls[0].request.url.endswith("/bookings/customer/alice%2Btrips%40example.com")
