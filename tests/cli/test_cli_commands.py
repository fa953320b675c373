"""Tests for the CLI commands."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from carrental.cli_module.cli import cli
from carrental.client.rental_client import RentalClientError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def booking_data():
    return {
        "id": "booking-1",
        "booking_code": "CRLZ4K1Q2M9F3A",
        "status": "Confirmed",
        "vehicle": {"id": "vehicle-1", "brand": "Toyota", "model": "Corolla", "license_plate": "TOY100"},
        "customer": {"name": "Alice", "email": "alice@example.com", "phone": "1234567890"},
        "rental": {
            "start_date": "2030-01-01T00:00:00",
            "end_date": "2030-01-04T00:00:00",
            "actual_return_date": None,
            "pickup_location": "Main Branch",
            "return_location": "Main Branch",
        },
        "pricing": {"daily_rate": 40.0, "total_days": 3, "base_amount": 120.0, "taxes": 12.0,
                    "fees": 25.0, "total_amount": 157.0},
        "notes": {"customer_notes": "Child seat", "admin_notes": "", "damage_notes": ""},
    }


class TestVehicleCommands:
    """Test class for vehicle commands."""

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_list(self, mock_client, runner):
        mock_client.list_vehicles.return_value = (
            [{"id": "vehicle-1", "license_plate": "TOY100", "brand": "Toyota", "model": "Corolla",
              "year": 2020, "category": "Economy", "daily_rate": 40.0, "seats": 5, "status": "Available"}],
            {"page": 1, "limit": 12, "total": 1, "pages": 1},
        )

        result = runner.invoke(cli, ["vehicle", "list", "--category", "economy"])

        assert result.exit_code == 0
        assert "TOY100" in result.output
        assert "$40.00" in result.output
        assert "Page 1 of 1 (1 total)" in result.output
        assert mock_client.list_vehicles.call_args.kwargs["category"] == "Economy"

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_list_empty(self, mock_client, runner):
        mock_client.list_vehicles.return_value = ([], {})

        result = runner.invoke(cli, ["vehicle", "list"])

        assert "No vehicles found." in result.output

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_add(self, mock_client, runner):
        mock_client.create_vehicle.return_value = {"id": "vehicle-1", "license_plate": "TOY100"}

        result = runner.invoke(cli, [
            "vehicle", "add",
            "--brand", "Toyota", "--model", "Corolla", "--year", "2020",
            "--license-plate", "toy100", "--category", "Economy", "--daily-rate", "40",
            "--feature", "GPS", "--feature", "Bluetooth",
        ])

        assert result.exit_code == 0
        assert "Vehicle added successfully!" in result.output
        payload = mock_client.create_vehicle.call_args.args[0]
        assert payload["features"] == ["GPS", "Bluetooth"]
        assert payload["daily_rate"] == 40.0
        assert "location" not in payload

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_update_without_changes(self, mock_client, runner):
        result = runner.invoke(cli, ["vehicle", "update", "vehicle-1"])

        assert "No updates specified." in result.output
        mock_client.update_vehicle.assert_not_called()

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_delete_reports_guard(self, mock_client, runner):
        mock_client.get_vehicle.return_value = {"brand": "Toyota", "model": "Corolla", "year": 2020,
                                                "license_plate": "TOY100"}
        mock_client.delete_vehicle.side_effect = RentalClientError("Cannot delete vehicle with active bookings", 400)

        result = runner.invoke(cli, ["vehicle", "delete", "vehicle-1", "--confirm"])

        assert "Error: Cannot delete vehicle with active bookings" in result.output

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_maintenance_off(self, mock_client, runner):
        mock_client.set_vehicle_status.return_value = {"license_plate": "TOY100", "status": "Available"}

        result = runner.invoke(cli, ["vehicle", "maintenance", "vehicle-1", "--off"])

        mock_client.set_vehicle_status.assert_called_once_with("vehicle-1", "Available")
        assert "Vehicle TOY100 is now Available." in result.output

    @patch("carrental.cli_module.commands.vehicle_commands.RentalClient")
    def test_stats(self, mock_client, runner):
        mock_client.category_stats.return_value = [
            {"category": "SUV", "count": 2, "avg_price": 85.0, "min_price": 80.0, "max_price": 90.0},
        ]

        result = runner.invoke(cli, ["vehicle", "stats"])

        assert "SUV" in result.output
        assert "$85.00" in result.output


class TestBookingCommands:
    """Test class for booking commands."""

    @patch("carrental.cli_module.commands.booking_commands.RentalClient")
    def test_create(self, mock_client, runner, booking_data):
        mock_client.create_booking.return_value = booking_data

        result = runner.invoke(cli, [
            "booking", "create", "vehicle-1",
            "--name", "Alice", "--email", "alice@example.com", "--phone", "1234567890",
            "--start-date", "2030-01-01", "--end-date", "2030-01-04",
        ])

        assert result.exit_code == 0
        assert "Booking confirmed!" in result.output
        assert "Booking Code: CRLZ4K1Q2M9F3A" in result.output
        assert "Vehicle: Toyota Corolla (TOY100)" in result.output
        assert "Total: $157.00" in result.output
        assert "Customer Notes: Child seat" in result.output

    @patch("carrental.cli_module.commands.booking_commands.RentalClient")
    def test_create_conflict(self, mock_client, runner):
        mock_client.create_booking.side_effect = RentalClientError("Car is not available for the selected dates", 400)

        result = runner.invoke(cli, [
            "booking", "create", "vehicle-1",
            "--name", "Alice", "--email", "alice@example.com", "--phone", "1234567890",
            "--start-date", "2030-01-01", "--end-date", "2030-01-04",
        ])

        assert "Error: Car is not available for the selected dates" in result.output

    @patch("carrental.cli_module.commands.booking_commands.RentalClient")
    def test_list(self, mock_client, runner, booking_data):
        mock_client.list_bookings.return_value = ([booking_data], {"page": 1, "limit": 10, "total": 1, "pages": 1})

        result = runner.invoke(cli, ["booking", "list", "--status", "confirmed"])

        assert "CRLZ4K1Q2M9F3A" in result.output
        assert "2030-01-01" in result.output
        assert mock_client.list_bookings.call_args.kwargs["status"] == "Confirmed"

    @patch("carrental.cli_module.commands.booking_commands.RentalClient")
    def test_cancel_requires_confirmation(self, mock_client, runner):
        result = runner.invoke(cli, ["booking", "cancel", "booking-1"], input="n\n")

        assert "Booking not cancelled." in result.output
        mock_client.cancel_booking.assert_not_called()

    @patch("carrental.cli_module.commands.booking_commands.RentalClient")
    def test_return(self, mock_client, runner, booking_data):
        returned = dict(booking_data, status="Completed")
        returned["rental"] = dict(booking_data["rental"], actual_return_date="2030-01-04T09:30:00")
        mock_client.return_booking.return_value = returned

        result = runner.invoke(cli, ["booking", "return", "booking-1", "--damage-notes", "Scratch"])

        mock_client.return_booking.assert_called_once_with("booking-1", damage_notes="Scratch", admin_notes=None)
        assert "Vehicle returned at 2030-01-04 09:30." in result.output

    @patch("carrental.cli_module.commands.booking_commands.RentalClient")
    def test_status_rejects_unknown_value(self, mock_client, runner):
        result = runner.invoke(cli, ["booking", "status", "booking-1", "Lost"])

        assert result.exit_code != 0
        mock_client.set_booking_status.assert_not_called()


class TestReportCommands:
    """Test class for report commands."""

    @patch("carrental.cli_module.commands.report_commands.RentalClient")
    def test_dashboard(self, mock_client, runner):
        mock_client.dashboard.return_value = {
            "overview": {"total_bookings": 4, "active_bookings": 1, "completed_bookings": 2,
                         "cancelled_bookings": 1, "total_revenue": 314.0},
            "monthly_stats": [{"year": 2030, "month": 1, "bookings": 4, "revenue": 628.0}],
        }

        result = runner.invoke(cli, ["report", "dashboard"])

        assert result.exit_code == 0
        assert "Total bookings: 4" in result.output
        assert "Revenue: $314.00" in result.output
        assert "Jan 2030" in result.output
