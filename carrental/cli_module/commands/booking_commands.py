"""Booking commands for the car rental CLI."""

import click
from tabulate import tabulate

from carrental.cli_module.utils import echo_booking, echo_pagination, format_date, format_money, vehicle_label
from carrental.client.rental_client import RentalClient, RentalClientError
from carrental.models.booking import BookingStatus


@click.group(name="booking")
def booking_group():
    """Reservation commands."""
    pass


def _booking_rows(bookings):
    return [
        [
            booking.get('id'),
            booking.get('booking_code'),
            vehicle_label(booking.get('vehicle')),
            booking.get('customer', {}).get('email'),
            format_date(booking.get('rental', {}).get('start_date')),
            format_date(booking.get('rental', {}).get('end_date')),
            format_money(booking.get('pricing', {}).get('total_amount')),
            booking.get('status'),
        ]
        for booking in bookings
    ]


BOOKING_HEADERS = ["ID", "Code", "Vehicle", "Customer", "From", "To", "Total", "Status"]


@booking_group.command(name="create")
@click.argument("vehicle_id")
@click.option("--name", prompt=True, help="Customer name")
@click.option("--email", prompt=True, help="Customer email")
@click.option("--phone", prompt=True, help="Customer phone number")
@click.option("--start-date", prompt=True, help="Rental start (YYYY-MM-DD or ISO datetime)")
@click.option("--end-date", prompt=True, help="Rental end (YYYY-MM-DD or ISO datetime)")
@click.option("--license-number", help="Driving license number")
@click.option("--pickup-location", help="Pickup branch")
@click.option("--return-location", help="Return branch")
@click.option("--notes", help="Notes for the rental desk")
def create_booking(vehicle_id, name, email, phone, start_date, end_date, license_number,
                   pickup_location, return_location, notes):
    """Book VEHICLE_ID for a date range."""
    try:
        booking = RentalClient.create_booking(
            vehicle_id, name, email, phone, start_date, end_date,
            notes=notes,
            license_number=license_number,
            pickup_location=pickup_location,
            return_location=return_location,
        )

        click.echo("\nBooking confirmed!\n")
        echo_booking(booking)

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="list")
@click.option("--status", type=click.Choice(BookingStatus.labels(), case_sensitive=False), help="Filter by status")
@click.option("--email", help="Filter by customer email (partial match)")
@click.option("--vehicle-id", help="Filter by vehicle")
@click.option("--start-date", help="Rentals starting on or after this date")
@click.option("--end-date", help="Rentals starting on or before this date")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--limit", type=int, default=10, help="Bookings per page")
def list_bookings(status, email, vehicle_id, start_date, end_date, page, limit):
    """List bookings, newest first."""
    try:
        bookings, pagination = RentalClient.list_bookings(
            status=status, email=email, vehicle_id=vehicle_id,
            start_date=start_date, end_date=end_date, page=page, limit=limit,
        )

        if not bookings:
            click.echo("No bookings found.")
            return

        click.echo(tabulate(_booking_rows(bookings), headers=BOOKING_HEADERS, tablefmt="grid"))
        echo_pagination(pagination)

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="show")
@click.argument("booking_id")
def show_booking(booking_id):
    """Show one booking."""
    try:
        echo_booking(RentalClient.get_booking(booking_id))
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="mine")
@click.argument("email")
def customer_bookings(email):
    """List every booking made with EMAIL."""
    try:
        bookings = RentalClient.customer_bookings(email)

        if not bookings:
            click.echo(f"No bookings found for {email}.")
            return

        click.echo(tabulate(_booking_rows(bookings), headers=BOOKING_HEADERS, tablefmt="grid"))

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="activate")
@click.argument("booking_id")
def activate_booking(booking_id):
    """Hand over the vehicle for a confirmed booking."""
    try:
        booking = RentalClient.activate_booking(booking_id)
        click.echo(f"Booking {booking['booking_code']} is now {booking['status']}.")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="cancel")
@click.argument("booking_id")
@click.option("--confirm", is_flag=True, help="Skip confirmation prompt")
def cancel_booking(booking_id, confirm):
    """Cancel a confirmed booking."""
    try:
        if not confirm and not click.confirm("Are you sure you want to cancel this booking?"):
            click.echo("Booking not cancelled.")
            return

        booking = RentalClient.cancel_booking(booking_id)
        click.echo(f"Booking {booking['booking_code']} cancelled.")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="return")
@click.argument("booking_id")
@click.option("--damage-notes", help="Damage found at return")
@click.option("--admin-notes", help="Notes from the rental desk")
def return_booking(booking_id, damage_notes, admin_notes):
    """Record the return of the vehicle."""
    try:
        booking = RentalClient.return_booking(booking_id, damage_notes=damage_notes, admin_notes=admin_notes)
        returned_at = format_date(booking.get('rental', {}).get('actual_return_date'), True)
        click.echo(f"Booking {booking['booking_code']} completed. Vehicle returned at {returned_at}.")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="status")
@click.argument("booking_id")
@click.argument("status", type=click.Choice(BookingStatus.labels(), case_sensitive=False))
def set_booking_status(booking_id, status):
    """Move BOOKING_ID to STATUS."""
    try:
        booking = RentalClient.set_booking_status(booking_id, status)
        click.echo(f"Booking {booking['booking_code']} is now {booking['status']}.")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)
