"""Utility functions for the CLI interface."""

from datetime import datetime
from typing import Any, Dict, Optional

import click


def format_date(value: Optional[str], with_time: bool = False) -> str:
    """Render an ISO timestamp for display."""
    if not value:
        return "-"
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (ValueError, TypeError):
        return value
    return dt.strftime('%Y-%m-%d %H:%M' if with_time else '%Y-%m-%d')


def format_money(amount: Any) -> str:
    try:
        return f"${float(amount):,.2f}"
    except (TypeError, ValueError):
        return "-"


def vehicle_label(vehicle: Optional[Dict[str, Any]]) -> str:
    if not vehicle:
        return "Unknown vehicle"
    return f"{vehicle.get('brand', '')} {vehicle.get('model', '')} ({vehicle.get('license_plate', '')})".strip()


def echo_booking(booking: Dict[str, Any]) -> None:
    """Print the details of one booking."""
    rental = booking.get("rental", {})
    pricing = booking.get("pricing", {})
    customer = booking.get("customer", {})
    notes = booking.get("notes", {})

    click.echo(f"Booking Code: {booking.get('booking_code')}")
    click.echo(f"Booking ID: {booking.get('id')}")
    click.echo(f"Status: {booking.get('status')}")
    click.echo(f"Vehicle: {vehicle_label(booking.get('vehicle'))}")
    click.echo(f"Customer: {customer.get('name')} <{customer.get('email')}>, {customer.get('phone')}")
    click.echo(f"Rental: {format_date(rental.get('start_date'), True)} to {format_date(rental.get('end_date'), True)}")
    if rental.get("actual_return_date"):
        click.echo(f"Returned: {format_date(rental.get('actual_return_date'), True)}")
    click.echo(f"Pickup: {rental.get('pickup_location')}  Return: {rental.get('return_location')}")

    click.echo("\nPricing:")
    click.echo(f"  Daily Rate: {format_money(pricing.get('daily_rate'))}")
    click.echo(f"  Days: {pricing.get('total_days')}")
    click.echo(f"  Base Amount: {format_money(pricing.get('base_amount'))}")
    click.echo(f"  Taxes: {format_money(pricing.get('taxes'))}")
    click.echo(f"  Fees: {format_money(pricing.get('fees'))}")
    click.echo(f"  Total: {format_money(pricing.get('total_amount'))}")

    for key, title in (("customer_notes", "Customer Notes"), ("admin_notes", "Admin Notes"),
                       ("damage_notes", "Damage Notes")):
        if notes.get(key):
            click.echo(f"{title}: {notes[key]}")


def echo_pagination(pagination: Dict[str, int]) -> None:
    if pagination:
        click.echo(f"\nPage {pagination.get('page')} of {pagination.get('pages')} "
                   f"({pagination.get('total')} total)")
