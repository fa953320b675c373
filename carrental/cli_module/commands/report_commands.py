"""Reporting commands for the car rental CLI."""

import calendar

import click
from tabulate import tabulate

from carrental.cli_module.utils import format_money
from carrental.client.rental_client import RentalClient, RentalClientError


@click.group(name="report")
def report_group():
    """Booking reports."""
    pass


@report_group.command(name="dashboard")
def dashboard():
    """Booking counts, revenue and the monthly trend."""
    try:
        stats = RentalClient.dashboard()
        overview = stats.get("overview", {})

        click.echo("Overview:")
        click.echo(f"  Total bookings: {overview.get('total_bookings', 0)}")
        click.echo(f"  Active bookings: {overview.get('active_bookings', 0)}")
        click.echo(f"  Completed bookings: {overview.get('completed_bookings', 0)}")
        click.echo(f"  Cancelled bookings: {overview.get('cancelled_bookings', 0)}")
        click.echo(f"  Revenue: {format_money(overview.get('total_revenue', 0))}")

        monthly = stats.get("monthly_stats", [])
        if monthly:
            table_data = [
                [f"{calendar.month_abbr[row['month']]} {row['year']}", row['bookings'], format_money(row['revenue'])]
                for row in monthly
            ]
            click.echo("\nMonthly trend:")
            click.echo(tabulate(table_data, headers=["Month", "Bookings", "Booked Amount"], tablefmt="grid"))

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)
