"""Vehicle management commands for the car rental CLI."""

import click
from tabulate import tabulate

from carrental.cli_module.utils import echo_pagination, format_date, format_money
from carrental.client.rental_client import RentalClient, RentalClientError
from carrental.models.vehicle import FuelType, Transmission, VehicleCategory, VehicleStatus


@click.group(name="vehicle")
def vehicle_group():
    """Vehicle catalog commands."""
    pass


def _vehicle_rows(vehicles):
    return [
        [
            vehicle.get('id'),
            vehicle.get('license_plate'),
            vehicle.get('brand'),
            vehicle.get('model'),
            vehicle.get('year'),
            vehicle.get('category'),
            format_money(vehicle.get('daily_rate')),
            vehicle.get('seats'),
            vehicle.get('status'),
        ]
        for vehicle in vehicles
    ]


VEHICLE_HEADERS = ["ID", "Plate", "Brand", "Model", "Year", "Category", "Daily Rate", "Seats", "Status"]


@vehicle_group.command(name="list")
@click.option("--category", type=click.Choice(VehicleCategory.labels(), case_sensitive=False), help="Filter by category")
@click.option("--min-price", type=float, help="Minimum daily rate")
@click.option("--max-price", type=float, help="Maximum daily rate")
@click.option("--status", type=click.Choice(VehicleStatus.labels(), case_sensitive=False), help="Filter by status")
@click.option("--seats", type=int, help="Exact seat count")
@click.option("--transmission", type=click.Choice(Transmission.labels(), case_sensitive=False), help="Filter by transmission")
@click.option("--fuel-type", type=click.Choice(FuelType.labels(), case_sensitive=False), help="Filter by fuel type")
@click.option("--start-date", help="Only vehicles free from this date (YYYY-MM-DD)")
@click.option("--end-date", help="Only vehicles free until this date (YYYY-MM-DD)")
@click.option("--page", type=int, default=1, help="Page number")
@click.option("--limit", type=int, default=12, help="Vehicles per page")
def list_vehicles(category, min_price, max_price, status, seats, transmission, fuel_type,
                  start_date, end_date, page, limit):
    """Search the vehicle catalog."""
    try:
        vehicles, pagination = RentalClient.list_vehicles(
            category=category, min_price=min_price, max_price=max_price, status=status,
            seats=seats, transmission=transmission, fuel_type=fuel_type,
            start_date=start_date, end_date=end_date, page=page, limit=limit,
        )

        if not vehicles:
            click.echo("No vehicles found.")
            return

        click.echo(tabulate(_vehicle_rows(vehicles), headers=VEHICLE_HEADERS, tablefmt="grid"))
        echo_pagination(pagination)

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="show")
@click.argument("vehicle_id")
def show_vehicle(vehicle_id):
    """Show one vehicle."""
    try:
        vehicle = RentalClient.get_vehicle(vehicle_id)

        click.echo(f"ID: {vehicle['id']}")
        click.echo(f"Brand: {vehicle['brand']}")
        click.echo(f"Model: {vehicle['model']}")
        click.echo(f"Year: {vehicle['year']}")
        click.echo(f"License Plate: {vehicle['license_plate']}")
        click.echo(f"Category: {vehicle['category']}")
        click.echo(f"Daily Rate: {format_money(vehicle['daily_rate'])}")
        click.echo(f"Seats: {vehicle.get('seats')}")
        click.echo(f"Fuel: {vehicle.get('fuel_type')}  Transmission: {vehicle.get('transmission')}")
        if vehicle.get('features'):
            click.echo(f"Features: {', '.join(vehicle['features'])}")
        click.echo(f"Location: {vehicle.get('location')}")
        click.echo(f"Mileage: {vehicle.get('mileage')}")
        click.echo(f"Status: {vehicle['status']}")
        click.echo(f"Added on: {format_date(vehicle.get('created_at'), True)}")

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="add")
@click.option("--brand", prompt=True, help="Vehicle manufacturer")
@click.option("--model", prompt=True, help="Vehicle model")
@click.option("--year", prompt=True, type=int, help="Model year")
@click.option("--license-plate", prompt=True, help="License plate")
@click.option("--category", prompt=True, type=click.Choice(VehicleCategory.labels(), case_sensitive=False),
              help="Rental category")
@click.option("--daily-rate", prompt=True, type=float, help="Price per day")
@click.option("--seats", type=int, default=5, help="Seating capacity")
@click.option("--fuel-type", type=click.Choice(FuelType.labels(), case_sensitive=False), default="Petrol",
              help="Fuel type")
@click.option("--transmission", type=click.Choice(Transmission.labels(), case_sensitive=False), default="Manual",
              help="Transmission")
@click.option("--feature", "features", multiple=True, help="Feature, may be repeated")
@click.option("--location", help="Branch where the vehicle is kept")
def add_vehicle(brand, model, year, license_plate, category, daily_rate, seats, fuel_type,
                transmission, features, location):
    """Add a vehicle to the catalog."""
    payload = {
        "brand": brand,
        "model": model,
        "year": year,
        "license_plate": license_plate,
        "category": category,
        "daily_rate": daily_rate,
        "seats": seats,
        "fuel_type": fuel_type,
        "transmission": transmission,
        "features": list(features),
    }
    if location:
        payload["location"] = location

    try:
        vehicle = RentalClient.create_vehicle(payload)
        click.echo("Vehicle added successfully!")
        click.echo(f"Vehicle ID: {vehicle['id']}")
        click.echo(f"License Plate: {vehicle['license_plate']}")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="update")
@click.argument("vehicle_id")
@click.option("--brand", help="Update manufacturer")
@click.option("--model", help="Update model")
@click.option("--year", type=int, help="Update model year")
@click.option("--license-plate", help="Update license plate")
@click.option("--category", type=click.Choice(VehicleCategory.labels(), case_sensitive=False),
              help="Update category")
@click.option("--daily-rate", type=float, help="Update price per day")
@click.option("--seats", type=int, help="Update seating capacity")
@click.option("--location", help="Update branch")
@click.option("--mileage", type=int, help="Update odometer reading")
def update_vehicle(vehicle_id, brand, model, year, license_plate, category, daily_rate, seats,
                   location, mileage):
    """Update vehicle information."""
    candidates = {
        "brand": brand,
        "model": model,
        "year": year,
        "license_plate": license_plate,
        "category": category,
        "daily_rate": daily_rate,
        "seats": seats,
        "location": location,
        "mileage": mileage,
    }
    update_data = {key: value for key, value in candidates.items() if value is not None}

    if not update_data:
        click.echo("No updates specified.", err=True)
        return

    try:
        vehicle = RentalClient.update_vehicle(vehicle_id, update_data)
        click.echo("Vehicle updated successfully!")
        for key in update_data:
            click.echo(f"{key.replace('_', ' ').title()}: {vehicle.get(key)}")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="delete")
@click.argument("vehicle_id")
@click.option("--confirm", is_flag=True, help="Skip confirmation prompt")
def delete_vehicle(vehicle_id, confirm):
    """Remove a vehicle from the catalog."""
    try:
        vehicle = RentalClient.get_vehicle(vehicle_id)

        click.echo(f"Vehicle: {vehicle['brand']} {vehicle['model']} ({vehicle['year']})")
        click.echo(f"License Plate: {vehicle['license_plate']}")

        if not confirm and not click.confirm("Are you sure you want to delete this vehicle?"):
            click.echo("Vehicle deletion cancelled.")
            return

        RentalClient.delete_vehicle(vehicle_id)
        click.echo("Vehicle deleted successfully.")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="available")
@click.argument("start_date")
@click.argument("end_date")
@click.option("--category", type=click.Choice(VehicleCategory.labels(), case_sensitive=False), help="Filter by category")
@click.option("--max-price", type=float, help="Maximum daily rate")
def available_vehicles(start_date, end_date, category, max_price):
    """
    List vehicles free for the whole period.

    START_DATE and END_DATE are ISO dates, e.g. 2024-07-01.
    """
    try:
        vehicles = RentalClient.available_vehicles(start_date, end_date, category=category, max_price=max_price)

        if not vehicles:
            click.echo("No vehicles available for these dates.")
            return

        click.echo(f"{len(vehicles)} vehicle(s) available from {start_date} to {end_date}:")
        click.echo(tabulate(_vehicle_rows(vehicles), headers=VEHICLE_HEADERS, tablefmt="grid"))

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="maintenance")
@click.argument("vehicle_id")
@click.option("--on/--off", "in_maintenance", default=True, help="Send to or bring back from maintenance")
def maintenance(vehicle_id, in_maintenance):
    """Take a vehicle out of service or put it back."""
    status = VehicleStatus.MAINTENANCE.value if in_maintenance else VehicleStatus.AVAILABLE.value
    try:
        vehicle = RentalClient.set_vehicle_status(vehicle_id, status)
        click.echo(f"Vehicle {vehicle['license_plate']} is now {vehicle['status']}.")
    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)


@vehicle_group.command(name="stats")
def category_stats():
    """Fleet size and daily rates per category."""
    try:
        stats = RentalClient.category_stats()

        if not stats:
            click.echo("The catalog is empty.")
            return

        table_data = [
            [row['category'], row['count'], format_money(row['avg_price']),
             format_money(row['min_price']), format_money(row['max_price'])]
            for row in stats
        ]
        click.echo(tabulate(table_data, headers=["Category", "Vehicles", "Avg Rate", "Min Rate", "Max Rate"],
                            tablefmt="grid"))

    except RentalClientError as e:
        click.echo(f"Error: {str(e)}", err=True)
