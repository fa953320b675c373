"""Main CLI entry point for the car rental application."""

import click

from carrental.cli_module.commands.booking_commands import booking_group
from carrental.cli_module.commands.report_commands import report_group
from carrental.cli_module.commands.vehicle_commands import vehicle_group

# Set context settings to properly display help for all commands
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
    "show_default": True
}


@click.group(context_settings=CONTEXT_SETTINGS)
def cli():
    """Car rental CLI for the fleet catalog and reservations."""
    pass


# Register all command groups
cli.add_command(vehicle_group)
cli.add_command(booking_group)
cli.add_command(report_group)


def main():
    """Entry point for the application."""
    cli()


if __name__ == '__main__':
    main()
