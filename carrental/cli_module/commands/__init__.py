"""Command modules for the car rental CLI."""

from carrental.cli_module.commands.vehicle_commands import vehicle_group
from carrental.cli_module.commands.booking_commands import booking_group
from carrental.cli_module.commands.report_commands import report_group

__all__ = [
    'vehicle_group',
    'booking_group',
    'report_group',
]
