#!/usr/bin/env python3
"""
Management script for the car rental API server.
"""

import json
import os
import signal
import subprocess
import sys
import time

import click

from carrental import config
from carrental.storage.json_store import empty_database

PID_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'server.pid')
LOG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'server.log')


def _db_path():
    return os.path.abspath(config.DB_FILE)


@click.group()
def cli():
    """Car rental server management CLI."""
    pass


@cli.command()
@click.option('--port', default=config.PORT, help='Port to run the server on')
def start(port):
    """Start the API server."""
    # Check if server is already running
    if os.path.exists(PID_FILE):
        with open(PID_FILE, 'r') as f:
            pid = f.read().strip()

        click.echo(f"Server already running with PID {pid}")
        click.echo("If the server is not running, delete the 'server.pid' file and try again")
        return

    db_path = _db_path()

    if not os.path.exists(db_path):
        click.echo(f"Database file not found: {db_path}")
        click.echo("Creating empty database file...")
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        with open(db_path, 'w') as f:
            json.dump(empty_database(), f, indent=2)

    click.echo(f"Starting API server on port {port}...")
    click.echo(f"Using database: {db_path}")

    try:
        # Server output is appended to LOG_FILE
        with open(LOG_FILE, 'a') as log:
            process = subprocess.Popen([
                sys.executable, '-m', 'carrental.api',
                '--port', str(port),
                '--db', db_path,
            ],
                stdout=log,
                stderr=subprocess.STDOUT,
                start_new_session=True)

        with open(PID_FILE, 'w') as f:
            f.write(str(process.pid))

        click.echo(f"Server running with PID {process.pid}")
        click.echo(f"Server accessible at: http://localhost:{port}/api")
        click.echo(f"Server log: {LOG_FILE}")

        # Give the server a moment to start
        time.sleep(1)

        if process.poll() is not None:
            click.echo("Server failed to start!", err=True)
            with open(LOG_FILE, 'r') as log:
                click.echo(log.read())
            os.remove(PID_FILE)
            return

        click.echo("Server started successfully!")

    except OSError as e:
        click.echo(f"Error starting server: {str(e)}", err=True)
        if os.path.exists(PID_FILE):
            os.remove(PID_FILE)


@cli.command()
def stop():
    """Stop the API server."""
    if not os.path.exists(PID_FILE):
        click.echo("No running server found")
        return

    with open(PID_FILE, 'r') as f:
        pid = f.read().strip()

    try:
        pid = int(pid)
        click.echo(f"Stopping server with PID {pid}...")

        try:
            # Try to terminate gracefully first
            os.kill(pid, signal.SIGTERM)
            time.sleep(1)

            try:
                os.kill(pid, 0)
                click.echo("Server did not terminate gracefully, force killing...")
                os.kill(pid, signal.SIGKILL)
            except OSError:
                # Process is gone
                pass

            click.echo("Server stopped")
        except OSError as e:
            click.echo(f"Error stopping server: {str(e)}")

        os.remove(PID_FILE)

    except ValueError:
        click.echo(f"Invalid PID in the file: {pid}")
        os.remove(PID_FILE)


@cli.command()
def status():
    """Check if the API server is running."""
    if not os.path.exists(PID_FILE):
        click.echo("Server is not running")
        return

    with open(PID_FILE, 'r') as f:
        pid = f.read().strip()

    try:
        pid = int(pid)
        try:
            os.kill(pid, 0)
            click.echo(f"Server is running with PID {pid}")
        except OSError:
            click.echo("Server PID file exists but process is not running")
            click.echo("You may want to remove the 'server.pid' file")
    except ValueError:
        click.echo(f"Invalid PID in the file: {pid}")


@cli.command()
def reset():
    """Reset the database to empty state."""
    db_path = _db_path()

    if not os.path.exists(db_path):
        click.echo(f"Database file not found: {db_path}")
        return

    try:
        # Create a backup of the current db
        backup_path = f"{db_path}.bak"
        with open(db_path, 'r') as src:
            with open(backup_path, 'w') as dst:
                dst.write(src.read())

        with open(db_path, 'w') as f:
            json.dump(empty_database(), f, indent=2)

        click.echo(f"Database reset. Backup created at {backup_path}")
    except OSError as e:
        click.echo(f"Error resetting database: {str(e)}")


if __name__ == '__main__':
    cli()
