"""Run the car rental API: python -m carrental.api"""

import click

from carrental import config
from carrental.api import create_app


@click.command()
@click.option('--port', default=config.PORT, help='Port to run the server on')
@click.option('--host', default='0.0.0.0', help='Interface to bind')
@click.option('--db', 'db_file', default=config.DB_FILE, help='JSON database file')
def main(port, host, db_file):
    """Serve the car rental API."""
    app = create_app({"DB_FILE": db_file})
    click.echo(f"Car Rental API running on port {port}")
    click.echo(f"Health check: http://localhost:{port}/api/health")
    app.run(host=host, port=port, threaded=True)


if __name__ == '__main__':
    main()
