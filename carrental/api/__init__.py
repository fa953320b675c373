"""HTTP request layer for the car rental application."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, NotFound

from carrental import config
from carrental.api.booking_routes import bookings_bp
from carrental.api.vehicle_routes import vehicles_bp
from carrental.errors import RentalError
from carrental.services import build_services
from carrental.storage.json_store import JsonStore

logger = logging.getLogger(__name__)


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Build the API application.

    Args:
        overrides: Config values replacing the defaults. DB_FILE=None keeps
            the data in memory.

    Returns:
        Flask: The configured application
    """
    app = Flask(__name__)
    app.config.update(DB_FILE=config.DB_FILE, CLIENT_URL=config.CLIENT_URL)
    if overrides:
        app.config.update(overrides)

    CORS(app, origins=app.config["CLIENT_URL"])

    app.extensions["carrental"] = build_services(JsonStore(app.config["DB_FILE"]))

    app.register_blueprint(vehicles_bp, url_prefix="/api")
    app.register_blueprint(bookings_bp, url_prefix="/api")

    @app.route("/api/health")
    def health():
        return jsonify({
            "success": True,
            "message": "Car Rental API is running!",
            "timestamp": datetime.now().isoformat(),
        })

    @app.errorhandler(RentalError)
    def handle_rental_error(error):
        return jsonify({"success": False, "message": error.message}), error.status_code

    @app.errorhandler(NotFound)
    def handle_not_found(error):
        return jsonify({"success": False, "message": "Route not found"}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"success": False, "message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error while processing request")
        return jsonify({"success": False, "message": "Something went wrong!"}), 500

    return app
