"""Configuration for the car rental application."""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Set up logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))

# Storage
DB_FILE = os.getenv("CARRENTAL_DB_FILE", os.path.join("data", "db.json"))

# Base URL the CLI client talks to
BASE_URL = os.getenv("CARRENTAL_API_URL", "http://localhost:5000/api")

# API server
PORT = int(os.getenv("PORT", "5000"))
CLIENT_URL = os.getenv("CLIENT_URL", "*")

# Pricing
TAX_RATE = 0.10
PROCESSING_FEE = 25.0

# Listing defaults
DEFAULT_VEHICLE_PAGE_SIZE = 12
DEFAULT_BOOKING_PAGE_SIZE = 10
MONTHLY_STATS_LIMIT = 12

DEFAULT_LOCATION = "Main Branch"
BOOKING_CODE_PREFIX = "CR"
BOOKING_CODE_ATTEMPTS = 5
