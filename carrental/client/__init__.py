"""HTTP client for the car rental API."""
from carrental.client.rental_client import RentalClient, RentalClientError

__all__ = ['RentalClient', 'RentalClientError']
