"""Errors raised by the car rental services."""


class RentalError(Exception):
    """Base exception for reservation errors.

    Every subclass carries the HTTP status the request layer answers with.
    """
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RentalError):
    """Referenced vehicle or booking does not exist."""
    status_code = 404


class VehicleUnavailableError(RentalError):
    """Vehicle cannot take new bookings in its current status."""
    pass


class DateConflictError(RentalError):
    """Requested dates overlap an open booking on the same vehicle."""
    pass


class InvalidTransitionError(RentalError):
    """Booking or vehicle status change not permitted in the current state."""
    pass


class ValidationError(RentalError):
    """Malformed input."""
    pass


class DuplicateKeyError(RentalError):
    """A unique key (license plate, booking code) is already taken."""
    pass


class VehicleInUseError(RentalError):
    """Vehicle still has confirmed or active bookings."""
    pass
