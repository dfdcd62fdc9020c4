"""Typed errors raised by the reservation core.

Every precondition violation surfaces as one of these; the HTTP layer maps
``kind`` and ``status_code`` straight onto the JSON error response.
"""


class BookingError(Exception):
    kind = "booking_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(BookingError):
    kind = "not_found"
    status_code = 404


class InvalidSlot(BookingError):
    kind = "invalid_slot"
    status_code = 400


class CapacityExceeded(BookingError):
    kind = "capacity_exceeded"
    status_code = 409

    def __init__(self, message: str, requested: int = 0, available: int = 0):
        super().__init__(message)
        self.requested = requested
        self.available = available


class InvalidInput(BookingError):
    kind = "invalid_input"
    status_code = 422


class InvalidTransition(BookingError):
    kind = "invalid_transition"
    status_code = 409


class DuplicateConfirmationCode(Exception):
    """Raised by a store when a confirmation code is already taken."""
