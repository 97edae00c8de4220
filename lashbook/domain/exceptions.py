"""
Domain-specific exception hierarchy for the booking application.
"""


class BookingError(Exception):
    """Base class for all application-level errors."""


class InvalidFormatError(BookingError, ValueError):
    """Raised when a time string, date or free-text field is malformed."""


class NotFoundError(BookingError):
    """Raised when a referenced provider, profile or appointment does not exist."""


class ServiceUnavailableError(BookingError):
    """Raised when a booking references a missing or inactive service."""


class SlotUnavailableError(BookingError):
    """Raised when the requested interval cannot be booked."""


class ForbiddenError(BookingError):
    """Raised when the actor may not perform the requested action."""


class InvalidTransitionError(BookingError):
    """Raised when a status change is not allowed from the current state."""


class NotificationError(BookingError):
    """Raised by notifier adapters when a message cannot be delivered."""
