"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService
from .booking import AppointmentPage, BookingService
from .notifications import FanOutNotifier, NotificationDispatcher, NotifierProtocol
from .repositories import AppointmentRepository, ProfileRepository

__all__ = [
    "AppointmentPage",
    "AppointmentRepository",
    "AvailabilityService",
    "BookingService",
    "FanOutNotifier",
    "NotificationDispatcher",
    "NotifierProtocol",
    "ProfileRepository",
]
