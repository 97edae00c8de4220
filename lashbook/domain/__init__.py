"""
Domain layer - Pure business logic without I/O.
"""

from .availability import AvailabilityCalculator, DayAvailability, DayStatus, compute_free_slots
from .conflicts import blocking_intervals, has_conflict, overlaps
from .lifecycle import AppointmentLifecycle, LifecycleEvent, Notification, NotificationEvent
from .models import (
    Actor,
    Appointment,
    AppointmentStatus,
    Break,
    ProviderProfile,
    Role,
    Service,
    TimeInterval,
    WorkingWindow,
)

__all__ = [
    "Actor",
    "Appointment",
    "AppointmentLifecycle",
    "AppointmentStatus",
    "AvailabilityCalculator",
    "Break",
    "DayAvailability",
    "DayStatus",
    "LifecycleEvent",
    "Notification",
    "NotificationEvent",
    "ProviderProfile",
    "Role",
    "Service",
    "TimeInterval",
    "WorkingWindow",
    "blocking_intervals",
    "compute_free_slots",
    "has_conflict",
    "overlaps",
]
