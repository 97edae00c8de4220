"""
Conflict detection between a requested interval and existing bookings.

``overlaps`` is the single overlap rule of the application. The availability
calculator uses it as well, so a slot shown as free can always be booked.
"""

from datetime import date
from typing import Iterable, List

from .models import Appointment, TimeInterval


def overlaps(first: TimeInterval, second: TimeInterval) -> bool:
    """
    Check if two half-open intervals intersect.

    Touching intervals such as 10:00-10:30 and 10:30-11:00 do not overlap.
    """
    return first.start < second.end and second.start < first.end


def has_conflict(candidate: TimeInterval, existing: Iterable[TimeInterval]) -> bool:
    """Return True if ``candidate`` overlaps any interval in ``existing``."""
    return any(overlaps(candidate, interval) for interval in existing)


def find_conflicts(
    candidate: TimeInterval,
    appointments: Iterable[Appointment]
) -> List[Appointment]:
    """Return the appointments whose interval overlaps ``candidate``."""
    return [
        appointment for appointment in appointments
        if overlaps(candidate, appointment.interval)
    ]


def blocking_intervals(
    appointments: Iterable[Appointment],
    provider_id: str,
    day: date
) -> List[TimeInterval]:
    """
    Collect the intervals that block new bookings for a provider on a day.

    Cancelled and completed appointments never block.
    """
    return [
        appointment.interval
        for appointment in appointments
        if appointment.provider_id == provider_id
        and appointment.appointment_date == day
        and appointment.is_blocking
    ]
