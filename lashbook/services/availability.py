"""
Application service for free-slot lookups.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Union

from ..domain.availability import AvailabilityCalculator, DayAvailability
from ..domain.conflicts import blocking_intervals
from ..domain.exceptions import NotFoundError
from ..domain.models import BLOCKING_STATUSES
from ..domain.timeutils import calendar_day
from .repositories import AppointmentRepository, ProfileRepository


class AvailabilityService:
    """
    Loads a provider's profile and bookings for a day and delegates the slot
    calculation to the domain-level ``AvailabilityCalculator``.
    """

    def __init__(
        self,
        appointments: AppointmentRepository,
        profiles: ProfileRepository,
        calculator: Optional[AvailabilityCalculator] = None,
        *,
        timezone: str = "UTC",
    ) -> None:
        self._appointments = appointments
        self._profiles = profiles
        self._calculator = calculator or AvailabilityCalculator()
        self._timezone = timezone

    def get_availability(self, provider_id: str, day: Union[str, date]) -> DayAvailability:
        """
        Compute the free slots of a provider on a calendar day.

        Raises:
            NotFoundError: If the provider has no profile
            InvalidFormatError: If ``day`` is not a valid date
        """
        profile = self._profiles.get_profile(provider_id)
        if profile is None:
            raise NotFoundError(f"Provider {provider_id} not found")

        target = calendar_day(day, self._timezone)
        existing = self._appointments.find(
            provider_id=provider_id,
            start_date=target,
            end_date=target,
            statuses=BLOCKING_STATUSES,
        )

        return self._calculator.for_day(
            profile,
            target,
            blocking_intervals(existing, provider_id, target),
        )
