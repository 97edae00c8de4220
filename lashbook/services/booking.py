"""
Application service for booking and managing appointments.

The service coordinates persistence, the scheduling rules from the domain
layer and notification dispatch. Storage and delivery are injected through
protocols so the real backends or in-memory fakes can be plugged in.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Union

import pendulum
from pendulum import DateTime

from ..domain.conflicts import blocking_intervals, has_conflict
from ..domain.exceptions import (
    ForbiddenError,
    InvalidFormatError,
    NotFoundError,
    ServiceUnavailableError,
    SlotUnavailableError,
)
from ..domain.lifecycle import AppointmentLifecycle, LifecycleEvent
from ..domain.models import (
    BLOCKING_STATUSES,
    Actor,
    Appointment,
    AppointmentStatus,
    ProviderProfile,
    Role,
    TimeInterval,
)
from ..domain.timeutils import calendar_day, day_bounds, to_minutes, weekday_index
from .locks import KeyedLocks
from .notifications import NotificationDispatcher
from .repositories import AppointmentRepository, ProfileRepository

logger = logging.getLogger(__name__)

DateInput = Union[str, date]


@dataclass
class AppointmentPage:
    """One page of an appointment listing."""
    appointments: List[Appointment] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


class BookingService:
    """
    Creates appointments and drives their status transitions.

    Checking a slot and inserting the appointment happen under one lock per
    (provider, date), so concurrent requests cannot double-book a slot. The
    losing request fails with ``SlotUnavailableError``.
    """

    def __init__(
        self,
        appointments: AppointmentRepository,
        profiles: ProfileRepository,
        dispatcher: Optional[NotificationDispatcher] = None,
        *,
        lifecycle: Optional[AppointmentLifecycle] = None,
        timezone: str = "UTC",
        max_advance_booking_days: int = 30,
        enforce_working_hours: bool = True,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self._appointments = appointments
        self._profiles = profiles
        self._dispatcher = dispatcher or NotificationDispatcher()
        self._lifecycle = lifecycle or AppointmentLifecycle()
        self._timezone = timezone
        self._max_advance_booking_days = max_advance_booking_days
        self._enforce_working_hours = enforce_working_hours
        self._clock = clock or (lambda: pendulum.now(timezone))
        self._locks = KeyedLocks()

    def create_appointment(
        self,
        actor: Actor,
        *,
        provider_id: str,
        service_id: str,
        appointment_date: DateInput,
        start_time: str,
        notes: Optional[str] = None,
    ) -> Appointment:
        """
        Book a service for the calling client.

        Args:
            actor: The client requesting the booking
            provider_id: Provider offering the service
            service_id: Service to book
            appointment_date: Calendar date (date or ``YYYY-MM-DD``)
            start_time: Start time as ``"HH:MM"``
            notes: Optional free text for the provider

        Returns:
            The new appointment in ``pending`` status

        Raises:
            ForbiddenError: If the actor is not a client
            NotFoundError: If the provider has no profile
            ServiceUnavailableError: If the service is missing or inactive
            InvalidFormatError: If the date, time or notes are malformed
            SlotUnavailableError: If the interval cannot be booked
        """
        self._lifecycle.ensure_can_book(actor)

        profile = self._require_profile(provider_id)
        service = profile.find_service(service_id)
        if service is None or not service.is_active:
            raise ServiceUnavailableError(
                f"Service {service_id} not found or inactive for provider {provider_id}"
            )

        now = self._clock()
        day = calendar_day(appointment_date, self._timezone)
        self._check_booking_window(day, now)

        start = to_minutes(start_time)
        try:
            interval = TimeInterval.starting_at(start, service.duration)
        except ValueError as exc:
            raise SlotUnavailableError(
                f"A {service.duration} minute service starting at {start_time} "
                f"runs past the end of the day"
            ) from exc

        if self._enforce_working_hours:
            self._check_schedule(profile, day, interval)

        with self._locks.hold(provider_id, day):
            existing = self._appointments.find(
                provider_id=provider_id,
                start_date=day,
                end_date=day,
                statuses=BLOCKING_STATUSES,
            )
            if has_conflict(interval, blocking_intervals(existing, provider_id, day)):
                logger.info(
                    "Rejected booking for provider %s on %s at %s: slot taken",
                    provider_id, day.to_date_string(), interval,
                )
                raise SlotUnavailableError(
                    f"The selected time {interval} on {day.to_date_string()} is not available"
                )

            appointment, notification = self._lifecycle.create(
                actor=actor,
                provider_id=provider_id,
                service=service,
                day=day,
                interval=interval,
                notes=notes,
                now=now,
            )
            self._appointments.add(appointment)

        logger.info(
            "Created appointment %s for client %s with provider %s on %s at %s",
            appointment.id, actor.user_id, provider_id, day.to_date_string(), interval,
        )
        self._dispatcher.dispatch(notification)
        return appointment

    def upload_deposit_proof(self, appointment_id: str, actor: Actor, proof: str) -> Appointment:
        """Attach a proof of payment; moves the appointment to ``payment_pending``."""
        return self._transition(
            appointment_id, actor, LifecycleEvent.UPLOAD_DEPOSIT, deposit_proof=proof
        )

    def confirm(self, appointment_id: str, actor: Actor) -> Appointment:
        """Confirm a pending appointment (provider only)."""
        return self._transition(appointment_id, actor, LifecycleEvent.CONFIRM)

    def reject(self, appointment_id: str, actor: Actor, reason: Optional[str] = None) -> Appointment:
        """Reject an open appointment (provider only)."""
        return self._transition(appointment_id, actor, LifecycleEvent.REJECT, reason=reason)

    def cancel(self, appointment_id: str, actor: Actor, reason: Optional[str] = None) -> Appointment:
        """Cancel an open appointment (either participant)."""
        return self._transition(appointment_id, actor, LifecycleEvent.CANCEL, reason=reason)

    def complete(self, appointment_id: str, actor: Actor) -> Appointment:
        """Mark a confirmed appointment as completed (provider only)."""
        return self._transition(appointment_id, actor, LifecycleEvent.COMPLETE)

    def get_appointment(self, appointment_id: str, actor: Actor) -> Appointment:
        """Return an appointment the actor participates in."""
        appointment = self._require_appointment(appointment_id)
        self._lifecycle.role_of(appointment, actor)
        return appointment

    def list_appointments(
        self,
        actor: Actor,
        *,
        status: Optional[AppointmentStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> AppointmentPage:
        """List the appointments the actor takes part in, newest date first."""
        found = self._appointments.find(
            participant_id=actor.user_id,
            statuses=[status] if status else None,
        )
        return _paginate(found, page, limit)

    def list_provider_appointments(
        self,
        actor: Actor,
        *,
        day: Optional[DateInput] = None,
        status: Optional[AppointmentStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> AppointmentPage:
        """List the calling provider's appointments, optionally for one day."""
        if actor.role != Role.PROVIDER:
            raise ForbiddenError("Only providers can list their agenda")

        target = calendar_day(day, self._timezone) if day is not None else None
        found = self._appointments.find(
            provider_id=actor.user_id,
            start_date=target,
            end_date=target,
            statuses=[status] if status else None,
        )
        return _paginate(found, page, limit)

    def upcoming_confirmed(self, provider_id: str, limit: int = 10) -> List[Appointment]:
        """Public view of a provider's upcoming confirmed appointments, soonest first."""
        self._require_profile(provider_id)
        now = self._clock().in_timezone(self._timezone)
        today = calendar_day(now, self._timezone)
        minute_of_day = now.hour * 60 + now.minute

        found = [
            appointment
            for appointment in self._appointments.find(
                provider_id=provider_id,
                start_date=today,
                statuses=[AppointmentStatus.CONFIRMED],
            )
            # Today's appointments only count until they end
            if appointment.appointment_date > today or appointment.interval.end > minute_of_day
        ]
        found.sort(key=lambda a: (a.appointment_date, a.interval.start))
        return found[:limit]

    def _transition(
        self,
        appointment_id: str,
        actor: Actor,
        event: LifecycleEvent,
        **kwargs,
    ) -> Appointment:
        located = self._require_appointment(appointment_id)

        with self._locks.hold(located.provider_id, located.appointment_date):
            appointment = self._require_appointment(appointment_id)
            notification = self._lifecycle.apply(
                appointment, actor, event, now=self._clock(), **kwargs
            )
            self._appointments.save(appointment)

        self._dispatcher.dispatch(notification)
        return appointment

    def _require_profile(self, provider_id: str) -> ProviderProfile:
        profile = self._profiles.get_profile(provider_id)
        if profile is None:
            raise NotFoundError(f"Provider {provider_id} not found")
        return profile

    def _require_appointment(self, appointment_id: str) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    def _check_booking_window(self, day: date, now: DateTime) -> None:
        day_start, _ = day_bounds(day, self._timezone)

        if day_start <= now:
            raise SlotUnavailableError(
                f"The appointment date {day.to_date_string()} must be in the future"
            )

        last_day = calendar_day(now, self._timezone).add(days=self._max_advance_booking_days)
        if day > last_day:
            raise SlotUnavailableError(
                f"Appointments can be booked at most {self._max_advance_booking_days} days ahead"
            )

    @staticmethod
    def _check_schedule(profile: ProviderProfile, day: date, interval: TimeInterval) -> None:
        window = profile.window_for_weekday(weekday_index(day))

        if window is None:
            raise SlotUnavailableError(
                f"The provider does not work on {day.to_date_string()}"
            )

        if interval.start < window.start or interval.end > window.end:
            raise SlotUnavailableError(
                f"The interval {interval} is outside working hours {window}"
            )

        if has_conflict(interval, profile.break_intervals()):
            raise SlotUnavailableError(f"The interval {interval} overlaps a break")


def _paginate(appointments: List[Appointment], page: int, limit: int) -> AppointmentPage:
    if page < 1 or limit < 1:
        raise InvalidFormatError("page and limit must be positive integers")

    # Newest date first, earliest start first within a day
    ordered = sorted(appointments, key=lambda a: a.interval.start)
    ordered.sort(key=lambda a: a.appointment_date, reverse=True)

    offset = (page - 1) * limit
    return AppointmentPage(
        appointments=ordered[offset:offset + limit],
        page=page,
        limit=limit,
        total=len(ordered),
    )
