"""
Appointment status state machine.

Every status change goes through an explicit transition. A transition names
the states it may start from, the role allowed to trigger it and the
notification it produces, so the booking service only has to persist the
result and hand the notification to the dispatcher.

Usage:
    lifecycle = AppointmentLifecycle()
    notification = lifecycle.apply(appointment, actor, LifecycleEvent.CONFIRM)
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from pendulum import DateTime

from .exceptions import (
    ForbiddenError,
    InvalidFormatError,
    InvalidTransitionError,
)
from .models import (
    CANCELLATION_REASON_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    Actor,
    Appointment,
    AppointmentStatus,
    Role,
    Service,
    TimeInterval,
)

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = "Cancelled by user"


class LifecycleEvent(str, Enum):
    """Actions that change an appointment's status."""
    UPLOAD_DEPOSIT = "upload_deposit"
    CONFIRM = "confirm"
    REJECT = "reject"
    CANCEL = "cancel"
    COMPLETE = "complete"


class NotificationEvent(str, Enum):
    """Messages the core asks the notifier to deliver."""
    NEW_APPOINTMENT = "new_appointment"
    DEPOSIT_UPLOADED = "deposit_uploaded"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Recipient(str, Enum):
    """Who receives a transition's notification."""
    PROVIDER = "provider"
    CLIENT = "client"
    COUNTERPART = "counterpart"


@dataclass(frozen=True)
class Notification:
    """A notification decided by the core, delivered by an adapter."""
    event: NotificationEvent
    appointment: Appointment
    recipients: Tuple[str, ...]
    include_email: bool = False


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    event: LifecycleEvent
    from_states: FrozenSet[AppointmentStatus]
    to_state: AppointmentStatus
    roles: FrozenSet[Role]
    notification: Optional[NotificationEvent] = None
    recipient: Optional[Recipient] = None
    include_email: bool = False


_OPEN = frozenset({
    AppointmentStatus.PENDING,
    AppointmentStatus.PAYMENT_PENDING,
    AppointmentStatus.CONFIRMED,
})


class AppointmentLifecycle:
    """
    Deterministic state machine for appointment statuses.

    Wrong actors are rejected with ``ForbiddenError`` before the current state
    is looked at; transitions that do not exist from the current state raise
    ``InvalidTransitionError``.
    """

    TRANSITIONS: List[Transition] = [
        Transition(
            LifecycleEvent.UPLOAD_DEPOSIT,
            frozenset({AppointmentStatus.PENDING}),
            AppointmentStatus.PAYMENT_PENDING,
            frozenset({Role.CLIENT}),
            NotificationEvent.DEPOSIT_UPLOADED,
            Recipient.PROVIDER,
        ),
        Transition(
            LifecycleEvent.CONFIRM,
            frozenset({AppointmentStatus.PENDING, AppointmentStatus.PAYMENT_PENDING}),
            AppointmentStatus.CONFIRMED,
            frozenset({Role.PROVIDER}),
            NotificationEvent.CONFIRMED,
            Recipient.CLIENT,
            include_email=True,
        ),
        Transition(
            LifecycleEvent.REJECT,
            _OPEN,
            AppointmentStatus.CANCELLED,
            frozenset({Role.PROVIDER}),
            NotificationEvent.CANCELLED,
            Recipient.COUNTERPART,
        ),
        Transition(
            LifecycleEvent.CANCEL,
            _OPEN,
            AppointmentStatus.CANCELLED,
            frozenset({Role.PROVIDER, Role.CLIENT}),
            NotificationEvent.CANCELLED,
            Recipient.COUNTERPART,
        ),
        Transition(
            LifecycleEvent.COMPLETE,
            frozenset({AppointmentStatus.CONFIRMED}),
            AppointmentStatus.COMPLETED,
            frozenset({Role.PROVIDER}),
        ),
    ]

    def create(
        self,
        *,
        actor: Actor,
        provider_id: str,
        service: Service,
        day: date,
        interval: TimeInterval,
        notes: Optional[str] = None,
        now: Optional[DateTime] = None,
    ) -> Tuple[Appointment, Notification]:
        """
        Build a new pending appointment and the notification for the provider.

        Availability must already have been checked by the caller.
        """
        self.ensure_can_book(actor)
        _check_length("notes", notes, NOTES_MAX_LENGTH)

        appointment = Appointment(
            id=uuid.uuid4().hex,
            provider_id=provider_id,
            client_id=actor.user_id,
            service_id=service.id,
            service_name=service.name,
            service_duration=service.duration,
            service_price=service.price,
            appointment_date=day,
            interval=interval,
            status=AppointmentStatus.PENDING,
            notes=notes.strip() if notes else notes,
            created_at=now,
            updated_at=now,
        )

        notification = Notification(
            event=NotificationEvent.NEW_APPOINTMENT,
            appointment=appointment,
            recipients=(provider_id,),
        )
        return appointment, notification

    def apply(
        self,
        appointment: Appointment,
        actor: Actor,
        event: LifecycleEvent,
        *,
        reason: Optional[str] = None,
        deposit_proof: Optional[str] = None,
        now: Optional[DateTime] = None,
    ) -> Optional[Notification]:
        """
        Execute a transition on ``appointment`` in place.

        Args:
            appointment: The appointment to change
            actor: Authenticated caller
            event: The action requested
            reason: Cancellation or rejection reason
            deposit_proof: Reference to the uploaded proof of payment
            now: Timestamp recorded as ``updated_at``

        Returns:
            The notification to dispatch, or None if the transition is silent

        Raises:
            ForbiddenError: If the actor is not the right participant
            InvalidTransitionError: If the event is not valid from the current status
            InvalidFormatError: If the reason or proof is malformed
        """
        role = self.role_of(appointment, actor)
        transition = self._transition_for(event)

        if role not in transition.roles:
            raise ForbiddenError(
                f"A {role.value} cannot {event.value} appointment {appointment.id}"
            )

        if appointment.is_terminal or appointment.status not in transition.from_states:
            allowed = [t.event.value for t in self.valid_events(appointment.status)]
            raise InvalidTransitionError(
                f"Cannot {event.value} an appointment that is '{appointment.status.value}'. "
                f"Valid events: {allowed}"
            )

        _check_length("cancellation reason", reason, CANCELLATION_REASON_MAX_LENGTH)

        if event == LifecycleEvent.UPLOAD_DEPOSIT:
            if not deposit_proof or not deposit_proof.strip():
                raise InvalidFormatError("A deposit proof reference is required")
            appointment.deposit_proof = deposit_proof.strip()
        elif event == LifecycleEvent.REJECT:
            appointment.cancellation_reason = reason
        elif event == LifecycleEvent.CANCEL:
            appointment.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON

        old_status = appointment.status
        appointment.status = transition.to_state
        appointment.updated_at = now

        logger.info(
            "Appointment %s: %s -> %s (%s by %s)",
            appointment.id, old_status.value, appointment.status.value,
            event.value, actor.user_id,
        )

        if transition.notification is None:
            return None

        return Notification(
            event=transition.notification,
            appointment=appointment,
            recipients=(self._recipient_id(appointment, actor, transition.recipient),),
            include_email=transition.include_email,
        )

    @staticmethod
    def ensure_can_book(actor: Actor) -> None:
        """Raise ForbiddenError unless the actor may request a booking."""
        if actor.role != Role.CLIENT:
            raise ForbiddenError("Only clients can book appointments")

    @staticmethod
    def role_of(appointment: Appointment, actor: Actor) -> Role:
        """
        Resolve the actor's part in an appointment.

        Raises:
            ForbiddenError: If the actor does not participate in it
        """
        if actor.role == Role.PROVIDER and actor.user_id == appointment.provider_id:
            return Role.PROVIDER
        if actor.role == Role.CLIENT and actor.user_id == appointment.client_id:
            return Role.CLIENT
        raise ForbiddenError(f"You do not have access to appointment {appointment.id}")

    def valid_events(self, status: AppointmentStatus) -> List[Transition]:
        """Return all transitions available from ``status``."""
        return [t for t in self.TRANSITIONS if status in t.from_states]

    def _transition_for(self, event: LifecycleEvent) -> Transition:
        for transition in self.TRANSITIONS:
            if transition.event == event:
                return transition
        raise InvalidTransitionError(f"Unknown event: {event}")

    @staticmethod
    def _recipient_id(
        appointment: Appointment,
        actor: Actor,
        recipient: Optional[Recipient]
    ) -> str:
        if recipient == Recipient.PROVIDER:
            return appointment.provider_id
        if recipient == Recipient.CLIENT:
            return appointment.client_id
        return appointment.counterpart_of(actor.user_id)


def _check_length(label: str, value: Optional[str], limit: int) -> None:
    if value is not None and len(value.strip()) > limit:
        raise InvalidFormatError(f"The {label} cannot be longer than {limit} characters")
