"""
Domain models for provider schedules and appointments.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pendulum import Date, DateTime

from .timeutils import MINUTES_PER_DAY, to_minutes, to_time_string

MIN_SERVICE_DURATION = 15
NOTES_MAX_LENGTH = 500
CANCELLATION_REASON_MAX_LENGTH = 200


@dataclass(frozen=True, order=True)
class TimeInterval:
    """
    Immutable half-open interval ``[start, end)`` in minutes since midnight.

    Invariant: start must be before end, and both lie within one day.
    """
    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start < MINUTES_PER_DAY:
            raise ValueError(f"Start minute {self.start} is outside the day")
        if self.end > MINUTES_PER_DAY:
            raise ValueError(f"End minute {self.end} is past midnight")
        if self.start >= self.end:
            raise ValueError(
                f"Start time {self.start} must be before end time {self.end}"
            )

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeInterval":
        """Build an interval from two ``"HH:MM"`` strings."""
        return cls(start=to_minutes(start), end=to_minutes(end))

    @classmethod
    def starting_at(cls, start: int, duration_minutes: int) -> "TimeInterval":
        """Build an interval of ``duration_minutes`` beginning at ``start``."""
        return cls(start=start, end=start + duration_minutes)

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def start_string(self) -> str:
        return to_time_string(self.start)

    def end_string(self) -> str:
        # 24:00 is a valid end of day but not a valid time of day
        if self.end == MINUTES_PER_DAY:
            return "24:00"
        return to_time_string(self.end)

    def __str__(self) -> str:
        return f"{self.start_string()}-{self.end_string()}"


@dataclass(frozen=True)
class WorkingWindow:
    """
    Working hours for one weekday.

    ``weekday`` uses 0=Sunday through 6=Saturday. When ``is_working`` is false
    the window is ignored.
    """
    weekday: int
    window: TimeInterval
    is_working: bool = True

    def __post_init__(self):
        if self.weekday not in range(7):
            raise ValueError(f"Weekday must be between 0 and 6, got {self.weekday}")


@dataclass(frozen=True)
class Break:
    """A recurring pause that applies to every working day."""
    interval: TimeInterval
    description: str = ""


@dataclass
class Service:
    """A bookable service offered by a provider."""
    id: str
    name: str
    duration: int
    price: float
    description: str = ""
    is_active: bool = True

    def __post_init__(self):
        if self.duration < MIN_SERVICE_DURATION:
            raise ValueError(
                f"Service duration must be at least {MIN_SERVICE_DURATION} minutes, "
                f"got {self.duration}"
            )
        if self.price < 0:
            raise ValueError(f"Service price cannot be negative, got {self.price}")


@dataclass
class ProviderProfile:
    """
    A provider's studio configuration: services, working hours and breaks.
    """
    provider_id: str
    studio_name: str = ""
    services: List[Service] = field(default_factory=list)
    working_hours: List[WorkingWindow] = field(default_factory=list)
    breaks: List[Break] = field(default_factory=list)
    deposit_amount: float = 0.0

    def __post_init__(self):
        weekdays = [entry.weekday for entry in self.working_hours]
        if len(weekdays) != len(set(weekdays)):
            raise ValueError(
                f"Provider {self.provider_id} has more than one working window per weekday"
            )

    def find_service(self, service_id: str) -> Optional[Service]:
        """Find a service by its id."""
        for service in self.services:
            if service.id == service_id:
                return service
        return None

    def window_for_weekday(self, weekday: int) -> Optional[TimeInterval]:
        """
        Get the working window for a weekday.
        Returns None if the provider does not work that day.
        """
        for entry in self.working_hours:
            if entry.weekday == weekday and entry.is_working:
                return entry.window
        return None

    def break_intervals(self) -> List[TimeInterval]:
        return [brk.interval for brk in self.breaks]


class Role(str, Enum):
    """User roles known to the booking core."""
    PROVIDER = "lashista"
    CLIENT = "client"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller identity supplied by the auth layer."""
    user_id: str
    role: Role


class AppointmentStatus(str, Enum):
    """All states an appointment can be in."""
    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Appointments in these states occupy their slot
BLOCKING_STATUSES = frozenset({
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.PAYMENT_PENDING,
})

TERMINAL_STATUSES = frozenset({
    AppointmentStatus.CANCELLED,
    AppointmentStatus.COMPLETED,
})


@dataclass
class Appointment:
    """
    A booked service between a client and a provider.

    Service fields are copied at creation time so later edits to the service
    do not alter booked appointments.
    """
    id: str
    provider_id: str
    client_id: str
    service_id: str
    service_name: str
    service_duration: int
    service_price: float
    appointment_date: Date
    interval: TimeInterval
    status: AppointmentStatus = AppointmentStatus.PENDING
    deposit_proof: Optional[str] = None
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[DateTime] = None
    updated_at: Optional[DateTime] = None

    @property
    def is_blocking(self) -> bool:
        return self.status in BLOCKING_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.provider_id, self.client_id)

    def counterpart_of(self, user_id: str) -> str:
        """Return the other participant's id."""
        return self.client_id if user_id == self.provider_id else self.provider_id

    def format_display(self) -> str:
        """
        Format the appointment for display.
        Format: YYYY-MM-DD | HH:MM-HH:MM | service (status)
        """
        return (
            f"{self.appointment_date.to_date_string()} | {self.interval} | "
            f"{self.service_name} ({self.status.value})"
        )
