"""
Core business logic for calculating free booking slots.

Pure domain logic without any external dependencies (no database, no I/O).
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from .conflicts import has_conflict
from .models import ProviderProfile, TimeInterval
from .timeutils import to_time_string, weekday_index

DEFAULT_SLOT_MINUTES = 30


class DayStatus(str, Enum):
    """Why a day has (or lacks) free slots."""
    AVAILABLE = "available"
    FULLY_BOOKED = "fully_booked"
    NOT_WORKING = "not_working"


@dataclass
class DayAvailability:
    """Free slots of one provider on one calendar day."""
    day: date
    status: DayStatus
    window: Optional[TimeInterval] = None
    slots: List[int] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.status == DayStatus.AVAILABLE

    def slot_strings(self) -> List[str]:
        """Slot start times as ``"HH:MM"`` strings."""
        return [to_time_string(start) for start in self.slots]


class AvailabilityCalculator:
    """
    Calculates free fixed-length slots inside a working window.

    Algorithm:
    1. Step through candidate starts every ``slot_minutes`` from window start
    2. Stop once a candidate would run past the window end
    3. Drop candidates overlapping a break
    4. Drop candidates overlapping a booked interval
    5. Return the remaining starts in ascending order
    """

    def __init__(self, slot_minutes: int = DEFAULT_SLOT_MINUTES):
        if slot_minutes <= 0:
            raise ValueError(f"Slot size must be positive, got {slot_minutes}")
        self.slot_minutes = slot_minutes

    def iter_free_slots(
        self,
        window: TimeInterval,
        breaks: Sequence[TimeInterval],
        booked: Sequence[TimeInterval]
    ) -> Iterator[int]:
        """Yield free slot start minutes in ascending order."""
        start = window.start

        while start + self.slot_minutes <= window.end:
            candidate = TimeInterval(start=start, end=start + self.slot_minutes)

            if not has_conflict(candidate, breaks) and not has_conflict(candidate, booked):
                yield start

            start += self.slot_minutes

    def free_slots(
        self,
        window: TimeInterval,
        breaks: Sequence[TimeInterval],
        booked: Sequence[TimeInterval]
    ) -> List[int]:
        """
        Compute the free slot starts for a working window.

        Args:
            window: Working hours of the day
            breaks: Break intervals, in any order
            booked: Intervals of appointments that block the day

        Returns:
            Slot start times in minutes since midnight
        """
        return list(self.iter_free_slots(window, breaks, booked))

    def for_day(
        self,
        profile: ProviderProfile,
        day: date,
        booked: Sequence[TimeInterval]
    ) -> DayAvailability:
        """
        Compute a provider's availability for a calendar day.

        Breaks apply to every working day regardless of weekday.
        """
        window = profile.window_for_weekday(weekday_index(day))

        if window is None:
            return DayAvailability(day=day, status=DayStatus.NOT_WORKING)

        slots = self.free_slots(window, profile.break_intervals(), booked)
        status = DayStatus.AVAILABLE if slots else DayStatus.FULLY_BOOKED

        return DayAvailability(day=day, status=status, window=window, slots=slots)


def compute_free_slots(
    window: TimeInterval,
    breaks: Sequence[TimeInterval],
    booked: Sequence[TimeInterval],
    slot_minutes: int = DEFAULT_SLOT_MINUTES
) -> List[int]:
    """Shortcut for ``AvailabilityCalculator(slot_minutes).free_slots(...)``."""
    return AvailabilityCalculator(slot_minutes).free_slots(window, breaks, booked)
