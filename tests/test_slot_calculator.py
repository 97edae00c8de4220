"""
Tests for the availability calculator.
"""

import random

import pendulum
import pytest

from lashbook.domain.availability import AvailabilityCalculator, DayStatus, compute_free_slots
from lashbook.domain.conflicts import has_conflict
from lashbook.domain.models import TimeInterval
from lashbook.domain.timeutils import to_minutes


def _interval(start: str, end: str) -> TimeInterval:
    return TimeInterval.parse(start, end)


class TestAvailabilityCalculator:
    """Tests for AvailabilityCalculator."""

    def test_break_and_booking_removed(self):
        """Booked and break slots are missing, the rest of the day is free."""
        calculator = AvailabilityCalculator(slot_minutes=30)

        slots = calculator.free_slots(
            window=_interval("09:00", "17:00"),
            breaks=[_interval("12:00", "13:00")],
            booked=[_interval("10:00", "10:30")],
        )

        assert to_minutes("10:00") not in slots
        assert to_minutes("12:00") not in slots
        assert to_minutes("12:30") not in slots
        assert to_minutes("09:00") in slots
        assert to_minutes("13:00") in slots
        # 16 slots in the window minus one booked and two in the break
        assert len(slots) == 13

    def test_empty_day(self):
        slots = compute_free_slots(_interval("09:00", "11:00"), [], [])
        assert slots == [540, 570, 600, 630]

    def test_last_slot_must_fit(self):
        """A slot that would run past the window end is not offered."""
        slots = compute_free_slots(_interval("09:00", "10:45"), [], [], slot_minutes=30)
        assert slots == [540, 570, 600]

    def test_window_shorter_than_slot(self):
        assert compute_free_slots(_interval("09:00", "09:20"), [], []) == []

    def test_break_covering_window(self):
        slots = compute_free_slots(
            _interval("12:00", "13:00"),
            [_interval("11:00", "14:00")],
            [],
        )
        assert slots == []

    def test_unordered_breaks(self):
        slots = compute_free_slots(
            _interval("09:00", "11:00"),
            [_interval("10:30", "11:00"), _interval("09:00", "09:30")],
            [],
        )
        assert slots == [570, 600]

    def test_booking_off_the_grid(self):
        """A booking not aligned to the slot grid blocks every slot it touches."""
        slots = compute_free_slots(
            _interval("09:00", "11:00"),
            [],
            [_interval("09:45", "10:15")],
        )
        assert slots == [540, 630]

    def test_custom_slot_size(self):
        slots = compute_free_slots(_interval("09:00", "10:00"), [], [], slot_minutes=15)
        assert slots == [540, 555, 570, 585]

    @pytest.mark.parametrize("slot_minutes", [0, -30])
    def test_invalid_slot_size(self, slot_minutes):
        with pytest.raises(ValueError):
            AvailabilityCalculator(slot_minutes=slot_minutes)

    def test_idempotent(self):
        calculator = AvailabilityCalculator()
        args = (
            _interval("09:00", "17:00"),
            [_interval("12:00", "13:00")],
            [_interval("10:00", "11:00"), _interval("15:15", "15:45")],
        )
        assert calculator.free_slots(*args) == calculator.free_slots(*args)

    @pytest.mark.parametrize("seed", range(10))
    def test_every_slot_is_free(self, seed):
        """Each returned slot fits the window and avoids breaks and bookings."""
        rng = random.Random(seed)
        slot_minutes = rng.choice([15, 20, 30, 45, 60])
        window_start = rng.randrange(6 * 60, 11 * 60)
        window = TimeInterval(window_start, window_start + rng.randrange(60, 10 * 60))

        def random_inside():
            start = rng.randrange(window.start, window.end - 15)
            return TimeInterval(start, min(window.end, start + rng.randrange(15, 120)))

        breaks = [random_inside() for _ in range(rng.randrange(0, 3))]
        booked = [random_inside() for _ in range(rng.randrange(0, 6))]

        slots = AvailabilityCalculator(slot_minutes).free_slots(window, breaks, booked)

        assert slots == sorted(slots)
        for start in slots:
            slot = TimeInterval(start, start + slot_minutes)
            assert window.start <= slot.start and slot.end <= window.end
            assert (start - window.start) % slot_minutes == 0
            assert not has_conflict(slot, breaks)
            assert not has_conflict(slot, booked)


class TestForDay:
    """Tests for per-day availability."""

    def test_working_day(self, profile):
        result = AvailabilityCalculator().for_day(profile, pendulum.date(2026, 10, 20), [])

        assert result.status == DayStatus.AVAILABLE
        assert result.available
        assert result.window == _interval("09:00", "17:00")
        assert result.slot_strings()[0] == "09:00"
        assert "12:00" not in result.slot_strings()

    def test_not_working(self, profile):
        """Sunday is closed, which is distinct from being fully booked."""
        result = AvailabilityCalculator().for_day(profile, pendulum.date(2026, 10, 25), [])

        assert result.status == DayStatus.NOT_WORKING
        assert result.slots == []
        assert result.window is None

    def test_fully_booked(self, profile):
        booked = [_interval("09:00", "12:00"), _interval("13:00", "17:00")]

        result = AvailabilityCalculator().for_day(profile, pendulum.date(2026, 10, 20), booked)

        assert result.status == DayStatus.FULLY_BOOKED
        assert not result.available
        assert result.window == _interval("09:00", "17:00")
