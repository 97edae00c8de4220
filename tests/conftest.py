"""
Shared fixtures for the booking tests.

The fixed clock is Sunday 2026-10-18 10:00 in America/Santiago. The studio
works Monday to Saturday 09:00-17:00 with a lunch break 12:00-13:00 and is
closed on Sundays.
"""

import pendulum
import pytest

from lashbook.adapters.memory_store import InMemoryAppointmentRepository, InMemoryProfileRepository
from lashbook.adapters.mock_notifier import RecordingNotifier
from lashbook.domain.models import (
    Actor,
    Break,
    ProviderProfile,
    Role,
    Service,
    TimeInterval,
    WorkingWindow,
)
from lashbook.services.availability import AvailabilityService
from lashbook.services.booking import BookingService
from lashbook.services.notifications import NotificationDispatcher

TZ = "America/Santiago"
NOW = pendulum.datetime(2026, 10, 18, 10, 0, tz=TZ)

TUESDAY = "2026-10-20"
NEXT_SUNDAY = "2026-10-25"


def build_profile(provider_id: str = "ana") -> ProviderProfile:
    return ProviderProfile(
        provider_id=provider_id,
        studio_name="Ana Lash Studio",
        deposit_amount=10000,
        services=[
            Service(id="classic", name="Classic lash set", duration=90, price=25000),
            Service(id="refill", name="Refill", duration=60, price=15000),
            Service(id="quick", name="Quick touch-up", duration=30, price=8000),
            Service(id="lift", name="Lash lift", duration=45, price=18000, is_active=False),
        ],
        working_hours=[
            WorkingWindow(weekday=day, window=TimeInterval.parse("09:00", "17:00"))
            for day in range(1, 7)
        ] + [
            WorkingWindow(weekday=0, window=TimeInterval.parse("10:00", "14:00"), is_working=False)
        ],
        breaks=[Break(interval=TimeInterval.parse("12:00", "13:00"), description="Lunch")],
    )


@pytest.fixture
def profile():
    return build_profile()


@pytest.fixture
def profiles(profile):
    return InMemoryProfileRepository([profile])


@pytest.fixture
def appointments():
    return InMemoryAppointmentRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def booking_service(appointments, profiles, notifier):
    return BookingService(
        appointments,
        profiles,
        NotificationDispatcher(notifier),
        timezone=TZ,
        clock=lambda: NOW,
    )


@pytest.fixture
def availability_service(appointments, profiles):
    return AvailabilityService(appointments, profiles, timezone=TZ)


@pytest.fixture
def provider():
    return Actor(user_id="ana", role=Role.PROVIDER)


@pytest.fixture
def client():
    return Actor(user_id="carla", role=Role.CLIENT)


@pytest.fixture
def other_client():
    return Actor(user_id="diana", role=Role.CLIENT)
