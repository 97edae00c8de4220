"""
Persistence protocols consumed by the service layer.

Any storage backend can be plugged in as long as it honours these shapes; the
in-memory adapter in ``lashbook.adapters.memory_store`` is the reference.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Protocol

from ..domain.models import Appointment, AppointmentStatus, ProviderProfile


class AppointmentRepository(Protocol):
    """Storage for appointments. Appointments are never deleted."""

    def add(self, appointment: Appointment) -> None:
        """Insert a new appointment."""

    def get(self, appointment_id: str) -> Optional[Appointment]:
        """Return the appointment or None if it does not exist."""

    def save(self, appointment: Appointment) -> None:
        """Persist changes to an existing appointment."""

    def find(
        self,
        *,
        provider_id: Optional[str] = None,
        client_id: Optional[str] = None,
        participant_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        statuses: Optional[Iterable[AppointmentStatus]] = None,
    ) -> List[Appointment]:
        """Return appointments matching every given filter; dates are inclusive."""


class ProfileRepository(Protocol):
    """Read access to provider profiles."""

    def get_profile(self, provider_id: str) -> Optional[ProviderProfile]:
        """Return the provider's profile or None if unknown."""
