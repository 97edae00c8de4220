"""
In-memory persistence for profiles and appointments.
"""

import copy
import threading
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..domain.exceptions import NotFoundError
from ..domain.models import Appointment, AppointmentStatus, ProviderProfile


class InMemoryProfileRepository:
    """Provider profiles kept in a dict, keyed by provider id."""

    def __init__(self, profiles: Iterable[ProviderProfile] = ()):
        self._profiles: Dict[str, ProviderProfile] = {}
        for profile in profiles:
            self.put_profile(profile)

    def put_profile(self, profile: ProviderProfile) -> None:
        self._profiles[profile.provider_id] = profile

    def get_profile(self, provider_id: str) -> Optional[ProviderProfile]:
        return self._profiles.get(provider_id)

    def list_profiles(self) -> List[ProviderProfile]:
        return list(self._profiles.values())


class InMemoryAppointmentRepository:
    """
    Appointments kept in memory.

    Stored objects are copied on the way in and out, so callers never share
    state with the store and changes only land through ``save``.
    """

    def __init__(self):
        self._appointments: Dict[str, Appointment] = {}
        self._lock = threading.Lock()

    def add(self, appointment: Appointment) -> None:
        with self._lock:
            if appointment.id in self._appointments:
                raise ValueError(f"Appointment {appointment.id} already exists")
            self._appointments[appointment.id] = copy.deepcopy(appointment)

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with self._lock:
            stored = self._appointments.get(appointment_id)
            return copy.deepcopy(stored) if stored else None

    def save(self, appointment: Appointment) -> None:
        with self._lock:
            if appointment.id not in self._appointments:
                raise NotFoundError(f"Appointment {appointment.id} not found")
            self._appointments[appointment.id] = copy.deepcopy(appointment)

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
        wanted = set(statuses) if statuses is not None else None

        with self._lock:
            matches = [
                copy.deepcopy(appointment)
                for appointment in self._appointments.values()
                if (provider_id is None or appointment.provider_id == provider_id)
                and (client_id is None or appointment.client_id == client_id)
                and (participant_id is None or appointment.is_participant(participant_id))
                and (start_date is None or appointment.appointment_date >= start_date)
                and (end_date is None or appointment.appointment_date <= end_date)
                and (wanted is None or appointment.status in wanted)
            ]

        return matches
