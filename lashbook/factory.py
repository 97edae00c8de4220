"""
Wiring of services and adapters from an ``AppConfig``.
"""

import logging
from concurrent.futures import Executor
from typing import Callable, List, Mapping, Optional

from pendulum import DateTime

from .adapters.email_notifier import EmailNotifier
from .adapters.memory_store import InMemoryAppointmentRepository, InMemoryProfileRepository
from .adapters.whatsapp_notifier import WhatsAppNotifier
from .config import AppConfig, ContactConfig
from .domain.availability import AvailabilityCalculator
from .services.availability import AvailabilityService
from .services.booking import BookingService
from .services.notifications import FanOutNotifier, NotificationDispatcher, NotifierProtocol
from .services.repositories import AppointmentRepository, ProfileRepository

logger = logging.getLogger(__name__)


def build_notifier(
    config: AppConfig,
    client_contacts: Optional[Mapping[str, ContactConfig]] = None
) -> Optional[NotifierProtocol]:
    """
    Build the notifier for every configured channel.

    Args:
        config: Application configuration
        client_contacts: Client id -> contact details, merged over ``config.clients``

    Returns:
        A single notifier, a fan-out over several, or None if no channel is configured
    """
    notifiers: List[NotifierProtocol] = []

    if config.whatsapp.is_configured():
        notifiers.append(WhatsAppNotifier(
            access_token=config.whatsapp.access_token,
            phone_number_id=config.whatsapp.phone_number_id,
            contacts=config.whatsapp_contacts(client_contacts),
            api_version=config.whatsapp.api_version,
        ))

    if config.email.is_configured():
        notifiers.append(EmailNotifier(
            host=config.email.host,
            port=config.email.port,
            username=config.email.username,
            password=config.email.password,
            contacts=config.email_contacts(client_contacts),
            from_email=config.email.from_email,
            from_name=config.email.from_name,
            use_tls=config.email.use_tls,
        ))

    if not notifiers:
        logger.info("No notification channel configured, notifications are disabled")
        return None

    logger.info("Notification channels: %s", ", ".join(type(n).__name__ for n in notifiers))
    return notifiers[0] if len(notifiers) == 1 else FanOutNotifier(notifiers)


def build_booking_service(
    config: AppConfig,
    appointments: Optional[AppointmentRepository] = None,
    profiles: Optional[ProfileRepository] = None,
    *,
    client_contacts: Optional[Mapping[str, ContactConfig]] = None,
    executor: Optional[Executor] = None,
    clock: Optional[Callable[[], DateTime]] = None,
) -> BookingService:
    """
    Create a BookingService that follows the configured rules.

    Repositories default to in-memory stores seeded with the configured
    provider profiles.
    """
    return BookingService(
        appointments if appointments is not None else InMemoryAppointmentRepository(),
        profiles if profiles is not None else InMemoryProfileRepository(config.profiles()),
        NotificationDispatcher(build_notifier(config, client_contacts), executor),
        timezone=config.timezone,
        max_advance_booking_days=config.booking.max_advance_booking_days,
        enforce_working_hours=config.booking.enforce_working_hours,
        clock=clock,
    )


def build_availability_service(
    config: AppConfig,
    appointments: AppointmentRepository,
    profiles: Optional[ProfileRepository] = None,
) -> AvailabilityService:
    """Create an AvailabilityService using the configured slot size and timezone."""
    return AvailabilityService(
        appointments,
        profiles if profiles is not None else InMemoryProfileRepository(config.profiles()),
        AvailabilityCalculator(config.booking.slot_minutes),
        timezone=config.timezone,
    )
