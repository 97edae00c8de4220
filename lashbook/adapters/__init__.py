"""
Adapters layer - Storage and message delivery backends.
"""

from .email_notifier import EmailNotifier
from .memory_store import InMemoryAppointmentRepository, InMemoryProfileRepository
from .mock_notifier import RecordingNotifier
from .whatsapp_notifier import WhatsAppNotifier

__all__ = [
    "EmailNotifier",
    "InMemoryAppointmentRepository",
    "InMemoryProfileRepository",
    "RecordingNotifier",
    "WhatsAppNotifier",
]
