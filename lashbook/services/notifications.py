"""
Fire-and-forget delivery of lifecycle notifications.

The core decides whether a notification is sent and to whom; the injected
notifier decides how. Delivery never fails or blocks the booking call that
produced it.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import List, Optional, Protocol, Sequence

from ..domain.exceptions import NotificationError
from ..domain.lifecycle import Notification

logger = logging.getLogger(__name__)


class NotifierProtocol(Protocol):
    """Protocol describing the delivery behaviour needed by the dispatcher."""

    def notify(self, notification: Notification) -> None:
        """Deliver one notification, raising on failure."""


class FanOutNotifier:
    """
    Delivers each notification through several channels.

    Every channel is tried even if an earlier one fails; the failures are
    raised together afterwards.
    """

    def __init__(self, notifiers: Sequence[NotifierProtocol]) -> None:
        self.notifiers = list(notifiers)

    def notify(self, notification: Notification) -> None:
        errors: List[str] = []
        for notifier in self.notifiers:
            try:
                notifier.notify(notification)
            except NotificationError as e:
                errors.append(str(e))

        if errors:
            raise NotificationError("; ".join(errors))


class NotificationDispatcher:
    """
    Hands notifications to a notifier, inline or on an executor.

    With an executor, ``dispatch`` returns as soon as the job is queued.
    Without one, delivery happens inline but errors are still only logged.
    """

    def __init__(
        self,
        notifier: Optional[NotifierProtocol] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._notifier = notifier
        self._executor = executor

    @property
    def enabled(self) -> bool:
        return self._notifier is not None

    def dispatch(self, notification: Optional[Notification]) -> None:
        """Send ``notification`` if there is one and a notifier is configured."""
        if notification is None:
            return

        if self._notifier is None:
            logger.debug(
                "No notifier configured, skipping %s for appointment %s",
                notification.event.value, notification.appointment.id,
            )
            return

        if self._executor is None:
            self._deliver(notification)
            return

        try:
            self._executor.submit(self._deliver, notification)
        except RuntimeError:
            # Raised by executors that have been shut down
            logger.warning(
                "Could not queue %s notification for appointment %s",
                notification.event.value, notification.appointment.id,
                exc_info=True,
            )

    def _deliver(self, notification: Notification) -> None:
        try:
            self._notifier.notify(notification)
        except Exception:
            logger.warning(
                "Failed to deliver %s notification for appointment %s to %s",
                notification.event.value,
                notification.appointment.id,
                ", ".join(notification.recipients),
                exc_info=True,
            )
        else:
            logger.debug(
                "Delivered %s notification for appointment %s",
                notification.event.value, notification.appointment.id,
            )
