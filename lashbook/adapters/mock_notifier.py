"""
Recording notifier for tests and offline runs.
"""

import threading
from typing import List

from ..domain.exceptions import NotificationError
from ..domain.lifecycle import Notification, NotificationEvent


class RecordingNotifier:
    """
    Mock notifier that keeps every notification instead of delivering it.

    Set ``fail`` to make every call raise ``NotificationError``, which is
    useful to check that delivery failures never reach the caller.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Notification] = []
        self._lock = threading.Lock()

    def notify(self, notification: Notification) -> None:
        if self.fail:
            raise NotificationError(
                f"Mock delivery failure for {notification.event.value}"
            )
        with self._lock:
            self.sent.append(notification)

    def events(self) -> List[NotificationEvent]:
        """Events received so far, in order."""
        with self._lock:
            return [notification.event for notification in self.sent]

    def clear(self) -> None:
        with self._lock:
            self.sent.clear()
