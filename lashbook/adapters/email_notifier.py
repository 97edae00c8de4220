"""
SMTP email notifier.
"""

import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Mapping

from ..domain.exceptions import NotificationError
from ..domain.lifecycle import Notification
from .messages import SUBJECTS, plain_text, render_message

logger = logging.getLogger(__name__)


class EmailNotifier:
    """
    Sends an email copy of notifications that ask for one.

    Only notifications with ``include_email`` set are mailed; the others are
    left to the messaging channel. Recipients are user ids; ``contacts`` maps
    them to email addresses.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        contacts: Mapping[str, str],
        from_email: str = "",
        from_name: str = "lashbook",
        use_tls: bool = True,
        timeout: int = 30
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.contacts = contacts
        self.from_email = from_email or username
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout

    def notify(self, notification: Notification) -> None:
        """
        Mail the notification to every recipient with a known address.

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        if not notification.include_email:
            return

        subject = SUBJECTS[notification.event]
        body = plain_text(render_message(notification))

        for recipient in notification.recipients:
            address = self.contacts.get(recipient)
            if not address:
                logger.warning(
                    "No email address for user %s, skipping %s",
                    recipient, notification.event.value
                )
                continue
            self.send(address, subject, body)

    def send(self, to: str, subject: str, body: str) -> str:
        """
        Send a plain text email.

        Returns:
            The generated Message-ID
        """
        msg = EmailMessage()
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to
        msg["Subject"] = subject
        message_id = make_msgid()
        msg["Message-ID"] = message_id
        msg.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.ehlo()
                if self.use_tls:
                    smtp.starttls()
                    smtp.ehlo()
                smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email to {to}: {e}") from e

        logger.info("Email '%s' sent to %s", subject, to)
        return message_id
