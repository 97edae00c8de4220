"""
WhatsApp Cloud API notifier.
"""

import logging
from typing import Any, Dict, Mapping

import requests

from ..domain.exceptions import NotificationError
from ..domain.lifecycle import Notification
from .messages import render_message

logger = logging.getLogger(__name__)


class WhatsAppNotifier:
    """
    Delivers notifications as WhatsApp text messages.

    Uses the Cloud API ``/{phone-number-id}/messages`` endpoint. Recipients are
    user ids; ``contacts`` maps them to WhatsApp numbers.
    """

    GRAPH_API_ENDPOINT = "https://graph.facebook.com"

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        contacts: Mapping[str, str],
        api_version: str = "v18.0",
        timeout: int = 30
    ):
        """
        Initialize the notifier.

        Args:
            access_token: WhatsApp Cloud API access token
            phone_number_id: Sender phone number id
            contacts: Mapping of user id -> WhatsApp number
            api_version: Graph API version segment
            timeout: Request timeout in seconds
        """
        self.phone_number_id = phone_number_id
        self.contacts = contacts
        self.api_version = api_version
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json"
        }

    def notify(self, notification: Notification) -> None:
        """
        Send the notification to every recipient with a known number.

        Raises:
            NotificationError: If the API call fails
        """
        body = self.render(notification)

        for recipient in notification.recipients:
            number = self.contacts.get(recipient)
            if not number:
                logger.warning(
                    "No WhatsApp number for user %s, skipping %s",
                    recipient, notification.event.value
                )
                continue
            self.send_message(number, body)

    def send_message(self, to: str, text: str) -> Dict[str, Any]:
        """
        Send a plain text message.

        Returns:
            The API response payload
        """
        url = f"{self.GRAPH_API_ENDPOINT}/{self.api_version}/{self.phone_number_id}/messages"

        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text}
        }

        try:
            response = requests.post(
                url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"Failed to send WhatsApp message: {e}") from e

        logger.info("WhatsApp message sent to %s", to)
        return response.json()

    def render(self, notification: Notification) -> str:
        """Build the message text for a notification."""
        return render_message(notification)
