import logging
from typing import Sequence

from forwarding.models import ErrorEvent
from .source import DeliverError, NotificationSource


def compose_message(events: Sequence[ErrorEvent], integration_id: int, console_url: str) -> str:
    if not events:
        raise ValueError("Can't compose a notification without errors")
    message = f"Recent Errors found on integration: {integration_id}\n"
    for event in events:
        message += event.message + "\n"
    message += f"\nYou can check the integration in the following link: {console_url}{integration_id}"
    return message


class NotificationManager():
    def __init__(self, source: NotificationSource, console_url: str):
        self.source = source
        self.console_url = console_url

    def send_errors_notification(self, events: Sequence[ErrorEvent], integration_id: int) -> bool:
        """Compose and deliver one message, True when the source accepted it."""
        message = compose_message(events, integration_id, self.console_url)
        try:
            self.source.send(message)
        except DeliverError as e:
            logging.error(f"Error sending Slack notification: {e}")
            return False
        logging.info("Slack notification sent successfully.")
        return True
