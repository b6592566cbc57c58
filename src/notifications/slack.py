import json
import logging
import requests
from typing import Dict, Optional

from .source import EncodeError, NotificationSource, TransportError, UnexpectedStatus


class SlackNotification(NotificationSource):

    def __init__(self, url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post_webhook(self, body: Dict) -> None:
        try:
            data = json.dumps(body)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"failed to marshal slack payload: {e}") from e

        try:
            r = self.session.post(self.url, data=data, headers={"Content-Type": "application/json"},
                                  timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"failed to send slack notification: {e}") from e

        if r.status_code != 200:
            raise UnexpectedStatus(r.status_code, r.text)
        logging.debug(f"Slack webhook answered {r.status_code}")

    def send(self, text: str) -> None:
        self._post_webhook({"text": text})
