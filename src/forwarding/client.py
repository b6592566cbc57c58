import json
import logging
import requests
from typing import Optional

from .models import ErrorReport, ShapeError


class FetchError(Exception):
    pass


class RequestBuildFailed(FetchError):
    pass


class TransportError(FetchError):
    pass


class UnexpectedStatus(FetchError):
    def __init__(self, status_code: int):
        super().__init__(f"unexpected status code: {status_code}")
        self.status_code = status_code


class BodyReadError(FetchError):
    pass


class DecodeError(FetchError):
    pass


class EventsForwardingClient():

    def __init__(self, api_url: str, integration_id: int, tenant_id: int, token: str,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.url = f"{api_url}{integration_id}/{tenant_id}"
        self.headers = {"Authorization": "Bearer " + token}
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self) -> ErrorReport:
        """
        Read the errors reported for the integration.

        One GET per call, raises a FetchError subclass on any failure.
        """
        try:
            req = self.session.prepare_request(requests.Request("GET", self.url, headers=self.headers))
        except (requests.RequestException, ValueError) as e:
            raise RequestBuildFailed(f"failed to create request: {e}") from e

        try:
            response = self.session.send(req, stream=True, timeout=self.timeout)
        except (requests.RequestException, UnicodeError) as e:
            raise TransportError(f"failed to fetch data: {e}") from e

        try:
            if response.status_code != 200:
                raise UnexpectedStatus(response.status_code)
            try:
                body = response.content
            except requests.RequestException as e:
                raise BodyReadError(f"failed to read response body: {e}") from e
        finally:
            response.close()

        logging.debug(f"Fetched {len(body)} bytes from {self.url}")
        try:
            return ErrorReport.from_json(json.loads(body))
        except (ValueError, ShapeError, RecursionError) as e:
            raise DecodeError(f"failed to parse JSON: {e}") from e
