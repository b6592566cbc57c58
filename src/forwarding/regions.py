from typing import NamedTuple


class Region(NamedTuple):
    api_url: str
    console_url: str


API_PATH = "/api/v1/eventsForwarding/errors/"
CONSOLE_PATH = "/secure/#/settings/events-forwarding/"

HOSTS = {
    "us1": "https://secure.sysdig.com",
    "us2": "https://us2.app.sysdig.com",
    "us4": "https://app.us4.sysdig.com",
    "eu1": "https://eu1.app.sysdig.com",
    "au1": "https://app.au1.sysdig.com",
    "me2": "https://app.me2.sysdig.com",
    "in1": "https://app.in1.sysdig.com",
}
DEFAULT_REGION = "us1"


def resolve(region: str) -> Region:
    """Map a region code to its API and console base URLs, falling back to us1."""
    host = HOSTS.get(region, HOSTS[DEFAULT_REGION])
    return Region(host + API_PATH, host + CONSOLE_PATH)
