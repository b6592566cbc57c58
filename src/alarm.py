from datetime import datetime, timezone
from enum import Enum
import logging
import sys
import time
from typing import Optional

from config import Config, ConfigError, DEFAULT_PATH
from forwarding import EventsForwardingClient, FetchError, resolve, select_recent
from forwarding.window import WINDOW
from notifications import NotificationManager, SlackNotification


class CycleOutcome(Enum):
    FETCH_FAILED = 1
    NO_NEW_ERRORS = 2
    NOTIFIED = 3
    DELIVERY_FAILED = 4


class Alarm():

    def __init__(self, config: Config, client: EventsForwardingClient, manager: NotificationManager):
        self.config = config
        self.client = client
        self.manager = manager

    @classmethod
    def from_config(cls, config: Config) -> "Alarm":
        region = resolve(config.region)
        client = EventsForwardingClient(region.api_url, config.integration_id, config.tenant_id,
                                        config.bearer_token, timeout=config.request_timeout)
        slack = SlackNotification(config.webhook_url, timeout=config.request_timeout)
        return cls(config, client, NotificationManager(slack, region.console_url))

    def run_cycle(self, now: Optional[datetime] = None) -> CycleOutcome:
        try:
            report = self.client.fetch()
        except FetchError as e:
            logging.error(f"Error fetching data: {e}")
            return CycleOutcome.FETCH_FAILED

        if now is None:
            now = datetime.now(timezone.utc)
        recent = select_recent(report, now)
        if not recent:
            logging.info("No new errors found.")
            return CycleOutcome.NO_NEW_ERRORS

        logging.info(f"{len(recent)} new errors found on integration {report.integration_id}")
        if self.manager.send_errors_notification(recent, report.integration_id):
            return CycleOutcome.NOTIFIED
        return CycleOutcome.DELIVERY_FAILED

    def run_forever(self, sleep=time.sleep, max_cycles: Optional[int] = None):
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self.run_cycle()
            cycles += 1
            sleep(self.config.poll_interval)


def main(argv=None):
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(message)s",
        level=logging.INFO,
        datefmt="%Y/%m/%d %H:%M:%S",
        handlers=[
            logging.StreamHandler()
        ]
    )
    argv = sys.argv if argv is None else argv
    path = argv[1] if len(argv) > 1 else DEFAULT_PATH

    try:
        config = Config.load(path)
    except ConfigError as e:
        logging.error(f"Got a fatal error, aborting: {e}")
        return 1

    if config.poll_interval > WINDOW.seconds:
        logging.warning(f"Poll interval {config.poll_interval}s is longer than the {WINDOW.seconds}s window, "
                        "errors between polls won't be reported")

    logging.info(f"Started, polling integration {config.integration_id} every {config.poll_interval}s")
    try:
        Alarm.from_config(config).run_forever()
    except KeyboardInterrupt:
        logging.info("Interrupted, exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
