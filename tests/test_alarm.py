"""Tests for the poll loop."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, call, patch

import pytest

from alarm import Alarm, CycleOutcome, main
from config import Config
from forwarding.client import DecodeError, EventsForwardingClient, UnexpectedStatus
from forwarding.models import ErrorEvent, ErrorReport
from notifications import NotificationManager, NotificationSource
from notifications.source import UnexpectedStatus as DeliveryStatus

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
CONFIG = Config(
    bearer_token="secret",
    integration_id=42,
    tenant_id=7,
    region="eu1",
    poll_interval=30,
    webhook_url="https://hooks.slack.com/services/A/B/C",
)


def ts(delta_seconds):
    return (NOW + timedelta(seconds=delta_seconds)).isoformat()


def make_alarm(report=None, fetch_error=None, deliver_error=None):
    client = MagicMock(spec=EventsForwardingClient)
    if fetch_error:
        client.fetch.side_effect = fetch_error
    else:
        client.fetch.return_value = report
    source = MagicMock(spec=NotificationSource)
    if deliver_error:
        source.send.side_effect = deliver_error
    manager = NotificationManager(source, "https://eu1.app.sysdig.com/secure/#/settings/events-forwarding/")
    return Alarm(CONFIG, client, manager), client, source


class TestRunCycle:

    def test_notifies_recent_errors(self):
        report = ErrorReport(1, 42, 2, [ErrorEvent("disk full", ts(-10)), ErrorEvent("stale", ts(-600))])
        alarm, _, source = make_alarm(report)

        assert alarm.run_cycle(NOW) == CycleOutcome.NOTIFIED
        message = source.send.call_args.args[0]
        assert message.startswith("Recent Errors found on integration: 42\n")
        assert "disk full" in message
        assert "stale" not in message

    def test_empty_report_sends_nothing(self):
        alarm, _, source = make_alarm(ErrorReport(1, 42, 0, []))
        assert alarm.run_cycle(NOW) == CycleOutcome.NO_NEW_ERRORS
        source.send.assert_not_called()

    def test_only_old_errors_sends_nothing(self):
        alarm, _, source = make_alarm(ErrorReport(1, 42, 1, [ErrorEvent("old", ts(-60))]))
        assert alarm.run_cycle(NOW) == CycleOutcome.NO_NEW_ERRORS
        source.send.assert_not_called()

    @pytest.mark.parametrize("error", [UnexpectedStatus(500), DecodeError("bad json")])
    def test_fetch_failure_skips_notification(self, error):
        alarm, _, source = make_alarm(fetch_error=error)
        assert alarm.run_cycle(NOW) == CycleOutcome.FETCH_FAILED
        source.send.assert_not_called()

    def test_bad_token_fails_the_cycle_only(self):
        client = EventsForwardingClient("https://eu1.app.sysdig.com/api/v1/eventsForwarding/errors/",
                                        42, 7, "secret\n")
        alarm, _, source = make_alarm()
        alarm.client = client
        assert alarm.run_cycle(NOW) == CycleOutcome.FETCH_FAILED
        source.send.assert_not_called()

    def test_delivery_failure_is_not_retried(self):
        report = ErrorReport(1, 42, 1, [ErrorEvent("disk full", ts(-10))])
        alarm, _, source = make_alarm(report, deliver_error=DeliveryStatus(404, "no_service"))
        assert alarm.run_cycle(NOW) == CycleOutcome.DELIVERY_FAILED
        source.send.assert_called_once()

    def test_now_defaults_to_current_time(self):
        recent = (datetime.now(timezone.utc) - timedelta(seconds=5)).isoformat()
        alarm, _, source = make_alarm(ErrorReport(1, 42, 1, [ErrorEvent("fresh", recent)]))
        assert alarm.run_cycle() == CycleOutcome.NOTIFIED


class TestRunForever:

    def test_sleeps_after_every_cycle(self):
        alarm, client, _ = make_alarm(fetch_error=UnexpectedStatus(500))
        sleep = MagicMock()
        alarm.run_forever(sleep=sleep, max_cycles=3)
        assert client.fetch.call_count == 3
        assert sleep.call_args_list == [call(30)] * 3

    def test_keeps_going_after_delivery_failure(self):
        recent = (datetime.now(timezone.utc) - timedelta(seconds=5)).isoformat()
        report = ErrorReport(1, 42, 1, [ErrorEvent("disk full", recent)])
        alarm, client, source = make_alarm(report, deliver_error=DeliveryStatus(404, "no_service"))
        alarm.run_forever(sleep=MagicMock(), max_cycles=2)
        assert client.fetch.call_count == 2
        assert source.send.call_count == 2


class TestMain:

    def test_bad_config_exits_non_zero(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  bearerToken: abc\n")
        with patch.object(Alarm, "run_forever") as run_forever:
            assert main(["alarm", str(path)]) == 1
        run_forever.assert_not_called()

    def test_runs_loop_until_interrupted(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "config:\n"
            "  bearerToken: abc\n"
            "  integrationId: 1\n"
            "  tenantId: 2\n"
            "  region: eu1\n"
            "  pollIntervalSecs: 30\n"
            "  slackWebhookUrl: https://example.com/hook\n"
        )
        with patch.object(Alarm, "run_forever", side_effect=KeyboardInterrupt) as run_forever:
            assert main(["alarm", str(path)]) == 0
        run_forever.assert_called_once()
