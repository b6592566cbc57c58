from datetime import datetime, timedelta
import logging
import re
from typing import List

from .models import ErrorEvent, ErrorReport

WINDOW = timedelta(seconds=60)

# RFC 3339 with optional fraction of any length and a mandatory offset
_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$")


def parse_timestamp(value: str) -> datetime:
    m = _RFC3339.match(value)
    if not m:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    date, time, fraction, offset = m.groups()
    # datetime only holds microseconds, nanoseconds are truncated
    fraction = "." + fraction[:6].ljust(6, "0") if fraction else ""
    if offset in ("Z", "z"):
        offset = "+00:00"
    return datetime.fromisoformat(f"{date}T{time}{fraction}{offset}")


def select_recent(report: ErrorReport, now: datetime) -> List[ErrorEvent]:
    """
    Return the errors of the report that happened in the open interval
    (now - WINDOW, now), in report order.

    Events whose timestamp can't be parsed are logged and skipped.
    """
    if not report.errors:
        logging.debug("Report contains no errors")
        return []

    start = now - WINDOW
    recent = []
    for event in report.errors:
        try:
            t = parse_timestamp(event.timestamp)
        except ValueError as e:
            logging.warning(f"Error parsing timestamp: {e}")
            continue
        if start < t < now:
            recent.append(event)
    logging.debug(f"{len(recent)} of {len(report.errors)} errors in the last {WINDOW.seconds}s")
    return recent
