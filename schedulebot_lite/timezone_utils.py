"""Time helpers for schedulebot_lite.

The schedule is published for a Japanese audience, so all display strings use
a fixed UTC+9 offset. Japan has no daylight saving time, which keeps a plain
offset exact and avoids depending on the host's tz database.
"""

from __future__ import annotations

import datetime
import logging
import os

logger = logging.getLogger(__name__)

# Zone name the calendar uses for local wall-clock times
DEFAULT_CALENDAR_TIMEZONE = "Asia/Tokyo"

JST_OFFSET = datetime.timedelta(hours=9)
JST = datetime.timezone(JST_OFFSET, "JST")

TEST_TIME_ENV = "SCHEDULEBOT_TEST_TIME"


def now_utc() -> datetime.datetime:
    """Return current UTC time with tzinfo.

    Can be overridden for testing via the SCHEDULEBOT_TEST_TIME environment variable.
    Format: ISO 8601 datetime string (e.g., "2030-01-01T11:59:00Z"). Naive values
    are taken as UTC.

    Returns:
        Current time in UTC with timezone info
    """
    test_time = os.environ.get(TEST_TIME_ENV)
    if test_time:
        try:
            from dateutil import parser as date_parser

            dt = date_parser.isoparse(test_time)
            if dt.tzinfo is None:
                return dt.replace(tzinfo=datetime.timezone.utc)
            return dt.astimezone(datetime.timezone.utc)
        except (ValueError, OverflowError) as e:
            logger.warning("Invalid %s value %r: %s", TEST_TIME_ENV, test_time, e)

    return datetime.datetime.now(datetime.timezone.utc)


def is_default_timezone(tzid: str | None) -> bool:
    """Return True when a TZID means the calendar's local (JST) wall clock.

    A missing or empty TZID counts as the default zone.
    """
    return not tzid or tzid == DEFAULT_CALENDAR_TIMEZONE
