"""DateTime parsing utilities for ICS start values - schedulebot_lite.

Resolves DTSTART-style values into absolute UTC instants and formats them for
the published schedule.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from .timezone_utils import JST, JST_OFFSET, is_default_timezone

logger = logging.getLogger(__name__)

_DATE_ONLY_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$", re.ASCII)
_DATE_TIME_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})(Z)?$", re.ASCII)

# Monday-first, matching datetime.weekday()
_JA_WEEKDAYS = ("月", "火", "水", "木", "金", "土", "日")


def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware.

    Args:
        dt: Datetime to make timezone-aware

    Returns:
        Timezone-aware datetime (UTC if originally naive)
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def resolve_instant(value: str, tzid: Optional[str] = None) -> Optional[datetime]:
    """Convert an ICS date/time value into an aware UTC datetime.

    Recognized shapes:
        - ``YYYYMMDD``: all-day, returns None (not a timed stream)
        - ``YYYYMMDDTHHMMSSZ``: UTC
        - ``YYYYMMDDTHHMMSS`` with no TZID or TZID=Asia/Tokyo: JST wall clock
        - ``YYYYMMDDTHHMMSS`` with any other TZID: taken as UTC. This is an
          approximation; other zones are not converted.

    Args:
        value: Property value, e.g. ``20300101T210000``
        tzid: Optional TZID parameter of the property

    Returns:
        Datetime with ``tzinfo=timezone.utc``, or None when the value is all-day,
        malformed or out of range.
    """
    raw = (value or "").strip()

    if _DATE_ONLY_RE.match(raw):
        logger.debug("All-day value %r is not applicable", raw)
        return None

    m = _DATE_TIME_RE.match(raw)
    if not m:
        logger.debug("Unrecognized date/time value %r", raw)
        return None

    year, month, day, hour, minute, second = (int(g) for g in m.groups()[:6])
    is_utc = m.group(7) is not None

    try:
        wall = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError as e:
        logger.debug("Out-of-range date/time value %r: %s", raw, e)
        return None

    if is_utc:
        instant = wall
    elif is_default_timezone(tzid):
        instant = None
    else:
        logger.debug("TZID %r is not the calendar zone; treating %r as UTC", tzid, raw)
        instant = wall

    # Both the JST wall clock and the JST display must fit in datetime's range
    try:
        if instant is None:
            instant = wall - JST_OFFSET
        instant.astimezone(JST)
    except OverflowError:
        logger.debug("Date/time value %r overflows once shifted to JST", raw)
        return None

    return instant


def to_iso_utc(dt: datetime) -> str:
    """Format an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Millisecond precision and a fixed ``Z`` suffix make lexical comparison of
    the result equivalent to chronological comparison.
    """
    utc = ensure_timezone_aware(dt).astimezone(timezone.utc)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def format_jst_parts(dt: datetime) -> tuple[str, str]:
    """Return ``(dateText, timeText)`` for display in Japan Standard Time.

    Examples:
        >>> from datetime import datetime, timezone
        >>> format_jst_parts(datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc))
        ('2030/01/01（火）', '21:00')
    """
    local = ensure_timezone_aware(dt).astimezone(JST)
    weekday = _JA_WEEKDAYS[local.weekday()]
    date_text = f"{local:%Y/%m/%d}（{weekday}）"
    time_text = f"{local:%H:%M}"
    return date_text, time_text
