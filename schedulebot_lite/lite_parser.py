"""Tolerant iCalendar line parser - schedulebot_lite version.

Only the subset of RFC 5545 the schedule needs is handled: line unfolding and
splitting VEVENT blocks into name/parameter/value properties. Malformed lines
are skipped rather than reported.
"""

import logging
from typing import Optional

from icalendar.parser import Contentline

from .lite_models import RawEvent, RawProperty

logger = logging.getLogger(__name__)

BEGIN_EVENT = "BEGIN:VEVENT"
END_EVENT = "END:VEVENT"


def unfold_ics(text: str) -> list[str]:
    """Reassemble folded physical lines into logical lines.

    A line starting with a space or tab continues the previous logical line;
    exactly one leading whitespace character is removed. Empty lines are
    dropped. A continuation with nothing before it starts a new line.

    Args:
        text: Raw ICS text with any line-ending convention

    Returns:
        Logical lines in order
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    out: list[str] = []
    for line in normalized.split("\n"):
        if not line:
            continue
        if line[0] in (" ", "\t") and out:
            out[-1] += line[1:]
        else:
            out.append(line)
    return out


def parse_property_line(line: str) -> Optional[RawProperty]:
    """Split ``NAME;KEY=VALUE:value`` into a RawProperty.

    Tokenizing is delegated to icalendar's content-line parser, so quoted
    parameter values are unquoted and the value may contain colons.
    Parameters with an empty value are dropped.

    Returns:
        The property, or None when icalendar cannot split the line
    """
    try:
        name, parameters, value = Contentline(line).parts()
    except ValueError:
        logger.debug("Skipping malformed content line: %r", line[:80])
        return None

    name = name.strip().upper()
    if not name:
        return None

    params: dict[str, str] = {}
    for key, param_value in parameters.items():
        if isinstance(param_value, (list, tuple)):
            param_value = ",".join(str(v) for v in param_value)
        if param_value:
            params[str(key).upper()] = str(param_value)

    return RawProperty(name=name, params=params, value=value)


def parse_event_blocks(lines: list[str]) -> list[RawEvent]:
    """Collect VEVENT blocks from logical lines.

    A BEGIN:VEVENT while an event is already open discards the unterminated
    event. Lines outside any event and lines without a colon are ignored.
    """
    events: list[RawEvent] = []
    current: Optional[RawEvent] = None

    for line in lines:
        if line == BEGIN_EVENT:
            if current is not None:
                logger.debug("Discarding unterminated VEVENT (%d properties)", len(current.properties))
            current = RawEvent()
            continue
        if line == END_EVENT:
            if current is not None:
                events.append(current)
            current = None
            continue
        if current is None:
            continue
        # nested components (VALARM) only contribute their inner properties
        if line.startswith(("BEGIN:", "END:")):
            continue

        prop = parse_property_line(line)
        if prop is None:
            continue
        current.add(prop)

    if current is not None:
        logger.debug("Feed ended inside an unterminated VEVENT; dropped")

    return events


def parse_ics(text: str) -> list[RawEvent]:
    """Unfold and parse ICS text into raw events. Never raises on bad input."""
    lines = unfold_ics(text)
    events = parse_event_blocks(lines)
    logger.debug("Parsed %d VEVENT blocks from %d logical lines", len(events), len(lines))
    return events
