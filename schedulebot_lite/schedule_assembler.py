"""Turn raw calendar events into the published schedule document."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Optional

from .lite_datetime_utils import ensure_timezone_aware, format_jst_parts, resolve_instant
from .lite_models import (
    DecodedEvent,
    EventOutcome,
    MemberRecord,
    MemberSnapshot,
    RawEvent,
    ScheduleDocument,
    SkippedEvent,
    SkipReason,
)
from .lite_title_parser import parse_title
from .timezone_utils import now_utc

logger = logging.getLogger(__name__)

MAX_EVENTS = 30
GRACE_PERIOD = timedelta(minutes=2)

PLATFORM_YOUTUBE = "Y"
PLATFORM_TWITCH = "T"

FALLBACK_MEMBER_ID = "0"
FALLBACK_MEMBER_NAME = "Lunaria Factory"
FALLBACK_AVATAR = "images/sample2.png"


class ScheduleAssembler:
    """Decode, filter, sort and cap events into a ScheduleDocument.

    Individual events that cannot be published are returned as SkippedEvent
    outcomes; assembly itself never fails.
    """

    def __init__(
        self,
        members: Optional[Mapping[str, MemberRecord]] = None,
        max_events: int = MAX_EVENTS,
        grace: timedelta = GRACE_PERIOD,
        fallback: Optional[MemberSnapshot] = None,
        default_platform: str = PLATFORM_YOUTUBE,
    ) -> None:
        """Initialize assembler.

        Args:
            members: Member lookup by id (e.g. a MemberDirectory)
            max_events: Maximum number of events kept in the document
            grace: How long after its start an event is still listed
            fallback: Identity used when the member id is unknown
            default_platform: Platform code used when the title has none
        """
        self.members: Mapping[str, MemberRecord] = members if members is not None else {}
        self.max_events = max_events
        self.grace = grace
        self.fallback = fallback or MemberSnapshot(
            id=FALLBACK_MEMBER_ID, name=FALLBACK_MEMBER_NAME, avatar=FALLBACK_AVATAR
        )
        self.default_platform = default_platform

    def _who(self, member_id: str) -> MemberSnapshot:
        member = self.members.get(member_id) if member_id else None
        if member is not None:
            return MemberSnapshot(id=member_id, name=member.name, avatar=member.avatar)
        return MemberSnapshot(
            id=member_id or self.fallback.id,
            name=self.fallback.name,
            avatar=self.fallback.avatar,
        )

    def pick_link(self, member_id: str, platform: str, explicit_url: str = "") -> str:
        """Resolve the stream link.

        Precedence: explicit event URL/LOCATION, then the member's Twitch URL for
        platform T or YouTube URL otherwise, then empty string.
        """
        if explicit_url:
            return explicit_url
        member = self.members.get(member_id) if member_id else None
        if member is None:
            return ""
        if platform == PLATFORM_TWITCH:
            return member.twitch or ""
        return member.youtube or ""

    def decode_event(self, raw: RawEvent, now: datetime) -> EventOutcome:
        """Decode a single raw event or explain why it is skipped."""
        summary = raw.value("SUMMARY")
        if not summary:
            return SkippedEvent(reason=SkipReason.MISSING_SUMMARY)

        parts = parse_title(summary)

        start_value = raw.value("DTSTART")
        start = resolve_instant(start_value, raw.param("DTSTART", "TZID") or None)
        if start is None:
            return SkippedEvent(
                reason=SkipReason.UNSUPPORTED_START,
                summary=summary,
                detail=f"DTSTART={start_value!r}",
            )

        if start < ensure_timezone_aware(now) - self.grace:
            return SkippedEvent(reason=SkipReason.EXPIRED, summary=summary, detail=start.isoformat())

        explicit_url = raw.value("URL") or raw.value("LOCATION")
        date_text, time_text = format_jst_parts(start)
        who = self._who(parts.member_id)

        return DecodedEvent(
            start_utc=start,
            date_text=date_text,
            time_text=time_text,
            title=parts.title,
            member_id=who.id,
            platform=parts.platform or self.default_platform,
            link=self.pick_link(parts.member_id, parts.platform, explicit_url),
            who=who,
        )

    def assemble(
        self, raw_events: Iterable[RawEvent], now: Optional[datetime] = None
    ) -> ScheduleDocument:
        """Build the schedule document from parsed calendar events.

        Args:
            raw_events: Events from the block parser
            now: Reference time for the grace filter and generatedAtUtc

        Returns:
            Document with at most ``max_events`` events, ascending by start
        """
        now = ensure_timezone_aware(now or now_utc())

        decoded: list[DecodedEvent] = []
        skipped: Counter[str] = Counter()
        for raw in raw_events:
            outcome = self.decode_event(raw, now)
            if isinstance(outcome, SkippedEvent):
                skipped[outcome.reason.value] += 1
                logger.debug(
                    "Skipped event (%s): %s %s", outcome.reason.value, outcome.summary, outcome.detail
                )
                continue
            decoded.append(outcome)

        decoded.sort(key=lambda e: e.sort_key)
        events = decoded[: self.max_events]

        logger.info(
            "Assembled %d events (%d eligible, skipped: %s)",
            len(events),
            len(decoded),
            dict(skipped) or "none",
        )

        return ScheduleDocument(
            generated_at_utc=now,
            next_event=events[0] if events else None,
            events=events,
        )
