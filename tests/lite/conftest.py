import logging
from collections.abc import Generator
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest

from schedulebot_lite.lite_members import MemberDirectory
from schedulebot_lite.lite_models import MemberRecord


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast isolated unit tests")
    config.addinivalue_line("markers", "integration: end-to-end pipeline tests")


@pytest.fixture
def simple_settings() -> SimpleNamespace:
    """Lightweight settings object for the fetcher.

    Fields:
      - request_timeout: HTTP timeout in seconds
      - max_redirects: redirect hop cap
      - user_agent: User-Agent header sent with each request
    """
    return SimpleNamespace(
        request_timeout=5,
        max_redirects=5,
        user_agent="schedulebot-lite-test/1.0",
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic reference time well before the sample events."""
    return datetime(2030, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def members() -> MemberDirectory:
    """Two-member directory mirroring the production members.json shape."""
    return MemberDirectory(
        {
            "1": MemberRecord(
                id="1",
                name="もにぃ",
                avatar="images/monii.png",
                youtube="https://www.youtube.com/channel/UC-monii",
                twitch="https://www.twitch.tv/monii_friends",
            ),
            "2": MemberRecord(
                id="2",
                name="仁成ウツメ",
                avatar="images/utsume.png",
                youtube="https://www.youtube.com/channel/UC-utsume",
                twitch="",
            ),
        }
    )


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep pipeline environment variables from leaking into tests."""
    for var in (
        "SCHEDULEBOT_TEST_TIME",
        "SCHEDULEBOT_DEBUG",
        "SCHEDULEBOT_LOG_LEVEL",
        "CALENDAR_ICS_URL",
        "CALENDAR_ICS_FILE",
        "SCHEDULE_OUTPUT_PATH",
        "SCHEDULE_MEMBERS_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def restore_levels() -> Generator[None, Any, None]:
    """Restore logger levels changed by logging setup under test."""
    names = ["", "schedulebot_lite", "httpx", "httpcore", "asyncio"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


# ==================== ICS Test Data Fixtures ====================


@pytest.fixture
def sample_ics_simple() -> str:
    """
    Return a calendar with one structured-title event.

    Returns:
        ICS string with one event:
        - Summary {1:Y}Game Night at 2030-01-01 12:00 UTC
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Google Inc//Google Calendar 70.9054//EN
BEGIN:VEVENT
DTSTART:20300101T120000Z
DTEND:20300101T140000Z
UID:game-night@google.com
SUMMARY:{1:Y}Game Night
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_mixed() -> str:
    """
    Return a CRLF calendar exercising every start shape and skip reason.

    Events (in feed order):
        - JST wall clock with TZID=Asia/Tokyo, Twitch, folded summary
        - all-day event (skipped)
        - UTC event with explicit URL, unknown member
        - event without SUMMARY (skipped)
        - unstructured summary, floating time (JST)
        - America/New_York TZID (treated as UTC)
    """
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "BEGIN:VTIMEZONE",
        "TZID:Asia/Tokyo",
        "END:VTIMEZONE",
        "BEGIN:VEVENT",
        "DTSTART;TZID=Asia/Tokyo:20300105T210000",
        "SUMMARY:{2:t}参加型",
        " ゲーム",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART;VALUE=DATE:20300103",
        "SUMMARY:{1:Y}All day",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART:20300102T030000Z",
        "SUMMARY:{9:Y}Guest collab",
        "URL:https://example.com/watch?v=abc",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART:20300104T000000Z",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART:20300103T200000",
        "SUMMARY:Announcement",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART;TZID=America/New_York:20300106T090000",
        "SUMMARY:{1:Y}Overseas",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"
