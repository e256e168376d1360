"""Unit tests for schedulebot_lite.lite_title_parser."""

import pytest

from schedulebot_lite.lite_title_parser import DEFAULT_TITLE, format_title, parse_title

pytestmark = pytest.mark.unit


def test_parse_title_when_structured_then_splits_parts() -> None:
    parts = parse_title("{7:T}Some Title")

    assert parts.member_id == "7"
    assert parts.platform == "T"
    assert parts.title == "Some Title"


def test_parse_title_when_formatted_then_round_trips() -> None:
    parts = parse_title(format_title("7", "T", "Some Title"))

    assert (parts.member_id, parts.platform, parts.title) == ("7", "T", "Some Title")


def test_parse_title_when_unbracketed_then_whole_text_is_title() -> None:
    parts = parse_title("Just Text")

    assert parts.member_id == ""
    assert parts.platform == ""
    assert parts.title == "Just Text"


def test_parse_title_when_lowercase_platform_then_uppercased() -> None:
    assert parse_title("{12:y}x").platform == "Y"


def test_parse_title_when_surrounding_whitespace_then_trimmed() -> None:
    parts = parse_title("  {1:Y}   エンドフィールド #4   ")

    assert parts.member_id == "1"
    assert parts.title == "エンドフィールド #4"


def test_parse_title_when_only_prefix_then_placeholder_title() -> None:
    parts = parse_title("{1:Y}   ")

    assert parts.member_id == "1"
    assert parts.title == DEFAULT_TITLE


@pytest.mark.parametrize(
    "summary",
    ["{a:Y}x", "{1:YT}x", "{1:}x", "{:Y}x", "prefix {1:Y}x", "{1:9}x", "{１:Y}x"],
)
def test_parse_title_when_malformed_prefix_then_not_decoded(summary: str) -> None:
    parts = parse_title(summary)

    assert parts.member_id == ""
    assert parts.platform == ""
    assert parts.title == summary.strip()
