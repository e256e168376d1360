"""End-to-end tests for the schedule build pipeline."""

import json

import httpx
import pytest

from schedulebot_lite.config_loader import Config
from schedulebot_lite.lite_exceptions import LiteConfigError, LiteFetchError, LiteIOError
from schedulebot_lite.pipeline import build_schedule, run

pytestmark = pytest.mark.integration


class TestBuildSchedule:
    """Pipeline runs against local files and mocked HTTP."""

    @pytest.mark.asyncio
    async def test_build_from_file_writes_document(self, tmp_path, sample_ics_simple, fixed_now):
        ics = tmp_path / "cal.ics"
        ics.write_text(sample_ics_simple, encoding="utf-8")
        out = tmp_path / "data" / "schedule.json"
        config = Config(ics_file=str(ics), output_path=str(out), members_file="")

        document = await build_schedule(config, now=fixed_now)

        written = json.loads(out.read_text(encoding="utf-8"))
        assert written == document.to_dict()
        assert len(written["events"]) == 1
        event = written["events"][0]
        assert event["platform"] == "Y"
        assert event["title"] == "Game Night"
        assert event["memberId"] == "1"
        assert event["startUtc"] == "2030-01-01T12:00:00.000Z"
        assert written["next"] == event

    @pytest.mark.asyncio
    async def test_build_from_url_follows_redirect_and_uses_member_file(
        self, tmp_path, sample_ics_mixed, fixed_now
    ):
        members_file = tmp_path / "members.json"
        members_file.write_text(
            json.dumps({"2": {"name": "仁成ウツメ", "avatar": "images/utsume.png",
                              "youtube": "", "twitch": "https://www.twitch.tv/utsume"}}),
            encoding="utf-8",
        )

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/calendar/ical/basic.ics":
                return httpx.Response(302, headers={"Location": "/export/basic.ics"})
            return httpx.Response(200, text=sample_ics_mixed)

        out = tmp_path / "schedule.json"
        config = Config(
            ics_url="https://calendar.example.com/calendar/ical/basic.ics",
            output_path=str(out),
            members_file=str(members_file),
        )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            document = await build_schedule(config, now=fixed_now, client=client)

        titles = [e.title for e in document.events]
        assert titles == ["Guest collab", "Announcement", "参加型ゲーム", "Overseas"]
        games = document.events[2]
        assert games.link == "https://www.twitch.tv/utsume"
        assert games.who.name == "仁成ウツメ"
        assert out.exists()

    @pytest.mark.asyncio
    async def test_build_when_feed_fails_then_no_output_written(self, tmp_path, fixed_now):
        out = tmp_path / "schedule.json"
        config = Config(ics_url="https://calendar.example.com/x.ics", output_path=str(out))

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(503))
        ) as client:
            with pytest.raises(LiteFetchError) as exc_info:
                await build_schedule(config, members={}, now=fixed_now, client=client)

        assert exc_info.value.status_code == 503
        assert not out.exists()

    @pytest.mark.asyncio
    async def test_build_when_no_source_then_config_error(self, tmp_path):
        with pytest.raises(LiteConfigError):
            await build_schedule(Config(output_path=str(tmp_path / "s.json")), members={})

    @pytest.mark.asyncio
    async def test_build_when_calendar_file_missing_then_io_error(self, tmp_path):
        config = Config(ics_file=str(tmp_path / "missing.ics"), output_path=str(tmp_path / "s.json"))

        with pytest.raises(LiteIOError):
            await build_schedule(config, members={})


def test_run_uses_test_time_override(tmp_path, monkeypatch, sample_ics_simple):
    """run() is the synchronous entry used by the CLI."""
    monkeypatch.setenv("SCHEDULEBOT_TEST_TIME", "2030-01-01T12:01:30Z")
    ics = tmp_path / "cal.ics"
    ics.write_text(sample_ics_simple, encoding="utf-8")
    config = Config(ics_file=str(ics), output_path=str(tmp_path / "s.json"), members_file="")

    document = run(config)

    # started 90 seconds ago: still inside the grace window
    assert len(document.events) == 1
    assert document.to_dict()["generatedAtUtc"] == "2030-01-01T12:01:30.000Z"
