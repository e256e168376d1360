"""Single-run schedule build: fetch, parse, assemble, write."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta

import httpx

from .config_loader import Config
from .lite_fetcher import LiteFeedFetcher
from .lite_members import load_member_directory
from .lite_models import MemberRecord, ScheduleDocument
from .lite_parser import parse_ics
from .lite_writer import write_schedule
from .schedule_assembler import ScheduleAssembler

logger = logging.getLogger(__name__)


async def build_schedule(
    config: Config,
    members: Mapping[str, MemberRecord] | None = None,
    now: datetime | None = None,
    client: httpx.AsyncClient | None = None,
) -> ScheduleDocument:
    """Run the pipeline once and write the schedule JSON.

    Args:
        config: Build configuration; must name a calendar source
        members: Member lookup; loaded from ``config.members_file`` when None
        now: Reference time (defaults to the current UTC time)
        client: Optional shared httpx client (left open)

    Returns:
        The document that was written

    Raises:
        LiteConfigError: no calendar source configured
        LiteFetchError, LiteNetworkError: feed retrieval failed
        LiteIOError: calendar, member or output file I/O failed
    """
    source = config.require_source()

    if members is None:
        members = load_member_directory(config.members_file)

    async with LiteFeedFetcher(config, shared_client=client) as fetcher:
        fetched = await fetcher.retrieve(source)

    raw_events = parse_ics(fetched.content)
    logger.debug("Parsed %d raw events from %s", len(raw_events), fetched.source)

    assembler = ScheduleAssembler(
        members=members,
        max_events=config.max_events,
        grace=timedelta(seconds=config.grace_seconds),
    )
    document = assembler.assemble(raw_events, now=now)

    out = write_schedule(document, config.output_path)
    logger.info("Wrote %s (events=%d)", out, len(document.events))
    return document


def run(config: Config) -> ScheduleDocument:
    """Synchronous wrapper used by the CLI."""
    return asyncio.run(build_schedule(config))
