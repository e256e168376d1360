"""Command-line entry for schedulebot_lite.

Builds ``data/schedule.json`` once and exits:

    0  schedule written
    1  fetch, I/O or configuration error
    2  no calendar source configured
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional

from . import _init_logging
from .config_loader import load_config
from .lite_exceptions import LiteConfigError, LiteScheduleError
from .lite_logging import configure_lite_logging
from .pipeline import run

logger = logging.getLogger("schedulebot_lite")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_SOURCE = 2


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the schedulebot_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="schedulebot",
        description="Build the stream schedule JSON from an ICS calendar feed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  CALENDAR_ICS_URL=https://.../basic.ics python -m schedulebot_lite
  python -m schedulebot_lite --file calendar.ics --output data/schedule.json
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", dest="ics_url", metavar="URL", help="Calendar ICS URL (env: CALENDAR_ICS_URL)")
    source.add_argument("--file", dest="ics_file", metavar="PATH", help="Local ICS file (env: CALENDAR_ICS_FILE)")
    parser.add_argument("--output", dest="output_path", metavar="PATH", help="Output JSON path (default: data/schedule.json)")
    parser.add_argument("--members", dest="members_file", metavar="PATH", help="Member directory JSON/YAML (default: data/members.json)")
    parser.add_argument("--config", metavar="PATH", help="Optional YAML config file")
    parser.add_argument("--log-level", dest="log_level", metavar="LEVEL", help="Logging level (env: SCHEDULEBOT_LOG_LEVEL)")

    return parser


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run one schedule build and exit with its status code."""
    args = _create_parser().parse_args(argv)

    overrides = {
        "ics_url": args.ics_url,
        "ics_file": args.ics_file,
        "output_path": args.output_path,
        "members_file": args.members_file,
        "log_level": args.log_level,
    }

    try:
        config = load_config(args.config, overrides=overrides)
    except LiteConfigError as exc:
        _init_logging(args.log_level)
        logger.error("ERROR: %s", exc)
        sys.exit(EXIT_FAILURE)

    _init_logging(config.log_level)
    configure_lite_logging(debug_mode=config.log_level == "DEBUG")

    if not config.calendar_source:
        logger.error("ERROR: CALENDAR_ICS_URL or CALENDAR_ICS_FILE is required.")
        sys.exit(EXIT_NO_SOURCE)

    try:
        run(config)
    except (LiteScheduleError, ValueError):
        # ValueError: malformed member directory
        logger.exception("Schedule build failed")
        sys.exit(EXIT_FAILURE)

    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
