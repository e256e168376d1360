"""schedulebot_lite - builds the stream schedule JSON from a Google Calendar ICS feed.

Pipeline: fetch feed -> unfold/parse VEVENTs -> decode ``{id:P}Title`` summaries
-> filter/sort/cap -> write ``data/schedule.json``.
"""

__version__ = "1.0.0"

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Honors the SCHEDULEBOT_DEBUG environment variable (truthy values: "1",
    "true", "yes", "on") which forces DEBUG verbosity.
    """
    debug_env = os.environ.get("SCHEDULEBOT_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none are present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message  (only the level is colorized)
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
