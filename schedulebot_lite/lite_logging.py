"""
Central logging configuration for schedulebot_lite.

Keeps third-party HTTP client chatter out of CI logs while letting the
pipeline's own modules log at DEBUG when troubleshooting.
"""

import logging
import os
from typing import Optional

# Third-party libraries that log every request/connection at DEBUG
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def _env_debug() -> bool:
    return os.getenv("SCHEDULEBOT_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


def configure_lite_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logger levels for schedulebot_lite.

    Args:
        debug_mode: Whether to enable debug logging for schedulebot_lite modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        SCHEDULEBOT_DEBUG: Set to '1', 'true', 'yes' to force debug logging
    """
    if force_debug is not None:
        final_debug = force_debug
    else:
        final_debug = debug_mode or _env_debug()

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # NOTSET defers to the root level set by _init_logging
    logging.getLogger("schedulebot_lite").setLevel(logging.DEBUG if final_debug else logging.NOTSET)

    if final_debug:
        logging.getLogger(__name__).debug(
            "Debug logging enabled for schedulebot_lite; third-party debug logs suppressed"
        )


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ("schedulebot_lite", *NOISY_LOGGERS):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
