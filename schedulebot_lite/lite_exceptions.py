"""Exception hierarchy for the schedulebot_lite pipeline.

Only run-level failures are modelled here. Problems with an individual
calendar event never raise; they are reported as ``SkippedEvent`` outcomes by
the assembler so that a partially corrupt feed degrades coverage instead of
aborting the run.
"""

from typing import Optional


class LiteScheduleError(Exception):
    """Base exception for all fatal schedule-build errors.

    The CLI maps any subclass to a non-zero exit status.
    """


class LiteConfigError(LiteScheduleError):
    """Configuration is incomplete or invalid.

    Raised when:
    - Neither a calendar URL nor a calendar file is configured
    - A config file exists but is not a mapping
    """


class LiteFetchError(LiteScheduleError):
    """Feed retrieval finished with a non-success HTTP status.

    Raised when:
    - The terminal response status is outside 2xx
    - The URL scheme is not http/https
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, url: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class LiteTooManyRedirectsError(LiteFetchError):
    """Redirect chain exceeded the configured hop limit."""


class LiteNetworkError(LiteScheduleError):
    """Transport-level failure (DNS resolution, connection refused, timeout)."""


class LiteIOError(LiteScheduleError):
    """Local filesystem read or write failed."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
