"""schedulebot_lite.config_loader

Configuration for a schedule build.

- Values come from an optional YAML file, then environment variables, then
  CLI overrides (later sources win).
- Exposes a typed dataclass `Config` and a `load_config()` helper.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from .lite_exceptions import LiteConfigError

logger = logging.getLogger(__name__)

# Environment variable -> Config field
ENV_VARS: dict[str, str] = {
    "CALENDAR_ICS_URL": "ics_url",
    "CALENDAR_ICS_FILE": "ics_file",
    "SCHEDULE_OUTPUT_PATH": "output_path",
    "SCHEDULE_MEMBERS_FILE": "members_file",
    "SCHEDULEBOT_LOG_LEVEL": "log_level",
}


@dataclass
class Config:
    """Typed configuration for one schedule build.

    Fields:
        ics_url: calendar feed URL
        ics_file: local calendar file; takes precedence over ics_url
        output_path: where the schedule JSON is written
        members_file: member directory (JSON or YAML)
        max_events: cap on published events
        grace_seconds: how long a started event stays listed
        max_redirects: redirect hops allowed when fetching ics_url
        request_timeout: HTTP timeout in seconds
        user_agent: User-Agent header sent with feed requests
        log_level: logging level name
    """

    ics_url: str = ""
    ics_file: str = ""
    output_path: str = "data/schedule.json"
    members_file: str = "data/members.json"
    max_events: int = 30
    grace_seconds: int = 120
    max_redirects: int = 5
    request_timeout: float = 30.0
    user_agent: str = "lunariafactory-schedule-bot/1.0"
    log_level: str = "INFO"

    @property
    def calendar_source(self) -> str:
        """The source that drives retrieval: the file if set, else the URL."""
        return self.ics_file or self.ics_url

    def require_source(self) -> str:
        """Return the calendar source or raise LiteConfigError if none is set."""
        source = self.calendar_source
        if not source:
            raise LiteConfigError("CALENDAR_ICS_URL or CALENDAR_ICS_FILE is required.")
        return source

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None, base: Config | None = None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Unknown keys are ignored. Numeric values are coerced; a value that cannot
        be coerced keeps the default and logs a warning.
        """
        base = base or cls()
        if not data:
            return base

        def _coerce(key: str, kind: type, default: Any) -> Any:
            raw = data.get(key, default)
            if raw is None:
                return default
            try:
                return kind(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not a %s; using default %r", key, raw, kind.__name__, default)
                return default

        max_events = _coerce("max_events", int, base.max_events)
        if max_events < 1:
            logger.warning("max_events %d below minimum; coercing to 1", max_events)
            max_events = 1

        max_redirects = _coerce("max_redirects", int, base.max_redirects)
        if max_redirects < 0:
            logger.warning("max_redirects %d below minimum; coercing to 0", max_redirects)
            max_redirects = 0

        return replace(
            base,
            ics_url=_coerce("ics_url", str, base.ics_url).strip(),
            ics_file=_coerce("ics_file", str, base.ics_file).strip(),
            output_path=_coerce("output_path", str, base.output_path),
            members_file=_coerce("members_file", str, base.members_file),
            max_events=max_events,
            grace_seconds=_coerce("grace_seconds", int, base.grace_seconds),
            max_redirects=max_redirects,
            request_timeout=_coerce("request_timeout", float, base.request_timeout),
            user_agent=_coerce("user_agent", str, base.user_agent),
            log_level=_coerce("log_level", str, base.log_level).upper(),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, base: Config | None = None) -> Config:
        """Overlay values from environment variables (empty values are ignored)."""
        env = os.environ if environ is None else environ
        data = {field: env[var] for var, field in ENV_VARS.items() if env.get(var)}
        return cls.from_dict(data, base=base)


def _load_yaml(path: Path) -> Any:
    """Load a YAML (or JSON) document; empty files load as an empty mapping."""
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    return {} if loaded is None else loaded


def load_config(
    path: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Load configuration from file, environment and explicit overrides.

    Args:
        path: Optional YAML/JSON config file. A missing file is not an error.
        environ: Environment mapping (defaults to os.environ)
        overrides: Highest-priority values, typically from the CLI; None values
            are ignored

    Raises:
        LiteConfigError: if the config file's top level is not a mapping
    """
    cfg = Config()
    if path:
        p = Path(path)
        if p.exists():
            raw = _load_yaml(p)
            if not isinstance(raw, dict):
                logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
                raise LiteConfigError("Config file must contain a mapping at top level")
            cfg = Config.from_dict(raw, base=cfg)
            logger.info("Loaded configuration from %s", p)
        else:
            logger.info("Config file %s not found; using defaults", p)

    cfg = Config.from_env(environ, base=cfg)
    if overrides:
        cfg = Config.from_dict({k: v for k, v in overrides.items() if v is not None}, base=cfg)

    logger.debug("Configuration values: %s", cfg)
    return cfg
