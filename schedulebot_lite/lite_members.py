"""Member directory loading for schedulebot_lite.

The directory file is owned by the site (``data/members.json``) and maps member
ids to display data::

    {"1": {"name": "...", "avatar": "images/a.png", "youtube": "...", "twitch": ""}}

YAML with the same shape is accepted as well.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .lite_exceptions import LiteIOError
from .lite_models import MemberRecord

logger = logging.getLogger(__name__)


class MemberDirectory(Mapping[str, MemberRecord]):
    """Read-only id -> MemberRecord lookup."""

    def __init__(self, records: Mapping[str, MemberRecord] | None = None) -> None:
        self._records: dict[str, MemberRecord] = dict(records or {})

    def __getitem__(self, member_id: str) -> MemberRecord:
        return self._records[member_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MemberDirectory:
        """Build a directory from a plain mapping, skipping malformed entries."""
        records: dict[str, MemberRecord] = {}
        for raw_id, raw in data.items():
            member_id = str(raw_id)
            if not isinstance(raw, Mapping):
                logger.warning("Member %r is not a mapping; skipping", member_id)
                continue
            try:
                record = MemberRecord.model_validate({**raw, "id": member_id})
            except ValidationError as e:
                logger.warning("Member %r is invalid; skipping: %s", member_id, e)
                continue
            records[member_id] = record
        return cls(records)


def load_member_directory(path: str | Path | None) -> MemberDirectory:
    """Load the member directory from a JSON or YAML file.

    Behavior:
    - No path or missing file: empty directory (events fall back to the
      organization identity).
    - Top level is not a mapping: ValueError.
    - Unreadable file: LiteIOError.
    """
    if not path:
        return MemberDirectory()

    p = Path(path)
    if not p.exists():
        logger.info("Member file %s not found; using empty directory", p)
        return MemberDirectory()

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise LiteIOError(f"Cannot read member file {p}: {e}", path=str(p)) from e

    try:
        loaded = json.loads(text) if p.suffix.lower() == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Member file {p} is not valid JSON/YAML: {e}") from e
    if loaded is None:
        return MemberDirectory()
    if not isinstance(loaded, dict):
        raise ValueError("Member file must contain a mapping at top level")  # noqa: TRY004

    directory = MemberDirectory.from_dict(loaded)
    logger.debug("Loaded %d members from %s", len(directory), p)
    return directory
