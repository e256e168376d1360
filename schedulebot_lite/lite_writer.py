"""Persist the schedule document as JSON with atomic replace."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from .lite_exceptions import LiteIOError
from .lite_models import ScheduleDocument

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "data/schedule.json"


def write_schedule(document: ScheduleDocument, path: str | Path = DEFAULT_OUTPUT_PATH) -> Path:
    """Write the document to ``path``, creating parent directories.

    Writes to a temporary file in the same directory then Path.replace()s it
    into place so readers never see a half-written file on POSIX filesystems.

    Returns:
        The resolved output path

    Raises:
        LiteIOError: if the directory cannot be created or the file written
    """
    out = Path(path)
    payload = document.to_json()

    tmp_path: Path | None = None
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", dir=out.parent, prefix=f".{out.name}.", suffix=".tmp", delete=False, encoding="utf-8"
        ) as tf:
            tmp_path = Path(tf.name)
            tf.write(payload)
            tf.flush()
            with contextlib.suppress(OSError):
                os.fsync(tf.fileno())
        tmp_path.replace(out)
    except OSError as e:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
        raise LiteIOError(f"Failed to write schedule to {out}: {e}", path=str(out)) from e

    logger.debug("Wrote %d bytes to %s", len(payload.encode("utf-8")), out)
    return out
