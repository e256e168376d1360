"""Structured summary decoding for stream events.

Calendar editors encode who is streaming and where in the event summary::

    {1:Y}Endfield #4      member 1 on YouTube
    {2:T}Viewer games     member 2 on Twitch
"""

import logging
import re

from .lite_models import TitleParts

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"^\{(\d+):([A-Za-z])\}(.*)$", re.DOTALL | re.ASCII)

# Shown when the summary carries only the {id:P} prefix
DEFAULT_TITLE = "配信"


def parse_title(summary: str) -> TitleParts:
    """Decode ``{memberId:platform}Title`` from an event summary.

    Summaries that do not follow the convention are kept whole as the title
    with empty member id and platform.
    """
    text = (summary or "").strip()
    m = _TITLE_RE.match(text)
    if not m:
        return TitleParts(member_id="", platform="", title=text)

    title = m.group(3).strip() or DEFAULT_TITLE
    return TitleParts(member_id=m.group(1), platform=m.group(2).upper(), title=title)


def format_title(member_id: str, platform: str, title: str) -> str:
    """Build a summary in the structured convention (inverse of parse_title)."""
    return f"{{{member_id}:{platform}}}{title}"
