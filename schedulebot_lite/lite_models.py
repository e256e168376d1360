"""Data models for schedule building - schedulebot_lite."""

import json
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .lite_datetime_utils import to_iso_utc


class RawProperty(BaseModel):
    """A single ICS content line split into name, parameters and value."""

    name: str = Field(..., description="Upper-cased property name, e.g. DTSTART")
    params: dict[str, str] = Field(default_factory=dict, description="Parameters keyed upper-case")
    value: str = Field(default="", description="Raw value text after the first colon")


class RawEvent(BaseModel):
    """Properties collected between BEGIN:VEVENT and END:VEVENT.

    A property that appears more than once keeps its last occurrence.
    """

    properties: dict[str, RawProperty] = Field(default_factory=dict)

    def add(self, prop: RawProperty) -> None:
        """Store a property, replacing any earlier one with the same name."""
        self.properties[prop.name] = prop

    def get(self, name: str) -> Optional[RawProperty]:
        return self.properties.get(name.upper())

    def value(self, name: str, default: str = "") -> str:
        prop = self.get(name)
        return prop.value if prop is not None else default

    def param(self, name: str, key: str, default: str = "") -> str:
        prop = self.get(name)
        if prop is None:
            return default
        return prop.params.get(key.upper(), default)


class TitleParts(BaseModel):
    """Result of decoding a ``{memberId:platform}Title`` summary."""

    member_id: str = ""
    platform: str = ""
    title: str = ""


class MemberRecord(BaseModel):
    """Entry in the external member directory (read-only for the pipeline)."""

    id: str = Field(default="", description="Member identifier used in event titles")
    name: str = Field(default="", description="Display name")
    avatar: str = Field(default="", description="Avatar image path or URL")
    youtube: str = Field(default="", description="YouTube channel URL")
    twitch: str = Field(default="", description="Twitch channel URL")
    x: str = Field(default="", alias="X", description="X (Twitter) profile URL")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MemberSnapshot(BaseModel):
    """Denormalized member identity embedded in each output event as ``who``."""

    id: str
    name: str
    avatar: str


class DecodedEvent(BaseModel):
    """Normalized stream event as published in the schedule document."""

    start_utc: datetime = Field(..., alias="startUtc", description="Start instant (aware UTC)")
    date_text: str = Field(..., alias="dateText", description="JST date, e.g. 2030/01/01（火）")
    time_text: str = Field(..., alias="timeText", description="JST time, e.g. 21:00")
    title: str
    member_id: str = Field(..., alias="memberId")
    platform: str
    link: str = ""
    who: MemberSnapshot

    model_config = ConfigDict(populate_by_name=True)

    @property
    def sort_key(self) -> str:
        """Canonical ISO string; lexical order equals chronological order."""
        return to_iso_utc(self.start_utc)

    @field_serializer("start_utc")
    def serialize_start(self, dt: datetime) -> str:
        """Serialize start instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
        return to_iso_utc(dt)


class SkipReason(str, Enum):
    """Why an event was left out of the schedule."""

    MISSING_SUMMARY = "missing_summary"
    UNSUPPORTED_START = "unsupported_start"
    EXPIRED = "expired"


class SkippedEvent(BaseModel):
    """Per-event outcome for an event that was not published."""

    reason: SkipReason
    summary: str = ""
    detail: str = ""


# Outcome of decoding one raw event
EventOutcome = Union[DecodedEvent, SkippedEvent]


class ScheduleDocument(BaseModel):
    """The persisted schedule artifact read by the site and the posting bot."""

    generated_at_utc: datetime = Field(..., alias="generatedAtUtc")
    next_event: Optional[DecodedEvent] = Field(default=None, alias="next")
    events: list[DecodedEvent] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("generated_at_utc")
    def serialize_generated_at(self, dt: datetime) -> str:
        return to_iso_utc(dt)

    def to_dict(self) -> dict:
        """Return the JSON-ready mapping with published (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self) -> str:
        """Render the document the way it is written to disk."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


class FetchResult(BaseModel):
    """Raw feed text plus where it actually came from."""

    content: str
    source: str = Field(..., description="Final URL after redirects, or the local path")
    status_code: Optional[int] = None
    redirects: list[str] = Field(default_factory=list, description="URLs visited via redirect")
