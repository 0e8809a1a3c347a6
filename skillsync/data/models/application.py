"""
Application, job and revenue data models for SkillSync.

These mirror the records returned by the SkillSync data source. Timeline
events are validated individually here; sequence-level invariants are
enforced by ApplicationTimeline.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, TypeAdapter, ValidationError, field_validator, model_validator

from skillsync.utils.constants import UNKNOWN_STATUS, EventStatus, Stage
from skillsync.utils.logger import get_logger

from .base import ApiModel, FrozenModel, UtcDatetime

logger = get_logger(__name__)

# Dates as shown on timeline cards, e.g. "Jan 15, 2024"
DISPLAY_DATE_FORMATS = ("%Y-%m-%d", "%b %d, %Y", "%B %d, %Y", "%m/%d/%Y")

_datetime_adapter = TypeAdapter(datetime)


def parse_event_date(text: str) -> Optional[datetime]:
    """Parse an ISO 8601 or display-format date; None when neither matches."""
    try:
        return _datetime_adapter.validate_python(text)
    except ValidationError:
        pass
    for fmt in DISPLAY_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


class TimelineEvent(FrozenModel):
    """A single stage of an application's timeline."""

    stage: Stage
    status: EventStatus = EventStatus.PENDING
    occurred_at: Optional[UtcDatetime] = None
    ended_at: Optional[UtcDatetime] = None
    note: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def lenient_dates(cls, data: Any) -> Any:
        """
        Normalize date strings.

        Blank dates become None. A date that cannot be parsed is dropped with
        a warning and its raw text is kept in the note.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for camel, snake in (("occurredAt", "occurred_at"), ("endedAt", "ended_at")):
            key = camel if camel in data else snake
            raw = data.get(key)
            if not isinstance(raw, str):
                continue
            text = raw.strip()
            parsed = parse_event_date(text) if text else None
            data[key] = parsed
            if text and parsed is None:
                logger.warning(f"Unparseable timeline date {raw!r} for {data.get('stage')}; keeping it in the note")
                note = data.get("note")
                data["note"] = f"{note} ({text})" if note else text
        return data

    @field_validator("stage", mode="before")
    @classmethod
    def parse_stage(cls, v: Any) -> Stage:
        return Stage.parse(v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "TimelineEvent":
        """Build an event from a stored record; ``date`` is accepted for ``occurredAt``."""
        data = dict(record)
        if "occurredAt" not in data and "occurred_at" not in data and "date" in data:
            data["occurredAt"] = data.pop("date")
        return cls.model_validate(data)


class StatusChange(FrozenModel):
    """One coarse status move recorded on an application."""

    from_status: str
    to_status: str
    changed_at: UtcDatetime
    changed_by: str = "System"
    note: Optional[str] = None


class Application(ApiModel):
    """A job seeker's application to a job."""

    id: Optional[str] = None
    job_id: Optional[str] = None
    job_seeker_id: Optional[str] = None
    status: str = "applied"
    source: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    timeline: list[Any] = Field(default_factory=list)
    history: list[StatusChange] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        if v is None:
            return UNKNOWN_STATUS
        if isinstance(v, str):
            return v.strip().lower() or UNKNOWN_STATUS
        return getattr(v, "value", v)

    @field_validator("timeline", mode="before")
    @classmethod
    def null_timeline_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class JobPosting(ApiModel):
    """A job posted by an employer."""

    id: str
    title: str
    employer_id: Optional[str] = None
    status: str = "active"


class RevenueRecord(ApiModel):
    """A subscription payment."""

    amount: float
    occurred_at: UtcDatetime
    subscription_id: Optional[str] = None
