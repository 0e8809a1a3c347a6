"""
Application timeline state machine.

An ApplicationTimeline is an ordered, immutable sequence of TimelineEvents
in which at most one event is current. Every transition returns a new
timeline, so a half-applied advance is never observable.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import ValidationError

from skillsync.core.classification import badge_category
from skillsync.core.exceptions import InvalidTimeline, InvalidTransition
from skillsync.data.models import Application, FrozenModel, TimelineEvent, ensure_utc, utc_now
from skillsync.utils.constants import (
    DEFAULT_PIPELINE,
    BadgeCategory,
    EventStatus,
    Stage,
)
from skillsync.utils.logger import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400.0


class TimelineStep(FrozenModel):
    """Rendering state of one event."""

    stage: Stage
    status: EventStatus
    badge: BadgeCategory
    occurred_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    note: Optional[str] = None
    reachable: bool = True


class TimelineSnapshot(FrozenModel):
    """State of a timeline for progress indicators."""

    current_stage: Optional[Stage]
    is_terminal: bool
    is_rejected: bool
    progress: float  # percent of events completed
    steps: list[TimelineStep]


def _validate(events: Sequence[TimelineEvent]) -> None:
    if not events:
        raise InvalidTimeline("Timeline has no events")

    stages = [e.stage for e in events]
    if len(set(stages)) != len(stages):
        raise InvalidTimeline("Timeline lists a stage more than once")

    current = [i for i, e in enumerate(events) if e.status == EventStatus.CURRENT]
    rejected = [i for i, e in enumerate(events) if e.status == EventStatus.REJECTED]

    if len(current) > 1:
        raise InvalidTimeline(f"Timeline has {len(current)} current events")
    if len(rejected) > 1:
        raise InvalidTimeline(f"Timeline has {len(rejected)} rejected events")
    if current and rejected:
        raise InvalidTimeline("Timeline cannot be both in progress and rejected")

    pivots = current or rejected
    if not pivots:
        # Finished timelines only; a completed prefix with pending events has lost its current stage
        if any(e.status != EventStatus.COMPLETED for e in events):
            raise InvalidTimeline("Timeline has pending events but no current stage")
        return

    pivot = pivots[0]
    for i, event in enumerate(events):
        if i < pivot and event.status != EventStatus.COMPLETED:
            raise InvalidTimeline(
                f"{event.stage.value} is {event.status.value} before "
                f"{events[pivot].stage.value} ({events[pivot].status.value})"
            )
        if i > pivot and event.status != EventStatus.PENDING:
            raise InvalidTimeline(
                f"{event.stage.value} is {event.status.value} after "
                f"{events[pivot].stage.value} ({events[pivot].status.value})"
            )


def _stamp(at: Optional[datetime]) -> datetime:
    if at is None:
        return utc_now()
    if not isinstance(at, datetime):
        raise TypeError(f"Transition time must be a datetime, not {type(at).__name__}")
    return ensure_utc(at)


class ApplicationTimeline:
    """
    Validated stage timeline of one application.

    Invariants:
    - at most one event is current;
    - events before the current (or rejected) event are completed;
    - events after it are pending;
    - with no current or rejected event, every event is completed.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[TimelineEvent]):
        events = tuple(events)
        _validate(events)
        self._events = events

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def start(
        cls,
        stages: Sequence[Union[Stage, str]] = DEFAULT_PIPELINE,
        completed: int = 0,
        at: Optional[datetime] = None,
    ) -> "ApplicationTimeline":
        """
        Create a timeline at its initial state.

        Args:
            stages: Configured pipeline stages in order
            completed: Number of leading stages already completed
            at: Timestamp for the current stage (default: now)
        """
        try:
            parsed = [Stage.parse(s) for s in stages]
        except ValueError as e:
            raise InvalidTimeline(str(e)) from e
        if not 0 <= completed <= len(parsed):
            raise InvalidTimeline(f"Cannot complete {completed} of {len(parsed)} stages")

        events = []
        for i, stage in enumerate(parsed):
            if i < completed:
                events.append(TimelineEvent(stage=stage, status=EventStatus.COMPLETED))
            elif i == completed:
                events.append(
                    TimelineEvent(stage=stage, status=EventStatus.CURRENT, occurred_at=at or utc_now())
                )
            else:
                events.append(TimelineEvent(stage=stage, status=EventStatus.PENDING))
        return cls(events)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Union[TimelineEvent, dict[str, Any]]],
        application_id: Optional[str] = None,
    ) -> "ApplicationTimeline":
        """
        Build a timeline from stored event records.

        Raises:
            InvalidTimeline: An event is unparseable or the sequence is invalid.
        """
        events = []
        for position, record in enumerate(records):
            if isinstance(record, TimelineEvent):
                events.append(record)
                continue
            if not isinstance(record, dict):
                raise InvalidTimeline(f"Event {position} is not an object", application_id)
            try:
                events.append(TimelineEvent.from_record(record))
            except ValidationError as e:
                raise InvalidTimeline(
                    f"Event {position} is invalid: {e.errors()[0]['msg']}", application_id
                ) from e
        try:
            return cls(events)
        except InvalidTimeline as e:
            if application_id:
                raise InvalidTimeline(str(e), application_id) from e
            raise

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def events(self) -> tuple[TimelineEvent, ...]:
        return self._events

    @property
    def current_index(self) -> Optional[int]:
        for i, event in enumerate(self._events):
            if event.status == EventStatus.CURRENT:
                return i
        return None

    @property
    def current_stage(self) -> Optional[Stage]:
        index = self.current_index
        return None if index is None else self._events[index].stage

    @property
    def final_stage(self) -> Stage:
        return self._events[-1].stage

    @property
    def is_rejected(self) -> bool:
        return any(e.status == EventStatus.REJECTED for e in self._events)

    @property
    def is_complete(self) -> bool:
        """The final configured stage has been completed."""
        return self._events[-1].status == EventStatus.COMPLETED

    @property
    def is_terminal(self) -> bool:
        return self.is_rejected or self.is_complete

    @property
    def reached_offer(self) -> bool:
        """An offer was made (or the pipeline finished) without a rejection."""
        if self.is_rejected:
            return False
        if self.is_complete:
            return True
        return any(
            e.stage == Stage.OFFER and e.status in (EventStatus.CURRENT, EventStatus.COMPLETED)
            for e in self._events
        )

    @property
    def progress(self) -> float:
        done = sum(1 for e in self._events if e.status == EventStatus.COMPLETED)
        return round(100 * done / len(self._events), 1)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def advance(self, at: Optional[datetime] = None, note: Optional[str] = None) -> "ApplicationTimeline":
        """
        Complete the current stage and make the next one current.

        Advancing from the last stage completes the timeline.

        Raises:
            InvalidTransition: The timeline is already terminal.
        """
        index = self.current_index
        if index is None:
            raise InvalidTransition(f"Cannot advance a {self._terminal_label()} timeline")

        stamp = _stamp(at)
        events = list(self._events)
        events[index] = events[index].model_copy(
            update={"status": EventStatus.COMPLETED, "ended_at": stamp}
        )
        if index + 1 < len(events):
            update: dict[str, Any] = {"status": EventStatus.CURRENT, "occurred_at": stamp}
            if note is not None:
                update["note"] = note
            events[index + 1] = events[index + 1].model_copy(update=update)
        elif note is not None:
            events[index] = events[index].model_copy(update={"note": note})
        return ApplicationTimeline(events)

    def reject(self, at: Optional[datetime] = None, note: Optional[str] = None) -> "ApplicationTimeline":
        """
        Reject the application at its current stage.

        The stage keeps its start date and is closed at ``at`` (default: now).
        Later stages stay pending and become unreachable.

        Raises:
            InvalidTransition: The timeline is already terminal.
        """
        index = self.current_index
        if index is None:
            raise InvalidTransition(f"Cannot reject a {self._terminal_label()} timeline")

        events = list(self._events)
        update: dict[str, Any] = {
            "status": EventStatus.REJECTED,
            "ended_at": _stamp(at),
        }
        if note is not None:
            update["note"] = note
        events[index] = events[index].model_copy(update=update)
        return ApplicationTimeline(events)

    def _terminal_label(self) -> str:
        return "rejected" if self.is_rejected else "completed"

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def snapshot(self) -> TimelineSnapshot:
        """Rendering state of every step."""
        rejected_at = next(
            (i for i, e in enumerate(self._events) if e.status == EventStatus.REJECTED), None
        )
        steps = [
            TimelineStep(
                stage=e.stage,
                status=e.status,
                badge=badge_category(e.status),
                occurred_at=e.occurred_at,
                ended_at=e.ended_at,
                note=e.note,
                reachable=rejected_at is None or i <= rejected_at,
            )
            for i, e in enumerate(self._events)
        ]
        return TimelineSnapshot(
            current_stage=self.current_stage,
            is_terminal=self.is_terminal,
            is_rejected=self.is_rejected,
            progress=self.progress,
            steps=steps,
        )

    def stage_durations(self) -> dict[Stage, float]:
        """
        Days spent in each stage whose start and end are both recorded.

        A stage ends at its own ``ended_at`` or, failing that, when the next
        non-pending stage started.
        """
        durations: dict[Stage, float] = {}
        for i, event in enumerate(self._events):
            if event.occurred_at is None:
                continue
            end = event.ended_at
            if end is None and i + 1 < len(self._events):
                following = self._events[i + 1]
                if following.status != EventStatus.PENDING:
                    end = following.occurred_at
            if end is None:
                continue
            seconds = (end - event.occurred_at).total_seconds()
            if seconds < 0:
                logger.warning(f"{event.stage.value} ends before it starts; skipping")
                continue
            durations[event.stage] = seconds / SECONDS_PER_DAY
        return durations

    def to_records(self) -> list[dict[str, Any]]:
        """Serialize events the way the data source stores them."""
        return [e.model_dump(mode="json", by_alias=True, exclude_none=True) for e in self._events]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self._events)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApplicationTimeline):
            return NotImplemented
        return self._events == other._events

    def __hash__(self) -> int:
        return hash(self._events)

    def __repr__(self) -> str:
        states = ", ".join(f"{e.stage.value}:{e.status.value}" for e in self._events)
        return f"ApplicationTimeline([{states}])"


def derive_current_stage(timeline: ApplicationTimeline) -> Optional[Stage]:
    """Return the current stage, or None when the timeline is complete or rejected."""
    return timeline.current_stage


def load_timeline(application: Application) -> Optional[ApplicationTimeline]:
    """
    Build an application's timeline for rendering.

    Invalid stored timelines are reported as a data-integrity warning and
    yield None; applications without events also yield None.
    """
    if not application.timeline:
        return None
    try:
        return ApplicationTimeline.from_records(application.timeline, application.id)
    except InvalidTimeline as e:
        logger.warning(f"Data integrity: not rendering timeline: {e}")
        return None
