"""Application lifecycle module: stage timelines and the coarse status pipeline."""

from .lifecycle import (
    ApplicationTimeline,
    TimelineSnapshot,
    TimelineStep,
    derive_current_stage,
    load_timeline,
)
from .status_pipeline import (
    applications_by_status,
    bulk_change_status,
    change_status,
    is_valid_transition,
)

__all__ = [
    "ApplicationTimeline",
    "TimelineSnapshot",
    "TimelineStep",
    "derive_current_stage",
    "load_timeline",
    "applications_by_status",
    "bulk_change_status",
    "change_status",
    "is_valid_transition",
]
