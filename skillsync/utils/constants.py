"""
Application-wide constants for SkillSync.

This module contains all constant values used throughout the package.
Modify these values to customize behavior without changing code logic.
"""

import re
from enum import Enum
from typing import Any, Final, Optional


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "SkillSync"
APP_DISPLAY_NAME: Final[str] = "SkillSync Match & Application Lifecycle"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Scoring Constants
# =============================================================================

# Lower bound (inclusive) of each tier on the 0-100 match score scale
SCORE_TIER_THRESHOLDS: Final[dict[str, int]] = {
    "high": 90,
    "medium": 70,
}

MIN_MATCH_SCORE: Final[int] = 0
MAX_MATCH_SCORE: Final[int] = 100


# =============================================================================
# Pipeline Constants
# =============================================================================

# Applications without a recorded source
DEFAULT_SOURCE: Final[str] = "Direct"

# Bucket for applications whose stored status is null or blank
UNKNOWN_STATUS: Final[str] = "unknown"

# Coarse statuses that count as a conversion when no timeline is recorded
CONVERTED_STATUSES: Final[frozenset[str]] = frozenset({"offer", "hired", "accepted"})

# Job status that counts as an active posting
ACTIVE_JOB_STATUS: Final[str] = "active"

# Chart buckets: (label, status)
FUNNEL_STEPS: Final[tuple[tuple[str, str], ...]] = (
    ("Applied", "applied"),
    ("Reviewing", "reviewing"),
    ("Interview", "interview"),
    ("Accepted", "accepted"),
)

ACCEPTANCE_SLICES: Final[tuple[tuple[str, str], ...]] = (
    ("Accepted", "accepted"),
    ("Interview", "interview"),
    ("Reviewing", "reviewing"),
    ("Rejected", "rejected"),
)


# =============================================================================
# Enums
# =============================================================================


class MatchTier(str, Enum):
    """Presentation tier of a match score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: float) -> "MatchTier":
        """Convert a 0-100 match score to a tier."""
        if score >= SCORE_TIER_THRESHOLDS["high"]:
            return cls.HIGH
        elif score >= SCORE_TIER_THRESHOLDS["medium"]:
            return cls.MEDIUM
        return cls.LOW


class BadgeCategory(str, Enum):
    """Badge colour family for a lifecycle status."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# Status -> badge lookup, keyed by lowercase status
STATUS_BADGES: Final[dict[str, BadgeCategory]] = {
    "accepted": BadgeCategory.POSITIVE,
    "completed": BadgeCategory.POSITIVE,
    "interview": BadgeCategory.POSITIVE,
    "offer": BadgeCategory.POSITIVE,
    "hired": BadgeCategory.POSITIVE,
    "applied": BadgeCategory.NEUTRAL,
    "reviewing": BadgeCategory.NEUTRAL,
    "current": BadgeCategory.NEUTRAL,
    "pending": BadgeCategory.NEUTRAL,
    "rejected": BadgeCategory.NEGATIVE,
}


def _stage_key(value: str) -> str:
    return re.sub(r"[^a-z]", "", value.lower())


class Stage(str, Enum):
    """Named step of the hiring pipeline."""

    APPLIED = "Applied"
    RESUME_REVIEWED = "Resume Reviewed"
    PHONE_SCREEN = "Phone Screen"
    TECHNICAL_INTERVIEW = "Technical Interview"
    FINAL_INTERVIEW = "Final Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"

    @classmethod
    def _missing_(cls, value: Any) -> Optional["Stage"]:
        # Accept "phone_screen", "PhoneScreen", "phone screen", ...
        if isinstance(value, str):
            key = _stage_key(value)
            for member in cls:
                if _stage_key(member.value) == key:
                    return member
        return None

    @classmethod
    def parse(cls, value: "str | Stage") -> "Stage":
        """Parse a stage name leniently; raises ValueError for unknown stages."""
        return cls(value)


# Stages an application moves through, in order
DEFAULT_PIPELINE: Final[tuple[Stage, ...]] = (
    Stage.APPLIED,
    Stage.RESUME_REVIEWED,
    Stage.PHONE_SCREEN,
    Stage.TECHNICAL_INTERVIEW,
    Stage.FINAL_INTERVIEW,
    Stage.OFFER,
)


class EventStatus(str, Enum):
    """State of a single timeline event."""

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"
    REJECTED = "rejected"

    @classmethod
    def _missing_(cls, value: Any) -> Optional["EventStatus"]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class ApplicationStatus(str, Enum):
    """Coarse status of an application in the employer pipeline."""

    APPLIED = "applied"
    REVIEWING = "reviewing"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


# Allowed coarse status moves; terminal statuses have no successors
VALID_STATUS_TRANSITIONS: Final[dict[ApplicationStatus, tuple[ApplicationStatus, ...]]] = {
    ApplicationStatus.APPLIED: (
        ApplicationStatus.REVIEWING,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.REJECTED,
    ),
    ApplicationStatus.REVIEWING: (ApplicationStatus.INTERVIEW, ApplicationStatus.REJECTED),
    ApplicationStatus.INTERVIEW: (ApplicationStatus.OFFER, ApplicationStatus.REJECTED),
    ApplicationStatus.OFFER: (ApplicationStatus.HIRED, ApplicationStatus.REJECTED),
    ApplicationStatus.HIRED: (),
    ApplicationStatus.REJECTED: (),
}


class AuditAction(str, Enum):
    """Types of actions that are audited."""

    STATUS_CHANGED = "status_changed"
    REPORT_EXPORTED = "report_exported"
