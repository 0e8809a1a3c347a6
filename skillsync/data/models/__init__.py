"""
Pydantic data models and schemas for SkillSync.

This module provides the records consumed from the SkillSync API and the
view-models and analytics rows produced from them.
"""

# Base models
from .base import ApiModel, FrozenModel, UtcDatetime, ensure_utc, utc_now

# Match models
from .match import (
    AnalysisPayload,
    CandidateProfile,
    MatchResult,
    MatchView,
    SkillSet,
    normalize_skill,
    normalize_skills,
)

# Application models
from .application import (
    Application,
    JobPosting,
    RevenueRecord,
    StatusChange,
    TimelineEvent,
)

# Analytics rows
from .analytics import (
    AcceptanceSlice,
    FunnelStep,
    HiringSummary,
    JobPerformance,
    RevenueMonth,
    SourceAttribution,
    StageDuration,
    StatusCount,
)

__all__ = [
    # Base
    "ApiModel",
    "FrozenModel",
    "UtcDatetime",
    "ensure_utc",
    "utc_now",
    # Match
    "AnalysisPayload",
    "CandidateProfile",
    "MatchResult",
    "MatchView",
    "SkillSet",
    "normalize_skill",
    "normalize_skills",
    # Application
    "Application",
    "JobPosting",
    "RevenueRecord",
    "StatusChange",
    "TimelineEvent",
    # Analytics
    "AcceptanceSlice",
    "FunnelStep",
    "HiringSummary",
    "JobPerformance",
    "RevenueMonth",
    "SourceAttribution",
    "StageDuration",
    "StatusCount",
]
