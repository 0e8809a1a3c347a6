"""
Analytics row models for SkillSync charts and CSV export.

Rows are immutable and regenerated on every query.
"""

from typing import Optional

from skillsync.utils.constants import Stage

from .base import FrozenModel


class StatusCount(FrozenModel):
    status: str
    count: int


class StageDuration(FrozenModel):
    """Average days spent in a stage."""

    stage: Stage
    avg_days: float = 0.0
    samples: int = 0


class SourceAttribution(FrozenModel):
    """Applications and conversions per candidate source."""

    source: str
    count: int
    conversions: int
    share: float = 0.0  # percent of all applications


class RevenueMonth(FrozenModel):
    month: str  # YYYY-MM
    revenue: float
    subscriptions: int


class FunnelStep(FrozenModel):
    name: str
    value: int


class AcceptanceSlice(FrozenModel):
    name: str
    value: int
    percentage: float


class JobPerformance(FrozenModel):
    job_id: str
    title: str
    applications: int
    interviews: int
    accepted: int
    status: Optional[str] = None


class HiringSummary(FrozenModel):
    """Headline numbers of the employer analytics page."""

    total_applications: int = 0
    avg_applications_per_job: int = 0
    interview_rate: int = 0
    acceptance_rate: int = 0
    active_jobs: int = 0
    total_jobs: int = 0
