"""
Match and skill gap data models for SkillSync.

Defines skill sets, candidate profiles, the normalized match result and
the raw payload schema returned by the AI analysis provider.
"""

from collections.abc import Iterable
from typing import Annotated, Optional

from pydantic import BeforeValidator, Field, model_validator

from skillsync.utils.constants import MAX_MATCH_SCORE, MIN_MATCH_SCORE, MatchTier

from .base import ApiModel, FrozenModel


def normalize_skill(name: str) -> str:
    """Normalize a single skill name for identity comparison."""
    return name.strip().lower()


def normalize_skills(skills: Optional[Iterable[str]]) -> frozenset[str]:
    """
    Build a skill set from any iterable of names.

    Names are stripped and lowercased; blanks are dropped and duplicates
    collapse. ``None`` yields an empty set.
    """
    if skills is None:
        return frozenset()
    if isinstance(skills, str):
        skills = [skills]
    normalized = (normalize_skill(s) for s in skills if isinstance(s, str))
    return frozenset(s for s in normalized if s)


SkillSet = Annotated[frozenset[str], BeforeValidator(normalize_skills)]


class CandidateProfile(ApiModel):
    """Job seeker profile as returned by the data source."""

    id: str
    skills: list[str] = Field(default_factory=list)
    headline: Optional[str] = None

    @property
    def skill_set(self) -> frozenset[str]:
        return normalize_skills(self.skills)


class MatchResult(FrozenModel):
    """
    Normalized result of pairing a subject with a job or target role.

    The score is supplied by the AI backend; matching and gap skills never
    overlap.
    """

    subject_id: str
    match_score: int = Field(0, ge=MIN_MATCH_SCORE, le=MAX_MATCH_SCORE)
    matching_skills: SkillSet = frozenset()
    gap_skills: SkillSet = frozenset()
    explanation: str = ""
    recommendations: tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_disjoint(self) -> "MatchResult":
        overlap = self.matching_skills & self.gap_skills
        if overlap:
            raise ValueError(
                f"Skills cannot be both matching and missing: {', '.join(sorted(overlap))}"
            )
        return self


class AnalysisPayload(ApiModel):
    """Schema of a well-formed analysis provider response."""

    matching_skills: list[str]
    gap_skills: list[str]
    recommendations: list[str]
    target_skills: Optional[list[str]] = None
    match_score: Optional[int] = Field(None, ge=MIN_MATCH_SCORE, le=MAX_MATCH_SCORE)
    explanation: Optional[str] = None


class MatchView(FrozenModel):
    """View-model rendered by match cards."""

    subject_id: str
    score: int
    tier: MatchTier
    matching_skills: list[str]
    gap_skills: list[str]
    recommendations: list[str] = Field(default_factory=list)
