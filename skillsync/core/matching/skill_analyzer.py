"""
Skill set analysis.

Partitions skill sets into matching and gap skills and proxies the AI
skill gap analysis, normalizing whatever the provider returns into a
MatchResult.
"""

import asyncio
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from skillsync.core.classification import tier
from skillsync.core.exceptions import AnalysisUnavailable, MalformedAnalysisResponse
from skillsync.data.models import (
    AnalysisPayload,
    CandidateProfile,
    MatchResult,
    MatchView,
    normalize_skills,
)
from skillsync.services.analysis_provider import AnalysisProvider, get_analysis_provider
from skillsync.utils.constants import MAX_MATCH_SCORE, MIN_MATCH_SCORE
from skillsync.utils.logger import LoggerMixin, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SkillPartition:
    """Required skills split by whether the subject has them."""

    matching: frozenset[str]
    gap: frozenset[str]


def partition(have: Iterable[str], required: Iterable[str]) -> SkillPartition:
    """
    Split required skills into matching and gap skills.

    Comparison is case-insensitive; both sets come back normalized.
    """
    have_set = normalize_skills(have)
    required_set = normalize_skills(required)
    return SkillPartition(
        matching=required_set & have_set,
        gap=required_set - have_set,
    )


def informational_score(matching: frozenset[str], gap: frozenset[str]) -> int:
    """Share of matching skills as 0-100, used when the provider sends no score."""
    total = len(matching) + len(gap)
    if total == 0:
        return 0
    return int(100 * len(matching) / total + 0.5)


def build_match_view(result: MatchResult) -> MatchView:
    """Build the card view-model for a match result."""
    return MatchView(
        subject_id=result.subject_id,
        score=result.match_score,
        tier=tier(result.match_score),
        matching_skills=sorted(result.matching_skills),
        gap_skills=sorted(result.gap_skills),
        recommendations=list(result.recommendations),
    )


# -----------------------------------------------------------------------------
# Provider payload handling
# -----------------------------------------------------------------------------

_PAYLOAD_LISTS = ("matchingSkills", "gapSkills", "recommendations", "targetSkills")


def parse_analysis_payload(payload: Any) -> AnalysisPayload:
    """
    Validate a provider response.

    Raises:
        MalformedAnalysisResponse: Fields are missing or have the wrong type.
    """
    try:
        return AnalysisPayload.model_validate(payload)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        ]
        raise MalformedAnalysisResponse(
            f"Analysis response has {len(problems)} invalid field(s)", problems
        ) from e


def _lookup(payload: Mapping[str, Any], camel: str) -> Any:
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in camel)
    return payload[camel] if camel in payload else payload.get(snake)


def recover_analysis_payload(payload: Any) -> AnalysisPayload:
    """Keep the valid fields of a malformed response; empty everything else."""
    if not isinstance(payload, Mapping):
        return AnalysisPayload(matching_skills=[], gap_skills=[], recommendations=[])

    salvaged: dict[str, Any] = {}
    for key in _PAYLOAD_LISTS:
        value = _lookup(payload, key)
        if isinstance(value, list):
            salvaged[key] = [item for item in value if isinstance(item, str)]
        elif key != "targetSkills":
            salvaged[key] = []

    score = _lookup(payload, "matchScore")
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        if MIN_MATCH_SCORE <= score <= MAX_MATCH_SCORE:
            salvaged["matchScore"] = int(score)

    explanation = _lookup(payload, "explanation")
    if isinstance(explanation, str):
        salvaged["explanation"] = explanation

    return AnalysisPayload.model_validate(salvaged)


# -----------------------------------------------------------------------------
# Request sessions
# -----------------------------------------------------------------------------


class AnalysisSession:
    """
    Generation counter for one caller's analysis requests.

    Every request takes a token; only the holder of the newest token may
    deliver its result.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0

    def begin(self) -> int:
        """Start a request, superseding every earlier one."""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_latest(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    @property
    def generation(self) -> int:
        return self._generation


ProfileInput = Union[CandidateProfile, Mapping[str, Any]]


class SkillSetAnalyzer(LoggerMixin):
    """
    Front end of the AI skill gap analysis.

    Usage:
        analyzer = SkillSetAnalyzer(provider)
        result = analyzer.request_gap_analysis(profile, "Senior Data Engineer")
        if result is not None:
            view = build_match_view(result)
    """

    def __init__(self, provider: Optional[AnalysisProvider] = None):
        """
        Initialize the analyzer.

        Args:
            provider: Analysis backend; defaults to the configured one
        """
        self.provider = provider or get_analysis_provider()
        self.session = AnalysisSession()

    def request_gap_analysis(
        self,
        profile: ProfileInput,
        target_role: str,
        session: Optional[AnalysisSession] = None,
    ) -> Optional[MatchResult]:
        """
        Analyze a profile against a target role.

        Args:
            profile: Candidate profile (model or raw record)
            target_role: Free-text role name
            session: Caller session; defaults to the analyzer's own

        Returns:
            The normalized result, or None when a newer request on the same
            session superseded this one.

        Raises:
            ValueError: target_role is blank
            AnalysisUnavailable: The provider failed and this is still the
                latest request
        """
        profile, role, session = self._prepare(profile, target_role, session)
        token = session.begin()
        return self._complete(token, session, profile, role)

    async def arequest_gap_analysis(
        self,
        profile: ProfileInput,
        target_role: str,
        session: Optional[AnalysisSession] = None,
    ) -> Optional[MatchResult]:
        """Asyncio variant of request_gap_analysis; the provider call runs in a worker thread."""
        profile, role, session = self._prepare(profile, target_role, session)
        token = session.begin()
        return await asyncio.to_thread(self._complete, token, session, profile, role)

    def _prepare(
        self,
        profile: ProfileInput,
        target_role: str,
        session: Optional[AnalysisSession],
    ) -> tuple[CandidateProfile, str, AnalysisSession]:
        if not isinstance(profile, CandidateProfile):
            profile = CandidateProfile.model_validate(profile)
        role = (target_role or "").strip()
        if not role:
            raise ValueError("target_role must not be blank")
        return profile, role, session or self.session

    def _complete(
        self,
        token: int,
        session: AnalysisSession,
        profile: CandidateProfile,
        role: str,
    ) -> Optional[MatchResult]:
        skills = sorted(profile.skill_set)
        self.logger.debug(f"Requesting gap analysis #{token} for {profile.id}: {role!r}")

        try:
            payload = self.provider.analyze(skills, role)
        except AnalysisUnavailable:
            if not session.is_latest(token):
                self.logger.debug(f"Discarding failure of superseded analysis #{token}")
                return None
            raise
        except Exception as e:
            if not session.is_latest(token):
                self.logger.debug(f"Discarding failure of superseded analysis #{token}")
                return None
            raise AnalysisUnavailable(f"Analysis provider failed: {e}") from e

        if not session.is_latest(token):
            self.logger.debug(f"Discarding result of superseded analysis #{token}")
            return None

        return self._build_result(profile.id, payload)

    def _build_result(self, subject_id: str, payload: Any) -> MatchResult:
        try:
            parsed = parse_analysis_payload(payload)
        except MalformedAnalysisResponse as e:
            self.logger.warning(f"{e} for {subject_id}: {'; '.join(e.problems)}")
            parsed = recover_analysis_payload(payload)

        matching = normalize_skills(parsed.matching_skills)
        gap = normalize_skills(parsed.gap_skills)
        overlap = matching & gap
        if overlap:
            self.logger.warning(
                f"Provider listed {len(overlap)} skill(s) as both matching and missing; "
                f"keeping them as matching: {', '.join(sorted(overlap))}"
            )
            gap = gap - overlap

        score = parsed.match_score
        if score is None:
            score = informational_score(matching, gap)

        return MatchResult(
            subject_id=subject_id,
            match_score=score,
            matching_skills=matching,
            gap_skills=gap,
            explanation=parsed.explanation or "",
            recommendations=tuple(parsed.recommendations),
        )


# Singleton instance
_skill_analyzer: Optional[SkillSetAnalyzer] = None


def get_skill_analyzer() -> SkillSetAnalyzer:
    """Get the skill analyzer singleton instance."""
    global _skill_analyzer
    if _skill_analyzer is None:
        _skill_analyzer = SkillSetAnalyzer()
    return _skill_analyzer
