"""
AI skill gap analysis providers.

The analysis itself runs on the SkillSync AI backend; this module only
transports the request and hands back the decoded JSON body. Payload
validation is done by the SkillSetAnalyzer.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from skillsync.core.exceptions import AnalysisUnavailable
from skillsync.utils.config import AnalysisSettings, get_settings
from skillsync.utils.logger import LoggerMixin, get_logger

logger = get_logger(__name__)


class AnalysisProvider(ABC):
    """Interface of an external skill gap analysis backend."""

    @abstractmethod
    def analyze(self, profile_skills: list[str], target_role: str) -> Any:
        """
        Analyze a profile's skills against a target role.

        Returns:
            The decoded response body. Shape is not guaranteed.

        Raises:
            AnalysisUnavailable: The backend could not be reached or errored.
        """


class HttpAnalysisProvider(AnalysisProvider, LoggerMixin):
    """
    Calls the analysis endpoint over HTTP.

    Usage:
        provider = HttpAnalysisProvider("https://api.skillsync.dev/api/job-seeker/skill-gap-analysis")
        body = provider.analyze(["python", "sql"], "Data Engineer")
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.api_key = api_key
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: AnalysisSettings) -> "HttpAnalysisProvider":
        if not settings.url:
            raise ValueError("ANALYSIS_BASE_URL is not configured")
        return cls(settings.url, timeout=settings.timeout_seconds, api_key=settings.api_key)

    def analyze(self, profile_skills: list[str], target_role: str) -> Any:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = self._session.post(
                self.url,
                json={"profileSkills": profile_skills, "targetRole": target_role},
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"Analysis request to {self.url} failed: {e}")
            raise AnalysisUnavailable(f"Analysis provider request failed: {e}") from e

        try:
            return response.json()
        except ValueError:
            # Reported as a malformed payload by the caller
            self.logger.warning(f"Analysis provider returned a non-JSON body ({len(response.content)} bytes)")
            return None


class OfflineAnalysisProvider(AnalysisProvider):
    """
    Fallback used when no AI backend is configured.

    Treats every current skill as relevant and suggests the generic
    leadership and communication skills.
    """

    GENERIC_SKILLS = ("Leadership", "Communication")

    def analyze(self, profile_skills: list[str], target_role: str) -> dict[str, Any]:
        current = {s.lower() for s in profile_skills}
        gap = [s for s in self.GENERIC_SKILLS if s.lower() not in current]
        lead = profile_skills[0] if profile_skills else "core"
        return {
            "targetSkills": [*profile_skills, *gap],
            "matchingSkills": list(profile_skills),
            "gapSkills": gap,
            "recommendations": [
                f"Continue developing your {lead} skills",
                f"Consider courses in leadership for {target_role}",
                "Build a portfolio showcasing your work",
            ],
        }


def get_analysis_provider(settings: Optional[AnalysisSettings] = None) -> AnalysisProvider:
    """Return the HTTP provider when a backend is configured, the offline one otherwise."""
    settings = settings or get_settings().analysis
    if settings.url:
        return HttpAnalysisProvider.from_settings(settings)
    logger.info("No analysis backend configured, using offline provider")
    return OfflineAnalysisProvider()
