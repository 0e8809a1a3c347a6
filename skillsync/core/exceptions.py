"""
Exception hierarchy for the SkillSync domain core.
"""

from typing import Optional


class SkillSyncError(Exception):
    """Base class for all SkillSync errors."""


class InvalidTimeline(SkillSyncError):
    """A stage/status sequence violates the timeline invariants."""

    def __init__(self, message: str, application_id: Optional[str] = None):
        self.application_id = application_id
        if application_id:
            message = f"{message} (application {application_id})"
        super().__init__(message)


class InvalidTransition(SkillSyncError):
    """A transition was requested that the current state does not allow."""


class AnalysisUnavailable(SkillSyncError):
    """The analysis provider could not be reached or returned an error."""


class MalformedAnalysisResponse(SkillSyncError):
    """The analysis provider returned a payload with missing or invalid fields."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        self.problems = problems or []
        super().__init__(message)


class ExportError(SkillSyncError):
    """Raised when export preconditions fail (e.g., empty dataset)."""
