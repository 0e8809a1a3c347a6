"""
Shared test fixtures for the SkillSync test suite.

Sets environment variables before any skillsync imports so settings are
deterministic, then provides factory fixtures for applications, timelines
and analysis providers.
"""

import os

# === Set environment BEFORE any skillsync imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")
os.environ.setdefault("LOG_CONSOLE_OUTPUT", "false")
os.environ.pop("ANALYSIS_BASE_URL", None)

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest
from loguru import logger

from skillsync.core.exceptions import AnalysisUnavailable
from skillsync.data.models import Application, CandidateProfile
from skillsync.services.analysis_provider import AnalysisProvider
from skillsync.utils.constants import EventStatus, Stage


BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Timeline records
# ---------------------------------------------------------------------------


def event(
    stage: Stage,
    status: EventStatus,
    day: Optional[float] = None,
    note: Optional[str] = None,
) -> dict[str, Any]:
    """Raw timeline event record as stored by the data source."""
    record: dict[str, Any] = {"stage": stage.value, "status": status.value}
    if day is not None:
        record["date"] = (BASE_TIME + timedelta(days=day)).isoformat()
    if note is not None:
        record["note"] = note
    return record


@pytest.fixture
def phone_screen_records():
    """Timeline sitting at the phone screen."""
    return [
        event(Stage.APPLIED, EventStatus.COMPLETED, day=0),
        event(Stage.RESUME_REVIEWED, EventStatus.COMPLETED, day=2),
        event(Stage.PHONE_SCREEN, EventStatus.CURRENT, day=5),
        event(Stage.TECHNICAL_INTERVIEW, EventStatus.PENDING),
        event(Stage.FINAL_INTERVIEW, EventStatus.PENDING),
    ]


@pytest.fixture
def make_application():
    """Factory that returns a callable to build Application models."""
    counter = {"n": 0}

    def _factory(
        status: str = "applied",
        source: Optional[str] = "LinkedIn",
        timeline: Optional[list[dict[str, Any]]] = None,
        job_id: str = "job-1",
        **kwargs,
    ) -> Application:
        counter["n"] += 1
        return Application(
            id=kwargs.pop("id", f"app-{counter['n']}"),
            job_id=job_id,
            status=status,
            source=source,
            timeline=timeline or [],
            **kwargs,
        )

    return _factory


# ---------------------------------------------------------------------------
# Analysis providers
# ---------------------------------------------------------------------------


class FakeProvider(AnalysisProvider):
    """Returns canned payloads and records every call."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None):
        self.payload = payload
        self.error = error
        self.calls: list[tuple[list[str], str]] = []

    def analyze(self, profile_skills: list[str], target_role: str) -> Any:
        self.calls.append((profile_skills, target_role))
        if self.error is not None:
            raise self.error
        return self.payload


class GatedProvider(AnalysisProvider):
    """
    Blocks the first call until released so a second request can overtake it.
    """

    def __init__(self, first: Any, second: Any):
        self.responses = [first, second]
        self.first_started = threading.Event()
        self.release_first = threading.Event()
        self._lock = threading.Lock()
        self._calls = 0

    def analyze(self, profile_skills: list[str], target_role: str) -> Any:
        with self._lock:
            index = self._calls
            self._calls += 1
        if index == 0:
            self.first_started.set()
            self.release_first.wait(timeout=5)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def analysis_payload():
    return {
        "matchingSkills": ["Python", "SQL"],
        "gapSkills": ["Kubernetes", "Terraform"],
        "recommendations": ["Take a Kubernetes course", "Automate infra with Terraform"],
    }


@pytest.fixture
def fake_provider(analysis_payload):
    return FakeProvider(payload=analysis_payload)


@pytest.fixture
def failing_provider():
    return FakeProvider(error=AnalysisUnavailable("backend down"))


@pytest.fixture
def sample_profile():
    return CandidateProfile(id="seeker-1", skills=["Python", "SQL", "python "], headline="Data Analyst")


# ---------------------------------------------------------------------------
# Logging capture
# ---------------------------------------------------------------------------


@pytest.fixture
def loguru_messages():
    """Collect (level, message) pairs emitted through loguru during a test."""
    messages: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda m: messages.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_event():
    return event


@pytest.fixture
def make_fake_provider():
    return FakeProvider


@pytest.fixture
def make_gated_provider():
    return GatedProvider
