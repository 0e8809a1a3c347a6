"""
Tests for skillsync.core.pipeline.status_pipeline — coarse status moves.
"""

from datetime import datetime, timezone

import pytest

from skillsync.core.exceptions import InvalidTransition
from skillsync.core.pipeline import (
    applications_by_status,
    bulk_change_status,
    change_status,
    is_valid_transition,
)
from skillsync.utils.constants import ApplicationStatus


class TestIsValidTransition:
    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            ("applied", "reviewing"),
            ("applied", "interview"),
            ("reviewing", "interview"),
            ("interview", "offer"),
            ("offer", "hired"),
            ("offer", "rejected"),
            ("Applied", " REJECTED "),
            (ApplicationStatus.INTERVIEW, ApplicationStatus.REJECTED),
        ],
    )
    def test_allowed(self, from_status, to_status):
        assert is_valid_transition(from_status, to_status)

    @pytest.mark.parametrize(
        "from_status,to_status",
        [
            ("applied", "hired"),
            ("interview", "reviewing"),
            ("hired", "rejected"),
            ("rejected", "applied"),
            ("applied", "applied"),
            ("applied", "ghosted"),
            ("unknown", "reviewing"),
        ],
    )
    def test_rejected(self, from_status, to_status):
        assert not is_valid_transition(from_status, to_status)


class TestChangeStatus:
    def test_records_history(self, make_application):
        application = make_application(status="applied")
        at = datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)

        updated = change_status(application, "interview", changed_by="Dana", note="Strong CV", at=at)

        assert updated.status == "interview"
        assert len(updated.history) == 1
        change = updated.history[0]
        assert (change.from_status, change.to_status) == ("applied", "interview")
        assert change.changed_by == "Dana"
        assert change.note == "Strong CV"
        assert change.changed_at == at

    def test_original_unchanged(self, make_application):
        application = make_application(status="applied")
        change_status(application, "reviewing")
        assert application.status == "applied"
        assert application.history == []

    def test_history_accumulates(self, make_application):
        application = make_application(status="applied")
        application = change_status(application, "reviewing")
        application = change_status(application, ApplicationStatus.INTERVIEW)
        assert [c.to_status for c in application.history] == ["reviewing", "interview"]
        assert application.history[0].changed_by == "System"

    def test_invalid_move(self, make_application):
        with pytest.raises(InvalidTransition, match="from hired to interview"):
            change_status(make_application(status="hired"), "interview")

    def test_audit_logged(self, make_application, loguru_messages):
        change_status(make_application(status="offer"), "hired")
        assert any("status_changed" in message for _, message in loguru_messages)


class TestBulkChangeStatus:
    def test_partial_failure(self, make_application):
        applications = [
            make_application(status="applied", id="a1"),
            make_application(status="rejected", id="a2"),
            make_application(status="reviewing", id="a3"),
        ]
        updated, failures = bulk_change_status(applications, "interview", changed_by="Dana")

        assert [a.id for a in updated] == ["a1", "a3"]
        assert all(a.status == "interview" for a in updated)
        assert [f[0] for f in failures] == ["a2"]
        assert "Invalid stage transition" in failures[0][1]

    def test_empty(self):
        assert bulk_change_status([], "rejected") == ([], [])


class TestApplicationsByStatus:
    def test_filter(self, make_application):
        applications = [
            make_application(status="applied"),
            make_application(status="interview"),
            make_application(status="interview"),
        ]
        assert len(applications_by_status(applications, "Interview")) == 2
        assert len(applications_by_status(applications, ApplicationStatus.APPLIED)) == 1
        assert len(applications_by_status(applications)) == 3
