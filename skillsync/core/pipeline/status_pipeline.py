"""
Coarse application status pipeline.

Employers move applications through applied, reviewing, interview, offer
and hired; rejection is possible from every non-terminal status. Each move
is recorded on the application and written to the audit log.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional, Union

from skillsync.core.exceptions import InvalidTransition
from skillsync.data.models import Application, StatusChange, ensure_utc, utc_now
from skillsync.utils.constants import (
    VALID_STATUS_TRANSITIONS,
    ApplicationStatus,
    AuditAction,
)
from skillsync.utils.logger import audit_log, get_logger

logger = get_logger(__name__)

StatusInput = Union[ApplicationStatus, str]


def _parse_status(status: StatusInput) -> Optional[ApplicationStatus]:
    try:
        return ApplicationStatus(status.strip().lower() if isinstance(status, str) else status)
    except ValueError:
        return None


def is_valid_transition(from_status: StatusInput, to_status: StatusInput) -> bool:
    """Check whether a status move is allowed; unknown statuses never are."""
    source = _parse_status(from_status)
    target = _parse_status(to_status)
    if source is None or target is None:
        return False
    return target in VALID_STATUS_TRANSITIONS[source]


def change_status(
    application: Application,
    new_status: StatusInput,
    changed_by: str = "System",
    note: Optional[str] = None,
    at: Optional[datetime] = None,
) -> Application:
    """
    Move an application to a new status.

    Args:
        application: Application to update (left unchanged)
        new_status: Target status
        changed_by: Display name of the user making the change
        note: Optional note stored with the change
        at: When the change happened (default: now)

    Returns:
        Updated copy of the application

    Raises:
        InvalidTransition: The move is not allowed from the current status
    """
    old_status = application.status
    if not is_valid_transition(old_status, new_status):
        raise InvalidTransition(f"Invalid stage transition from {old_status} to {new_status}")

    target = _parse_status(new_status)
    change = StatusChange(
        from_status=old_status,
        to_status=target.value,
        changed_at=ensure_utc(at) if at else utc_now(),
        changed_by=changed_by or "System",
        note=note,
    )
    updated = application.model_copy(
        update={"status": target.value, "history": [*application.history, change]}
    )

    audit_log(
        AuditAction.STATUS_CHANGED.value,
        {
            "application_id": application.id,
            "job_id": application.job_id,
            "from": old_status,
            "to": target.value,
            "changed_by": change.changed_by,
        },
    )
    return updated


def bulk_change_status(
    applications: Iterable[Application],
    new_status: StatusInput,
    changed_by: str = "System",
    note: Optional[str] = None,
    at: Optional[datetime] = None,
) -> tuple[list[Application], list[tuple[Optional[str], str]]]:
    """
    Apply a status move to many applications.

    Returns:
        (updated applications, [(application id, error message), ...])
    """
    updated: list[Application] = []
    failures: list[tuple[Optional[str], str]] = []

    for application in applications:
        try:
            updated.append(change_status(application, new_status, changed_by, note, at))
        except InvalidTransition as e:
            logger.warning(f"Failed to update application {application.id}: {e}")
            failures.append((application.id, str(e)))

    logger.info(f"Bulk status change to {new_status}: {len(updated)} updated, {len(failures)} failed")
    return updated, failures


def applications_by_status(
    applications: Iterable[Application],
    status: Optional[StatusInput] = None,
) -> list[Application]:
    """Filter applications by coarse status; no status returns them all."""
    applications = list(applications)
    if status is None:
        return applications
    wanted = status.value if isinstance(status, ApplicationStatus) else status.strip().lower()
    return [a for a in applications if a.status == wanted]
