"""
Hiring analytics aggregations.

Pure folds over applications, jobs and revenue records producing the rows
behind the SkillSync charts and CSV exports. Every fold accepts models or
raw API records and returns empty or zero-valued results for empty input.
"""

from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from skillsync.core.pipeline import ApplicationTimeline, load_timeline
from skillsync.data.models import (
    AcceptanceSlice,
    Application,
    FunnelStep,
    HiringSummary,
    JobPerformance,
    JobPosting,
    RevenueMonth,
    RevenueRecord,
    SourceAttribution,
    StageDuration,
)
from skillsync.utils.constants import (
    ACCEPTANCE_SLICES,
    ACTIVE_JOB_STATUS,
    CONVERTED_STATUSES,
    DEFAULT_PIPELINE,
    DEFAULT_SOURCE,
    FUNNEL_STEPS,
    Stage,
)
from skillsync.utils.logger import get_logger

logger = get_logger(__name__)

ApplicationInput = Union[Application, Mapping[str, Any]]
ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(records: Iterable[Any], model: type[ModelT]) -> list[ModelT]:
    """Validate raw records, skipping the ones that cannot be read."""
    valid = []
    for position, record in enumerate(records):
        if isinstance(record, model):
            valid.append(record)
            continue
        try:
            valid.append(model.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"Skipping unreadable {model.__name__} record {position}: {e.error_count()} invalid field(s)"
            )
    return valid


def _applications(applications: Iterable[ApplicationInput]) -> list[Application]:
    return _coerce(applications, Application)


def _jobs(jobs: Iterable[Union[JobPosting, Mapping[str, Any]]]) -> list[JobPosting]:
    return _coerce(jobs, JobPosting)


def _percent(part: float, total: float) -> float:
    return round(100 * part / total, 1) if total else 0.0


def _rate(part: int, total: int) -> int:
    # Integer percent, half up
    return int(100 * part / total + 0.5) if total else 0


# -----------------------------------------------------------------------------
# Status and stage folds
# -----------------------------------------------------------------------------


def count_by_status(applications: Iterable[ApplicationInput]) -> dict[str, int]:
    """Number of applications per status, in order of first appearance."""
    counts: dict[str, int] = {}
    for application in _applications(applications):
        counts[application.status] = counts.get(application.status, 0) + 1
    return counts


def avg_time_in_stage(
    applications: Iterable[ApplicationInput],
    stages: Sequence[Stage] = DEFAULT_PIPELINE,
) -> list[StageDuration]:
    """
    Average days spent in each pipeline stage.

    Only applications with both a start and an end for a stage contribute
    to it; stages without samples report 0 days.
    """
    samples: dict[Stage, list[float]] = defaultdict(list)
    for application in _applications(applications):
        timeline = load_timeline(application)
        if timeline is None:
            continue
        for stage, days in timeline.stage_durations().items():
            samples[stage].append(days)

    rows = []
    for stage in stages:
        values = samples.get(stage, [])
        avg = round(sum(values) / len(values), 1) if values else 0.0
        rows.append(StageDuration(stage=stage, avg_days=avg, samples=len(values)))
    return rows


def total_time_to_hire(rows: Iterable[StageDuration]) -> float:
    """Sum of the per-stage averages."""
    return round(sum(row.avg_days for row in rows), 1)


def _is_converted(application: Application, timeline: Optional[ApplicationTimeline]) -> bool:
    if timeline is not None:
        return timeline.reached_offer
    return application.status in CONVERTED_STATUSES


def source_attribution(applications: Iterable[ApplicationInput]) -> list[SourceAttribution]:
    """
    Applications and conversions per source.

    A conversion is an application that reached Offer (or completed its
    pipeline) without being rejected.
    """
    applications = _applications(applications)
    counts: Counter[str] = Counter()
    conversions: Counter[str] = Counter()

    for application in applications:
        source = (application.source or "").strip() or DEFAULT_SOURCE
        counts[source] += 1
        if _is_converted(application, load_timeline(application)):
            conversions[source] += 1

    total = len(applications)
    rows = [
        SourceAttribution(
            source=source,
            count=count,
            conversions=conversions[source],
            share=_percent(count, total),
        )
        for source, count in counts.items()
    ]
    return sorted(rows, key=lambda r: (-r.count, r.source))


def application_funnel(applications: Iterable[ApplicationInput]) -> list[FunnelStep]:
    counts = count_by_status(applications)
    return [FunnelStep(name=name, value=counts.get(status, 0)) for name, status in FUNNEL_STEPS]


def match_acceptance(applications: Iterable[ApplicationInput]) -> list[AcceptanceSlice]:
    """Status distribution of applications with each slice's share of the charted total."""
    counts = count_by_status(applications)
    values = [(name, counts.get(status, 0)) for name, status in ACCEPTANCE_SLICES]
    total = sum(value for _, value in values)
    return [
        AcceptanceSlice(name=name, value=value, percentage=_percent(value, total))
        for name, value in values
    ]


def job_performance(
    jobs: Iterable[Union[JobPosting, Mapping[str, Any]]],
    applications: Iterable[ApplicationInput],
) -> list[JobPerformance]:
    """Per-job application counts, busiest jobs first."""
    by_job: dict[Optional[str], list[Application]] = defaultdict(list)
    for application in _applications(applications):
        by_job[application.job_id].append(application)

    rows = []
    for job in _jobs(jobs):
        job_apps = by_job.get(job.id, [])
        rows.append(
            JobPerformance(
                job_id=job.id,
                title=job.title,
                applications=len(job_apps),
                interviews=sum(1 for a in job_apps if a.status == "interview"),
                accepted=sum(1 for a in job_apps if a.status == "accepted"),
                status=job.status,
            )
        )
    return sorted(rows, key=lambda r: -r.applications)


def summarize_hiring(
    jobs: Iterable[Union[JobPosting, Mapping[str, Any]]],
    applications: Iterable[ApplicationInput],
) -> HiringSummary:
    """Headline numbers: volume, interview rate and acceptance rate."""
    jobs = _jobs(jobs)
    counts = count_by_status(applications)
    total = sum(counts.values())
    return HiringSummary(
        total_applications=total,
        avg_applications_per_job=int(total / len(jobs) + 0.5) if jobs else 0,
        interview_rate=_rate(counts.get("interview", 0), total),
        acceptance_rate=_rate(counts.get("accepted", 0), total),
        active_jobs=sum(1 for j in jobs if j.status == ACTIVE_JOB_STATUS),
        total_jobs=len(jobs),
    )


# -----------------------------------------------------------------------------
# Revenue
# -----------------------------------------------------------------------------


def revenue_by_month(records: Iterable[Union[RevenueRecord, Mapping[str, Any]]]) -> list[RevenueMonth]:
    """Revenue and distinct paying subscriptions per calendar month (UTC)."""
    revenue: dict[str, float] = defaultdict(float)
    subscriptions: dict[str, set[str]] = defaultdict(set)

    for record in _coerce(records, RevenueRecord):
        month = record.occurred_at.strftime("%Y-%m")
        revenue[month] += record.amount
        if record.subscription_id:
            subscriptions[month].add(record.subscription_id)

    return [
        RevenueMonth(month=month, revenue=round(revenue[month], 2), subscriptions=len(subscriptions[month]))
        for month in sorted(revenue)
    ]


# -----------------------------------------------------------------------------
# Export shaping
# -----------------------------------------------------------------------------


def format_percentage(part: float, total: float) -> str:
    """Share of part in total as a one-decimal percentage string."""
    return f"{_percent(part, total):.1f}%"


def _row_values(row: Union[BaseModel, Mapping[str, Any]]) -> dict[str, Any]:
    if isinstance(row, BaseModel):
        # Columns may be named by field or by alias
        return {**row.model_dump(mode="json"), **row.model_dump(mode="json", by_alias=True)}
    return dict(row)


def _render(value: Any, percent: bool) -> str:
    if value is None:
        return ""
    if percent and isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.1f}%"
    return str(value)


def to_export_rows(
    rows: Iterable[Union[BaseModel, Mapping[str, Any]]],
    column_order: Sequence[str],
    percent_columns: Iterable[str] = (),
) -> list[dict[str, str]]:
    """
    Shape rows for CSV serialization.

    Args:
        rows: Analytics rows (models or mappings)
        column_order: Columns to keep, in output order
        percent_columns: Columns holding 0-100 numbers to render as "12.5%"

    Returns:
        One flat mapping of column -> string per row, keys in column order

    Raises:
        ValueError: A column is listed twice
    """
    columns = list(column_order)
    duplicates = {c for c in columns if columns.count(c) > 1}
    if duplicates:
        raise ValueError(f"Duplicate export columns: {', '.join(sorted(duplicates))}")

    percent = set(percent_columns)
    shaped = []
    for row in rows:
        values = _row_values(row)
        shaped.append({c: _render(values.get(c), c in percent) for c in columns})
    return shaped
