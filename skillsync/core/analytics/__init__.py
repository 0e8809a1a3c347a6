"""Hiring analytics aggregations and CSV export."""

from .aggregator import (
    application_funnel,
    avg_time_in_stage,
    count_by_status,
    format_percentage,
    job_performance,
    match_acceptance,
    revenue_by_month,
    source_attribution,
    summarize_hiring,
    to_export_rows,
    total_time_to_hire,
)
from .exporter import render_csv, write_csv

__all__ = [
    "application_funnel",
    "avg_time_in_stage",
    "count_by_status",
    "format_percentage",
    "job_performance",
    "match_acceptance",
    "revenue_by_month",
    "source_attribution",
    "summarize_hiring",
    "to_export_rows",
    "total_time_to_hire",
    "render_csv",
    "write_csv",
]
