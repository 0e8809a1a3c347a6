"""
SkillSync Command Line Interface

Inspect match tiers, application timelines and hiring reports from
exported SkillSync data.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="skillsync",
    help="SkillSync match and application lifecycle tools",
    add_completion=False,
)
console = Console()


class ReportKind(str, Enum):
    STATUS = "status"
    STAGES = "stages"
    SOURCES = "sources"
    FUNNEL = "funnel"
    ACCEPTANCE = "acceptance"


# Columns and percent columns per report
REPORT_COLUMNS: dict[ReportKind, tuple[list[str], list[str]]] = {
    ReportKind.STATUS: (["status", "count"], []),
    ReportKind.STAGES: (["stage", "avgDays", "samples"], []),
    ReportKind.SOURCES: (["source", "count", "conversions", "share"], ["share"]),
    ReportKind.FUNNEL: (["name", "value"], []),
    ReportKind.ACCEPTANCE: (["name", "value", "percentage"], ["percentage"]),
}


def _load_records(path: Path, key: str) -> list[dict[str, Any]]:
    if not path.exists():
        console.print(f"[red]Error: File does not exist: {path}[/red]")
        raise typer.Exit(1)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path} is not valid JSON: {e}[/red]")
        raise typer.Exit(1)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        console.print(f"[red]Error: Expected a list of {key} in {path}[/red]")
        raise typer.Exit(1)
    return data


@app.callback()
def main() -> None:
    """Initialize logging before any command runs."""
    from skillsync.utils.logger import setup_logging

    setup_logging()


@app.command()
def version():
    """Show application version."""
    from skillsync import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show configuration."""
    from skillsync.utils.config import get_settings

    settings = get_settings()

    table = Table(title="SkillSync Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Analysis Endpoint", settings.analysis.url or "offline")
    table.add_row("Export Directory", str(settings.export.output_directory))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def tier(score: float = typer.Argument(..., help="Match score between 0 and 100")):
    """Classify a match score."""
    from skillsync.core.classification import tier as classify

    result = classify(score)
    colors = {"high": "green", "medium": "yellow", "low": "red"}
    console.print(f"{score:g} -> [{colors[result.value]}]{result.value.upper()}[/{colors[result.value]}]")


@app.command()
def timeline(path: Path = typer.Argument(..., help="JSON file of applications")):
    """Show the timeline of each application."""
    from skillsync.core.pipeline import load_timeline
    from skillsync.data.models import Application

    records = _load_records(path, "applications")
    shown = 0

    for position, record in enumerate(records):
        try:
            application = Application.model_validate(record)
        except ValidationError as e:
            console.print(f"[red]Error: Application record {position} is invalid: {e.errors()[0]['msg']}[/red]")
            raise typer.Exit(1)
        label = application.id or f"#{position}"
        current = load_timeline(application)
        if current is None:
            console.print(f"[yellow]{label}: no valid timeline[/yellow]")
            continue

        snapshot = current.snapshot()
        table = Table(title=f"{label} ({snapshot.progress:.1f}% complete)")
        table.add_column("Stage", style="cyan")
        table.add_column("Status")
        table.add_column("Date", style="dim")
        table.add_column("Note")
        for step in snapshot.steps:
            style = {"positive": "green", "negative": "red"}.get(step.badge.value, "white")
            status = step.status.value if step.reachable else f"{step.status.value} (unreachable)"
            table.add_row(
                step.stage.value,
                f"[{style}]{status}[/{style}]",
                step.occurred_at.strftime("%Y-%m-%d") if step.occurred_at else "",
                step.note or "",
            )
        console.print(table)
        shown += 1

    console.print(f"\nShown [cyan]{shown}[/cyan] of [cyan]{len(records)}[/cyan] timeline(s)")


@app.command()
def report(
    path: Path = typer.Argument(..., help="JSON file of applications"),
    kind: ReportKind = typer.Option(ReportKind.STATUS, "--kind", "-k", help="Report to build"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write CSV to this file"),
):
    """Build an analytics report and print it or export it as CSV."""
    from skillsync.core import analytics
    from skillsync.core.exceptions import ExportError
    from skillsync.data.models import StatusCount

    applications = _load_records(path, "applications")

    if kind == ReportKind.STATUS:
        rows: list[Any] = [
            StatusCount(status=status, count=count)
            for status, count in analytics.count_by_status(applications).items()
        ]
    elif kind == ReportKind.STAGES:
        rows = analytics.avg_time_in_stage(applications)
    elif kind == ReportKind.SOURCES:
        rows = analytics.source_attribution(applications)
    elif kind == ReportKind.FUNNEL:
        rows = analytics.application_funnel(applications)
    else:
        rows = analytics.match_acceptance(applications)

    columns, percent_columns = REPORT_COLUMNS[kind]
    export_rows = analytics.to_export_rows(rows, columns, percent_columns)

    if output is not None:
        try:
            written = analytics.write_csv(export_rows, columns, output.name, output.parent)
        except ExportError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]Wrote {len(export_rows)} row(s) to {written}[/green]")
        return

    table = Table(title=f"{kind.value.title()} report")
    for column in columns:
        table.add_column(column, style="cyan" if column == columns[0] else None)
    for row in export_rows:
        table.add_row(*(row[c] for c in columns))
    console.print(table)


@app.command()
def gap_analysis(
    role: str = typer.Option(..., "--role", "-r", help="Target role"),
    skills: list[str] = typer.Option([], "--skill", "-s", help="Current skill (repeatable)"),
):
    """Run a skill gap analysis for a target role."""
    from skillsync.core.exceptions import AnalysisUnavailable
    from skillsync.core.matching import build_match_view, get_skill_analyzer

    analyzer = get_skill_analyzer()
    try:
        result = analyzer.request_gap_analysis({"id": "cli", "skills": skills}, role)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except AnalysisUnavailable as e:
        console.print(f"[red]Analysis unavailable, try again later: {e}[/red]")
        raise typer.Exit(1)

    view = build_match_view(result)
    console.print(f"Match score: [bold]{view.score}[/bold] ({view.tier.value})")
    console.print(f"[green]Skills you have:[/green] {', '.join(view.matching_skills) or '-'}")
    console.print(f"[yellow]Skills to develop:[/yellow] {', '.join(view.gap_skills) or '-'}")
    for recommendation in view.recommendations:
        console.print(f"  • {recommendation}")


if __name__ == "__main__":
    app()
