"""
Weekly command - hours logged per calendar week.

Shows a bar per week (Monday-Sunday) with the projects that received time,
built from time entries when the export has them and from current project
totals otherwise.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

import typer
from rich import box
from rich.table import Table

from ..config.settings import get_weekly_mode
from ..models.metrics import WeeklyBucket
from ..services.pipeline import get_weekly_buckets
from ..services.weekly_service import total_hours, weeks_for_period
from ..utils.output import console, print_json
from ._helpers import get_state, handle_command_error, load_source

BAR_WIDTH = 30
MAX_PROJECTS_SHOWN = 3


class PeriodOption(str, Enum):
    week = "week"
    month = "month"
    quarter = "quarter"
    year = "year"


class ModeOption(str, Enum):
    auto = "auto"
    entries = "entries"
    snapshot = "snapshot"


def _bar(hours: float, max_hours: float) -> str:
    return "█" * round(hours / max_hours * BAR_WIDTH)


def _display_weekly(buckets: list[WeeklyBucket], details: bool) -> None:
    if not buckets:
        console.print("[dim]No weekly data available.[/dim]")
        return

    max_hours = max(max(b.total_hours for b in buckets), 1)

    table = Table(show_header=True, header_style="dim", box=box.SIMPLE)
    table.add_column("Week", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("", style="blue")
    table.add_column("Projects")

    for bucket in buckets:
        names = [f"{p.project_name} ({p.hours}h)" for p in bucket.projects[:MAX_PROJECTS_SHOWN]]
        if len(bucket.projects) > MAX_PROJECTS_SHOWN:
            names.append(f"[dim]+{len(bucket.projects) - MAX_PROJECTS_SHOWN} more projects[/dim]")
        table.add_row(
            bucket.week_label,
            f"{bucket.total_hours}h",
            _bar(bucket.total_hours, max_hours),
            ", ".join(names) or "[dim]-[/dim]",
        )

    table.add_section()
    table.add_row(
        f"[bold]Total ({len(buckets)} weeks)[/bold]",
        f"[bold]{total_hours(buckets)}h[/bold]",
        "",
        "",
    )
    console.print(table)

    if not details:
        return

    for bucket in buckets:
        if not bucket.projects:
            continue
        console.print(f"[bold]{bucket.week_label}[/bold] ({bucket.week_start} to {bucket.week_end})")
        for project in bucket.projects:
            console.print(f"  {project.project_name}: {project.hours}h")
            for task in project.task_breakdowns:
                console.print(f"    [dim]{task.task_name}: {task.hours}h[/dim]")


@handle_command_error("building weekly breakdown")
def weekly(
    ctx: typer.Context,
    period: PeriodOption = typer.Option(
        PeriodOption.week, "--period", "-p", help="Reporting period"
    ),
    weeks: Optional[int] = typer.Option(
        None, "--weeks", "-w", min=1, help="Number of weeks (overrides --period)"
    ),
    mode: Optional[ModeOption] = typer.Option(
        None, "--mode", help="Bucket source (default: TRACKBOARD_WEEKLY_MODE or auto)"
    ),
    details: bool = typer.Option(False, "--details", "-d", help="Show per-project and per-task hours"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """
    Show hours logged per week, oldest first.

    Examples:
        trackboard weekly
        trackboard weekly --period quarter --details
        trackboard weekly --weeks 6 --mode snapshot --json
    """
    state = get_state(ctx)
    resolved_mode = get_weekly_mode(mode.value if mode else None)
    weeks_back = weeks or weeks_for_period(period.value)

    source = load_source(state)
    buckets = get_weekly_buckets(
        source, state.folder_id, weeks_back=weeks_back, now=datetime.now(), mode=resolved_mode
    )

    if json_output:
        print_json(
            {
                "weekCount": len(buckets),
                "totalHours": total_hours(buckets),
                "weeks": [bucket.to_dict() for bucket in buckets],
            }
        )
    else:
        _display_weekly(buckets, details)
