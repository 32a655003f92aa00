"""
Dashboard commands - project summary and per-project details.

Provides:
- summary: hour totals, weeks to completion and the projects table
- projects: one card per project with status, budget and next due date
"""

from datetime import datetime
from typing import Any, Optional

import typer
from rich import box
from rich.panel import Panel
from rich.table import Table

from ..config.settings import TeamSettings, get_team_settings
from ..models.metrics import DashboardSummary, ProjectMetric, ProjectStatus
from ..services.due_dates import DueDatePolicy, describe_due_date, select_next_due_date
from ..services.pipeline import get_dashboard_summary
from ..services.project_service import (
    budget_variance,
    estimate_efficiency,
    filter_projects,
    is_over_budget,
    totals_for,
    weeks_to_completion,
)
from ..utils.output import console, print_json
from ..utils.units import round_half_away
from ._helpers import ProjectViewOption, get_state, handle_command_error, load_source

STATUS_STYLES = {
    ProjectStatus.NOT_STARTED: "dim",
    ProjectStatus.IN_PROGRESS: "blue",
    ProjectStatus.COMPLETED: "green",
}


def _progress_bar(percent: int, width: int = 10) -> str:
    filled = round(percent / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _due_label(project: ProjectMetric, policy: DueDatePolicy, now: datetime, with_year: bool) -> Optional[str]:
    due = describe_due_date(select_next_due_date(project, policy), now, with_year=with_year)
    return due.label if due else None


def _build_summary_json(
    summary: DashboardSummary,
    view: str,
    projects: list[ProjectMetric],
    team: TeamSettings,
    now: datetime,
) -> dict[str, Any]:
    """Build JSON output for the summary --json flag."""
    totals = totals_for(projects)
    return {
        "view": view,
        "generated_at": now.isoformat(),
        "totalProjects": summary.total_projects,
        "activeProjects": summary.active_projects,
        "completedProjects": summary.completed_projects,
        "totalHoursSpent": summary.total_hours_spent,
        "totalHoursEstimated": summary.total_hours_estimated,
        "totalHoursRemaining": summary.total_hours_remaining,
        "viewTotals": {
            "hoursSpent": totals.hours_spent,
            "hoursEstimated": totals.hours_estimated,
            "hoursRemaining": totals.hours_remaining,
            "projectCount": totals.project_count,
            "efficiency": estimate_efficiency(totals),
        },
        "weeksToCompletion": weeks_to_completion(
            totals.hours_remaining, team.team_size, team.hours_per_week
        ),
        "projects": [
            {
                **project.to_dict(),
                "nextDueDate": select_next_due_date(project, DueDatePolicy.EARLIEST),
            }
            for project in projects
        ],
    }


def _display_summary(
    summary: DashboardSummary,
    view: str,
    projects: list[ProjectMetric],
    team: TeamSettings,
    now: datetime,
) -> None:
    """Display the summary in human-readable format using Rich."""
    totals = totals_for(projects)
    title = {"active": "Active Projects", "completed": "Completed Projects"}.get(view, "All Projects")
    console.print(Panel(f"[bold]📊 Project Tracker[/bold]\n{title}", expand=False))

    weeks = weeks_to_completion(totals.hours_remaining, team.team_size, team.hours_per_week)
    stats = [
        f"[blue]{totals.hours_spent}h[/blue] spent",
        f"{totals.hours_estimated}h estimated",
        f"[yellow]{totals.hours_remaining}h[/yellow] remaining",
    ]
    if view != "completed":
        stats.append(f"[green]~{weeks} weeks[/green] to completion" if weeks else "[green]Complete[/green]")
    console.print(" • ".join(stats))
    if view != "completed":
        console.print(
            f"[dim]Based on {team.team_size} person(s) @ {team.hours_per_week}h/week[/dim]"
        )

    not_started = sum(1 for p in projects if p.status is ProjectStatus.NOT_STARTED)
    in_progress = sum(1 for p in projects if p.status is ProjectStatus.IN_PROGRESS)
    console.print(
        f"Not started: {not_started}  In progress: {in_progress}  "
        f"Completed: [green]{summary.completed_projects}[/green] of {summary.total_projects}"
    )
    console.print()

    if not projects:
        if view == "active":
            console.print("[dim]No active projects. All projects are completed![/dim]")
        else:
            console.print("[dim]No projects to show.[/dim]")
        return

    table = Table(show_header=True, header_style="dim", box=box.SIMPLE)
    table.add_column("Project", style="white")
    table.add_column("Progress")
    table.add_column("Spent", justify="right")
    table.add_column("Estimated", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Tasks", justify="right")
    table.add_column("Next Due", style="cyan")

    for project in projects:
        table.add_row(
            project.name,
            f"{_progress_bar(project.percent_complete)} {project.percent_complete}%",
            f"{project.hours_spent}h",
            f"{project.hours_estimated}h",
            f"{project.hours_remaining}h",
            f"{project.completed_task_count}/{project.task_count}",
            _due_label(project, DueDatePolicy.EARLIEST, now, with_year=False) or "-",
        )

    table.add_section()
    table.add_row(
        f"[bold]Total ({len(projects)} projects)[/bold]",
        "",
        f"{totals.hours_spent}h",
        f"{totals.hours_estimated}h",
        f"{totals.hours_remaining}h",
        f"{sum(p.completed_task_count for p in projects)}/{sum(p.task_count for p in projects)}",
        "",
    )
    console.print(table)

    if view == "completed" and totals.hours_estimated > 0:
        variance = round_half_away(totals.hours_spent - totals.hours_estimated)
        color = "red" if variance > 0 else "green"
        sign = "+" if variance > 0 else "-"
        console.print(
            f"Overall performance: [{color}]{sign}{abs(variance)}h[/{color}] against estimates"
        )
        efficiency = estimate_efficiency(totals)
        if efficiency is not None:
            console.print(f"Efficiency: [bold]{efficiency}%[/bold]")


@handle_command_error("building summary")
def summary(
    ctx: typer.Context,
    view: ProjectViewOption = typer.Option(
        ProjectViewOption.active, "--view", help="Which projects to include"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """
    Show hour totals, weeks to completion and the projects table.

    Examples:
        trackboard summary
        trackboard summary --view completed
        trackboard summary --json
    """
    state = get_state(ctx)
    team = get_team_settings()
    source = load_source(state)
    dashboard = get_dashboard_summary(source, state.folder_id)
    projects = filter_projects(dashboard.projects, view.value)
    now = datetime.now()

    if json_output:
        print_json(_build_summary_json(dashboard, view.value, projects, team, now))
    else:
        _display_summary(dashboard, view.value, projects, team, now)


def _display_project_card(project: ProjectMetric, now: datetime) -> None:
    style = STATUS_STYLES[project.status]
    lines = [
        f"[{style}]{project.status.value}[/{style}]  "
        f"{_progress_bar(project.percent_complete, 20)} {project.percent_complete}%",
        f"Spent [blue]{project.hours_spent}h[/blue]  "
        f"Estimated {project.hours_estimated}h  "
        f"Remaining [yellow]{project.hours_remaining}h[/yellow]",
    ]

    tasks_line = f"Tasks: {project.completed_task_count}/{project.task_count}"
    if is_over_budget(project):
        tasks_line += f"  [red]Over budget by {budget_variance(project)}h[/red]"
    lines.append(tasks_line)

    due = _due_label(project, DueDatePolicy.LAUNCH_PRIORITY, now, with_year=True)
    if due:
        lines.append(f"📅 Due date: {due}")

    console.print(Panel("\n".join(lines), title=f"[bold]{project.name}[/bold]", expand=False))


@handle_command_error("listing projects")
def projects(
    ctx: typer.Context,
    view: ProjectViewOption = typer.Option(
        ProjectViewOption.active, "--view", help="Which projects to include"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """
    Show one card per project with budget and next due date.

    Examples:
        trackboard projects
        trackboard projects --view all --json
    """
    state = get_state(ctx)
    source = load_source(state)
    dashboard = get_dashboard_summary(source, state.folder_id)
    selected = filter_projects(dashboard.projects, view.value)
    now = datetime.now()

    if json_output:
        print_json(
            [
                {
                    **project.to_dict(),
                    "nextDueDate": select_next_due_date(project, DueDatePolicy.LAUNCH_PRIORITY),
                    "overBudget": is_over_budget(project),
                }
                for project in selected
            ]
        )
        return

    if not selected:
        console.print("[dim]No projects to show.[/dim]")
        return

    for project in selected:
        _display_project_card(project, now)
