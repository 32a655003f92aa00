"""Project metrics service.

Turns raw tracker tasks into per-task time accounting, folds them into
per-project rollups and summarizes every project of a folder for the
dashboard. Everything here is a pure function of its inputs:

- build_task_metric(): one raw task -> TaskMetric (no rounding)
- build_project_metric(): one list of raw tasks -> ProjectMetric
- build_dashboard_summary(): all projects -> DashboardSummary
- totals_for() / filter_projects(): helpers for the active and completed views
- weeks_to_completion(): capacity estimate shown next to the totals
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..config.constants import DEFAULT_HOURS_PER_WEEK, DEFAULT_TEAM_SIZE
from ..exceptions import ConfigurationError
from ..models.metrics import (
    DashboardSummary,
    HoursTotals,
    ProjectMetric,
    ProjectStatus,
    ProjectTasks,
    TaskMetric,
)
from ..models.types import ProjectView
from ..utils.records import as_mapping
from ..utils.units import ms_to_hours, round_half_away, round_percent
from .classification import is_completed_status, is_launch_task

logger = logging.getLogger(__name__)


# =============================================================================
# Tasks
# =============================================================================


def build_task_metric(task: Mapping[str, Any]) -> TaskMetric:
    """Calculate time accounting for a single raw task.

    A task without an estimate never has hours remaining, even when time was
    logged against it.
    """
    status = as_mapping(task.get("status"))
    status_type = str(status.get("type") or "")

    hours_spent = ms_to_hours(task.get("time_spent"))
    hours_estimated = ms_to_hours(task.get("time_estimate"))
    is_completed = is_completed_status(status_type)

    hours_remaining = 0.0
    if not is_completed and hours_estimated > 0:
        hours_remaining = max(0.0, hours_estimated - hours_spent)

    return TaskMetric(
        id=str(task.get("id") or ""),
        name=str(task.get("name") or ""),
        status=str(status.get("status") or ""),
        status_type=status_type,
        hours_spent=hours_spent,
        hours_estimated=hours_estimated,
        hours_remaining=hours_remaining,
        is_completed=is_completed,
        due_date=task.get("due_date") or None,
        is_launch=is_launch_task(task),
    )


# =============================================================================
# Projects
# =============================================================================


def is_project_launched(tasks: Iterable[TaskMetric]) -> bool:
    """A project is launched once its launch task is completed."""
    return any(task.is_launch and task.is_completed for task in tasks)


def classify_project_status(
    tasks: Sequence[TaskMetric], is_launched: bool, hours_spent: float
) -> ProjectStatus:
    """Classify a project, checking launch first, then untouched, then in progress."""
    if is_launched:
        return ProjectStatus.COMPLETED
    if hours_spent == 0 and not any(task.is_completed for task in tasks):
        return ProjectStatus.NOT_STARTED
    return ProjectStatus.IN_PROGRESS


def calculate_percent_complete(
    task_count: int, completed_task_count: int, hours_spent: float, hours_estimated: float
) -> int:
    """Percent complete with three fallbacks.

    1. every task completed -> 100, whatever the hours say
    2. hours estimated -> spent / estimated, capped at 100
    3. tasks exist -> share of completed tasks
    """
    percent = 0.0
    if task_count > 0 and completed_task_count == task_count:
        percent = 100.0
    elif hours_estimated > 0:
        percent = min(100.0, hours_spent / hours_estimated * 100)
    elif task_count > 0:
        percent = completed_task_count / task_count * 100
    return round_percent(percent)


def build_project_metric(
    project_id: str, project_name: str, tasks: Sequence[Mapping[str, Any]]
) -> ProjectMetric:
    """Aggregate a project's raw tasks into a ProjectMetric.

    Task order is preserved. Hour sums are rounded to 0.1 only here; status
    and percent complete are derived from the unrounded sums.
    """
    task_metrics = tuple(build_task_metric(task) for task in tasks)

    hours_spent = sum(t.hours_spent for t in task_metrics)
    hours_estimated = sum(t.hours_estimated for t in task_metrics)
    hours_remaining = sum(t.hours_remaining for t in task_metrics)

    task_count = len(task_metrics)
    completed_task_count = sum(1 for t in task_metrics if t.is_completed)

    is_launched = is_project_launched(task_metrics)
    status = classify_project_status(task_metrics, is_launched, hours_spent)

    metric = ProjectMetric(
        id=project_id,
        name=project_name,
        hours_spent=round_half_away(hours_spent),
        hours_estimated=round_half_away(hours_estimated),
        hours_remaining=round_half_away(hours_remaining),
        percent_complete=calculate_percent_complete(
            task_count, completed_task_count, hours_spent, hours_estimated
        ),
        task_count=task_count,
        completed_task_count=completed_task_count,
        tasks=task_metrics,
        status=status,
        is_launched=is_launched,
    )
    logger.debug(
        f"Project {project_id} ({project_name}): {task_count} tasks, "
        f"{metric.hours_spent}h spent, status={status.value}"
    )
    return metric


# =============================================================================
# Dashboard
# =============================================================================


def _metric_for(project: ProjectTasks) -> ProjectMetric:
    return build_project_metric(project.id, project.name, project.tasks)


def build_project_metrics(
    projects: Sequence[ProjectTasks], max_workers: Optional[int] = None
) -> list[ProjectMetric]:
    """Build metrics for every project, in input order.

    Projects share no state, so with ``max_workers`` they are aggregated on
    a thread pool; ``executor.map`` keeps results in input order.
    """
    if max_workers and max_workers > 1 and len(projects) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(_metric_for, projects))
    return [_metric_for(project) for project in projects]


def summarize_projects(metrics: Sequence[ProjectMetric]) -> DashboardSummary:
    """Fold already-built project metrics into a DashboardSummary.

    Totals add up the rounded per-project values in input order and round
    again. Projects are then ordered by hours remaining, largest first;
    ties keep their input order.
    """
    completed = sum(1 for p in metrics if p.status is ProjectStatus.COMPLETED)
    ordered = sorted(metrics, key=lambda p: p.hours_remaining, reverse=True)

    return DashboardSummary(
        projects=tuple(ordered),
        total_hours_spent=round_half_away(sum(p.hours_spent for p in metrics)),
        total_hours_estimated=round_half_away(sum(p.hours_estimated for p in metrics)),
        total_hours_remaining=round_half_away(sum(p.hours_remaining for p in metrics)),
        total_projects=len(metrics),
        active_projects=len(metrics) - completed,
        completed_projects=completed,
    )


def build_dashboard_summary(
    projects: Sequence[ProjectTasks], max_workers: Optional[int] = None
) -> DashboardSummary:
    """Aggregate every project of a folder into the dashboard summary."""
    summary = summarize_projects(build_project_metrics(projects, max_workers=max_workers))
    logger.info(
        f"Summarized {summary.total_projects} projects "
        f"({summary.completed_projects} completed, {summary.total_hours_remaining}h remaining)"
    )
    return summary


# =============================================================================
# View helpers
# =============================================================================


def filter_projects(projects: Iterable[ProjectMetric], view: ProjectView) -> list[ProjectMetric]:
    """Select the projects shown by the active or completed views.

    Active means Not Started or In Progress. Order is preserved.
    """
    if view == "all":
        return list(projects)
    if view == "active":
        return [p for p in projects if p.is_active]
    if view == "completed":
        return [p for p in projects if p.status is ProjectStatus.COMPLETED]
    raise ValueError(f"Unknown project view: {view!r}")


def totals_for(projects: Sequence[ProjectMetric]) -> HoursTotals:
    """Sum hours over a subset of projects, rounded to 0.1."""
    return HoursTotals(
        hours_spent=round_half_away(sum(p.hours_spent for p in projects)),
        hours_estimated=round_half_away(sum(p.hours_estimated for p in projects)),
        hours_remaining=round_half_away(sum(p.hours_remaining for p in projects)),
        project_count=len(projects),
    )


def budget_variance(project: ProjectMetric) -> float:
    """Hours spent beyond (positive) or under (negative) the estimate."""
    return round_half_away(project.hours_spent - project.hours_estimated)


def is_over_budget(project: ProjectMetric) -> bool:
    return project.hours_estimated > 0 and project.hours_spent > project.hours_estimated


def estimate_efficiency(totals: HoursTotals) -> Optional[int]:
    """Estimated hours as a percentage of hours spent; None when nothing was spent."""
    if totals.hours_spent <= 0:
        return None
    return round_percent(totals.hours_estimated / totals.hours_spent * 100)


def weeks_to_completion(
    total_hours_remaining: float,
    team_size: int = DEFAULT_TEAM_SIZE,
    hours_per_week: int = DEFAULT_HOURS_PER_WEEK,
) -> int:
    """Whole weeks needed to burn down the remaining hours; 0 when done.

    Raises:
        ConfigurationError: If the weekly capacity is not positive.
    """
    if total_hours_remaining <= 0:
        return 0
    capacity = team_size * hours_per_week
    if capacity <= 0:
        raise ConfigurationError(
            "Team capacity must be positive",
            team_size=team_size,
            hours_per_week=hours_per_week,
        )
    return math.ceil(total_hours_remaining / capacity)
