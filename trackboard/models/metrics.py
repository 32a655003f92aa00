"""Derived metric records.

All records are frozen dataclasses built fresh on every aggregation call.
They hold copies of the values they were derived from, never references to
the raw tracker records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping

from .types import (
    DashboardSummaryDict,
    ProjectMetricDict,
    ProjectWeeklyHoursDict,
    TaskMetricDict,
    TaskWeeklyHoursDict,
    WeeklyBucketDict,
)


class ProjectStatus(str, Enum):
    """Lifecycle classification of a project."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


@dataclass(frozen=True)
class ProjectTasks:
    """One project (tracker list) together with its complete raw task set."""

    id: str
    name: str
    tasks: tuple[Mapping[str, Any], ...] = ()


@dataclass(frozen=True)
class TaskMetric:
    """Time accounting for a single task, in hours."""

    id: str
    name: str
    status: str
    status_type: str
    hours_spent: float
    hours_estimated: float
    hours_remaining: float
    is_completed: bool
    due_date: str | None
    is_launch: bool = False

    def to_dict(self) -> TaskMetricDict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "statusType": self.status_type,
            "hoursSpent": self.hours_spent,
            "hoursEstimated": self.hours_estimated,
            "hoursRemaining": self.hours_remaining,
            "isCompleted": self.is_completed,
            "dueDate": self.due_date,
        }


@dataclass(frozen=True)
class ProjectMetric:
    """Rollup of a project's tasks. Hour totals are rounded to 0.1."""

    id: str
    name: str
    hours_spent: float
    hours_estimated: float
    hours_remaining: float
    percent_complete: int
    task_count: int
    completed_task_count: int
    tasks: tuple[TaskMetric, ...]
    status: ProjectStatus
    is_launched: bool

    @property
    def is_active(self) -> bool:
        return self.status is not ProjectStatus.COMPLETED

    def to_dict(self) -> ProjectMetricDict:
        return {
            "id": self.id,
            "name": self.name,
            "hoursSpent": self.hours_spent,
            "hoursEstimated": self.hours_estimated,
            "hoursRemaining": self.hours_remaining,
            "percentComplete": self.percent_complete,
            "taskCount": self.task_count,
            "completedTaskCount": self.completed_task_count,
            "tasks": [task.to_dict() for task in self.tasks],
            "status": self.status.value,
            "isLaunched": self.is_launched,
        }


@dataclass(frozen=True)
class DashboardSummary:
    """Global view over every project in a folder."""

    projects: tuple[ProjectMetric, ...]
    total_hours_spent: float
    total_hours_estimated: float
    total_hours_remaining: float
    total_projects: int
    active_projects: int
    completed_projects: int

    def to_dict(self) -> DashboardSummaryDict:
        return {
            "projects": [project.to_dict() for project in self.projects],
            "totalHoursSpent": self.total_hours_spent,
            "totalHoursEstimated": self.total_hours_estimated,
            "totalHoursRemaining": self.total_hours_remaining,
            "totalProjects": self.total_projects,
            "activeProjects": self.active_projects,
            "completedProjects": self.completed_projects,
        }


@dataclass(frozen=True)
class HoursTotals:
    """Hour sums over a subset of projects, rounded to 0.1."""

    hours_spent: float
    hours_estimated: float
    hours_remaining: float
    project_count: int


@dataclass(frozen=True)
class TaskWeeklyHours:
    task_id: str
    task_name: str
    hours: float

    def to_dict(self) -> TaskWeeklyHoursDict:
        return {"taskId": self.task_id, "taskName": self.task_name, "hours": self.hours}


@dataclass(frozen=True)
class ProjectWeeklyHours:
    project_id: str
    project_name: str
    hours: float
    task_breakdowns: tuple[TaskWeeklyHours, ...] = ()

    def to_dict(self) -> ProjectWeeklyHoursDict:
        return {
            "projectId": self.project_id,
            "projectName": self.project_name,
            "hours": self.hours,
            "taskBreakdowns": [task.to_dict() for task in self.task_breakdowns],
        }


@dataclass(frozen=True)
class WeeklyBucket:
    """Hours logged during one Monday-Sunday calendar week."""

    week_start: date
    week_end: date
    week_label: str
    total_hours: float
    projects: tuple[ProjectWeeklyHours, ...] = field(default_factory=tuple)

    def to_dict(self) -> WeeklyBucketDict:
        return {
            "weekLabel": self.week_label,
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "totalHours": self.total_hours,
            "projects": [project.to_dict() for project in self.projects],
        }
