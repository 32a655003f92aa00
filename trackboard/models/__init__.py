"""Data models for trackboard.

This package defines:

- types: TypedDicts for raw tracker records and serialized metrics
- metrics: frozen records derived by the metrics engine
"""

from trackboard.models.metrics import (
    DashboardSummary,
    HoursTotals,
    ProjectMetric,
    ProjectStatus,
    ProjectTasks,
    ProjectWeeklyHours,
    TaskMetric,
    TaskWeeklyHours,
    WeeklyBucket,
)

__all__ = [
    "DashboardSummary",
    "HoursTotals",
    "ProjectMetric",
    "ProjectStatus",
    "ProjectTasks",
    "ProjectWeeklyHours",
    "TaskMetric",
    "TaskWeeklyHours",
    "WeeklyBucket",
]
