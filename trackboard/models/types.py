"""TypedDict definitions for raw tracker records and serialized metrics.

Raw records keep the field names of the tracker's JSON payloads so that an
export can be fed to the engine without renaming. Serialized metrics use the
camelCase names the dashboard front end reads.
"""

from __future__ import annotations

from typing import Literal, TypedDict

StatusType = Literal["open", "closed", "done", "custom"]
ProjectView = Literal["active", "completed", "all"]


# =============================================================================
# Raw records (input)
# =============================================================================


class RawStatusDict(TypedDict):
    status: str
    type: StatusType


class RawRefDict(TypedDict, total=False):
    id: str
    name: str


class RawTaskDict(TypedDict, total=False):
    id: str
    name: str
    status: RawStatusDict
    time_estimate: int | str | None  # milliseconds
    time_spent: int | str | None  # milliseconds
    due_date: str | None  # epoch milliseconds
    list: RawRefDict
    # Explicit milestone marker; takes precedence over the name heuristic
    is_launch: bool
    role: str


class RawUserDict(TypedDict, total=False):
    id: str
    username: str


class RawTimeEntryDict(TypedDict, total=False):
    id: str
    task: RawRefDict
    duration: int | str  # milliseconds, negative while a timer is running
    start: int | str  # epoch milliseconds
    end: int | str | None
    user: RawUserDict


class RawListDict(TypedDict, total=False):
    id: str
    name: str
    folder: RawRefDict


class SnapshotDict(TypedDict, total=False):
    lists: list[RawListDict]
    tasks: dict[str, list[RawTaskDict]]
    time_entries: list[RawTimeEntryDict]


# =============================================================================
# Serialized metrics (output)
# =============================================================================


class TaskMetricDict(TypedDict):
    id: str
    name: str
    status: str
    statusType: str
    hoursSpent: float
    hoursEstimated: float
    hoursRemaining: float
    isCompleted: bool
    dueDate: str | None


class ProjectMetricDict(TypedDict):
    id: str
    name: str
    hoursSpent: float
    hoursEstimated: float
    hoursRemaining: float
    percentComplete: int
    taskCount: int
    completedTaskCount: int
    tasks: list[TaskMetricDict]
    status: str
    isLaunched: bool


class DashboardSummaryDict(TypedDict):
    projects: list[ProjectMetricDict]
    totalHoursSpent: float
    totalHoursEstimated: float
    totalHoursRemaining: float
    totalProjects: int
    activeProjects: int
    completedProjects: int


class TaskWeeklyHoursDict(TypedDict):
    taskId: str
    taskName: str
    hours: float


class ProjectWeeklyHoursDict(TypedDict):
    projectId: str
    projectName: str
    hours: float
    taskBreakdowns: list[TaskWeeklyHoursDict]


class WeeklyBucketDict(TypedDict):
    weekLabel: str
    weekStart: str  # ISO date
    weekEnd: str  # ISO date
    totalHours: float
    projects: list[ProjectWeeklyHoursDict]
