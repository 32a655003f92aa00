"""Weekly time tracking service.

Partitions logged time into Monday-Sunday calendar weeks (local time) for
the trend views. Two bucket sources implement the same interface:

- EntryBucketSource: real time entries, attributed to projects through a
  task -> project index. This is the accurate history.
- SnapshotBucketSource: only current project totals are known, so the whole
  of each project's spent time is placed in the current week and older
  weeks stay empty. It restates present totals; it is not a history.

select_bucket_source() picks one depending on what data is available.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Sequence

from ..config.constants import (
    MONTH_ABBREVIATIONS,
    PERIOD_WEEKS,
    UNATTRIBUTED_PROJECT_ID,
    UNATTRIBUTED_PROJECT_NAME,
)
from ..exceptions import AttributionError, InvalidPeriodError
from ..models.metrics import (
    ProjectMetric,
    ProjectTasks,
    ProjectWeeklyHours,
    TaskWeeklyHours,
    WeeklyBucket,
)
from ..utils.datetime_utils import parse_epoch_ms, to_epoch_ms, to_local_naive
from ..utils.records import as_mapping
from ..utils.units import ms_to_hours, round_half_away

logger = logging.getLogger(__name__)

# Sunday 23:59:59.999 relative to Monday 00:00
WEEK_END_OFFSET = timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)

EntryFetcher = Callable[[int, int], Iterable[Mapping[str, Any]]]


# =============================================================================
# Week windows
# =============================================================================


def format_week_label(start: date, end: date) -> str:
    """Format a week as "Dec 18-24", or "Dec 29-Jan 4" across months."""
    start_month = MONTH_ABBREVIATIONS[start.month - 1]
    end_month = MONTH_ABBREVIATIONS[end.month - 1]
    if start_month == end_month:
        return f"{start_month} {start.day}-{end.day}"
    return f"{start_month} {start.day}-{end_month} {end.day}"


@dataclass(frozen=True)
class WeekWindow:
    """Monday 00:00:00.000 to Sunday 23:59:59.999, naive local time."""

    start: datetime
    end: datetime

    @property
    def start_ms(self) -> int:
        return to_epoch_ms(self.start)

    @property
    def end_ms(self) -> int:
        return to_epoch_ms(self.end)

    @property
    def label(self) -> str:
        return format_week_label(self.start.date(), self.end.date())

    def contains(self, millis: int) -> bool:
        return self.start_ms <= millis <= self.end_ms

    def empty_bucket(self) -> WeeklyBucket:
        return WeeklyBucket(
            week_start=self.start.date(),
            week_end=self.end.date(),
            week_label=self.label,
            total_hours=0.0,
            projects=(),
        )


def week_start_for(moment: datetime) -> datetime:
    """Monday 00:00 of the week containing ``moment``.

    Weeks start on Monday, so a Sunday belongs to the week that began six
    days earlier.
    """
    local = to_local_naive(moment)
    monday = local - timedelta(days=local.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def week_windows(weeks_back: int, now: Optional[datetime] = None) -> list[WeekWindow]:
    """The ``weeks_back`` weeks ending with the current one, oldest first."""
    current = week_start_for(now or datetime.now())
    windows = []
    for i in range(weeks_back - 1, -1, -1):
        start = current - timedelta(weeks=i)
        windows.append(WeekWindow(start=start, end=start + WEEK_END_OFFSET))
    return windows


def weeks_for_period(period: str) -> int:
    """Number of weeks shown for a period label (week, month, quarter, year)."""
    try:
        return PERIOD_WEEKS[period.lower()]
    except KeyError:
        raise InvalidPeriodError(period, valid=list(PERIOD_WEEKS)) from None


# =============================================================================
# Task -> project attribution
# =============================================================================


@dataclass(frozen=True)
class ProjectRef:
    project_id: str
    project_name: str


UNATTRIBUTED = ProjectRef(UNATTRIBUTED_PROJECT_ID, UNATTRIBUTED_PROJECT_NAME)


class TaskProjectIndex:
    """Maps task ids to the project (list) whose task set contains them.

    Time entries only reference a task, so this index is what attributes
    logged time to a project. Build it once per run from the fetched task
    sets.
    """

    def __init__(self, mapping: Optional[Mapping[str, ProjectRef]] = None):
        self._mapping: dict[str, ProjectRef] = dict(mapping or {})

    @classmethod
    def from_projects(cls, projects: Iterable[ProjectTasks]) -> "TaskProjectIndex":
        mapping: dict[str, ProjectRef] = {}
        for project in projects:
            ref = ProjectRef(project.id, project.name)
            for task in project.tasks:
                task_id = str(task.get("id") or "")
                if not task_id:
                    continue
                if task_id in mapping:
                    # Tasks shared between lists stay with the first list
                    logger.debug(
                        f"Task {task_id} already indexed under {mapping[task_id].project_id}, "
                        f"ignoring membership in {project.id}"
                    )
                    continue
                mapping[task_id] = ref
        return cls(mapping)

    def lookup(self, task_id: Optional[str]) -> Optional[ProjectRef]:
        if not task_id:
            return None
        return self._mapping.get(str(task_id))

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, task_id: object) -> bool:
        return str(task_id) in self._mapping


# =============================================================================
# Entry-accurate bucketing
# =============================================================================


def bucket_time_entries(
    window: WeekWindow,
    entries: Iterable[Mapping[str, Any]],
    index: TaskProjectIndex,
) -> WeeklyBucket:
    """Sum the entries that started inside ``window`` per project and task.

    Entries whose task is not in the index are reported under the
    "unattributed" project instead of being dropped. Entries without a
    positive duration (running timers) are skipped.
    """
    project_refs: dict[str, ProjectRef] = {}
    project_hours: dict[str, float] = {}
    task_hours: dict[str, dict[str, float]] = {}
    task_names: dict[str, str] = {}
    unattributed = 0

    for entry in entries:
        started = parse_epoch_ms(entry.get("start"))
        if started is None or not window.contains(started):
            continue
        hours = ms_to_hours(entry.get("duration"))
        if hours <= 0:
            continue

        task = as_mapping(entry.get("task"))
        task_id = str(task.get("id") or "")
        ref = index.lookup(task_id)
        if ref is None:
            ref = UNATTRIBUTED
            unattributed += 1

        project_refs.setdefault(ref.project_id, ref)
        project_hours[ref.project_id] = project_hours.get(ref.project_id, 0.0) + hours
        per_task = task_hours.setdefault(ref.project_id, {})
        per_task[task_id] = per_task.get(task_id, 0.0) + hours
        task_names.setdefault(task_id, str(task.get("name") or ""))

    if unattributed:
        logger.warning(
            f"{unattributed} time entries in week {window.label} reference tasks "
            f"outside the fetched projects"
        )

    projects = []
    for project_id, hours in project_hours.items():
        rounded = round_half_away(hours)
        if rounded <= 0:
            continue
        ref = project_refs[project_id]
        projects.append(
            ProjectWeeklyHours(
                project_id=ref.project_id,
                project_name=ref.project_name,
                hours=rounded,
                task_breakdowns=tuple(
                    TaskWeeklyHours(task_id=tid, task_name=task_names[tid], hours=round_half_away(h))
                    for tid, h in task_hours[project_id].items()
                    if round_half_away(h) > 0
                ),
            )
        )

    return WeeklyBucket(
        week_start=window.start.date(),
        week_end=window.end.date(),
        week_label=window.label,
        total_hours=round_half_away(sum(project_hours.values())),
        projects=tuple(projects),
    )


class WeeklyBucketSource(Protocol):
    """Anything that can produce oldest-first weekly buckets."""

    def buckets(self, weeks_back: int, now: Optional[datetime] = None) -> list[WeeklyBucket]: ...


class EntryBucketSource:
    """Weekly buckets built from real time entries."""

    def __init__(
        self,
        fetch_entries: EntryFetcher,
        index: Optional[TaskProjectIndex],
        max_workers: Optional[int] = None,
    ):
        """Initialize the entry bucket source.

        Args:
            fetch_entries: Called with (start_ms, end_ms) for each week; returns
                the raw time entries logged in that range
            index: Task -> project index used for attribution
            max_workers: Compute weeks on a thread pool of this size

        Raises:
            AttributionError: If no index is given
        """
        if index is None:
            raise AttributionError(
                "Entry-accurate weekly buckets need a task-to-project index"
            )
        self.fetch_entries = fetch_entries
        self.index = index
        self.max_workers = max_workers

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Mapping[str, Any]],
        index: Optional[TaskProjectIndex],
        max_workers: Optional[int] = None,
    ) -> "EntryBucketSource":
        """Build a source over an already-fetched list of entries."""
        entries = tuple(entries)

        def fetch(start_ms: int, end_ms: int) -> list[Mapping[str, Any]]:
            selected = []
            for entry in entries:
                started = parse_epoch_ms(entry.get("start"))
                if started is not None and start_ms <= started <= end_ms:
                    selected.append(entry)
            return selected

        return cls(fetch, index, max_workers=max_workers)

    def _bucket_for(self, window: WeekWindow) -> WeeklyBucket:
        entries = self.fetch_entries(window.start_ms, window.end_ms)
        return bucket_time_entries(window, entries, self.index)

    def buckets(self, weeks_back: int, now: Optional[datetime] = None) -> list[WeeklyBucket]:
        windows = week_windows(weeks_back, now)
        if self.max_workers and self.max_workers > 1 and len(windows) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(self._bucket_for, windows))
        return [self._bucket_for(window) for window in windows]


# =============================================================================
# Snapshot bucketing
# =============================================================================


class SnapshotBucketSource:
    """Weekly buckets approximated from current project totals.

    Only the current week receives hours: each project's total spent time.
    Every older week is an empty bucket.
    """

    def __init__(self, projects: Sequence[ProjectMetric]):
        self.projects = tuple(projects)

    def _current_bucket(self, window: WeekWindow) -> WeeklyBucket:
        projects = tuple(
            ProjectWeeklyHours(
                project_id=project.id,
                project_name=project.name,
                hours=project.hours_spent,
                task_breakdowns=tuple(
                    TaskWeeklyHours(
                        task_id=task.id,
                        task_name=task.name,
                        hours=round_half_away(task.hours_spent),
                    )
                    for task in project.tasks
                    if task.hours_spent > 0
                ),
            )
            for project in self.projects
            if project.hours_spent > 0
        )
        return WeeklyBucket(
            week_start=window.start.date(),
            week_end=window.end.date(),
            week_label=window.label,
            total_hours=round_half_away(sum(p.hours_spent for p in self.projects)),
            projects=projects,
        )

    def buckets(self, weeks_back: int, now: Optional[datetime] = None) -> list[WeeklyBucket]:
        windows = week_windows(weeks_back, now)
        return [
            self._current_bucket(window) if i == len(windows) - 1 else window.empty_bucket()
            for i, window in enumerate(windows)
        ]


def select_bucket_source(
    projects: Sequence[ProjectMetric],
    fetch_entries: Optional[EntryFetcher] = None,
    index: Optional[TaskProjectIndex] = None,
    max_workers: Optional[int] = None,
) -> WeeklyBucketSource:
    """Use time entries when they can be fetched and attributed, else the snapshot."""
    if fetch_entries is not None and index is not None:
        return EntryBucketSource(fetch_entries, index, max_workers=max_workers)
    logger.info("No attributable time-entry history, using snapshot weekly buckets")
    return SnapshotBucketSource(projects)


def total_hours(buckets: Iterable[WeeklyBucket]) -> float:
    """Hours over a whole period: the rounded week totals summed and rounded again."""
    return round_half_away(sum(bucket.total_hours for bucket in buckets))
