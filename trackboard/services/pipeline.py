"""End-to-end pipeline from a data source to dashboard metrics.

This is the only layer that calls the data source. Any failure there is
turned into a single DataFetchError; nothing is computed from a partial
record set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, TypeVar

from ..config.constants import DEFAULT_WEEKS_BACK, WEEKLY_MODES
from ..exceptions import ConfigurationError, DataFetchError, DataSourceError, TrackboardError
from ..models.metrics import DashboardSummary, ProjectTasks, WeeklyBucket
from ..models.types import RawTimeEntryDict
from ..utils.datetime_utils import to_epoch_ms
from ..utils.records import as_mapping
from ..utils.units import ms_to_hours, round_half_away
from .data_source import TrackerDataSource
from .project_service import build_dashboard_summary, build_project_metrics
from .weekly_service import EntryBucketSource, SnapshotBucketSource, TaskProjectIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ProjectTimeInRange:
    """Hours logged against one project's tasks within a time range."""

    project_id: str
    total_hours: float
    entries: tuple[RawTimeEntryDict, ...]


def _call_source(operation: Callable[[], T], message: str, **context: Any) -> T:
    """Run a data source call, wrapping unexpected failures in DataFetchError."""
    try:
        return operation()
    except TrackboardError:
        raise
    except Exception as e:
        raise DataFetchError(f"{message}: {e}", **context) from e


def fetch_projects(source: TrackerDataSource, folder_id: Optional[str]) -> list[ProjectTasks]:
    """Fetch every list of a folder together with its complete task set."""
    lists = _call_source(
        lambda: source.get_lists(folder_id), "Failed to fetch lists", folder_id=folder_id
    )
    projects = []
    for lst in lists:
        list_id = str(lst.get("id") or "")
        tasks = _call_source(
            lambda: source.get_tasks(list_id), "Failed to fetch tasks", list_id=list_id
        )
        projects.append(
            ProjectTasks(id=list_id, name=str(lst.get("name") or list_id), tasks=tuple(tasks))
        )
    logger.debug(f"Fetched {len(projects)} projects from folder {folder_id!r}")
    return projects


def get_dashboard_summary(
    source: TrackerDataSource,
    folder_id: Optional[str],
    max_workers: Optional[int] = None,
) -> DashboardSummary:
    """Fetch a folder's projects and build the dashboard summary."""
    return build_dashboard_summary(fetch_projects(source, folder_id), max_workers=max_workers)


def _entry_fetcher(source: TrackerDataSource) -> Callable[[int, int], list[RawTimeEntryDict]]:
    def fetch(start_ms: int, end_ms: int) -> list[RawTimeEntryDict]:
        return _call_source(
            lambda: source.get_time_entries(start_ms, end_ms),
            "Failed to fetch time entries",
            start_ms=start_ms,
            end_ms=end_ms,
        )

    return fetch


def get_weekly_buckets(
    source: TrackerDataSource,
    folder_id: Optional[str],
    weeks_back: int = DEFAULT_WEEKS_BACK,
    now: Optional[datetime] = None,
    mode: str = "auto",
    max_workers: Optional[int] = None,
    projects: Optional[Sequence[ProjectTasks]] = None,
) -> list[WeeklyBucket]:
    """Weekly buckets for a folder, oldest first.

    Args:
        source: Data source to read from
        folder_id: Folder whose lists are the projects
        weeks_back: Number of weeks, ending with the current one
        now: Reference time (defaults to now)
        mode: "entries" for time-entry history, "snapshot" for the current-totals
            approximation, "auto" to use entries whenever the source has them
        max_workers: Thread pool size for per-week computation
        projects: Already-fetched projects, to avoid fetching twice

    Raises:
        DataSourceError: If entries are requested but the source has none
    """
    if mode not in WEEKLY_MODES:
        raise ConfigurationError(f"Unknown weekly mode '{mode}'", setting="mode")
    if projects is None:
        projects = fetch_projects(source, folder_id)

    use_entries = mode == "entries" or (mode == "auto" and source.supports_time_entries())
    if mode == "entries" and not source.supports_time_entries():
        raise DataSourceError("Data source has no time-entry history", mode=mode)

    if use_entries:
        bucket_source = EntryBucketSource(
            _entry_fetcher(source),
            TaskProjectIndex.from_projects(projects),
            max_workers=max_workers,
        )
    else:
        bucket_source = SnapshotBucketSource(build_project_metrics(projects))

    logger.debug(f"Building {weeks_back} weekly buckets with {type(bucket_source).__name__}")
    return bucket_source.buckets(weeks_back, now)


def get_project_time_in_range(
    source: TrackerDataSource,
    projects: Sequence[ProjectTasks],
    project_id: str,
    start: datetime,
    end: datetime,
) -> ProjectTimeInRange:
    """Hours logged between ``start`` and ``end`` against one project's tasks."""
    index = TaskProjectIndex.from_projects(projects)
    start_ms, end_ms = to_epoch_ms(start), to_epoch_ms(end)
    entries = _entry_fetcher(source)(start_ms, end_ms)

    project_entries = []
    for entry in entries:
        ref = index.lookup(str(as_mapping(entry.get("task")).get("id") or ""))
        if ref is not None and ref.project_id == project_id:
            project_entries.append(entry)

    hours = (ms_to_hours(entry.get("duration")) for entry in project_entries)
    total = sum(h for h in hours if h > 0)
    return ProjectTimeInRange(
        project_id=project_id,
        total_hours=round_half_away(total),
        entries=tuple(project_entries),
    )
