"""Next-due-date selection for projects.

Two policies exist side by side and intentionally give different answers:

- EARLIEST: the soonest due date among open tasks. Used by the projects
  table.
- LAUNCH_PRIORITY: the open launch task's due date if there is one,
  otherwise the latest due date among open tasks. Used by the project cards.

Which one the product actually wants is still undecided, so both are kept
behind explicit names instead of being merged.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Union

from ..config.constants import MS_PER_DAY
from ..models.metrics import ProjectMetric, TaskMetric
from ..utils.datetime_utils import format_month_day, from_epoch_ms, parse_epoch_ms, to_epoch_ms

logger = logging.getLogger(__name__)


class DueDatePolicy(str, Enum):
    EARLIEST = "earliest"
    LAUNCH_PRIORITY = "launch_priority"


@dataclass(frozen=True)
class DueDateLabel:
    """A due date rendered relative to "now"."""

    date: str
    is_overdue: bool
    label: str
    diff_days: int


def _open_tasks_with_due_dates(tasks: Iterable[TaskMetric]) -> list[tuple[TaskMetric, int]]:
    candidates = []
    for task in tasks:
        if task.is_completed or not task.due_date:
            continue
        timestamp = parse_epoch_ms(task.due_date)
        if timestamp is None:
            logger.debug(f"Ignoring unparseable due date {task.due_date!r} on task {task.id}")
            continue
        candidates.append((task, timestamp))
    return candidates


def select_earliest_due(tasks: Iterable[TaskMetric]) -> Optional[TaskMetric]:
    """Open task with the smallest due timestamp (first one wins ties)."""
    candidates = _open_tasks_with_due_dates(tasks)
    if not candidates:
        return None
    return min(candidates, key=lambda c: c[1])[0]


def select_launch_priority_due(tasks: Iterable[TaskMetric]) -> Optional[TaskMetric]:
    """Open launch task with a due date, else the open task due last."""
    candidates = _open_tasks_with_due_dates(tasks)
    if not candidates:
        return None
    for task, _ in candidates:
        if task.is_launch:
            return task
    return max(candidates, key=lambda c: c[1])[0]


_SELECTORS = {
    DueDatePolicy.EARLIEST: select_earliest_due,
    DueDatePolicy.LAUNCH_PRIORITY: select_launch_priority_due,
}


def select_next_due_date(
    project: Union[ProjectMetric, Iterable[TaskMetric]], policy: DueDatePolicy
) -> Optional[str]:
    """Return the selected task's due date string, or None if nothing is due."""
    tasks = project.tasks if isinstance(project, ProjectMetric) else project
    task = _SELECTORS[DueDatePolicy(policy)](tasks)
    return task.due_date if task else None


def days_until(due_ms: int, now: datetime) -> int:
    """Whole days from ``now`` to ``due_ms``, rounding partial days up."""
    return math.ceil((due_ms - to_epoch_ms(now)) / MS_PER_DAY)


def describe_due_date(
    due_date: Union[str, int, None],
    now: Optional[datetime] = None,
    with_year: bool = False,
) -> Optional[DueDateLabel]:
    """Label a due date as overdue, today, tomorrow or a plain date.

    Args:
        due_date: Epoch-millisecond timestamp (string or int)
        now: Reference time, defaults to the current local time
        with_year: Use the long "Dec 5, 2025" form

    Returns:
        DueDateLabel, or None if the due date is missing or unparseable
    """
    due_ms = parse_epoch_ms(due_date)
    if due_ms is None:
        return None

    now = now or datetime.now()
    diff_days = days_until(due_ms, now)
    formatted = format_month_day(from_epoch_ms(due_ms), with_year=with_year)

    if diff_days < 0:
        label = f"{formatted} (overdue)"
    elif diff_days == 0:
        label = f"{formatted} (today)"
    elif diff_days == 1:
        label = f"{formatted} (tomorrow)"
    else:
        label = formatted

    return DueDateLabel(date=formatted, is_overdue=diff_days < 0, label=label, diff_days=diff_days)
