"""Task classification predicates.

Completion comes from the tracker's coarse status type. Launch detection
prefers an explicit marker on the raw task (``is_launch`` or
``role == "launch"``); tasks without one fall back to matching "launch" in
the task name, which is how older exports identify the milestone.
"""

from typing import Any, Mapping, Optional

from ..config.constants import COMPLETED_STATUS_TYPES, LAUNCH_KEYWORD, LAUNCH_ROLE


def is_completed_status(status_type: Optional[str]) -> bool:
    """Return True for status types that mean the work is finished."""
    return status_type in COMPLETED_STATUS_TYPES


def name_mentions_launch(name: Optional[str]) -> bool:
    """Case-insensitive check for the launch keyword in a task name."""
    return LAUNCH_KEYWORD in (name or "").lower()


def explicit_launch_flag(task: Mapping[str, Any]) -> Optional[bool]:
    """Read the explicit launch marker from a raw task, if it has one."""
    flag = task.get("is_launch")
    if isinstance(flag, bool):
        return flag
    role = task.get("role")
    if isinstance(role, str) and role:
        return role.lower() == LAUNCH_ROLE
    return None


def is_launch_task(task: Mapping[str, Any]) -> bool:
    """Decide whether a raw task is the project's launch milestone."""
    flag = explicit_launch_flag(task)
    if flag is not None:
        return flag
    return name_mentions_launch(task.get("name"))
