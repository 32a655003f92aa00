"""Shared pytest fixtures for trackboard tests."""

import json
from datetime import datetime

import pytest

HOUR_MS = 3_600_000


def make_task(
    task_id="t1",
    name="Task",
    status_type="open",
    spent_ms=None,
    estimate_ms=None,
    due_date=None,
    **extra,
):
    """Build a raw tracker task the way an export delivers it."""
    task = {
        "id": task_id,
        "name": name,
        "status": {"status": status_type, "type": status_type},
    }
    if spent_ms is not None:
        task["time_spent"] = spent_ms
    if estimate_ms is not None:
        task["time_estimate"] = estimate_ms
    if due_date is not None:
        task["due_date"] = due_date
    task.update(extra)
    return task


def make_entry(task_id, start, hours, task_name="Task", entry_id=None):
    """Build a raw time entry starting at a naive local datetime."""
    return {
        "id": entry_id or f"e-{task_id}-{int(start.timestamp())}",
        "task": {"id": task_id, "name": task_name},
        "start": str(int(start.timestamp() * 1000)),
        "duration": str(int(hours * HOUR_MS)),
    }


@pytest.fixture
def now():
    """A fixed Wednesday afternoon."""
    return datetime(2025, 12, 17, 15, 30)


@pytest.fixture
def snapshot_data(now):
    """A small export: one active project, one launched project, one untouched."""
    return {
        "lists": [
            {"id": "L1", "name": "Website", "folder": {"id": "F1"}},
            {"id": "L2", "name": "Mobile App", "folder": {"id": "F1"}},
            {"id": "L3", "name": "Backlog", "folder": {"id": "F1"}},
            {"id": "L9", "name": "Elsewhere", "folder": {"id": "F2"}},
        ],
        "tasks": {
            "L1": [
                make_task("a1", "Design", "closed", 4 * HOUR_MS, 4 * HOUR_MS),
                make_task("a2", "Build", "open", 2 * HOUR_MS, 10 * HOUR_MS),
            ],
            "L2": [
                make_task("b1", "Launch checklist", "closed", 3 * HOUR_MS, 2 * HOUR_MS),
                make_task("b2", "QA", "done", HOUR_MS, HOUR_MS),
            ],
            "L3": [
                make_task("c1", "Idea", "open", estimate_ms=5 * HOUR_MS),
            ],
            "L9": [],
        },
        "time_entries": [
            make_entry("a1", datetime(2025, 12, 15, 9, 0), 1.5, "Design"),
            make_entry("a2", datetime(2025, 12, 16, 10, 0), 2.0, "Build"),
            make_entry("b1", datetime(2025, 12, 9, 11, 0), 3.0, "Launch checklist"),
            make_entry("zz", datetime(2025, 12, 10, 12, 0), 0.5, "Someone else's task"),
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data):
    """The sample export written to disk."""
    path = tmp_path / "export.json"
    path.write_text(json.dumps(snapshot_data), encoding="utf-8")
    return path
