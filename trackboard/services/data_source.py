"""Raw tracker data sources.

The metrics engine never talks to the tracker itself. A data source hands it
complete, already-paginated record sets:

- lists (projects) in a folder
- every task of a list
- time entries logged in a millisecond range

JsonSnapshotSource reads those from a JSON export shaped like:

    {
      "lists": [{"id": "...", "name": "...", "folder": {"id": "..."}}],
      "tasks": {"<list id>": [{...raw task...}]},
      "time_entries": [{...raw time entry...}]
    }

``time_entries`` is optional; without it the weekly views fall back to the
snapshot approximation.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from ..exceptions import DataFetchError, DataSourceError, FileReadError
from ..models.types import RawListDict, RawTaskDict, RawTimeEntryDict, SnapshotDict
from ..utils.datetime_utils import parse_epoch_ms
from ..utils.records import as_mapping

logger = logging.getLogger(__name__)


class TrackerDataSource(Protocol):
    """Collaborator that supplies complete raw record sets."""

    def get_lists(self, folder_id: Optional[str]) -> list[RawListDict]: ...

    def get_tasks(self, list_id: str) -> list[RawTaskDict]: ...

    def get_time_entries(self, start_ms: int, end_ms: int) -> list[RawTimeEntryDict]: ...

    def supports_time_entries(self) -> bool: ...


class JsonSnapshotSource:
    """Data source backed by a JSON export of the tracker."""

    def __init__(self, data: SnapshotDict, origin: str = "<memory>"):
        if not isinstance(data, dict):
            raise DataSourceError("Tracker export must be a JSON object", origin=origin)
        if not isinstance(data.get("lists"), list):
            raise DataSourceError("Tracker export has no 'lists' array", origin=origin)
        if not isinstance(data.get("tasks", {}), dict):
            raise DataSourceError("Tracker export 'tasks' must map list ids to tasks", origin=origin)
        self._data = data
        self.origin = origin

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "JsonSnapshotSource":
        """Load an export from disk.

        Raises:
            FileReadError: If the file cannot be read or is not valid JSON.
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise FileReadError(f"Cannot read tracker export: {e.strerror or e}", path=str(path)) from e
        except json.JSONDecodeError as e:
            raise FileReadError(f"Tracker export is not valid JSON: {e.msg}", path=str(path)) from e
        logger.debug(f"Loaded tracker export from {path}")
        return cls(data, origin=str(path))

    def get_lists(self, folder_id: Optional[str]) -> list[RawListDict]:
        """Lists in ``folder_id``; every list when no folder is given."""
        lists = self._data["lists"]
        if not folder_id:
            return list(lists)
        return [lst for lst in lists if str(as_mapping(lst.get("folder")).get("id")) == str(folder_id)]

    def get_tasks(self, list_id: str) -> list[RawTaskDict]:
        tasks_by_list: dict[str, Any] = self._data.get("tasks", {})
        if list_id not in tasks_by_list:
            raise DataFetchError("Tracker export has no task set for list", list_id=list_id)
        tasks = tasks_by_list[list_id]
        if not isinstance(tasks, list):
            raise DataFetchError("Task set is not an array", list_id=list_id)
        return list(tasks)

    def supports_time_entries(self) -> bool:
        return isinstance(self._data.get("time_entries"), list)

    def get_time_entries(self, start_ms: int, end_ms: int) -> list[RawTimeEntryDict]:
        """Entries whose start timestamp falls within [start_ms, end_ms]."""
        if not self.supports_time_entries():
            raise DataFetchError("Tracker export has no time entries", origin=self.origin)
        selected = []
        for entry in self._data["time_entries"]:
            started = parse_epoch_ms(entry.get("start"))
            if started is not None and start_ms <= started <= end_ms:
                selected.append(entry)
        return selected
