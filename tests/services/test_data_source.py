"""Tests for the JSON export data source."""

import json
from datetime import datetime

import pytest

from trackboard.exceptions import DataFetchError, DataSourceError, FileReadError
from trackboard.services.data_source import JsonSnapshotSource
from trackboard.utils.datetime_utils import to_epoch_ms


class TestJsonSnapshotSource:
    """Tests for JsonSnapshotSource."""

    def test_lists_filtered_by_folder(self, snapshot_data):
        source = JsonSnapshotSource(snapshot_data)
        assert [lst["id"] for lst in source.get_lists("F1")] == ["L1", "L2", "L3"]
        assert [lst["id"] for lst in source.get_lists("F2")] == ["L9"]
        assert len(source.get_lists(None)) == 4

    def test_folder_not_a_mapping(self, snapshot_data):
        snapshot_data["lists"][0]["folder"] = "F1"
        source = JsonSnapshotSource(snapshot_data)
        assert [lst["id"] for lst in source.get_lists("F1")] == ["L2", "L3"]

    def test_tasks_for_list(self, snapshot_data):
        source = JsonSnapshotSource(snapshot_data)
        assert [t["id"] for t in source.get_tasks("L1")] == ["a1", "a2"]
        assert source.get_tasks("L9") == []

    def test_missing_task_set_raises(self, snapshot_data):
        source = JsonSnapshotSource(snapshot_data)
        with pytest.raises(DataFetchError) as exc_info:
            source.get_tasks("nope")
        assert exc_info.value.context["list_id"] == "nope"

    def test_time_entries_in_range(self, snapshot_data):
        source = JsonSnapshotSource(snapshot_data)
        start = to_epoch_ms(datetime(2025, 12, 15))
        end = to_epoch_ms(datetime(2025, 12, 21, 23, 59, 59))

        entries = source.get_time_entries(start, end)
        assert [e["task"]["id"] for e in entries] == ["a1", "a2"]

    def test_without_time_entries(self, snapshot_data):
        del snapshot_data["time_entries"]
        source = JsonSnapshotSource(snapshot_data)

        assert not source.supports_time_entries()
        with pytest.raises(DataFetchError):
            source.get_time_entries(0, 1)

    @pytest.mark.parametrize("data", [[], {"tasks": {}}, {"lists": [], "tasks": []}])
    def test_malformed_export(self, data):
        with pytest.raises(DataSourceError):
            JsonSnapshotSource(data)

    def test_from_file(self, snapshot_file):
        source = JsonSnapshotSource.from_file(snapshot_file)
        assert source.origin == str(snapshot_file)
        assert source.supports_time_entries()

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(FileReadError) as exc_info:
            JsonSnapshotSource.from_file(tmp_path / "missing.json")
        assert "missing.json" in exc_info.value.context["path"]

    def test_from_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(FileReadError, match="not valid JSON"):
            JsonSnapshotSource.from_file(path)

    def test_round_trip_through_disk(self, tmp_path, snapshot_data):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(snapshot_data), encoding="utf-8")
        assert JsonSnapshotSource.from_file(path).get_lists("F1") == snapshot_data["lists"][:3]
