"""CLI tests using typer's CliRunner against a JSON export on disk."""

import json
import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from trackboard import __version__
from trackboard.config.constants import ENV_VAR_DEFINITIONS
from trackboard.main import app
from trackboard.utils.output import console

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VAR_DEFINITIONS:
        monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger("trackboard")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def base_args(snapshot_file):
    return ["--data-file", str(snapshot_file), "--folder-id", "F1"]


@pytest.fixture
def wide_console(monkeypatch):
    """Keep table rows on one line."""
    monkeypatch.setattr(console, "width", 200)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "summary" in result.stdout
        assert "weekly" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_invalid_command(self):
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code != 0


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_json_active_view(self, base_args):
        result = runner.invoke(app, base_args + ["summary", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["view"] == "active"
        assert data["totalProjects"] == 3
        assert data["completedProjects"] == 1
        assert [p["name"] for p in data["projects"]] == ["Website", "Backlog"]
        assert data["viewTotals"]["hoursRemaining"] == 13.0
        assert data["weeksToCompletion"] == 1

    def test_team_settings_from_env(self, base_args):
        result = runner.invoke(
            app,
            base_args + ["summary", "--json", "--view", "all"],
            env={"TRACKBOARD_HOURS_PER_WEEK": "5"},
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["weeksToCompletion"] == 3

    def test_data_file_from_env(self, snapshot_file):
        result = runner.invoke(
            app,
            ["summary", "--json", "--view", "completed"],
            env={"TRACKBOARD_DATA_FILE": str(snapshot_file), "TRACKBOARD_FOLDER_ID": "F1"},
        )
        assert result.exit_code == 0, result.output
        assert [p["name"] for p in json.loads(result.stdout)["projects"]] == ["Mobile App"]

    def test_human_output(self, base_args):
        result = runner.invoke(app, base_args + ["summary"])

        assert result.exit_code == 0, result.output
        assert "Project Tracker" in result.stdout
        assert "Website" in result.stdout
        assert "Backlog" in result.stdout

    def test_completed_view_shows_performance(self, base_args):
        result = runner.invoke(app, base_args + ["summary", "--view", "completed"])
        assert result.exit_code == 0, result.output
        assert "Overall performance" in result.stdout

    def test_missing_data_file_setting(self):
        result = runner.invoke(app, ["summary"])
        assert result.exit_code == 1
        assert "Configuration error" in result.stdout

    def test_unreadable_export(self, tmp_path):
        result = runner.invoke(app, ["--data-file", str(tmp_path / "nope.json"), "summary"])
        assert result.exit_code == 1
        assert "Error building summary" in result.stdout


class TestProjectsCommand:
    """Tests for the projects command."""

    def test_json(self, base_args):
        result = runner.invoke(app, base_args + ["projects", "--view", "completed", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert len(data) == 1
        assert data[0]["name"] == "Mobile App"
        assert data[0]["overBudget"] is True
        assert data[0]["nextDueDate"] is None

    def test_cards(self, base_args):
        result = runner.invoke(app, base_args + ["projects"])
        assert result.exit_code == 0, result.output
        assert "Website" in result.stdout
        assert "Tasks: 1/2" in result.stdout

    def test_empty_folder(self, snapshot_file):
        result = runner.invoke(
            app, ["--data-file", str(snapshot_file), "--folder-id", "F2", "projects"]
        )
        assert result.exit_code == 0
        assert "No projects to show" in result.stdout


class TestWeeklyCommand:
    """Tests for the weekly command."""

    def test_snapshot_json(self, base_args):
        result = runner.invoke(
            app, base_args + ["weekly", "--weeks", "3", "--mode", "snapshot", "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["weekCount"] == 3
        assert data["totalHours"] == 10.0
        assert [week["totalHours"] for week in data["weeks"]] == [0.0, 0.0, 10.0]
        assert data["weeks"][-1]["projects"][0]["projectName"] == "Website"

    def test_period_sets_week_count(self, base_args):
        result = runner.invoke(app, base_args + ["weekly", "--period", "month", "--json"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)["weeks"]) == 4

    def test_table_output(self, base_args):
        result = runner.invoke(
            app, base_args + ["weekly", "--weeks", "2", "--mode", "snapshot", "--details"]
        )
        assert result.exit_code == 0, result.output
        assert "10.0h" in result.stdout
        assert "Design" in result.stdout

    def test_invalid_period(self, base_args):
        result = runner.invoke(app, base_args + ["weekly", "--period", "fortnight"])
        assert result.exit_code != 0

    def test_invalid_mode_from_env(self, base_args):
        result = runner.invoke(
            app, base_args + ["weekly"], env={"TRACKBOARD_WEEKLY_MODE": "hourly"}
        )
        assert result.exit_code == 1
        assert "Configuration error" in result.stdout

    def test_verbose_logging(self, base_args):
        result = runner.invoke(app, ["--verbose"] + base_args + ["weekly", "--json"])
        assert result.exit_code == 0, result.output
        assert logging.getLogger("trackboard").level == logging.DEBUG

    def test_period_total_footer(self, base_args, wide_console):
        result = runner.invoke(
            app, base_args + ["weekly", "--weeks", "2", "--mode", "snapshot"]
        )
        assert result.exit_code == 0, result.output
        assert "Total (2 weeks)" in result.stdout

    def test_period_total_sums_entry_weeks(self, base_args, now):
        """Test the JSON total re-rounds the summed week totals."""
        with patch("trackboard.commands.weekly.datetime") as mock_datetime:
            mock_datetime.now.return_value = now
            result = runner.invoke(
                app,
                base_args + ["weekly", "--weeks", "2", "--json"],
            )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [week["totalHours"] for week in data["weeks"]] == [3.5, 3.5]
        assert data["totalHours"] == 7.0


class TestCompletedArchive:
    """Tests for the completed view's performance figures."""

    def test_efficiency_shown(self, base_args):
        result = runner.invoke(app, base_args + ["summary", "--view", "completed"])
        assert result.exit_code == 0, result.output
        assert "Efficiency: 75%" in result.stdout

    def test_efficiency_in_json(self, base_args):
        result = runner.invoke(app, base_args + ["summary", "--view", "completed", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["viewTotals"]["efficiency"] == 75

    def test_no_efficiency_without_spent_hours(self, snapshot_file):
        result = runner.invoke(
            app,
            ["--data-file", str(snapshot_file), "--folder-id", "F2", "summary", "--view", "all", "--json"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["viewTotals"]["efficiency"] is None


class TestConfigurationHints:
    """Tests for the hint printed after a configuration error."""

    def test_team_size_hint(self, base_args):
        result = runner.invoke(app, base_args + ["summary"], env={"TRACKBOARD_TEAM_SIZE": "0"})
        assert result.exit_code == 1
        assert "TRACKBOARD_TEAM_SIZE must be a positive integer" in result.stdout
        assert "--data-file" not in result.stdout

    def test_weekly_mode_hint(self, base_args):
        result = runner.invoke(
            app, base_args + ["weekly"], env={"TRACKBOARD_WEEKLY_MODE": "hourly"}
        )
        assert result.exit_code == 1
        assert "must be auto, entries or snapshot" in result.stdout
        assert "--data-file" not in result.stdout

    def test_data_file_hint(self):
        result = runner.invoke(app, ["summary"])
        assert result.exit_code == 1
        assert "Pass --data-file or set TRACKBOARD_DATA_FILE" in result.stdout
