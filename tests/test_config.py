"""Tests for environment-based configuration."""

from pathlib import Path

import pytest

from trackboard.config.constants import ENV_VAR_DEFINITIONS
from trackboard.config.settings import (
    get_data_file,
    get_env_var,
    get_team_settings,
    get_weekly_mode,
    validate_all_env_vars,
    validate_env_var,
)
from trackboard.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without trackboard settings in the environment."""
    for name in ENV_VAR_DEFINITIONS:
        monkeypatch.delenv(name, raising=False)


class TestEnvValidation:
    """Tests for validate_env_var and friends."""

    def test_unknown_and_unset_are_valid(self):
        assert validate_env_var("SOMETHING_ELSE", "x") == (True, None)
        assert validate_env_var("TRACKBOARD_WEEKLY_MODE", None) == (True, None)

    def test_weekly_mode_values(self):
        assert validate_env_var("TRACKBOARD_WEEKLY_MODE", "Snapshot")[0]
        is_valid, error = validate_env_var("TRACKBOARD_WEEKLY_MODE", "hourly")
        assert not is_valid
        assert "hourly" in error

    def test_validate_all(self, monkeypatch):
        assert validate_all_env_vars() == []
        monkeypatch.setenv("TRACKBOARD_WEEKLY_MODE", "hourly")
        assert len(validate_all_env_vars()) == 1

    def test_get_env_var_raises_on_invalid(self, monkeypatch):
        monkeypatch.setenv("TRACKBOARD_WEEKLY_MODE", "hourly")
        with pytest.raises(ConfigurationError):
            get_env_var("TRACKBOARD_WEEKLY_MODE")
        assert get_env_var("TRACKBOARD_WEEKLY_MODE", validate=False) == "hourly"


class TestTeamSettings:
    """Tests for team capacity settings."""

    def test_defaults(self):
        team = get_team_settings()
        assert team.team_size == 1
        assert team.hours_per_week == 40

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("TRACKBOARD_TEAM_SIZE", "3")
        monkeypatch.setenv("TRACKBOARD_HOURS_PER_WEEK", "32")
        team = get_team_settings()
        assert (team.team_size, team.hours_per_week) == (3, 32)

    @pytest.mark.parametrize("value", ["0", "-2", "many"])
    def test_invalid_values(self, monkeypatch, value):
        monkeypatch.setenv("TRACKBOARD_TEAM_SIZE", value)
        with pytest.raises(ConfigurationError) as exc_info:
            get_team_settings()
        assert exc_info.value.context["setting"] == "TRACKBOARD_TEAM_SIZE"


class TestDataFileAndMode:
    """Tests for resolving the export path and weekly mode."""

    def test_data_file_required(self):
        with pytest.raises(ConfigurationError, match="--data-file"):
            get_data_file()

    def test_data_file_override_and_env(self, monkeypatch):
        assert get_data_file("export.json") == Path("export.json")
        monkeypatch.setenv("TRACKBOARD_DATA_FILE", "/tmp/tracker.json")
        assert get_data_file() == Path("/tmp/tracker.json")

    def test_weekly_mode(self, monkeypatch):
        assert get_weekly_mode() == "auto"
        assert get_weekly_mode("ENTRIES") == "entries"
        monkeypatch.setenv("TRACKBOARD_WEEKLY_MODE", "snapshot")
        assert get_weekly_mode() == "snapshot"
        with pytest.raises(ConfigurationError):
            get_weekly_mode("hourly")
