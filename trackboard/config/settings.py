"""Configuration utilities for trackboard.

Everything here is read by the CLI layer; the metrics engine never looks at
the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..exceptions import ConfigurationError
from .constants import DEFAULT_HOURS_PER_WEEK, DEFAULT_TEAM_SIZE, ENV_VAR_DEFINITIONS


@dataclass(frozen=True)
class TeamSettings:
    """Capacity used for the weeks-to-completion estimate."""

    team_size: int = DEFAULT_TEAM_SIZE
    hours_per_week: int = DEFAULT_HOURS_PER_WEEK


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    if value is None:
        return True, None

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")
    if valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all trackboard environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable, falling back to its documented default.

    Raises:
        ConfigurationError: If validate is True and the value is not allowed.
    """
    value = os.environ.get(name)
    if validate:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ConfigurationError(error or "Invalid value", setting=name)
    if value is None:
        return ENV_VAR_DEFINITIONS.get(name, {}).get("default")
    return value


def _positive_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'", setting=name) from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", setting=name)
    return value


def get_team_settings() -> TeamSettings:
    """Read team size and hours per week from the environment."""
    return TeamSettings(
        team_size=_positive_int(
            "TRACKBOARD_TEAM_SIZE", os.environ.get("TRACKBOARD_TEAM_SIZE"), DEFAULT_TEAM_SIZE
        ),
        hours_per_week=_positive_int(
            "TRACKBOARD_HOURS_PER_WEEK",
            os.environ.get("TRACKBOARD_HOURS_PER_WEEK"),
            DEFAULT_HOURS_PER_WEEK,
        ),
    )


def get_data_file(override: Optional[str] = None) -> Path:
    """Resolve the tracker export path from an explicit value or the environment."""
    value = override or get_env_var("TRACKBOARD_DATA_FILE")
    if not value:
        raise ConfigurationError(
            "No tracker export configured; pass --data-file or set TRACKBOARD_DATA_FILE",
            setting="TRACKBOARD_DATA_FILE",
        )
    return Path(value).expanduser()


def get_weekly_mode(override: Optional[str] = None) -> str:
    """Resolve the weekly bucket mode (auto, entries or snapshot)."""
    if override:
        is_valid, error = validate_env_var("TRACKBOARD_WEEKLY_MODE", override)
        if not is_valid:
            raise ConfigurationError(error or "Invalid weekly mode", setting="mode")
        return override.lower()
    return (get_env_var("TRACKBOARD_WEEKLY_MODE") or "auto").lower()
