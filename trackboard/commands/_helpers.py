"""Shared command helpers to reduce duplication across commands.

This module provides:
- CliState: global options collected by the main callback
- load_source(): open the configured tracker export or fail with a clear error
- @handle_command_error: Consistent error handling decorator
"""

from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import typer
from rich.markup import escape

from trackboard.config.settings import get_data_file
from trackboard.exceptions import ConfigurationError, TrackboardError
from trackboard.services.data_source import JsonSnapshotSource
from trackboard.utils.output import console

F = TypeVar("F", bound=Callable[..., Any])

CONFIG_HINTS = {
    "TRACKBOARD_DATA_FILE": "Pass --data-file or set TRACKBOARD_DATA_FILE",
    "TRACKBOARD_TEAM_SIZE": "TRACKBOARD_TEAM_SIZE must be a positive integer",
    "TRACKBOARD_HOURS_PER_WEEK": "TRACKBOARD_HOURS_PER_WEEK must be a positive integer",
    "TRACKBOARD_WEEKLY_MODE": "TRACKBOARD_WEEKLY_MODE must be auto, entries or snapshot",
    "mode": "Use --mode auto, entries or snapshot",
}


class ProjectViewOption(str, Enum):
    active = "active"
    completed = "completed"
    all = "all"


@dataclass
class CliState:
    """Options given before the command name."""

    data_file: Optional[str] = None
    folder_id: Optional[str] = None


def get_state(ctx: typer.Context) -> CliState:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, CliState) else CliState()


def load_source(state: CliState) -> JsonSnapshotSource:
    """Open the tracker export named by --data-file or TRACKBOARD_DATA_FILE.

    Raises:
        ConfigurationError: If no export is configured
        FileReadError: If the export cannot be read
    """
    return JsonSnapshotSource.from_file(get_data_file(state.data_file))


def handle_command_error(
    operation: Optional[str] = None,
    *,
    exit_code: int = 1,
) -> Callable[[F], F]:
    """Decorator for consistent error handling in CLI commands.

    Configuration problems and data problems are reported differently: the
    first needs the user to fix their settings, the second is usually a bad
    or incomplete export.

    Example:
        @handle_command_error("building summary")
        def summary(ctx: typer.Context):
            ...
    """

    def decorator(func: F) -> F:
        op = operation or func.__name__.replace("_", " ")

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except ConfigurationError as e:
                console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
                hint = CONFIG_HINTS.get(e.context.get("setting", ""))
                if hint:
                    console.print(f"[dim]{hint}[/dim]")
                raise typer.Exit(exit_code) from e
            except TrackboardError as e:
                console.print(f"[red]Error {op}: {escape(str(e))}[/red]")
                raise typer.Exit(exit_code) from e

        return wrapper  # type: ignore[return-value]

    return decorator
