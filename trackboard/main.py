#!/usr/bin/env python3
"""
Main CLI entry point for trackboard
"""

from pathlib import Path
from typing import Optional

import typer

from trackboard import __version__
from trackboard.commands._helpers import CliState
from trackboard.commands.dashboard import projects, summary
from trackboard.commands.weekly import weekly
from trackboard.config.settings import get_env_var
from trackboard.utils.logging_utils import configure_logging


# Version command
def version():
    """Show trackboard version"""
    typer.echo(f"trackboard version {__version__}")
    typer.echo("Project metrics and weekly time tracking")


# Callback for global options
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    data_file: Optional[str] = typer.Option(
        None, "--data-file", envvar="TRACKBOARD_DATA_FILE", help="Tracker export (JSON)"
    ),
    folder_id: Optional[str] = typer.Option(
        None, "--folder-id", envvar="TRACKBOARD_FOLDER_ID", help="Folder whose lists are projects"
    ),
):
    """
    trackboard - Project metrics and weekly time tracking

    Reads a task-tracker export and reports hours spent, estimated and
    remaining per project, plus hours logged per calendar week.

    [bold]Examples:[/bold]

    Show the active projects:
        [cyan]trackboard --data-file export.json summary[/cyan]

    Show completed projects as JSON:
        [cyan]trackboard summary --view completed --json[/cyan]

    Show the last quarter week by week:
        [cyan]trackboard weekly --period quarter[/cyan]
    """
    log_file = get_env_var("TRACKBOARD_LOG_FILE")
    configure_logging(verbose=verbose, log_file=Path(log_file).expanduser() if log_file else None)

    ctx.obj = CliState(data_file=data_file, folder_id=folder_id)


def create_app() -> typer.Typer:
    """Create and configure the main CLI application"""
    app = typer.Typer(
        name="trackboard",
        help="Project metrics and weekly time tracking",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )
    app.callback()(main)

    app.command(name="summary")(summary)
    app.command(name="projects")(projects)
    app.command(name="weekly")(weekly)
    app.command(name="version")(version)

    return app


# Create the app instance
app = create_app()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
