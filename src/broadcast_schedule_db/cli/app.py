"""Main CLI application for Broadcast Schedule DB."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from broadcast_schedule_db import __version__
from broadcast_schedule_db.cli import lookup as lookup_cmd
from broadcast_schedule_db.cli import sync as sync_cmd
from broadcast_schedule_db.config import get_settings
from broadcast_schedule_db.logging import setup_logging

app = typer.Typer(
    name="bcsched",
    help="Local cache of Syoboi Calendar schedules with curated TMDB mappings.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"bcsched version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Broadcast Schedule DB - Sync Syoboi Calendar schedules into a local cache."""
    settings = get_settings()
    log_config = settings.logging

    # Setup logging with CLI overrides
    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


# Register subcommands
app.add_typer(sync_cmd.app, name="sync")
app.add_typer(lookup_cmd.app, name="lookup")


if __name__ == "__main__":
    app()
