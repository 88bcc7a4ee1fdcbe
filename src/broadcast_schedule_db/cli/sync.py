"""Sync commands for Broadcast Schedule DB."""

import json
from typing import Any

import typer

from broadcast_schedule_db.clients.syoboi import SyoboiClient
from broadcast_schedule_db.config import get_settings
from broadcast_schedule_db.db import CacheStore, create_tables, dispose_engine, get_session_factory
from broadcast_schedule_db.schemas.params import resolve_time_range
from broadcast_schedule_db.sync import ScheduleSyncService

from .common import (
    ChannelIdsOption,
    DryRunOption,
    OutputFormat,
    OutputFormatOption,
    console,
    parse_id_list,
    run_async_command,
)

app = typer.Typer(help="Sync schedules from Syoboi Calendar into the cache")


@app.command("init-db")
def init_db() -> None:
    """Create the cache tables if they don't exist.

    For a cache that will be upgraded later, prefer `alembic upgrade head`.
    """

    async def _init() -> None:
        try:
            await create_tables()
        finally:
            await dispose_engine()

    run_async_command(_init(), error_prefix="Database setup failed")
    console.print("[green]Cache tables ready.[/green]")


@app.command("run")
def sync_run(
    since: str | None = typer.Option(
        None,
        "--since",
        help="Window start (YYYY-MM-DD, YYYY-MM-DD HH:MM:SS or YYYY-MM-DDTHH:MM:SS)",
    ),
    until: str | None = typer.Option(
        None,
        "--until",
        help="Window end (same formats; a bare date means end of day)",
    ),
    ch_ids: ChannelIdsOption = None,
    dry_run: DryRunOption = False,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync programs and titles for a time window.

    Without --since/--until the window is now +/- SYNC__DEFAULT_WINDOW_DAYS
    days (one by default).

    Examples:
        bcsched sync run
        bcsched sync run --since 2024-04-01 --until 2024-04-07 --ch-ids 1,3
        bcsched sync run --dry-run --format json
        bcsched -v sync run  # Debug logging
    """
    try:
        time_range = resolve_time_range(
            since, until, window_days=get_settings().sync.default_window_days
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    channel_ids = parse_id_list(ch_ids, "--ch-ids")

    async def _sync() -> dict[str, Any]:
        try:
            async with SyoboiClient() as client:
                service = ScheduleSyncService(client, CacheStore(get_session_factory()))
                result = await service.run(time_range, channel_ids, dry_run=dry_run)
                return result.to_dict()
        finally:
            await dispose_engine()

    result = run_async_command(_sync(), error_prefix="Sync failed")

    # JSON output
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    # Text output
    prefix = "[dim](dry-run)[/dim] " if dry_run else ""
    window = result["range"]
    console.print(f"{prefix}[bold]Synced[/bold] {window['start']} → {window['end']}")
    console.print(
        f"  Programs: {result['programs_fetched']} fetched, "
        f"{result['programs_written']} written, {result['programs_dropped']} dropped"
    )
    console.print(
        f"  Titles:   {result['titles_fetched']}/{result['titles_requested']} fetched, "
        f"{result['titles_written']} written"
    )
    if result["has_warnings"]:
        console.print(
            f"  [yellow]Warnings:[/yellow] {result['empty_chunks']} empty title chunks, "
            f"{result['programs_dropped']} programs without titles"
        )
    console.print(f"  [dim]{result['duration_seconds']}s[/dim]")


@app.command("map-title")
def map_title(
    tid: int = typer.Argument(..., help="Syoboi title ID"),
    series_id: int | None = typer.Option(None, "--series-id", help="TMDB series ID"),
    season: int | None = typer.Option(None, "--season", help="TMDB season number"),
) -> None:
    """Set the TMDB mapping of a cached title.

    --series-id and --season go together; omitting both clears the mapping.

    Examples:
        bcsched sync map-title 6309 --series-id 120089 --season 1
        bcsched sync map-title 6309  # Clear
    """
    if (series_id is None) != (season is None):
        raise typer.BadParameter(
            "--series-id and --season must be given together (omit both to clear)"
        )

    async def _map() -> bool:
        try:
            return await CacheStore(get_session_factory()).set_tmdb_mapping(tid, series_id, season)
        finally:
            await dispose_engine()

    if not run_async_command(_map(), error_prefix="Mapping failed"):
        console.print(f"[red]Error:[/red] TID {tid} is not cached. Run a sync first.")
        raise typer.Exit(1)

    if series_id is None and season is None:
        console.print(f"[green]Cleared[/green] TMDB mapping for TID {tid}")
    else:
        console.print(f"[green]Mapped[/green] TID {tid} → series {series_id}, season {season}")
