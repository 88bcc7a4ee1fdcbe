"""Ad-hoc lookup commands against Syoboi Calendar and TMDB."""

import json
from typing import Any

import typer
from rich.table import Table

from broadcast_schedule_db.clients.syoboi import SyoboiClient
from broadcast_schedule_db.clients.tmdb import TmdbClient
from broadcast_schedule_db.config import get_settings
from broadcast_schedule_db.schemas.params import ProgLookupParams, resolve_time_range
from broadcast_schedule_db.schemas.syoboi import parse_sub_titles
from broadcast_schedule_db.sync.pagination import RangePaginator

from .common import (
    ChannelIdsOption,
    OutputFormat,
    OutputFormatOption,
    console,
    parse_id_list,
    run_async_command,
)

app = typer.Typer(help="Look up Syoboi schedules and TMDB entries without caching")


def _print_rows(title: str, columns: list[str], rows: list[dict[str, Any]]) -> None:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("" if row.get(c) is None else str(row[c]) for c in columns))
    console.print(table)


@app.command("channels")
def lookup_channels(
    ch_ids: ChannelIdsOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List Syoboi channels."""
    ids = parse_id_list(ch_ids, "--ch-ids")

    async def _lookup() -> list[dict[str, Any]]:
        async with SyoboiClient() as client:
            return [c.model_dump() for c in await client.lookup_channels(ids)]

    rows = run_async_command(_lookup(), error_prefix="ChLookup failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return
    _print_rows("Channels", ["ch_id", "ch_gid", "ch_name", "ch_number"], rows)


@app.command("channel-groups")
def lookup_channel_groups(output_format: OutputFormatOption = OutputFormat.TEXT) -> None:
    """List Syoboi channel groups."""

    async def _lookup() -> list[dict[str, Any]]:
        async with SyoboiClient() as client:
            return [g.model_dump() for g in await client.lookup_channel_groups()]

    rows = run_async_command(_lookup(), error_prefix="ChGroupLookup failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return
    _print_rows("Channel groups", ["ch_gid", "ch_group_name", "ch_group_order"], rows)


@app.command("titles")
def lookup_titles(
    tids: list[int] = typer.Argument(..., help="Syoboi title IDs"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show Syoboi titles with their episode subtitles.

    Examples:
        bcsched lookup titles 6309
        bcsched lookup titles 6309 6310 --format json
    """

    async def _lookup() -> list[dict[str, Any]]:
        async with SyoboiClient() as client:
            titles = await client.lookup_titles(tids)
        return [
            {**t.model_dump(exclude={"sub_titles"}), "episodes": parse_sub_titles(t.sub_titles)}
            for t in titles
        ]

    rows = run_async_command(_lookup(), error_prefix="TitleLookup failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return
    for row in rows:
        console.print(f"[bold]{row['tid']}[/bold] {row['title']} ({row['first_year'] or '?'})")
        for number, subtitle in row["episodes"]:
            console.print(f"  #{number:>3} {subtitle}")


@app.command("tmdb-search")
def tmdb_search(
    query: str = typer.Argument(..., help="Series name to search for"),
    year: int | None = typer.Option(None, "--year", help="First air date year"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Search TMDB TV series, to find IDs for `sync map-title`."""

    async def _search() -> list[dict[str, Any]]:
        async with TmdbClient() as client:
            response = await client.search_tv(query, first_air_date_year=year)
        return [r.model_dump() for r in response.results]

    rows = run_async_command(_search(), error_prefix="TMDB search failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return
    _print_rows("TMDB series", ["id", "name", "original_name", "first_air_date"], rows)


@app.command("programs")
def lookup_programs(
    since: str | None = typer.Option(None, "--since", help="Window start (as in sync run)"),
    until: str | None = typer.Option(None, "--until", help="Window end (as in sync run)"),
    ch_ids: ChannelIdsOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List every program in a time window without caching it.

    Examples:
        bcsched lookup programs
        bcsched lookup programs --since 2024-04-01 --until 2024-04-02 --ch-ids 7
    """
    settings = get_settings()
    try:
        time_range = resolve_time_range(
            since, until, window_days=settings.sync.default_window_days
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    params = ProgLookupParams(range=time_range, ch_ids=parse_id_list(ch_ids, "--ch-ids"))

    async def _lookup() -> list[dict[str, Any]]:
        async with SyoboiClient() as client:
            paginator = RangePaginator(client.lookup_programs, settings.sync.page_limit)
            programs = await paginator.fetch_all(params)
        return [p.model_dump() for p in sorted(programs, key=lambda p: (p.st_time, p.pid))]

    rows = run_async_command(_lookup(), error_prefix="ProgLookup failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return
    _print_rows(
        "Programs",
        ["pid", "tid", "ch_id", "st_time", "ed_time", "count", "st_sub_title"],
        rows,
    )


@app.command("tmdb-movie")
def tmdb_movie(
    query: str = typer.Argument(..., help="Movie title to search for"),
    year: int | None = typer.Option(None, "--year", help="Primary release year"),
    language: str | None = typer.Option(None, "--language", help="Response language"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Search TMDB movies."""

    async def _search() -> list[dict[str, Any]]:
        async with TmdbClient() as client:
            response = await client.search_movie(
                query, primary_release_year=year, language=language
            )
        return [r.model_dump() for r in response.results]

    rows = run_async_command(_search(), error_prefix="TMDB search failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return
    _print_rows("TMDB movies", ["id", "title", "original_title", "release_date"], rows)


@app.command("tmdb-tv")
def tmdb_tv(
    series_id: int = typer.Argument(..., help="TMDB series ID"),
    language: str | None = typer.Option(None, "--language", help="Response language"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show a TMDB series with its seasons."""

    async def _details() -> dict[str, Any]:
        async with TmdbClient() as client:
            details = await client.tv_details(series_id, language=language)
        return details.model_dump()

    details = run_async_command(_details(), error_prefix="TMDB lookup failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(details))
        return
    console.print(
        f"[bold]{details['id']}[/bold] {details['name']} "
        f"({details['first_air_date'] or '?'}, {details['number_of_seasons']} seasons)"
    )
    _print_rows(
        "Seasons",
        ["season_number", "name", "episode_count", "air_date"],
        details["seasons"],
    )


@app.command("tmdb-season")
def tmdb_season(
    series_id: int = typer.Argument(..., help="TMDB series ID"),
    season_number: int = typer.Argument(..., help="Season number"),
    language: str | None = typer.Option(None, "--language", help="Response language"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show the episodes of one TMDB season.

    Examples:
        bcsched lookup tmdb-season 120089 1
    """

    async def _season() -> dict[str, Any]:
        async with TmdbClient() as client:
            season = await client.tv_season(series_id, season_number, language=language)
        return season.model_dump()

    season = run_async_command(_season(), error_prefix="TMDB lookup failed")
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(season))
        return
    _print_rows(
        season["name"] or f"Season {season['season_number']}",
        ["episode_number", "name", "air_date", "runtime"],
        season["episodes"],
    )
