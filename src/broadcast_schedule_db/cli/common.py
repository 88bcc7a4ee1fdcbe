"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `parse_id_list`: Comma-separated integer list parsing for ID options
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from enum import Enum
from typing import Annotated, TypeVar

import typer
from rich.console import Console

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        # Re-raise deliberate exits (e.g., from validation helpers)
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def parse_id_list(value: str | None, option_name: str) -> list[int] | None:
    """Parse a comma-separated list of integer IDs.

    Args:
        value: Raw option value (e.g. "1,3,19"), or None
        option_name: Option name used in the error message

    Returns:
        List of IDs, or None if the option was not given

    Raises:
        typer.BadParameter: If any element is not an integer
    """
    if value is None:
        return None
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise typer.BadParameter(
            f"{option_name} must be a comma-separated list of integers: {value}"
        ) from None


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Fetch from Syoboi but don't write to the cache",
    ),
]
"""Dry-run option type for CLI commands.

Usage:
    def command(dry_run: DryRunOption = False):
"""

ChannelIdsOption = Annotated[
    str | None,
    typer.Option(
        "--ch-ids",
        help="Comma-separated Syoboi channel IDs (e.g., 1,3,19). Default: all channels.",
    ),
]
"""Comma-separated channel ID filter option.

Usage:
    def run(ch_ids: ChannelIdsOption = None) -> None:
"""
