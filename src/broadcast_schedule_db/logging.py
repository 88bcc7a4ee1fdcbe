"""Logging setup for bcsched, built on loguru.

Application modules log through ``get_logger(__name__)``; the API clients
tag their records with ``bind_service``. Libraries that use the standard
``logging`` module (SQLAlchemy, aiosqlite, httpx, Alembic, and the rate
governor) are routed into the same sinks by ``InterceptHandler``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Stdlib logger -> (level with --verbose, level otherwise)
LIBRARY_LEVELS: dict[str, tuple[int, int]] = {
    "sqlalchemy.engine": (logging.INFO, logging.WARNING),
    "aiosqlite": (logging.INFO, logging.WARNING),
    "httpx": (logging.DEBUG, logging.WARNING),
    "httpcore": (logging.INFO, logging.WARNING),
    "alembic": (logging.INFO, logging.INFO),
}

_configured = False


class InterceptHandler(logging.Handler):
    """Forwards stdlib log records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _source(record: dict[str, Any]) -> str:
    # Intercepted stdlib records carry no bound name
    return "{extra[name]}" if "name" in record["extra"] else "{name}"


def _console_format(record: dict[str, Any]) -> str:
    return (
        "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
        f"<cyan>{_source(record)}</cyan> - <level>{{message}}</level>\n{{exception}}"
    )


def _file_format(record: dict[str, Any]) -> str:
    return (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
        f"{_source(record)}:{{function}}:{{line}} | {{extra}} | {{message}}\n{{exception}}"
    )


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Install the stderr sink, the optional file sink and stdlib interception.

    Args:
        level: Configured log level
        verbose: Force DEBUG (wins over quiet)
        quiet: Force WARNING
        log_file: Rotating log file; always receives DEBUG and above
        rotation: Rotation trigger, e.g. "10 MB" or "1 day"
        retention: How long rotated files are kept
        serialize: Write the file sink as JSON lines

    Returns:
        The configured loguru logger
    """
    global _configured

    if verbose:
        effective_level: LogLevel = "DEBUG"
    elif quiet:
        effective_level = "WARNING"
    else:
        effective_level = level

    logger.remove()
    logger.add(
        sys.stderr,
        level=effective_level,
        format=_console_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_file_format,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    _intercept_stdlib_logging(debug=effective_level in ("TRACE", "DEBUG"))

    _configured = True
    return logger


def _intercept_stdlib_logging(*, debug: bool) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name, (debug_level, default_level) in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(debug_level if debug else default_level)


def get_logger(name: str) -> Logger:
    """Logger with ``name`` bound, typically ``get_logger(__name__)``."""
    return logger.bind(name=name)


def bind_service(service: str) -> Logger:
    """Logger for one remote API client ("syoboi" or "tmdb").

    Records carry ``service`` in their extras, and callers add per-request
    fields such as ``attempt``:

        log = bind_service("syoboi")
        log.warning("Request failed", attempt=2)
    """
    return logger.bind(name="client", service=service)


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Remove every sink; tests call this between cases."""
    global _configured
    logger.remove()
    _configured = False
