"""Configuration settings for Broadcast Schedule DB."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyoboiConfig(BaseModel):
    """Configuration for the Syoboi Calendar API (primary service).

    Controls the three-tier rate governor and the retry budget
    of the request executor.
    """

    base_url: str = Field(
        default="https://cal.syoboi.jp/db.php",
        description="Endpoint for all Syoboi lookup commands",
    )
    user_agent: str = Field(
        default="broadcast-schedule-db/0.1.0",
        description="User-Agent header sent with every request",
    )
    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP timeout")

    # Rate governor
    min_interval_ms: int = Field(
        default=1000,
        ge=0,
        description="Minimum milliseconds between requests",
    )
    hourly_limit: int | None = Field(
        default=500,
        ge=1,
        description="Maximum requests in any rolling hour (None = unlimited)",
    )
    daily_limit: int | None = Field(
        default=10_000,
        ge=1,
        description="Maximum requests in any rolling day (None = unlimited)",
    )

    # Retries
    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Fixed delay between retries",
    )


class TmdbConfig(BaseModel):
    """Configuration for the TMDB API (secondary service)."""

    base_url: str = Field(
        default="https://api.themoviedb.org/3/",
        description="Versioned API base path",
    )
    user_agent: str = Field(
        default="broadcast-schedule-db/0.1.0",
        description="User-Agent header sent with every request",
    )
    language: str = Field(default="ja-JP", description="Default response language")
    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP timeout")

    min_interval_ms: int = Field(
        default=25,
        ge=0,
        description="Minimum milliseconds between requests (~40 req/s)",
    )

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Backoff unit, multiplied by the attempt number",
    )


class SyncConfig(BaseModel):
    """Configuration for schedule sync behavior.

    Controls pagination, title chunking and the empty-chunk
    retry heuristic.
    """

    page_limit: int = Field(
        default=5000,
        ge=1,
        description="Maximum records the server returns per ProgLookup request",
    )
    title_chunk_size: int = Field(
        default=50,
        ge=1,
        le=500,
        description="TIDs per TitleLookup request",
    )
    empty_chunk_max_retries: int = Field(
        default=5,
        ge=0,
        description="Retries for a non-empty chunk that returned no titles",
    )
    empty_chunk_base_backoff_seconds: float = Field(
        default=10.0,
        ge=0.0,
        description="First backoff for an empty chunk (doubles per retry)",
    )
    default_window_days: int = Field(
        default=1,
        ge=0,
        description="Days before and after now used when no window is given",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./broadcast_schedule.db",
        description="Async SQLite database connection string",
    )

    # --------------------------------------------------------------------------
    # TMDB API
    # --------------------------------------------------------------------------
    tmdb_api_token: str = Field(
        default="",
        description="TMDB API read access token (v4 bearer token)",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Remote Services
    # --------------------------------------------------------------------------
    syoboi: SyoboiConfig = Field(
        default_factory=SyoboiConfig,
        description="Syoboi Calendar client configuration",
    )
    tmdb: TmdbConfig = Field(
        default_factory=TmdbConfig,
        description="TMDB client configuration",
    )

    # --------------------------------------------------------------------------
    # Sync Configuration
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Schedule sync behavior configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
