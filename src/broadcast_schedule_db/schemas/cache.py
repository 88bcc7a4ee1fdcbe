"""Pydantic schemas for the cached title and program rows."""

import math
from datetime import datetime

from pydantic import Field

from .base import SchemaBase


class CachedTitle(SchemaBase):
    """A title as stored in the local cache.

    ``tmdb_series_id`` and ``tmdb_season_number`` are operator-curated.
    Upserts fill them only while the stored value is still empty; use
    ``CacheStore.set_tmdb_mapping`` to change them afterwards.
    """

    tid: int = Field(gt=0, description="Syoboi title ID")
    title: str = Field(description="Title name")
    short_title: str | None = Field(default=None, description="Short title")
    title_yomi: str | None = Field(default=None, description="Title reading (kana)")
    title_en: str | None = Field(default=None, description="English title")
    comment: str | None = Field(default=None, description="Free-form title comment")
    cat: int | None = Field(default=None, description="Category code")
    title_flag: int | None = Field(default=None, description="Title flag bits")
    first_year: int | None = Field(default=None, description="First broadcast year")
    first_month: int | None = Field(default=None, description="First broadcast month")
    first_end_year: int | None = Field(default=None, description="Final broadcast year")
    first_end_month: int | None = Field(default=None, description="Final broadcast month")
    first_ch: str | None = Field(default=None, description="First broadcast channel name")
    keywords: str | None = Field(default=None, description="Search keywords")
    user_point: int | None = Field(default=None, description="User rating points")
    user_point_rank: int | None = Field(default=None, description="User rating rank")
    sub_titles: str | None = Field(default=None, description="Raw episode subtitle blob")
    last_update: str = Field(description="Change token from Syoboi")

    # Protected TMDB mapping
    tmdb_series_id: int | None = Field(default=None, description="TMDB TV series ID")
    tmdb_season_number: int | None = Field(default=None, description="TMDB season number")


class CachedProgram(SchemaBase):
    """A broadcast slot as stored in the local cache."""

    pid: int = Field(gt=0, description="Syoboi program ID")
    tid: int = Field(gt=0, description="Title this slot airs")
    ch_id: int = Field(description="Channel ID")
    st_time: datetime = Field(description="Start time (local wall clock)")
    st_offset: int | None = Field(default=None, description="Start offset in seconds")
    ed_time: datetime = Field(description="End time (local wall clock)")
    count: int | None = Field(default=None, description="Episode number")
    sub_title: str | None = Field(default=None, description="Episode subtitle")
    prog_comment: str | None = Field(default=None, description="Program comment")
    flag: int | None = Field(default=None, description="Program flag bits")
    deleted: int | None = Field(default=None, description="Deleted marker")
    warn: int | None = Field(default=None, description="Warning marker")
    revision: int | None = Field(default=None, description="Revision counter")
    last_update: str | None = Field(default=None, description="Change token from Syoboi")
    st_sub_title: str | None = Field(default=None, description="Joined episode subtitle")
    duration_min: int | None = Field(default=None, description="Rounded duration in minutes")


def duration_minutes(st_time: datetime, ed_time: datetime) -> int:
    """Length of a broadcast slot in minutes, halves rounded away from zero."""
    minutes = (ed_time - st_time).total_seconds() / 60
    return int(math.copysign(math.floor(abs(minutes) + 0.5), minutes))
