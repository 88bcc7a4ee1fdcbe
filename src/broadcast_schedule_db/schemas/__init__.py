"""Pydantic schemas for Broadcast Schedule DB.

This module provides wire models for the remote services, request
parameters, and the cache row schemas.
"""

from .base import SchemaBase, WireModel
from .cache import CachedProgram, CachedTitle, duration_minutes
from .params import (
    ProgLookupParams,
    TimeRange,
    parse_since,
    parse_until,
    resolve_time_range,
)
from .syoboi import (
    SyoboiChannel,
    SyoboiChannelGroup,
    SyoboiProgram,
    SyoboiTitle,
    decode_ch_group_lookup,
    decode_ch_lookup,
    decode_prog_lookup,
    decode_title_lookup,
    parse_sub_titles,
)
from .tmdb import (
    TmdbEpisode,
    TmdbErrorResponse,
    TmdbGenre,
    TmdbMovieSearchResult,
    TmdbSearchMovieResponse,
    TmdbSearchTvResponse,
    TmdbSeasonSummary,
    TmdbTvDetails,
    TmdbTvSearchResult,
    TmdbTvSeason,
)

__all__ = [
    # Base
    "SchemaBase",
    "WireModel",
    # Cache
    "CachedProgram",
    "CachedTitle",
    "duration_minutes",
    # Params
    "ProgLookupParams",
    "TimeRange",
    "parse_since",
    "parse_until",
    "resolve_time_range",
    # Syoboi
    "SyoboiChannel",
    "SyoboiChannelGroup",
    "SyoboiProgram",
    "SyoboiTitle",
    "decode_ch_group_lookup",
    "decode_ch_lookup",
    "decode_prog_lookup",
    "decode_title_lookup",
    "parse_sub_titles",
    # TMDB
    "TmdbEpisode",
    "TmdbErrorResponse",
    "TmdbGenre",
    "TmdbMovieSearchResult",
    "TmdbSearchMovieResponse",
    "TmdbSearchTvResponse",
    "TmdbSeasonSummary",
    "TmdbTvDetails",
    "TmdbTvSearchResult",
    "TmdbTvSeason",
]
