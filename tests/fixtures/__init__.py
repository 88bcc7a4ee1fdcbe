"""Test fixtures for Broadcast Schedule DB."""

from .syoboi_responses import (
    CH_GROUP_LOOKUP_ALL,
    CH_LOOKUP_ALL,
    EMPTY_TITLE_LOOKUP,
    PROG_LOOKUP_6309,
    TITLE_LOOKUP_6309,
    TITLE_LOOKUP_API_ERROR,
    TITLE_LOOKUP_WITHOUT_RESULT,
    prog_item_xml,
    prog_lookup_xml,
    title_item_xml,
    title_lookup_xml,
)
from .tmdb_responses import (
    ERROR_NOT_FOUND_RESPONSE,
    ERROR_UNAUTHORIZED_RESPONSE,
    SEARCH_MOVIE_RESPONSE,
    SEARCH_TV_RESPONSE,
    TV_DETAILS_RESPONSE,
    TV_SEASON_RESPONSE,
)

__all__ = [
    # Syoboi
    "CH_GROUP_LOOKUP_ALL",
    "CH_LOOKUP_ALL",
    "EMPTY_TITLE_LOOKUP",
    "PROG_LOOKUP_6309",
    "TITLE_LOOKUP_6309",
    "TITLE_LOOKUP_API_ERROR",
    "TITLE_LOOKUP_WITHOUT_RESULT",
    "prog_item_xml",
    "prog_lookup_xml",
    "title_item_xml",
    "title_lookup_xml",
    # TMDB
    "ERROR_NOT_FOUND_RESPONSE",
    "ERROR_UNAUTHORIZED_RESPONSE",
    "SEARCH_MOVIE_RESPONSE",
    "SEARCH_TV_RESPONSE",
    "TV_DETAILS_RESPONSE",
    "TV_SEASON_RESPONSE",
]
