"""Pydantic schemas for parsing TMDB API responses.

These schemas map directly to the TMDB v3 response structure.
See: https://developer.themoviedb.org/reference/intro/getting-started
"""

import json
from typing import TypeVar

from pydantic import BaseModel, Field, ValidationError

from broadcast_schedule_db.clients.exceptions import ApiDecodeError

ModelT = TypeVar("ModelT", bound=BaseModel)


class TmdbErrorResponse(BaseModel):
    """Error envelope returned with non-success statuses."""

    status_code: int = Field(description="TMDB internal status code")
    status_message: str = Field(description="Human-readable error message")


class TmdbTvSearchResult(BaseModel):
    """One TV series hit from search/tv."""

    id: int = Field(description="TMDB series ID")
    name: str = Field(description="Localized series name")
    original_name: str = Field(description="Original series name")
    original_language: str = Field(default="", description="ISO 639-1 code")
    origin_country: list[str] = Field(default_factory=list, description="Origin countries")
    first_air_date: str | None = Field(default=None, description="First air date")
    overview: str | None = Field(default=None, description="Synopsis")
    popularity: float = Field(default=0.0, description="Popularity score")
    vote_average: float = Field(default=0.0, description="Average rating")
    vote_count: int = Field(default=0, description="Number of votes")
    genre_ids: list[int] = Field(default_factory=list, description="Genre IDs")
    adult: bool = Field(default=False, description="Adult content flag")
    poster_path: str | None = Field(default=None, description="Poster image path")
    backdrop_path: str | None = Field(default=None, description="Backdrop image path")


class TmdbSearchTvResponse(BaseModel):
    """Paginated response of search/tv."""

    page: int = Field(description="Current page")
    results: list[TmdbTvSearchResult] = Field(default_factory=list, description="Hits")
    total_pages: int = Field(default=0, description="Number of pages")
    total_results: int = Field(default=0, description="Number of hits")


class TmdbMovieSearchResult(BaseModel):
    """One movie hit from search/movie."""

    id: int = Field(description="TMDB movie ID")
    title: str = Field(description="Localized title")
    original_title: str = Field(description="Original title")
    original_language: str = Field(default="", description="ISO 639-1 code")
    release_date: str | None = Field(default=None, description="Release date")
    overview: str | None = Field(default=None, description="Synopsis")
    popularity: float = Field(default=0.0, description="Popularity score")
    vote_average: float = Field(default=0.0, description="Average rating")
    vote_count: int = Field(default=0, description="Number of votes")
    genre_ids: list[int] = Field(default_factory=list, description="Genre IDs")
    adult: bool = Field(default=False, description="Adult content flag")
    video: bool = Field(default=False, description="Video flag")
    poster_path: str | None = Field(default=None, description="Poster image path")
    backdrop_path: str | None = Field(default=None, description="Backdrop image path")


class TmdbSearchMovieResponse(BaseModel):
    """Paginated response of search/movie."""

    page: int = Field(description="Current page")
    results: list[TmdbMovieSearchResult] = Field(default_factory=list, description="Hits")
    total_pages: int = Field(default=0, description="Number of pages")
    total_results: int = Field(default=0, description="Number of hits")


class TmdbGenre(BaseModel):
    """Genre entry in series details."""

    id: int = Field(description="Genre ID")
    name: str = Field(description="Genre name")


class TmdbSeasonSummary(BaseModel):
    """Season entry in series details."""

    id: int = Field(description="TMDB season ID")
    season_number: int = Field(description="Season number (0 = specials)")
    episode_count: int = Field(default=0, description="Number of episodes")
    air_date: str | None = Field(default=None, description="Season air date")
    name: str = Field(description="Season name")
    overview: str | None = Field(default=None, description="Season synopsis")
    vote_average: float = Field(default=0.0, description="Average rating")


class TmdbTvDetails(BaseModel):
    """TV series object from tv/{id}."""

    id: int = Field(description="TMDB series ID")
    name: str = Field(description="Localized series name")
    original_name: str = Field(description="Original series name")
    original_language: str = Field(default="", description="ISO 639-1 code")
    origin_country: list[str] = Field(default_factory=list, description="Origin countries")
    first_air_date: str | None = Field(default=None, description="First air date")
    last_air_date: str | None = Field(default=None, description="Last air date")
    number_of_episodes: int = Field(default=0, description="Total episodes")
    number_of_seasons: int = Field(default=0, description="Total seasons")
    seasons: list[TmdbSeasonSummary] = Field(default_factory=list, description="Seasons")
    status: str | None = Field(default=None, description="Production status")
    overview: str | None = Field(default=None, description="Synopsis")
    popularity: float = Field(default=0.0, description="Popularity score")
    vote_average: float = Field(default=0.0, description="Average rating")
    genres: list[TmdbGenre] = Field(default_factory=list, description="Genres")
    in_production: bool = Field(default=False, description="Still in production")
    poster_path: str | None = Field(default=None, description="Poster image path")


class TmdbEpisode(BaseModel):
    """Episode entry in a season."""

    id: int = Field(description="TMDB episode ID")
    episode_number: int = Field(description="Episode number within the season")
    name: str = Field(default="", description="Episode title")
    overview: str | None = Field(default=None, description="Episode synopsis")
    air_date: str | None = Field(default=None, description="Air date")
    season_number: int = Field(description="Season number")
    show_id: int | None = Field(default=None, description="TMDB series ID")
    runtime: int | None = Field(default=None, description="Runtime in minutes")
    vote_average: float = Field(default=0.0, description="Average rating")
    episode_type: str | None = Field(default=None, description="standard, finale, ...")


class TmdbTvSeason(BaseModel):
    """Season object from tv/{id}/season/{n}."""

    internal_id: str | None = Field(default=None, alias="_id", description="Internal ID")
    id: int = Field(description="TMDB season ID")
    season_number: int = Field(description="Season number")
    name: str | None = Field(default=None, description="Season name")
    overview: str | None = Field(default=None, description="Season synopsis")
    air_date: str | None = Field(default=None, description="Season air date")
    episodes: list[TmdbEpisode] = Field(default_factory=list, description="Episodes")
    vote_average: float = Field(default=0.0, description="Average rating")


# -----------------------------------------------------------------------------
# JSON Decoding
# -----------------------------------------------------------------------------


def decode_json(model: type[ModelT], body: str, path: str) -> ModelT:
    """Validate a JSON body against a response model.

    Raises:
        ApiDecodeError: Body is not valid JSON or does not match the model
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise ApiDecodeError(f"failed to decode JSON response: {path}: {e}", body) from e


def error_message(body: str) -> str | None:
    """Extract ``status_message`` from a TMDB error envelope, if present."""
    try:
        envelope = TmdbErrorResponse.model_validate(json.loads(body))
    except (ValueError, ValidationError):
        return None
    return f"{envelope.status_message} (status_code={envelope.status_code})"
