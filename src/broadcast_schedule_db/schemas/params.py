"""Request parameter schemas for Syoboi lookups."""

from __future__ import annotations

from datetime import datetime, time, timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator

RANGE_FORMAT = "%Y%m%d_%H%M%S"

# Accepted --since/--until formats, most specific first
_DATETIME_FORMATS = ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S")
_DATE_FORMAT = "%Y-%m-%d"


class TimeRange(BaseModel):
    """Closed time window for the ProgLookup ``Range`` parameter."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self) -> TimeRange:
        if self.end < self.start:
            raise ValueError("range end must not be before range start")
        return self

    def to_syoboi_format(self) -> str:
        """Render as ``YYYYMMDD_HHMMSS-YYYYMMDD_HHMMSS``."""
        return f"{self.start.strftime(RANGE_FORMAT)}-{self.end.strftime(RANGE_FORMAT)}"


class ProgLookupParams(BaseModel):
    """Filters for one ProgLookup request.

    ``None`` means "no filter" for every optional field.
    """

    model_config = ConfigDict(frozen=True)

    tids: list[int] | None = Field(default=None, description="Title ID filter")
    ch_ids: list[int] | None = Field(default=None, description="Channel ID filter")
    range: TimeRange | None = Field(default=None, description="Range parameter")
    st_time: str | None = Field(default=None, description="StTime filter")
    last_update: str | None = Field(default=None, description="LastUpdate filter")
    join_sub_titles: bool = Field(default=True, description="Send JOIN=SubTitles")
    fields: list[str] | None = Field(default=None, description="Restrict output fields")

    def with_range(self, start: datetime, end: datetime) -> ProgLookupParams:
        """Copy with a new window, keeping every other filter."""
        return self.model_copy(update={"range": TimeRange(start=start, end=end)})

    def to_query(self) -> list[tuple[str, str]]:
        """Build the db.php query string pairs, in a stable order."""
        query: list[tuple[str, str]] = [("Command", "ProgLookup")]
        if self.tids is not None:
            query.append(("TID", ",".join(str(t) for t in self.tids)))
        if self.ch_ids is not None:
            query.append(("ChID", ",".join(str(c) for c in self.ch_ids)))
        if self.range is not None:
            query.append(("Range", self.range.to_syoboi_format()))
        if self.st_time is not None:
            query.append(("StTime", self.st_time))
        if self.last_update is not None:
            query.append(("LastUpdate", self.last_update))
        if self.join_sub_titles:
            query.append(("JOIN", "SubTitles"))
        if self.fields is not None:
            query.append(("Fields", ",".join(self.fields)))
        return query


# -----------------------------------------------------------------------------
# Time Window Resolution
# -----------------------------------------------------------------------------


def _parse_bound(value: str, date_only_time: time) -> datetime:
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        day = datetime.strptime(value, _DATE_FORMAT).date()
    except ValueError:
        raise ValueError(
            f"invalid datetime '{value}': expected YYYY-MM-DD, "
            "YYYY-MM-DD HH:MM:SS or YYYY-MM-DDTHH:MM:SS"
        ) from None
    return datetime.combine(day, date_only_time)


def parse_since(value: str) -> datetime:
    """Parse a window start; a bare date means the start of that day."""
    return _parse_bound(value.strip(), time(0, 0, 0))


def parse_until(value: str) -> datetime:
    """Parse a window end; a bare date means the last second of that day."""
    return _parse_bound(value.strip(), time(23, 59, 59))


def resolve_time_range(
    since: str | None,
    until: str | None,
    now: datetime | None = None,
    window_days: int = 1,
) -> TimeRange:
    """Resolve the sync window from optional user input.

    Args:
        since: Window start, or None
        until: Window end, or None
        now: Reference time when both are None (default: local now)
        window_days: Days before and after ``now`` for the default window

    Returns:
        The resolved TimeRange

    Raises:
        ValueError: Only one bound given, or a bound does not parse
    """
    if since is None and until is None:
        now = now or datetime.now().replace(microsecond=0)
        delta = timedelta(days=window_days)
        return TimeRange(start=now - delta, end=now + delta)

    if since is None or until is None:
        raise ValueError("both --since and --until must be specified together")

    return TimeRange(start=parse_since(since), end=parse_until(until))
