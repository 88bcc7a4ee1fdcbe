"""Pydantic schemas and XML decoders for Syoboi Calendar responses.

Every lookup command answers with the same envelope:

    <TitleLookupResponse>
        <Result><Code>200</Code><Message></Message></Result>
        <TitleItems>
            <TitleItem id="6309"><TID>6309</TID>...</TitleItem>
        </TitleItems>
    </TitleLookupResponse>

A missing <Result> element means success. Empty elements decode to None.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import TypeVar

from pydantic import Field, ValidationError

from broadcast_schedule_db.clients.exceptions import ApiDecodeError, ApiResultError

from .base import WireModel
from .cache import CachedProgram, CachedTitle, duration_minutes

SYOBOI_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
RESULT_OK = "200"

_SUB_TITLE_LINE = re.compile(r"\*(\d+)\*(.+)")

WireT = TypeVar("WireT", bound=WireModel)


class SyoboiTitle(WireModel):
    """Title record from TitleLookup."""

    tid: int = Field(alias="TID")
    last_update: str = Field(alias="LastUpdate")
    title: str = Field(alias="Title")
    short_title: str | None = Field(default=None, alias="ShortTitle")
    title_yomi: str | None = Field(default=None, alias="TitleYomi")
    title_en: str | None = Field(default=None, alias="TitleEN")
    comment: str | None = Field(default=None, alias="Comment")
    cat: int | None = Field(default=None, alias="Cat")
    title_flag: int | None = Field(default=None, alias="TitleFlag")
    first_year: int | None = Field(default=None, alias="FirstYear")
    first_month: int | None = Field(default=None, alias="FirstMonth")
    first_end_year: int | None = Field(default=None, alias="FirstEndYear")
    first_end_month: int | None = Field(default=None, alias="FirstEndMonth")
    first_ch: str | None = Field(default=None, alias="FirstCh")
    keywords: str | None = Field(default=None, alias="Keywords")
    user_point: int | None = Field(default=None, alias="UserPoint")
    user_point_rank: int | None = Field(default=None, alias="UserPointRank")
    sub_titles: str | None = Field(default=None, alias="SubTitles")

    def to_cached(self) -> CachedTitle:
        """
        Factory method to convert to the cache schema.

        The TMDB mapping is left empty; it is never sourced from Syoboi.

        Returns:
            CachedTitle instance
        """
        return CachedTitle.model_validate(self.model_dump(by_alias=False))


class SyoboiProgram(WireModel):
    """Broadcast slot from ProgLookup.

    Times stay in the wire format (``YYYY-MM-DD HH:MM:SS``) so the
    paginator can compare them as strings; use ``start_at``/``end_at``
    for parsed values.
    """

    pid: int = Field(alias="PID")
    tid: int = Field(alias="TID")
    st_time: str = Field(alias="StTime")
    st_offset: int | None = Field(default=None, alias="StOffset")
    ed_time: str = Field(alias="EdTime")
    count: int | None = Field(default=None, alias="Count")
    sub_title: str | None = Field(default=None, alias="SubTitle")
    prog_comment: str | None = Field(default=None, alias="ProgComment")
    flag: int | None = Field(default=None, alias="Flag")
    deleted: int | None = Field(default=None, alias="Deleted")
    warn: int | None = Field(default=None, alias="Warn")
    ch_id: int = Field(alias="ChID")
    revision: int | None = Field(default=None, alias="Revision")
    last_update: str | None = Field(default=None, alias="LastUpdate")
    st_sub_title: str | None = Field(default=None, alias="STSubTitle")

    @property
    def start_at(self) -> datetime:
        return datetime.strptime(self.st_time, SYOBOI_DATETIME_FORMAT)

    @property
    def end_at(self) -> datetime:
        return datetime.strptime(self.ed_time, SYOBOI_DATETIME_FORMAT)

    def to_cached(self) -> CachedProgram:
        """
        Factory method to convert to the cache schema.

        Returns:
            CachedProgram instance with parsed times and duration

        Raises:
            ValueError: If StTime or EdTime is not in the wire format
        """
        st_time = self.start_at
        ed_time = self.end_at
        data = self.model_dump(by_alias=False)
        data.update(
            st_time=st_time,
            ed_time=ed_time,
            duration_min=duration_minutes(st_time, ed_time),
        )
        return CachedProgram.model_validate(data)


class SyoboiChannel(WireModel):
    """Channel record from ChLookup."""

    ch_id: int = Field(alias="ChID")
    ch_gid: int | None = Field(default=None, alias="ChGID")
    ch_name: str = Field(alias="ChName")
    ch_comment: str | None = Field(default=None, alias="ChComment")
    ch_url: str | None = Field(default=None, alias="ChURL")
    last_update: str | None = Field(default=None, alias="LastUpdate")
    ch_iepg_name: str | None = Field(default=None, alias="ChiEPGName")
    ch_epg_url: str | None = Field(default=None, alias="ChEPGURL")
    ch_number: int | None = Field(default=None, alias="ChNumber")


class SyoboiChannelGroup(WireModel):
    """Channel group record from ChGroupLookup."""

    ch_gid: int = Field(alias="ChGID")
    ch_group_name: str = Field(alias="ChGroupName")
    ch_group_comment: str | None = Field(default=None, alias="ChGroupComment")
    ch_group_order: int | None = Field(default=None, alias="ChGroupOrder")
    last_update: str | None = Field(default=None, alias="LastUpdate")


# -----------------------------------------------------------------------------
# Envelope Decoding
# -----------------------------------------------------------------------------


def _decode_items(
    command: str,
    body: str,
    container: str,
    item: str,
    model: type[WireT],
) -> list[WireT]:
    """Decode one lookup envelope into a list of models.

    Raises:
        ApiDecodeError: Body is not the expected XML envelope
        ApiResultError: Envelope carries a non-200 result code
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise ApiDecodeError(f"{command} XML decoding failed: {e}", body) from e

    expected_root = f"{command}Response"
    if root.tag != expected_root:
        raise ApiDecodeError(
            f"{command} XML decoding failed: expected <{expected_root}>, got <{root.tag}>",
            body,
        )

    result = root.find("Result")
    if result is not None:
        code = (result.findtext("Code") or "").strip()
        if code and code != RESULT_OK:
            message = (result.findtext("Message") or "").strip() or None
            raise ApiResultError(
                f"{command} API error: code={code}, message={message}",
                code=code,
                detail=message,
                body=body,
            )

    items = root.find(container)
    if items is None:
        return []

    try:
        return [
            model.model_validate({child.tag: child.text for child in element})
            for element in items.findall(item)
        ]
    except ValidationError as e:
        raise ApiDecodeError(f"{command} XML decoding failed: {e}", body) from e


def decode_title_lookup(body: str) -> list[SyoboiTitle]:
    return _decode_items("TitleLookup", body, "TitleItems", "TitleItem", SyoboiTitle)


def decode_prog_lookup(body: str) -> list[SyoboiProgram]:
    return _decode_items("ProgLookup", body, "ProgItems", "ProgItem", SyoboiProgram)


def decode_ch_lookup(body: str) -> list[SyoboiChannel]:
    return _decode_items("ChLookup", body, "ChItems", "ChItem", SyoboiChannel)


def decode_ch_group_lookup(body: str) -> list[SyoboiChannelGroup]:
    return _decode_items("ChGroupLookup", body, "ChGroupItems", "ChGroupItem", SyoboiChannelGroup)


def parse_sub_titles(raw: str | None) -> list[tuple[int, str]]:
    """Parse a title's SubTitles blob into (episode_number, subtitle) pairs.

    Each line has the form ``*01*Subtitle``; other lines are ignored.

    Args:
        raw: SubTitles text from TitleLookup (may be None)

    Returns:
        Pairs in blob order
    """
    if not raw:
        return []

    pairs: list[tuple[int, str]] = []
    for line in raw.splitlines():
        match = _SUB_TITLE_LINE.match(line.strip())
        if match:
            pairs.append((int(match.group(1)), match.group(2)))
    return pairs
