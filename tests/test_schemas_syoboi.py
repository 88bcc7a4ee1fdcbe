"""Tests for Syoboi XML decoding and cache conversion."""

from datetime import datetime

import pytest

from broadcast_schedule_db.clients.exceptions import ApiDecodeError, ApiResultError
from broadcast_schedule_db.schemas.syoboi import (
    decode_ch_group_lookup,
    decode_prog_lookup,
    decode_title_lookup,
    parse_sub_titles,
)
from tests.factories import make_syoboi_program, make_syoboi_title
from tests.fixtures.syoboi_responses import (
    CH_GROUP_LOOKUP_ALL,
    EMPTY_TITLE_LOOKUP,
    TITLE_LOOKUP_6309,
    TITLE_LOOKUP_API_ERROR,
    TITLE_LOOKUP_WITHOUT_RESULT,
    prog_item_xml,
    prog_lookup_xml,
    title_item_xml,
    title_lookup_xml,
)


class TestEnvelope:
    """Tests for the shared response envelope."""

    def test_missing_result_means_success(self) -> None:
        titles = decode_title_lookup(TITLE_LOOKUP_WITHOUT_RESULT)

        assert [t.tid for t in titles] == [100]

    def test_empty_item_list(self) -> None:
        assert decode_title_lookup(EMPTY_TITLE_LOOKUP) == []

    def test_missing_container(self) -> None:
        """A response without an items element decodes to nothing."""
        body = "<TitleLookupResponse><Result><Code>200</Code></Result></TitleLookupResponse>"

        assert decode_title_lookup(body) == []

    def test_result_error(self) -> None:
        """A non-200 code raises with the server message."""
        with pytest.raises(ApiResultError) as exc_info:
            decode_title_lookup(TITLE_LOOKUP_API_ERROR)

        assert "code=400" in str(exc_info.value)
        assert exc_info.value.detail == "Bad Request"

    def test_wrong_root_element(self) -> None:
        """A body for another command is rejected."""
        with pytest.raises(ApiDecodeError, match="expected <TitleLookupResponse>"):
            decode_title_lookup(prog_lookup_xml([]))

    def test_invalid_xml_has_preview(self) -> None:
        body = "<TitleLookupResponse>" + "x" * 1000

        with pytest.raises(ApiDecodeError) as exc_info:
            decode_title_lookup(body)

        assert exc_info.value.body_length == len(body)
        assert len(exc_info.value.body_preview) == 500

    def test_missing_required_field(self) -> None:
        """An item without its key fails decoding."""
        body = title_lookup_xml(["<TitleItem><Title>No TID</Title></TitleItem>"])

        with pytest.raises(ApiDecodeError):
            decode_title_lookup(body)


class TestTitleDecoding:
    """Tests for TitleLookup items."""

    def test_real_title(self) -> None:
        title = decode_title_lookup(TITLE_LOOKUP_6309)[0]

        assert title.title_en == "SPY FAMILY"
        assert title.first_ch == "テレビ東京"
        assert title.keywords is None
        assert title.comment.startswith("*リンク")

    def test_markup_in_title_is_unescaped(self) -> None:
        body = title_lookup_xml([title_item_xml(7, title="A & B <Special>")])

        assert decode_title_lookup(body)[0].title == "A & B <Special>"

    def test_to_cached_leaves_mapping_empty(self) -> None:
        cached = make_syoboi_title(6309, first_year=2022).to_cached()

        assert cached.tid == 6309
        assert cached.first_year == 2022
        assert cached.tmdb_series_id is None
        assert cached.tmdb_season_number is None


class TestProgramDecoding:
    """Tests for ProgLookup items."""

    def test_blank_optional_fields_are_none(self) -> None:
        body = prog_lookup_xml([prog_item_xml(1, 6309, last_update=None)])

        program = decode_prog_lookup(body)[0]

        assert program.count is None
        assert program.sub_title is None
        assert program.last_update is None

    def test_to_cached_parses_times(self) -> None:
        program = make_syoboi_program(
            1,
            st_time="2024-04-01 23:45:00",
            ed_time="2024-04-02 00:15:00",
        )

        cached = program.to_cached()

        assert cached.st_time == datetime(2024, 4, 1, 23, 45)
        assert cached.ed_time == datetime(2024, 4, 2, 0, 15)
        assert cached.duration_min == 30

    def test_to_cached_rejects_bad_time(self) -> None:
        with pytest.raises(ValueError):
            make_syoboi_program(1, st_time="2024/04/01 23:45").to_cached()


class TestChannelGroups:
    def test_decode(self) -> None:
        groups = decode_ch_group_lookup(CH_GROUP_LOOKUP_ALL)

        assert groups[0].ch_group_name == "テレビ 関東"
        assert groups[0].ch_group_comment is None


class TestParseSubTitles:
    """Tests for the SubTitles blob."""

    def test_parses_numbered_lines(self) -> None:
        raw = "*01*First\n*02*Second\n\n*10*Tenth"

        assert parse_sub_titles(raw) == [(1, "First"), (2, "Second"), (10, "Tenth")]

    def test_ignores_other_lines(self) -> None:
        assert parse_sub_titles("note\n*3*Third\n*x*bad") == [(3, "Third")]

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty(self, raw) -> None:
        assert parse_sub_titles(raw) == []
