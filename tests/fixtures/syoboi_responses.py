"""Syoboi Calendar XML response fixtures.

Static bodies mirror real db.php responses (trimmed); the builders
generate ProgLookup/TitleLookup pages of arbitrary size for pagination
and chunking tests.
"""

from collections.abc import Iterable
from xml.sax.saxutils import escape

from tests.conftest import APR_01_2300, APR_01_2330, LAST_UPDATE_V1

# -----------------------------------------------------------------------------
# TitleLookup
# -----------------------------------------------------------------------------
TITLE_LOOKUP_6309 = """<?xml version="1.0" encoding="UTF-8"?>
<TitleLookupResponse>
    <Result>
        <Code>200</Code>
        <Message></Message>
    </Result>
    <TitleItems>
        <TitleItem id="6309">
            <TID>6309</TID>
            <LastUpdate>2023-12-25 01:59:03</LastUpdate>
            <Title>SPY×FAMILY</Title>
            <ShortTitle></ShortTitle>
            <TitleYomi>すぱいふぁみりー</TitleYomi>
            <TitleEN>SPY FAMILY</TitleEN>
            <Comment>*リンク
-[[公式 https://spy-family.net/]]</Comment>
            <Cat>1</Cat>
            <TitleFlag>0</TitleFlag>
            <FirstYear>2022</FirstYear>
            <FirstMonth>4</FirstMonth>
            <FirstEndYear>2022</FirstEndYear>
            <FirstEndMonth>6</FirstEndMonth>
            <FirstCh>テレビ東京</FirstCh>
            <Keywords></Keywords>
            <UserPoint>120</UserPoint>
            <UserPointRank>35</UserPointRank>
            <SubTitles>*01*オペレーション〈梟(ストリクス)〉
*02*妻役を確保せよ
*03*受験対策をせよ</SubTitles>
        </TitleItem>
    </TitleItems>
</TitleLookupResponse>
"""

TITLE_LOOKUP_WITHOUT_RESULT = """<?xml version="1.0" encoding="UTF-8"?>
<TitleLookupResponse>
    <TitleItems>
        <TitleItem id="100">
            <TID>100</TID>
            <LastUpdate>2024-01-01 00:00:00</LastUpdate>
            <Title>No Result Element</Title>
            <ShortTitle></ShortTitle>
            <Cat>1</Cat>
            <FirstYear>2024</FirstYear>
            <FirstMonth>1</FirstMonth>
            <SubTitles></SubTitles>
        </TitleItem>
    </TitleItems>
</TitleLookupResponse>
"""

EMPTY_TITLE_LOOKUP = """<?xml version="1.0" encoding="UTF-8"?>
<TitleLookupResponse>
    <Result>
        <Code>200</Code>
        <Message></Message>
    </Result>
    <TitleItems></TitleItems>
</TitleLookupResponse>
"""

TITLE_LOOKUP_API_ERROR = """<?xml version="1.0" encoding="UTF-8"?>
<TitleLookupResponse>
    <Result>
        <Code>400</Code>
        <Message>Bad Request</Message>
    </Result>
</TitleLookupResponse>
"""

# -----------------------------------------------------------------------------
# ProgLookup
# -----------------------------------------------------------------------------
PROG_LOOKUP_6309 = f"""<?xml version="1.0" encoding="UTF-8"?>
<ProgLookupResponse>
    <Result>
        <Code>200</Code>
        <Message></Message>
    </Result>
    <ProgItems>
        <ProgItem id="574823">
            <LastUpdate>2022-04-05 12:47:31</LastUpdate>
            <PID>574823</PID>
            <TID>6309</TID>
            <StTime>{APR_01_2300}</StTime>
            <StOffset>0</StOffset>
            <EdTime>{APR_01_2330}</EdTime>
            <Count>1</Count>
            <SubTitle></SubTitle>
            <ProgComment></ProgComment>
            <Flag>2</Flag>
            <Deleted>0</Deleted>
            <Warn>0</Warn>
            <ChID>7</ChID>
            <Revision>3</Revision>
            <STSubTitle>オペレーション〈梟(ストリクス)〉</STSubTitle>
        </ProgItem>
    </ProgItems>
</ProgLookupResponse>
"""

# -----------------------------------------------------------------------------
# ChLookup / ChGroupLookup
# -----------------------------------------------------------------------------
CH_LOOKUP_ALL = """<?xml version="1.0" encoding="UTF-8"?>
<ChLookupResponse>
    <Result>
        <Code>200</Code>
        <Message></Message>
    </Result>
    <ChItems>
        <ChItem id="1">
            <LastUpdate>2023-10-01 00:00:00</LastUpdate>
            <ChID>1</ChID>
            <ChName>NHK総合</ChName>
            <ChiEPGName>ＮＨＫ総合</ChiEPGName>
            <ChURL>https://www.nhk.or.jp/</ChURL>
            <ChEPGURL></ChEPGURL>
            <ChComment></ChComment>
            <ChGID>11</ChGID>
            <ChNumber>1</ChNumber>
        </ChItem>
        <ChItem id="7">
            <LastUpdate>2023-10-01 00:00:00</LastUpdate>
            <ChID>7</ChID>
            <ChName>テレビ東京</ChName>
            <ChiEPGName>テレビ東京</ChiEPGName>
            <ChURL></ChURL>
            <ChEPGURL></ChEPGURL>
            <ChComment></ChComment>
            <ChGID>1</ChGID>
            <ChNumber>7</ChNumber>
        </ChItem>
    </ChItems>
</ChLookupResponse>
"""

CH_GROUP_LOOKUP_ALL = """<?xml version="1.0" encoding="UTF-8"?>
<ChGroupLookupResponse>
    <Result>
        <Code>200</Code>
        <Message></Message>
    </Result>
    <ChGroupItems>
        <ChGroupItem id="1">
            <LastUpdate>2010-01-01 00:00:00</LastUpdate>
            <ChGID>1</ChGID>
            <ChGroupName>テレビ 関東</ChGroupName>
            <ChGroupComment></ChGroupComment>
            <ChGroupOrder>1200</ChGroupOrder>
        </ChGroupItem>
        <ChGroupItem id="2">
            <LastUpdate>2010-01-01 00:00:00</LastUpdate>
            <ChGID>2</ChGID>
            <ChGroupName>BSデジタル</ChGroupName>
            <ChGroupComment></ChGroupComment>
            <ChGroupOrder>1300</ChGroupOrder>
        </ChGroupItem>
    </ChGroupItems>
</ChGroupLookupResponse>
"""


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------
def prog_item_xml(
    pid: int,
    tid: int,
    st_time: str = APR_01_2300,
    ed_time: str = APR_01_2330,
    ch_id: int = 7,
    last_update: str | None = LAST_UPDATE_V1,
) -> str:
    """One <ProgItem> element."""
    return (
        f'<ProgItem id="{pid}">'
        f"<LastUpdate>{last_update or ''}</LastUpdate>"
        f"<PID>{pid}</PID><TID>{tid}</TID>"
        f"<StTime>{st_time}</StTime><EdTime>{ed_time}</EdTime>"
        f"<Count></Count><SubTitle></SubTitle><ChID>{ch_id}</ChID>"
        "</ProgItem>"
    )


def prog_lookup_xml(items: Iterable[str]) -> str:
    """Wrap <ProgItem> elements in a successful ProgLookup envelope."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<ProgLookupResponse><Result><Code>200</Code><Message></Message></Result>"
        f"<ProgItems>{''.join(items)}</ProgItems></ProgLookupResponse>"
    )


def title_item_xml(tid: int, title: str | None = None, last_update: str = LAST_UPDATE_V1) -> str:
    """One <TitleItem> element."""
    name = escape(title or f"Title {tid}")
    return (
        f'<TitleItem id="{tid}">'
        f"<TID>{tid}</TID><LastUpdate>{last_update}</LastUpdate>"
        f"<Title>{name}</Title><ShortTitle></ShortTitle><Cat>1</Cat>"
        f"<SubTitles></SubTitles>"
        "</TitleItem>"
    )


def title_lookup_xml(items: Iterable[str]) -> str:
    """Wrap <TitleItem> elements in a successful TitleLookup envelope."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<TitleLookupResponse><Result><Code>200</Code><Message></Message></Result>"
        f"<TitleItems>{''.join(items)}</TitleItems></TitleLookupResponse>"
    )
