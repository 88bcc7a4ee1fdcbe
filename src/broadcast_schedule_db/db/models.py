"""SQLAlchemy ORM models for Broadcast Schedule DB."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# ------------------------------------------------------------------------------
# Title model
# ------------------------------------------------------------------------------
class Title(Base):
    """Syoboi title (one anime or show).

    The TMDB mapping columns are curated by operators and are never
    overwritten by a sync once set.
    """

    __tablename__ = "titles"

    tid: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)

    # Protected TMDB mapping
    tmdb_series_id: Mapped[int | None] = mapped_column(nullable=True)
    tmdb_season_number: Mapped[int | None] = mapped_column(nullable=True)

    # Synced from Syoboi
    title: Mapped[str] = mapped_column(String(500))
    short_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    title_yomi: Mapped[str | None] = mapped_column(String(500), nullable=True)
    title_en: Mapped[str | None] = mapped_column(String(500), nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    cat: Mapped[int | None] = mapped_column(nullable=True)
    title_flag: Mapped[int | None] = mapped_column(nullable=True)
    first_year: Mapped[int | None] = mapped_column(nullable=True)
    first_month: Mapped[int | None] = mapped_column(nullable=True)
    first_end_year: Mapped[int | None] = mapped_column(nullable=True)
    first_end_month: Mapped[int | None] = mapped_column(nullable=True)
    first_ch: Mapped[str | None] = mapped_column(String(200), nullable=True)
    keywords: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_point: Mapped[int | None] = mapped_column(nullable=True)
    user_point_rank: Mapped[int | None] = mapped_column(nullable=True)
    sub_titles: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_update: Mapped[str] = mapped_column(String(32))  # Syoboi change token

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    programs: Mapped[list["Program"]] = relationship(back_populates="title_ref")

    def __repr__(self) -> str:
        return f"<Title(tid={self.tid}, title={self.title!r})>"


# ------------------------------------------------------------------------------
# Program model
# ------------------------------------------------------------------------------
class Program(Base):
    """One broadcast slot of a title on a channel."""

    __tablename__ = "programs"
    __table_args__ = (
        Index("ix_programs_tid", "tid"),
        Index("ix_programs_st_time", "st_time"),
    )

    pid: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    tid: Mapped[int] = mapped_column(ForeignKey("titles.tid"))
    ch_id: Mapped[int] = mapped_column()
    st_time: Mapped[datetime] = mapped_column(DateTime)
    st_offset: Mapped[int | None] = mapped_column(nullable=True)
    ed_time: Mapped[datetime] = mapped_column(DateTime)
    count: Mapped[int | None] = mapped_column(nullable=True)  # episode number
    sub_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    prog_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    flag: Mapped[int | None] = mapped_column(nullable=True)
    deleted: Mapped[int | None] = mapped_column(nullable=True)
    warn: Mapped[int | None] = mapped_column(nullable=True)
    revision: Mapped[int | None] = mapped_column(nullable=True)
    last_update: Mapped[str | None] = mapped_column(String(32), nullable=True)
    st_sub_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    duration_min: Mapped[int | None] = mapped_column(nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    title_ref: Mapped["Title"] = relationship(back_populates="programs")

    def __repr__(self) -> str:
        return f"<Program(pid={self.pid}, tid={self.tid}, st_time={self.st_time})>"
