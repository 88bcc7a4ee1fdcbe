"""create titles and programs tables

Revision ID: 5c1e9a7d3b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d3b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the title and program cache tables."""
    op.create_table('titles',
        sa.Column('tid', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('tmdb_series_id', sa.Integer(), nullable=True),
        sa.Column('tmdb_season_number', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('short_title', sa.String(length=500), nullable=True),
        sa.Column('title_yomi', sa.String(length=500), nullable=True),
        sa.Column('title_en', sa.String(length=500), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('cat', sa.Integer(), nullable=True),
        sa.Column('title_flag', sa.Integer(), nullable=True),
        sa.Column('first_year', sa.Integer(), nullable=True),
        sa.Column('first_month', sa.Integer(), nullable=True),
        sa.Column('first_end_year', sa.Integer(), nullable=True),
        sa.Column('first_end_month', sa.Integer(), nullable=True),
        sa.Column('first_ch', sa.String(length=200), nullable=True),
        sa.Column('keywords', sa.Text(), nullable=True),
        sa.Column('user_point', sa.Integer(), nullable=True),
        sa.Column('user_point_rank', sa.Integer(), nullable=True),
        sa.Column('sub_titles', sa.Text(), nullable=True),
        sa.Column('last_update', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('tid')
    )
    op.create_table('programs',
        sa.Column('pid', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('tid', sa.Integer(), nullable=False),
        sa.Column('ch_id', sa.Integer(), nullable=False),
        sa.Column('st_time', sa.DateTime(), nullable=False),
        sa.Column('st_offset', sa.Integer(), nullable=True),
        sa.Column('ed_time', sa.DateTime(), nullable=False),
        sa.Column('count', sa.Integer(), nullable=True),
        sa.Column('sub_title', sa.String(length=500), nullable=True),
        sa.Column('prog_comment', sa.Text(), nullable=True),
        sa.Column('flag', sa.Integer(), nullable=True),
        sa.Column('deleted', sa.Integer(), nullable=True),
        sa.Column('warn', sa.Integer(), nullable=True),
        sa.Column('revision', sa.Integer(), nullable=True),
        sa.Column('last_update', sa.String(length=32), nullable=True),
        sa.Column('st_sub_title', sa.String(length=500), nullable=True),
        sa.Column('duration_min', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['tid'], ['titles.tid']),
        sa.PrimaryKeyConstraint('pid')
    )
    op.create_index('ix_programs_tid', 'programs', ['tid'])
    op.create_index('ix_programs_st_time', 'programs', ['st_time'])


def downgrade() -> None:
    """Drop the cache tables."""
    op.drop_index('ix_programs_st_time', table_name='programs')
    op.drop_index('ix_programs_tid', table_name='programs')
    op.drop_table('programs')
    op.drop_table('titles')
