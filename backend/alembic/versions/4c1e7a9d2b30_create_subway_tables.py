"""create_subway_tables

Revision ID: 4c1e7a9d2b30
Revises:
Create Date: 2026-10-19 09:12:44.318520

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4c1e7a9d2b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema: Create stations, lines and line_sections tables."""
    op.create_table(
        "stations",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stations_name"), "stations", ["name"], unique=True)

    op.create_table(
        "lines",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("color", sa.String(length=50), nullable=False),
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "line_sections",
        sa.Column("line_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("up_station_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("down_station_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("distance", sa.Integer(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("distance > 0", name="ck_line_section_distance_positive"),
        sa.CheckConstraint("up_station_id <> down_station_id", name="ck_line_section_distinct_stations"),
        sa.ForeignKeyConstraint(["line_id"], ["lines.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["up_station_id"], ["stations.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["down_station_id"], ["stations.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("line_id", "up_station_id", name="uq_line_section_up_station"),
        sa.UniqueConstraint("line_id", "down_station_id", name="uq_line_section_down_station"),
    )
    op.create_index("ix_line_sections_line_sequence", "line_sections", ["line_id", "sequence"], unique=False)
    op.create_index("ix_line_sections_up_station", "line_sections", ["up_station_id"], unique=False)
    op.create_index("ix_line_sections_down_station", "line_sections", ["down_station_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema: Drop subway tables."""
    op.drop_index("ix_line_sections_down_station", table_name="line_sections")
    op.drop_index("ix_line_sections_up_station", table_name="line_sections")
    op.drop_index("ix_line_sections_line_sequence", table_name="line_sections")
    op.drop_table("line_sections")
    op.drop_table("lines")
    op.drop_index(op.f("ix_stations_name"), table_name="stations")
    op.drop_table("stations")
