"""Subway records: stations, lines and the sections that chain them."""

import uuid

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class Station(BaseModel):
    """A station that lines can be built through."""

    __tablename__ = "stations"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation of the station."""
        return f"<Station(id={self.id}, name={self.name})>"


class Line(BaseModel):
    """A subway line (e.g., Line 2, Shinbundang)."""

    __tablename__ = "lines"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(50),  # CSS class or hex value, e.g. "bg-red-600"
        nullable=False,
    )

    # Relationships
    sections: Mapped[list["Section"]] = relationship(
        back_populates="line",
        cascade="all, delete-orphan",
        order_by="Section.sequence",
    )

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, color={self.color})>"


class Section(BaseModel):
    """One connection of a line, stored with its position in the chain."""

    __tablename__ = "line_sections"

    line_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
    )
    up_station_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    down_station_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    distance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Relationships
    line: Mapped[Line] = relationship(back_populates="sections")
    up_station: Mapped[Station] = relationship(foreign_keys=[up_station_id])
    down_station: Mapped[Station] = relationship(foreign_keys=[down_station_id])

    # A station may start at most one section and end at most one section per line
    __table_args__ = (
        UniqueConstraint("line_id", "up_station_id", name="uq_line_section_up_station"),
        UniqueConstraint("line_id", "down_station_id", name="uq_line_section_down_station"),
        CheckConstraint("distance > 0", name="ck_line_section_distance_positive"),
        CheckConstraint("up_station_id <> down_station_id", name="ck_line_section_distinct_stations"),
        Index("ix_line_sections_line_sequence", "line_id", "sequence"),
        Index("ix_line_sections_up_station", "up_station_id"),
        Index("ix_line_sections_down_station", "down_station_id"),
    )

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<Section(id={self.id}, line={self.line_id}, seq={self.sequence}, "
            f"up={self.up_station_id}, down={self.down_station_id}, distance={self.distance})>"
        )
