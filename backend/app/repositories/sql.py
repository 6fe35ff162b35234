"""SQLAlchemy-backed repositories mapping subway records to domain objects."""

import uuid
from collections import defaultdict

import structlog
from sqlalchemy import Select, delete, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain import Connection, Line, Station
from app.models import subway as orm

logger = structlog.get_logger(__name__)


def _to_station(record: orm.Station) -> Station:
    return Station(name=record.name, id=record.id)


def _to_connection(record: orm.Section) -> Connection:
    return Connection(
        up_station=_to_station(record.up_station),
        down_station=_to_station(record.down_station),
        distance=record.distance,
        line_id=record.line_id,
    )


def _to_line(record: orm.Line, sections: list[orm.Section]) -> Line:
    return Line.restore(
        record.id,
        record.name,
        record.color,
        [_to_connection(section) for section in sections],
    )


def _sections_query() -> Select[tuple[orm.Section]]:
    # Rows read after a save (or under a row lock) overwrite whatever the session cached earlier
    return (
        select(orm.Section)
        .options(
            selectinload(orm.Section.up_station),
            selectinload(orm.Section.down_station),
        )
        .execution_options(populate_existing=True)
    )


class SqlStationRepository:
    """Station storage on the stations table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, station_id: uuid.UUID) -> Station | None:
        record = await self.db.get(orm.Station, station_id)
        return _to_station(record) if record else None

    async def list_all(self) -> list[Station]:
        result = await self.db.execute(select(orm.Station).order_by(orm.Station.name))
        return [_to_station(record) for record in result.scalars().all()]

    async def add(self, name: str) -> Station:
        record = orm.Station(name=name)
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return _to_station(record)

    async def name_exists(self, name: str) -> bool:
        result = await self.db.execute(select(exists().where(orm.Station.name == name)))
        return bool(result.scalar())

    async def is_in_use(self, station_id: uuid.UUID) -> bool:
        """Check whether any line section starts or ends at the station."""
        result = await self.db.execute(
            select(
                exists().where(
                    or_(
                        orm.Section.up_station_id == station_id,
                        orm.Section.down_station_id == station_id,
                    )
                )
            )
        )
        return bool(result.scalar())

    async def delete(self, station_id: uuid.UUID) -> bool:
        if not (record := await self.db.get(orm.Station, station_id)):
            return False
        await self.db.delete(record)
        await self.db.commit()
        return True


class SqlLineRepository:
    """Line aggregate storage on the lines and line_sections tables."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, line_id: uuid.UUID, *, for_update: bool = False) -> Line | None:
        query = select(orm.Line).where(orm.Line.id == line_id)
        if for_update:
            # Row lock held until save() commits, serializing mutations of this line
            query = query.with_for_update()

        result = await self.db.execute(query)
        if not (record := result.scalar_one_or_none()):
            return None

        sections = await self.db.execute(_sections_query().where(orm.Section.line_id == line_id))
        return _to_line(record, list(sections.scalars().all()))

    async def list_all(self) -> list[Line]:
        result = await self.db.execute(select(orm.Line).order_by(orm.Line.name))
        records = list(result.scalars().all())
        if not records:
            return []

        sections = await self.db.execute(
            _sections_query().where(orm.Section.line_id.in_([record.id for record in records]))
        )
        by_line: dict[uuid.UUID, list[orm.Section]] = defaultdict(list)
        for section in sections.scalars().all():
            by_line[section.line_id].append(section)

        return [_to_line(record, by_line[record.id]) for record in records]

    async def name_exists(self, name: str, *, exclude_id: uuid.UUID | None = None) -> bool:
        condition = orm.Line.name == name
        if exclude_id is not None:
            condition = condition & (orm.Line.id != exclude_id)
        result = await self.db.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def save(self, line: Line) -> None:
        """
        Persist the line and rewrite its sections in chain order.

        Old section rows are deleted before the new ones are inserted so the
        per-line unique constraints on up/down station never see both
        generations at once.
        """
        if line.id is None:
            msg = "Line must have an id before it can be saved"
            raise ValueError(msg)

        if record := await self.db.get(orm.Line, line.id):
            record.name = line.name
            record.color = line.color
        else:
            record = orm.Line(id=line.id, name=line.name, color=line.color)
            self.db.add(record)

        await self.db.execute(delete(orm.Section).where(orm.Section.line_id == line.id))
        await self.db.flush()

        self.db.add_all(
            [
                orm.Section(
                    line_id=line.id,
                    up_station_id=connection.up_station.id,
                    down_station_id=connection.down_station.id,
                    distance=connection.distance,
                    sequence=sequence,
                )
                for sequence, connection in enumerate(line.sections)
            ]
        )
        await self.db.commit()
        logger.debug("line_saved", line_id=str(line.id), section_count=len(line.sections))

    async def delete(self, line_id: uuid.UUID) -> bool:
        if not (record := await self.db.get(orm.Line, line_id)):
            return False
        await self.db.delete(record)
        await self.db.commit()
        return True
