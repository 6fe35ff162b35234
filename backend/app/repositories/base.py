"""
Storage interfaces the line and station services depend on.

The domain core assumes a line's full connection chain is in memory before
every mutation and is written back afterwards. These protocols describe that
contract; ``app.repositories.sql`` implements it on PostgreSQL.
"""

import uuid
from typing import Protocol

from app.domain import Line, Station


class StationRepository(Protocol):
    """Lookup and lifecycle of stations."""

    async def get(self, station_id: uuid.UUID) -> Station | None: ...

    async def list_all(self) -> list[Station]: ...

    async def add(self, name: str) -> Station: ...

    async def name_exists(self, name: str) -> bool: ...

    async def is_in_use(self, station_id: uuid.UUID) -> bool: ...

    async def delete(self, station_id: uuid.UUID) -> bool: ...


class LineRepository(Protocol):
    """Loading and saving whole line aggregates."""

    async def get(self, line_id: uuid.UUID, *, for_update: bool = False) -> Line | None:
        """
        Load a line with its full connection chain.

        Args:
            line_id: Line UUID
            for_update: Lock the line until the next save so mutations on one line are serialized
        """
        ...

    async def list_all(self) -> list[Line]: ...

    async def name_exists(self, name: str, *, exclude_id: uuid.UUID | None = None) -> bool: ...

    async def save(self, line: Line) -> None:
        """Persist the line and replace its stored sections with the current chain, then commit."""
        ...

    async def delete(self, line_id: uuid.UUID) -> bool: ...
