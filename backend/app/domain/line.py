"""Line aggregate root."""

import uuid
from collections.abc import Iterable

from app.domain.connection import Connection
from app.domain.connection_set import ConnectionSet
from app.domain.results import SectionError, SectionResult
from app.domain.station import Station


class Line:
    """
    A subway line: name, color and the chain of connections it owns.

    The line holds no topology logic itself. Every mutation is delegated to
    its ConnectionSet, which enforces the chain invariants.
    """

    def __init__(self, name: str, color: str, connections: ConnectionSet, line_id: uuid.UUID | None = None) -> None:
        self.id = line_id
        self.name = name
        self.color = color
        self._connections = connections

    @classmethod
    def create(
        cls,
        name: str,
        color: str,
        up_station: Station,
        down_station: Station,
        distance: int,
        *,
        line_id: uuid.UUID | None = None,
    ) -> "Line":
        """
        Create a line with its initial connection.

        Raises:
            ValueError: If the initial connection is invalid (same station twice, distance not positive)
        """
        connections = ConnectionSet(line_id)
        result = connections.add_connection(up_station, down_station, distance)
        if isinstance(result, SectionError):
            raise ValueError(result.message)
        return cls(name, color, connections, line_id=line_id)

    @classmethod
    def restore(
        cls,
        line_id: uuid.UUID,
        name: str,
        color: str,
        connections: Iterable[Connection],
    ) -> "Line":
        """
        Rebuild a persisted line from its stored connections.

        Raises:
            ValueError: If the stored connections are empty or do not form one chain
        """
        chain = ConnectionSet.from_connections(connections, line_id=line_id)
        if not len(chain):
            msg = f"Line {name!r} has no sections"
            raise ValueError(msg)
        return cls(name, color, chain, line_id=line_id)

    @property
    def sections(self) -> list[Connection]:
        """Connections in upstream-to-downstream order."""
        return self._connections.connections_in_order()

    @property
    def total_distance(self) -> int:
        return self._connections.total_distance

    def update(self, *, name: str | None = None, color: str | None = None) -> None:
        """Rename or recolor the line. Omitted values are left unchanged."""
        if name is not None:
            self.name = name
        if color is not None:
            self.color = color

    def add_section(self, up_station: Station, down_station: Station, distance: int) -> SectionResult:
        return self._connections.add_connection(up_station, down_station, distance)

    def remove_section(self, station: Station) -> SectionResult:
        return self._connections.remove_station(station)

    def get_stations(self) -> list[Station]:
        return self._connections.stations_in_order()

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, sections={len(self._connections)})>"
