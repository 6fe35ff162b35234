"""
Ordered-chain engine for the connections of one line.

The chain is kept as two index maps over the same connections, one keyed by
upstream station and one keyed by downstream station. Because the chain is
branch-free each station appears at most once in each map, which gives O(1)
neighbour lookup for splits and merges. Only locating the upstream terminal
needs a scan.

Every mutation validates fully before touching the maps, so a rejected call
leaves the chain exactly as it was.
"""

import uuid
from collections.abc import Iterable, Iterator

from app.domain.connection import Connection
from app.domain.results import (
    DuplicateStationsError,
    InvalidDistanceError,
    MinimumSizeError,
    NoMatchingStationError,
    SectionResult,
    StationNotFoundError,
    StationsChanged,
)
from app.domain.station import Station

MIN_CONNECTIONS = 1
# Upper bound of the line_sections.distance column (PostgreSQL integer)
MAX_DISTANCE = 2**31 - 1


class ConnectionSet:
    """The connections of one line, forming a single simple directed path."""

    def __init__(self, line_id: uuid.UUID | None = None) -> None:
        self.line_id = line_id
        self._by_up: dict[Station, Connection] = {}
        self._by_down: dict[Station, Connection] = {}

    @classmethod
    def from_connections(
        cls,
        connections: Iterable[Connection],
        line_id: uuid.UUID | None = None,
    ) -> "ConnectionSet":
        """
        Rebuild a chain from previously stored connections (in any order).

        Args:
            connections: Connections of a single line
            line_id: Owning line id

        Returns:
            ConnectionSet holding exactly those connections

        Raises:
            ValueError: If the connections branch, loop, or split into several paths
        """
        chain = cls(line_id)
        for connection in connections:
            if connection.up_station in chain._by_up or connection.down_station in chain._by_down:
                msg = f"Connections branch at {connection.up_station.name!r} -> {connection.down_station.name!r}"
                raise ValueError(msg)
            chain._link(connection)

        if chain._by_up and len(chain.stations_in_order()) != len(chain) + 1:
            msg = "Connections do not form a single path"
            raise ValueError(msg)
        return chain

    # ==================== Reads ====================

    def __len__(self) -> int:
        return len(self._by_up)

    def __contains__(self, station: object) -> bool:
        return station in self._by_up or station in self._by_down

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.connections_in_order())

    @property
    def upstream_terminal(self) -> Station | None:
        """The only station without an incoming connection (None when empty)."""
        for station in self._by_up:
            if station not in self._by_down:
                return station
        return None

    @property
    def downstream_terminal(self) -> Station | None:
        """The only station without an outgoing connection (None when empty)."""
        for station in self._by_down:
            if station not in self._by_up:
                return station
        return None

    @property
    def total_distance(self) -> int:
        """Sum of all connection distances."""
        return sum(connection.distance for connection in self._by_up.values())

    def connections_in_order(self) -> list[Connection]:
        """Connections from the upstream terminal to the downstream terminal."""
        ordered: list[Connection] = []
        station = self.upstream_terminal
        # Bounded by len(self) so a corrupted index can never loop forever
        while station is not None and len(ordered) < len(self):
            connection = self._by_up.get(station)
            if connection is None:
                break
            ordered.append(connection)
            station = connection.down_station
        return ordered

    def stations_in_order(self) -> list[Station]:
        """
        Stations from the upstream terminal to the downstream terminal.

        Returns a fresh list on every call; an empty chain yields an empty list.
        """
        ordered = self.connections_in_order()
        if not ordered:
            return []
        return [ordered[0].up_station, *(connection.down_station for connection in ordered)]

    # ==================== Mutations ====================

    def add_connection(self, up_station: Station, down_station: Station, distance: int) -> SectionResult:
        """
        Insert a connection, splitting an existing one when it lands mid-chain.

        Args:
            up_station: Upstream endpoint of the new connection
            down_station: Downstream endpoint of the new connection
            distance: Length of the new connection

        Returns:
            StationsChanged with the new order, or the SectionError that rejected it
        """
        if distance <= 0:
            return InvalidDistanceError(f"Distance must be positive, got {distance}")
        if distance > MAX_DISTANCE:
            return InvalidDistanceError(f"Distance must not exceed {MAX_DISTANCE}, got {distance}")
        if up_station == down_station:
            return DuplicateStationsError(f"A section cannot start and end at {up_station.name!r}")

        if not self._by_up:
            self._link(self._connect(up_station, down_station, distance))
            return self._changed()

        up_known = up_station in self
        down_known = down_station in self
        if up_known and down_known:
            return DuplicateStationsError(
                f"Both {up_station.name!r} and {down_station.name!r} are already on the line"
            )
        if not up_known and not down_known:
            return NoMatchingStationError(
                f"Neither {up_station.name!r} nor {down_station.name!r} is on the line"
            )

        # Prepend before the upstream terminal / append after the downstream terminal
        if (down_known and down_station not in self._by_down) or (up_known and up_station not in self._by_up):
            self._link(self._connect(up_station, down_station, distance))
            return self._changed()

        if up_known:
            existing = self._by_up[up_station]
            if distance >= existing.distance:
                return self._too_long(existing, distance)
            replacements = (
                self._connect(existing.up_station, down_station, distance),
                self._connect(down_station, existing.down_station, existing.distance - distance),
            )
        else:
            existing = self._by_down[down_station]
            if distance >= existing.distance:
                return self._too_long(existing, distance)
            replacements = (
                self._connect(existing.up_station, up_station, existing.distance - distance),
                self._connect(up_station, existing.down_station, distance),
            )

        self._unlink(existing)
        for connection in replacements:
            self._link(connection)
        return self._changed()

    def remove_station(self, station: Station) -> SectionResult:
        """
        Remove a station, merging its two connections when it is interior.

        Args:
            station: Station to remove

        Returns:
            StationsChanged with the new order, or the SectionError that rejected it
        """
        if len(self) <= MIN_CONNECTIONS:
            return MinimumSizeError(
                f"A line must keep at least {MIN_CONNECTIONS} section; cannot remove {station.name!r}"
            )

        as_up = self._by_up.get(station)
        as_down = self._by_down.get(station)
        if as_up is None and as_down is None:
            return StationNotFoundError(f"{station.name!r} is not on the line")

        merged = None
        if as_up is not None and as_down is not None:
            merged_distance = as_down.distance + as_up.distance
            if merged_distance > MAX_DISTANCE:
                return InvalidDistanceError(
                    f"Removing {station.name!r} would merge its sections into distance {merged_distance}, "
                    f"above the maximum of {MAX_DISTANCE}"
                )
            merged = self._connect(as_down.up_station, as_up.down_station, merged_distance)

        if as_up is not None:
            self._unlink(as_up)
        if as_down is not None:
            self._unlink(as_down)
        if merged is not None:
            self._link(merged)
        return self._changed()

    # ==================== Internals ====================

    def _connect(self, up_station: Station, down_station: Station, distance: int) -> Connection:
        return Connection(up_station, down_station, distance, line_id=self.line_id)

    def _link(self, connection: Connection) -> None:
        self._by_up[connection.up_station] = connection
        self._by_down[connection.down_station] = connection

    def _unlink(self, connection: Connection) -> None:
        del self._by_up[connection.up_station]
        del self._by_down[connection.down_station]

    def _changed(self) -> StationsChanged:
        return StationsChanged(self.stations_in_order())

    @staticmethod
    def _too_long(existing: Connection, distance: int) -> InvalidDistanceError:
        return InvalidDistanceError(
            f"Distance {distance} must be shorter than the {existing.distance} between "
            f"{existing.up_station.name!r} and {existing.down_station.name!r}"
        )
