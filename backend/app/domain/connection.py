"""Directed, distance-weighted connection between two stations."""

import uuid
from dataclasses import dataclass

from app.domain.station import Station


@dataclass(frozen=True)
class Connection:
    """
    One section of a line, from ``up_station`` to ``down_station``.

    Connections are never mutated: a split or merge discards the old
    connection and builds new ones.

    Raises:
        ValueError: If both endpoints are the same station or distance is not positive
    """

    up_station: Station
    down_station: Station
    distance: int
    line_id: uuid.UUID | None = None

    def __post_init__(self) -> None:
        if self.up_station == self.down_station:
            msg = f"Connection endpoints must differ (got {self.up_station.name!r} twice)"
            raise ValueError(msg)
        if self.distance <= 0:
            msg = f"Connection distance must be positive, got {self.distance}"
            raise ValueError(msg)

    def has_station(self, station: Station) -> bool:
        """Check whether the station is one of the two endpoints."""
        return station in (self.up_station, self.down_station)
