"""Subway line topology: stations, connections and the line aggregate."""

from app.domain.connection import Connection
from app.domain.connection_set import ConnectionSet
from app.domain.line import Line
from app.domain.results import (
    DuplicateStationsError,
    InvalidDistanceError,
    MinimumSizeError,
    NoMatchingStationError,
    SectionError,
    SectionResult,
    StationNotFoundError,
    StationsChanged,
)
from app.domain.station import Station

__all__ = [
    "Connection",
    "ConnectionSet",
    "Line",
    "Station",
    # Results
    "SectionResult",
    "StationsChanged",
    "SectionError",
    "DuplicateStationsError",
    "NoMatchingStationError",
    "InvalidDistanceError",
    "MinimumSizeError",
    "StationNotFoundError",
]
