"""
Tagged results returned by topology mutations.

Every mutation of a line's connection chain returns either
``StationsChanged`` (the new ordered station list) or one of the
``SectionError`` variants. Failures are values, not exceptions, so callers
have to branch on the result explicitly:

    result = line.add_section(up, down, 5)
    if isinstance(result, SectionError):
        ...
"""

from dataclasses import dataclass
from typing import ClassVar

from app.domain.station import Station


@dataclass(frozen=True)
class StationsChanged:
    """Successful mutation, carrying the stations in upstream-to-downstream order."""

    stations: list[Station]


@dataclass(frozen=True)
class SectionError:
    """Base class for rejected mutations. No change was made to the chain."""

    code: ClassVar[str] = "section_error"

    message: str


@dataclass(frozen=True)
class DuplicateStationsError(SectionError):
    """Both endpoints of the proposed connection already belong to the line."""

    code: ClassVar[str] = "duplicate_stations"


@dataclass(frozen=True)
class NoMatchingStationError(SectionError):
    """Neither endpoint of the proposed connection belongs to the line."""

    code: ClassVar[str] = "no_matching_station"


@dataclass(frozen=True)
class InvalidDistanceError(SectionError):
    """Distance is out of range, or not strictly shorter than the section being split."""

    code: ClassVar[str] = "invalid_distance"


@dataclass(frozen=True)
class MinimumSizeError(SectionError):
    """Removal would leave the line without any connection."""

    code: ClassVar[str] = "minimum_size"


@dataclass(frozen=True)
class StationNotFoundError(SectionError):
    """The station is not part of the line."""

    code: ClassVar[str] = "station_not_found"


SectionResult = StationsChanged | SectionError
