"""Persistence of lines and stations."""

from app.repositories.base import LineRepository, StationRepository
from app.repositories.sql import SqlLineRepository, SqlStationRepository

__all__ = [
    "LineRepository",
    "StationRepository",
    "SqlLineRepository",
    "SqlStationRepository",
]
