"""Station management service."""

import uuid

import structlog
from fastapi import HTTPException, status

from app.domain import Station
from app.repositories import StationRepository

logger = structlog.get_logger(__name__)


class StationService:
    """Service for creating, listing and deleting stations."""

    def __init__(self, stations: StationRepository) -> None:
        """
        Initialize the station service.

        Args:
            stations: Station storage
        """
        self.stations = stations

    async def get_station(self, station_id: uuid.UUID) -> Station:
        """
        Get a station by ID.

        Raises:
            HTTPException: 404 if station not found
        """
        if not (station := await self.stations.get(station_id)):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Station {station_id} not found.",
            )
        return station

    async def list_stations(self) -> list[Station]:
        return await self.stations.list_all()

    async def create_station(self, name: str) -> Station:
        """
        Create a station.

        Raises:
            HTTPException: 409 if a station with the same name exists
        """
        if await self.stations.name_exists(name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Station '{name}' already exists.",
            )

        station = await self.stations.add(name)
        logger.info("station_created", station_id=str(station.id), name=station.name)
        return station

    async def delete_station(self, station_id: uuid.UUID) -> None:
        """
        Delete a station that no line passes through.

        Raises:
            HTTPException: 404 if station not found, 409 if a line still uses it
        """
        await self.get_station(station_id)

        if await self.stations.is_in_use(station_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Station is part of a line. Remove it from the line first.",
            )

        await self.stations.delete(station_id)
        logger.info("station_deleted", station_id=str(station_id))
