"""Stations API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.domain import Station
from app.repositories import SqlStationRepository
from app.schemas.subway import CreateStationRequest, StationResponse
from app.services.station_service import StationService

router = APIRouter(prefix="/stations", tags=["stations"])


def get_station_service(db: AsyncSession = Depends(get_db)) -> StationService:
    """Build a StationService on the request's database session."""
    return StationService(SqlStationRepository(db))


@router.post("", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
async def create_station(
    request: CreateStationRequest,
    service: StationService = Depends(get_station_service),
) -> Station:
    """
    Create a station.

    Args:
        request: Station creation request
        service: Station service

    Returns:
        Created station
    """
    return await service.create_station(request.name)


@router.get("", response_model=list[StationResponse])
async def list_stations(
    service: StationService = Depends(get_station_service),
) -> list[Station]:
    """List all stations ordered by name."""
    return await service.list_stations()


@router.get("/{station_id}", response_model=StationResponse)
async def get_station(
    station_id: UUID,
    service: StationService = Depends(get_station_service),
) -> Station:
    """Get a single station."""
    return await service.get_station(station_id)


@router.delete("/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_station(
    station_id: UUID,
    service: StationService = Depends(get_station_service),
) -> None:
    """
    Delete a station.

    Stations still used by a line cannot be deleted (409).
    """
    await service.delete_station(station_id)
