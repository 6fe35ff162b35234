"""Lines API endpoints: line lifecycle and section management."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.domain import Line
from app.repositories import SqlLineRepository, SqlStationRepository
from app.schemas.subway import (
    CreateLineRequest,
    CreateSectionRequest,
    LineResponse,
    SectionResponse,
    StationResponse,
    UpdateLineRequest,
)
from app.services.line_service import LineService

router = APIRouter(prefix="/lines", tags=["lines"])


def get_line_service(db: AsyncSession = Depends(get_db)) -> LineService:
    """Build a LineService whose repositories share the request's database session."""
    return LineService(SqlLineRepository(db), SqlStationRepository(db))


def to_line_response(line: Line) -> LineResponse:
    """Serialize a line aggregate with its stations in order."""
    return LineResponse(
        id=line.id,  # type: ignore[arg-type]  # Persisted lines always have an id
        name=line.name,
        color=line.color,
        stations=[StationResponse.model_validate(station) for station in line.get_stations()],
        sections=[
            SectionResponse(
                up_station_id=section.up_station.id,  # type: ignore[arg-type]
                down_station_id=section.down_station.id,  # type: ignore[arg-type]
                distance=section.distance,
            )
            for section in line.sections
        ],
        total_distance=line.total_distance,
    )


# ==================== Line Endpoints ====================


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
async def create_line(
    request: CreateLineRequest,
    service: LineService = Depends(get_line_service),
) -> LineResponse:
    """
    Create a line with its first section.

    Args:
        request: Line creation request
        service: Line service

    Returns:
        Created line
    """
    return to_line_response(await service.create_line(request))


@router.get("", response_model=list[LineResponse])
async def list_lines(
    service: LineService = Depends(get_line_service),
) -> list[LineResponse]:
    """List all lines with their stations in order."""
    return [to_line_response(line) for line in await service.list_lines()]


@router.get("/{line_id}", response_model=LineResponse)
async def get_line(
    line_id: UUID,
    service: LineService = Depends(get_line_service),
) -> LineResponse:
    """Get a line with its stations from upstream to downstream terminal."""
    return to_line_response(await service.get_line(line_id))


@router.put("/{line_id}", response_model=LineResponse)
async def update_line(
    line_id: UUID,
    request: UpdateLineRequest,
    service: LineService = Depends(get_line_service),
) -> LineResponse:
    """Rename or recolor a line."""
    return to_line_response(await service.update_line(line_id, request))


@router.delete("/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_line(
    line_id: UUID,
    service: LineService = Depends(get_line_service),
) -> None:
    """Delete a line and its sections."""
    await service.delete_line(line_id)


# ==================== Section Endpoints ====================


@router.post("/{line_id}/sections", response_model=LineResponse)
async def add_section(
    line_id: UUID,
    request: CreateSectionRequest,
    service: LineService = Depends(get_line_service),
) -> LineResponse:
    """
    Add a section to a line.

    The new section must share exactly one station with the line. It is
    prepended, appended, or splits the existing section it lands in.

    Args:
        line_id: Line UUID
        request: Section creation request
        service: Line service

    Returns:
        Updated line

    Raises:
        HTTPException: 400 with ``{"code", "message"}`` detail if the line rejects the section
    """
    line = await service.add_section(line_id, request.up_station_id, request.down_station_id, request.distance)
    return to_line_response(line)


@router.delete("/{line_id}/sections", response_model=LineResponse)
async def remove_section(
    line_id: UUID,
    station_id: UUID = Query(..., description="Station to remove from the line"),
    service: LineService = Depends(get_line_service),
) -> LineResponse:
    """
    Remove a station from a line.

    Removing an interior station merges its two sections into one whose
    distance is their sum. A line always keeps at least one section.

    Raises:
        HTTPException: 400 with ``{"code", "message"}`` detail if the line rejects the removal
    """
    return to_line_response(await service.remove_section(line_id, station_id))
