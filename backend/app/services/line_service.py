"""Line management service: line lifecycle and section changes."""

import uuid

import structlog
from fastapi import HTTPException, status

from app.domain import Line, SectionError, SectionResult, Station
from app.repositories import LineRepository, StationRepository
from app.schemas.subway import CreateLineRequest, SectionErrorDetail, UpdateLineRequest

logger = structlog.get_logger(__name__)


def section_error_to_http(error: SectionError) -> HTTPException:
    """
    Translate a rejected section change into a 400 response.

    Args:
        error: The SectionError returned by the line

    Returns:
        HTTPException whose detail carries the error code and message
    """
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=SectionErrorDetail(code=error.code, message=error.message).model_dump(),
    )


class LineService:
    """Service for managing lines and their sections."""

    def __init__(self, lines: LineRepository, stations: StationRepository) -> None:
        """
        Initialize the line service.

        Args:
            lines: Line aggregate storage
            stations: Station lookup
        """
        self.lines = lines
        self.stations = stations

    async def _resolve_station(self, station_id: uuid.UUID) -> Station:
        """
        Resolve a station ID to a Station.

        Raises:
            HTTPException: 404 if station not found
        """
        if not (station := await self.stations.get(station_id)):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Station {station_id} not found.",
            )
        return station

    async def _ensure_unique_name(self, name: str, exclude_id: uuid.UUID | None = None) -> None:
        if await self.lines.name_exists(name, exclude_id=exclude_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Line '{name}' already exists.",
            )

    async def get_line(self, line_id: uuid.UUID, *, for_update: bool = False) -> Line:
        """
        Get a line by ID with its full chain of sections.

        Args:
            line_id: Line UUID
            for_update: Lock the line for a subsequent mutation

        Returns:
            Line aggregate

        Raises:
            HTTPException: 404 if line not found
        """
        if not (line := await self.lines.get(line_id, for_update=for_update)):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Line not found.",
            )
        return line

    async def list_lines(self) -> list[Line]:
        return await self.lines.list_all()

    async def get_stations(self, line_id: uuid.UUID) -> list[Station]:
        """Stations of a line from upstream to downstream terminal."""
        line = await self.get_line(line_id)
        return line.get_stations()

    async def create_line(self, request: CreateLineRequest) -> Line:
        """
        Create a line with its first section.

        Args:
            request: Line creation request

        Returns:
            Created line

        Raises:
            HTTPException: 404 if a station doesn't exist, 409 if the name is taken,
                400 if the first section is invalid
        """
        await self._ensure_unique_name(request.name)
        up_station = await self._resolve_station(request.up_station_id)
        down_station = await self._resolve_station(request.down_station_id)

        try:
            line = Line.create(
                request.name,
                request.color,
                up_station,
                down_station,
                request.distance,
                line_id=uuid.uuid4(),
            )
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e

        await self.lines.save(line)
        logger.info("line_created", line_id=str(line.id), name=line.name)
        return line

    async def update_line(self, line_id: uuid.UUID, request: UpdateLineRequest) -> Line:
        """
        Rename or recolor a line.

        Raises:
            HTTPException: 404 if line not found, 409 if the new name is taken
        """
        line = await self.get_line(line_id, for_update=True)
        if request.name is not None and request.name != line.name:
            await self._ensure_unique_name(request.name, exclude_id=line_id)

        line.update(name=request.name, color=request.color)
        await self.lines.save(line)
        logger.info("line_updated", line_id=str(line_id), name=line.name, color=line.color)
        return line

    async def delete_line(self, line_id: uuid.UUID) -> None:
        """
        Delete a line and all of its sections.

        Raises:
            HTTPException: 404 if line not found
        """
        if not await self.lines.delete(line_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Line not found.",
            )
        logger.info("line_deleted", line_id=str(line_id))

    async def add_section(
        self,
        line_id: uuid.UUID,
        up_station_id: uuid.UUID,
        down_station_id: uuid.UUID,
        distance: int,
    ) -> Line:
        """
        Add a section to a line, splitting an existing section if needed.

        Args:
            line_id: Line UUID
            up_station_id: Upstream station of the new section
            down_station_id: Downstream station of the new section
            distance: Length of the new section

        Returns:
            Updated line

        Raises:
            HTTPException: 404 if line or station not found, 400 if the line rejects the section
        """
        line = await self.get_line(line_id, for_update=True)
        up_station = await self._resolve_station(up_station_id)
        down_station = await self._resolve_station(down_station_id)

        result = line.add_section(up_station, down_station, distance)
        await self._apply(line, result, "section_added", up_station=up_station.name, down_station=down_station.name)
        return line

    async def remove_section(self, line_id: uuid.UUID, station_id: uuid.UUID) -> Line:
        """
        Remove a station from a line, merging its neighbouring sections.

        Args:
            line_id: Line UUID
            station_id: Station to remove

        Returns:
            Updated line

        Raises:
            HTTPException: 404 if line or station not found, 400 if the line rejects the removal
        """
        line = await self.get_line(line_id, for_update=True)
        station = await self._resolve_station(station_id)

        result = line.remove_section(station)
        await self._apply(line, result, "section_removed", station=station.name)
        return line

    async def _apply(self, line: Line, result: SectionResult, event: str, **context: str) -> None:
        """Persist a successful section change, or raise the matching 400."""
        if isinstance(result, SectionError):
            logger.info(
                "section_change_rejected",
                line_id=str(line.id),
                code=result.code,
                reason=result.message,
                **context,
            )
            raise section_error_to_http(result)

        await self.lines.save(line)
        logger.info(event, line_id=str(line.id), station_count=len(result.stations), **context)
