"""Pydantic schemas for stations, lines and sections."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ==================== Helper Functions ====================


def _strip_name(value: str | None) -> str | None:
    """
    Strip surrounding whitespace and reject blank names - reusable helper.

    Raises:
        ValueError: If the name is empty after stripping
    """
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        msg = "Name must not be blank"
        raise ValueError(msg)
    return stripped


# ==================== Request Schemas ====================


class CreateStationRequest(BaseModel):
    """Request to create a station."""

    name: str = Field(..., min_length=1, max_length=255, description="Station name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip whitespace from the station name."""
        return _strip_name(v)  # type: ignore[return-value]


class CreateLineRequest(BaseModel):
    """Request to create a line with its first section."""

    name: str = Field(..., min_length=1, max_length=255, description="Line name")
    color: str = Field(..., min_length=1, max_length=50, description="Display color, e.g. 'bg-red-600'")
    up_station_id: UUID = Field(..., description="Upstream terminal of the first section")
    down_station_id: UUID = Field(..., description="Downstream terminal of the first section")
    distance: int = Field(..., description="Length of the first section")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip whitespace from the line name."""
        return _strip_name(v)  # type: ignore[return-value]


class UpdateLineRequest(BaseModel):
    """Request to rename or recolor a line (all fields optional)."""

    name: str | None = Field(None, min_length=1, max_length=255)
    color: str | None = Field(None, min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Strip whitespace from the line name."""
        return _strip_name(v)

    @model_validator(mode="after")
    def validate_not_empty(self) -> "UpdateLineRequest":
        """Require at least one field to change."""
        if self.name is None and self.color is None:
            msg = "At least one of name or color must be provided"
            raise ValueError(msg)
        return self


class CreateSectionRequest(BaseModel):
    """
    Request to add a section to a line.

    Distance is validated by the line itself (positive, and shorter than any
    section it splits) so that every topology rejection reports the same way.
    """

    up_station_id: UUID = Field(..., description="Upstream station of the new section")
    down_station_id: UUID = Field(..., description="Downstream station of the new section")
    distance: int = Field(..., description="Length of the new section")


# ==================== Response Schemas ====================


class StationResponse(BaseModel):
    """Station."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class SectionResponse(BaseModel):
    """One section of a line, in chain order."""

    up_station_id: UUID
    down_station_id: UUID
    distance: int


class LineResponse(BaseModel):
    """Line with its stations from upstream to downstream terminal."""

    id: UUID
    name: str
    color: str
    stations: list[StationResponse]
    sections: list[SectionResponse]
    total_distance: int


class SectionErrorDetail(BaseModel):
    """Body of a rejected section change (HTTP 400 detail)."""

    code: str
    message: str
