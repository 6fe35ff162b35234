"""Database models for SubwayLines."""

# Import all models to register them with SQLAlchemy metadata
from app.models.base import Base, BaseModel
from app.models.subway import Line, Section, Station

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Subway models
    "Line",
    "Section",
    "Station",
]
