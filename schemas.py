"""
Pydantic schemas for request/response validation and serialization.
Provides data validation and API documentation for the FastAPI endpoints,
and the plain data records passed between the clustering services.
"""

from datetime import datetime
from typing import Optional, List
from enum import Enum
from pydantic import BaseModel, Field


class SuggestionType(str, Enum):
    """Outcome of a driver positioning lookup."""
    none = "none"
    suggestion = "suggestion"


# ============== Accident Schemas ==============

class AccidentPoint(BaseModel):
    """A geolocated accident as consumed by red zone clustering (no range checks)."""
    latitude: float
    longitude: float
    severity: int = 3

    class Config:
        from_attributes = True


class AccidentCreate(BaseModel):
    """Schema for logging a new accident."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")
    severity: int = Field(3, ge=1, le=5, description="Severity weight (1 low .. 5 high)")
    timestamp: Optional[datetime] = Field(None, description="When the accident happened")

    class Config:
        json_schema_extra = {
            "example": {
                "latitude": 19.0760,
                "longitude": 72.8777,
                "severity": 5,
                "timestamp": "2024-03-14T08:30:00Z"
            }
        }


class AccidentResponse(BaseModel):
    """Schema for accident response."""
    id: int
    latitude: float
    longitude: float
    severity: int
    timestamp: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HeatmapPoint(BaseModel):
    """A weighted heatmap sample (weight = accident severity)."""
    latitude: float
    longitude: float
    weight: int


# ============== Red Zone Schemas ==============

class RedZoneCreate(BaseModel):
    """A freshly computed red zone, ready to be stored."""
    center_lat: float
    center_lon: float
    radius: float = Field(..., description="Radius in meters")
    risk_score: int = Field(..., description="Number of accidents in the originating cluster")
    updated_at: datetime


class RedZoneResponse(RedZoneCreate):
    """Schema for a stored red zone."""
    id: int

    class Config:
        from_attributes = True


class PositionSuggestion(BaseModel):
    """Where an idle driver should wait: the riskiest red zone nearby, if any."""
    type: SuggestionType
    zone: Optional[RedZoneResponse] = None
    distance_km: Optional[float] = None


class PositionSuggestionResponse(PositionSuggestion):
    """Positioning suggestion plus the number of red zones in range."""
    nearby_count: int = 0


# ============== Batch Job Summaries ==============

class RedZoneRunSummary(BaseModel):
    """Result of one red zone computation run."""
    accident_count: int
    cluster_count: int
    red_zone_count: int
    updated_at: datetime


class ImportSummary(BaseModel):
    """Result of importing an accident CSV dataset."""
    total_rows: int
    imported: int
    duplicates: int
    skipped: int


# ============== Response Wrappers ==============

class MessageResponse(BaseModel):
    """Generic message response schema."""
    message: str
    data: Optional[dict] = None


class RedZoneListResponse(BaseModel):
    """Stored red zones with their count."""
    red_zones: List[RedZoneResponse]
    total: int
