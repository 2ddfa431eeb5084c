"""
Main FastAPI application for the RapidAid red zone backend.
Provides REST API endpoints for the accident log, the heatmap overlay,
red zone computation, and driver positioning suggestions.
"""

from dotenv import load_dotenv
load_dotenv()  # Load environment variables from .env file

import logging
import os
from fastapi import FastAPI, Depends, HTTPException, status, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from typing import List

from config import POSITIONING_MAX_DISTANCE_KM
from database import engine, get_db, Base
from errors import RedZoneError
from schemas import (
    AccidentCreate,
    AccidentResponse,
    HeatmapPoint,
    MessageResponse,
    PositionSuggestionResponse,
    RedZoneListResponse,
    RedZoneResponse,
)
from services.accidents import create_accident, get_heatmap_points, list_accidents
from services.positioning import count_nearby_zones, suggest_position
from services.red_zones import get_red_zones, update_red_zones

logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI application
app = FastAPI(
    title="RapidAid Red Zones",
    description="API for accident hotspots (red zones), accident heatmaps and driver positioning",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS middleware (explicit origins required when allow_credentials=True)
CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra_origins = os.environ.get("CORS_ORIGINS", "")
if _extra_origins:
    CORS_ORIGINS.extend(o.strip() for o in _extra_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============== Health Check ==============

@app.get("/", tags=["Health"])
def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "RapidAid Red Zones"}


# ============== Accident Endpoints ==============

@app.get(
    "/accidents",
    response_model=List[AccidentResponse],
    tags=["Accidents"]
)
def get_all_accidents(db: Session = Depends(get_db)):
    """
    Retrieve all logged accidents, most recent first.

    Args:
        db: Database session (injected)

    Returns:
        List of all accidents
    """
    return list_accidents(db)


@app.post(
    "/accidents",
    response_model=AccidentResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Accidents"]
)
def log_accident(accident: AccidentCreate, db: Session = Depends(get_db)):
    """
    Log a new accident.

    Red zones are not recomputed here; they are refreshed by the batch job
    or by POST /red-zones/refresh.
    """
    return create_accident(db, accident)


@app.get(
    "/heatmap",
    response_model=List[HeatmapPoint],
    tags=["Accidents"]
)
def get_heatmap(db: Session = Depends(get_db)):
    """Accident heatmap samples weighted by severity."""
    return get_heatmap_points(db)


# ============== Red Zone Endpoints ==============

@app.get(
    "/red-zones",
    response_model=RedZoneListResponse,
    tags=["Red Zones"]
)
def get_all_red_zones(db: Session = Depends(get_db)):
    """
    Retrieve stored red zones, highest risk score first.

    Args:
        db: Database session (injected)

    Returns:
        Red zones with their total count
    """
    zones = get_red_zones(db)
    return RedZoneListResponse(
        red_zones=[RedZoneResponse.model_validate(z) for z in zones],
        total=len(zones)
    )


@app.post(
    "/red-zones/refresh",
    response_model=MessageResponse,
    tags=["Red Zones"]
)
def refresh_red_zones(db: Session = Depends(get_db)):
    """
    Recompute red zones from the whole accident log.

    Replaces all stored red zones in a single transaction.

    Raises:
        HTTPException: If accidents cannot be read or red zones cannot be stored
    """
    try:
        summary = update_red_zones(db)
    except RedZoneError as e:
        logger.error("Red zone refresh failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        ) from e

    return MessageResponse(
        message="Red zones successfully updated",
        data=summary.model_dump(mode="json")
    )


@app.get(
    "/red-zones/suggestion",
    response_model=PositionSuggestionResponse,
    tags=["Red Zones"]
)
def get_position_suggestion(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance_km: float = Query(POSITIONING_MAX_DISTANCE_KM, gt=0),
    db: Session = Depends(get_db),
):
    """
    Suggest where an available driver should wait.

    Picks the highest-risk red zone within max_distance_km of the driver and
    reports how many red zones are in range.
    """
    zones = get_red_zones(db)
    suggestion = suggest_position(latitude, longitude, zones, max_distance_km)
    return PositionSuggestionResponse(
        **suggestion.model_dump(),
        nearby_count=count_nearby_zones(latitude, longitude, zones, max_distance_km),
    )


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
