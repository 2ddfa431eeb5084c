"""
Accident log access: listing, logging new accidents, and heatmap export.
"""

from typing import List

from sqlalchemy.orm import Session

from models import Accident
from schemas import AccidentCreate, HeatmapPoint


def list_accidents(db: Session) -> List[Accident]:
    """Return all accidents, most recent first."""
    return db.query(Accident).order_by(Accident.id.desc()).all()


def create_accident(db: Session, accident: AccidentCreate) -> Accident:
    """
    Store a new accident record.

    Args:
        db: SQLAlchemy database session
        accident: Validated accident data

    Returns:
        The stored Accident with its assigned ID
    """
    db_accident = Accident(
        latitude=accident.latitude,
        longitude=accident.longitude,
        severity=accident.severity,
        timestamp=accident.timestamp,
    )
    db.add(db_accident)
    db.commit()
    db.refresh(db_accident)
    return db_accident


def get_heatmap_points(db: Session) -> List[HeatmapPoint]:
    """
    Heatmap samples, one per accident, weighted by severity.
    Missing or zero severities count as weight 1.
    """
    rows = db.query(Accident.latitude, Accident.longitude, Accident.severity).all()
    return [
        HeatmapPoint(latitude=r.latitude, longitude=r.longitude, weight=r.severity or 1)
        for r in rows
    ]
