"""
SQLAlchemy ORM models for the RapidAid red zone backend.
Defines the database schema for Accidents and Red Zones.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Float, DateTime, UniqueConstraint

from database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Accident(Base):
    """
    A historical accident record (location + severity).
    Accidents are the input of red zone clustering and the heatmap overlay.
    """
    __tablename__ = "accidents"
    __table_args__ = (
        UniqueConstraint("latitude", "longitude", "timestamp", name="unique_accident"),
    )

    id = Column(Integer, primary_key=True, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    severity = Column(Integer, nullable=False, default=3)  # 1 (low) .. 5 (high)
    timestamp = Column(DateTime(timezone=True), nullable=True)  # when the accident happened
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self):
        return f"<Accident(id={self.id}, lat={self.latitude}, lon={self.longitude}, severity={self.severity})>"


class RedZone(Base):
    """
    A circular accident hotspot computed from a dense cluster of accidents.
    The whole table is replaced on every computation run, so ids are not stable.
    """
    __tablename__ = "red_zones"

    id = Column(Integer, primary_key=True, index=True)
    center_lat = Column(Float, nullable=False)
    center_lon = Column(Float, nullable=False)
    radius = Column(Float, nullable=False)  # meters
    risk_score = Column(Integer, nullable=False)  # number of accidents in the cluster
    updated_at = Column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self):
        return f"<RedZone(id={self.id}, risk_score={self.risk_score}, radius={self.radius})>"
