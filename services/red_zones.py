"""
Red zone service: leader/follower clustering of historical accidents.
Groups nearby accidents into hotspots ("red zones") used for the heatmap
overlay and for suggesting where idle drivers should wait.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import ClusteringConfig
from errors import SinkWriteError, SourceReadError
from models import Accident, RedZone
from schemas import AccidentPoint, RedZoneCreate, RedZoneRunSummary
from services.geo import haversine_m

logger = logging.getLogger(__name__)

# Arbitrary key shared by every red zone run (PostgreSQL advisory lock)
RED_ZONE_LOCK_KEY = 7_310_442


@dataclass
class AccidentCluster:
    """
    A group of accidents around a running centroid.

    The centroid is the unweighted mean of all members, updated
    incrementally every time a member is added.
    """
    center_lat: float
    center_lon: float
    members: List[AccidentPoint] = field(default_factory=list)

    @classmethod
    def found(cls, point: AccidentPoint) -> "AccidentCluster":
        return cls(center_lat=point.latitude, center_lon=point.longitude, members=[point])

    def add(self, point: AccidentPoint) -> None:
        self.members.append(point)
        n = len(self.members)
        self.center_lat = (self.center_lat * (n - 1) + point.latitude) / n
        self.center_lon = (self.center_lon * (n - 1) + point.longitude) / n

    def distance_to(self, point: AccidentPoint) -> float:
        return haversine_m(point.latitude, point.longitude, self.center_lat, self.center_lon)

    def max_member_distance(self) -> float:
        """Largest distance (m) from the centroid to any member."""
        if not self.members:
            return 0.0
        return max(
            haversine_m(self.center_lat, self.center_lon, p.latitude, p.longitude)
            for p in self.members
        )


def cluster_points(points: Iterable[AccidentPoint], cluster_radius_m: float = 600.0) -> List[AccidentCluster]:
    """
    Single-pass leader/follower clustering.

    Each point joins the first cluster (in creation order) whose centroid is
    within ``cluster_radius_m`` meters, or founds a new cluster. Assignment
    is first-match, not nearest, so the result depends on input order.

    Args:
        points: Accident points in scan order
        cluster_radius_m: Inclusive join distance in meters

    Returns:
        Clusters in creation order
    """
    clusters: List[AccidentCluster] = []

    for point in points:
        for cluster in clusters:
            if cluster.distance_to(point) <= cluster_radius_m:
                cluster.add(point)
                break
        else:
            clusters.append(AccidentCluster.found(point))

    return clusters


def red_zone_radius(max_dist_m: float, config: ClusteringConfig) -> float:
    """Pad the observed spread, then clamp it to the configured bounds."""
    return max(config.min_radius_m, min(max_dist_m + config.radius_padding_m, config.max_radius_m))


def summarize_clusters(
    clusters: Sequence[AccidentCluster],
    config: Optional[ClusteringConfig] = None,
    now: Optional[datetime] = None,
) -> List[RedZoneCreate]:
    """
    Turn significant clusters into red zone records.

    Clusters with fewer than ``config.min_cluster_size`` members are dropped.
    """
    config = config or ClusteringConfig()
    now = now or datetime.now(timezone.utc)

    return [
        RedZoneCreate(
            center_lat=cluster.center_lat,
            center_lon=cluster.center_lon,
            radius=red_zone_radius(cluster.max_member_distance(), config),
            risk_score=len(cluster.members),
            updated_at=now,
        )
        for cluster in clusters
        if len(cluster.members) >= config.min_cluster_size
    ]


def compute_red_zones(
    points: Iterable[AccidentPoint],
    config: Optional[ClusteringConfig] = None,
    now: Optional[datetime] = None,
) -> List[RedZoneCreate]:
    """
    Compute red zones from an accident point set.

    Pure function: no I/O, deterministic for a fixed input order. Coordinates
    are not validated here.

    Args:
        points: Accident points (anything with latitude/longitude attributes)
        config: Clustering parameters (defaults: 600 m, 3 members, 50/200/800 m)
        now: Timestamp stamped on every zone (defaults to current UTC time)

    Returns:
        One RedZoneCreate per significant cluster, in cluster creation order
    """
    config = config or ClusteringConfig()
    clusters = cluster_points(points, config.cluster_radius_m)
    return summarize_clusters(clusters, config, now)


def load_accident_points(db: Session) -> List[AccidentPoint]:
    """
    Read the full accident snapshot in insertion order.

    Raises:
        SourceReadError: If the accidents table cannot be read
    """
    try:
        rows = (
            db.query(Accident.latitude, Accident.longitude, Accident.severity)
            .order_by(Accident.id)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to fetch accidents: %s", e)
        raise SourceReadError(f"Failed to fetch accidents: {e}") from e

    return [
        AccidentPoint(latitude=r.latitude, longitude=r.longitude, severity=r.severity or 1)
        for r in rows
    ]


def _acquire_run_lock(db: Session) -> None:
    # Held until commit/rollback; serializes overlapping runs on PostgreSQL
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": RED_ZONE_LOCK_KEY})


def replace_red_zones(db: Session, zones: Sequence[RedZoneCreate]) -> None:
    """
    Replace every stored red zone with ``zones`` in a single transaction.

    On failure the transaction is rolled back, so the previous zones stay
    in place.

    Raises:
        SinkWriteError: With ``phase`` "delete" or "insert"
    """
    phase = "delete"
    try:
        _acquire_run_lock(db)
        db.query(RedZone).delete(synchronize_session=False)
        db.flush()

        phase = "insert"
        db.add_all([RedZone(**zone.model_dump()) for zone in zones])
        db.flush()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to %s red zones: %s", phase, e)
        raise SinkWriteError(phase, str(e)) from e


def update_red_zones(db: Session, config: Optional[ClusteringConfig] = None) -> RedZoneRunSummary:
    """
    Recompute all red zones from the accident log and store them.

    This function:
    1. Fetches all accidents from the database
    2. Clusters them with the leader/follower algorithm
    3. Keeps significant clusters and derives their radius
    4. Replaces the red_zones table with the new set

    Args:
        db: SQLAlchemy database session
        config: Clustering parameters (defaults to environment configuration)

    Returns:
        Summary with accident, cluster and red zone counts

    Raises:
        SourceReadError: If accidents cannot be read (nothing is written)
        SinkWriteError: If red zones cannot be replaced (previous zones kept)
    """
    config = config or ClusteringConfig.from_env()
    logger.info("Starting red zone clustering (radius=%.0fm, min size=%d)",
                config.cluster_radius_m, config.min_cluster_size)

    points = load_accident_points(db)
    logger.info("Processing %d accidents", len(points))

    now = datetime.now(timezone.utc)
    clusters = cluster_points(points, config.cluster_radius_m)
    zones = summarize_clusters(clusters, config, now)
    logger.info("Identified %d red zones from %d clusters", len(zones), len(clusters))

    replace_red_zones(db, zones)
    logger.info("Red zones successfully updated")

    return RedZoneRunSummary(
        accident_count=len(points),
        cluster_count=len(clusters),
        red_zone_count=len(zones),
        updated_at=now,
    )


def get_red_zones(db: Session) -> List[RedZone]:
    """Stored red zones, highest risk first."""
    return db.query(RedZone).order_by(RedZone.risk_score.desc(), RedZone.id).all()
