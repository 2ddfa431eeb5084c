"""
Runtime configuration for red zone computation and driver positioning.
Values come from environment variables (optionally loaded from a .env file).
"""

import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

load_dotenv()

# Leader/follower clustering defaults
CLUSTER_RADIUS_M = float(os.getenv("RED_ZONE_CLUSTER_RADIUS_M", "600"))
MIN_CLUSTER_SIZE = int(os.getenv("RED_ZONE_MIN_CLUSTER_SIZE", "3"))

# Dynamic red zone radius: observed spread + padding, clamped to [min, max]
RADIUS_PADDING_M = float(os.getenv("RED_ZONE_RADIUS_PADDING_M", "50"))
MIN_RADIUS_M = float(os.getenv("RED_ZONE_MIN_RADIUS_M", "200"))
MAX_RADIUS_M = float(os.getenv("RED_ZONE_MAX_RADIUS_M", "800"))

# Drivers are only pointed at red zones within this range
POSITIONING_MAX_DISTANCE_KM = float(os.getenv("POSITIONING_MAX_DISTANCE_KM", "5.0"))

ACCIDENTS_CSV_PATH = os.getenv("ACCIDENTS_CSV_PATH", "mumbai_dummy_accidents.csv")


class ClusteringConfig(BaseModel):
    """Parameters of a red zone computation run."""
    cluster_radius_m: float = Field(600.0, gt=0, description="Max distance (m) from a cluster centroid to join it")
    min_cluster_size: int = Field(3, ge=1, description="Minimum members for a cluster to become a red zone")
    radius_padding_m: float = Field(50.0, ge=0, description="Padding (m) added to the observed cluster spread")
    min_radius_m: float = Field(200.0, ge=0, description="Lower bound (m) of a red zone radius")
    max_radius_m: float = Field(800.0, gt=0, description="Upper bound (m) of a red zone radius")

    @model_validator(mode="after")
    def check_radius_bounds(self):
        if self.min_radius_m > self.max_radius_m:
            raise ValueError("min_radius_m must not exceed max_radius_m")
        return self

    @classmethod
    def from_env(cls) -> "ClusteringConfig":
        return cls(
            cluster_radius_m=CLUSTER_RADIUS_M,
            min_cluster_size=MIN_CLUSTER_SIZE,
            radius_padding_m=RADIUS_PADDING_M,
            min_radius_m=MIN_RADIUS_M,
            max_radius_m=MAX_RADIUS_M,
        )
