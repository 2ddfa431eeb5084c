"""
Driver positioning: point idle drivers at the riskiest red zone nearby.
"""

from typing import Sequence

from config import POSITIONING_MAX_DISTANCE_KM
from models import RedZone
from schemas import PositionSuggestion, RedZoneResponse, SuggestionType
from services.geo import haversine_km


def count_nearby_zones(
    latitude: float,
    longitude: float,
    zones: Sequence[RedZone],
    max_distance_km: float = POSITIONING_MAX_DISTANCE_KM,
) -> int:
    """Number of red zones whose centre is within ``max_distance_km``."""
    return sum(
        1 for zone in zones
        if haversine_km(latitude, longitude, zone.center_lat, zone.center_lon) <= max_distance_km
    )


def suggest_position(
    latitude: float,
    longitude: float,
    zones: Sequence[RedZone],
    max_distance_km: float = POSITIONING_MAX_DISTANCE_KM,
) -> PositionSuggestion:
    """
    Pick the red zone an available driver should move towards.

    Only zones within ``max_distance_km`` of the driver are considered; among
    those the highest ``risk_score`` wins, and on a tie the later zone wins.

    Args:
        latitude: Driver latitude
        longitude: Driver longitude
        zones: Stored red zones (rows of the red_zones table)
        max_distance_km: Search range in kilometers

    Returns:
        PositionSuggestion of type "none" when no zone is in range
    """
    best = None
    best_distance = None

    for zone in zones:
        distance = haversine_km(latitude, longitude, zone.center_lat, zone.center_lon)
        if distance > max_distance_km:
            continue
        if best is None or zone.risk_score >= best.risk_score:
            best, best_distance = zone, distance

    if best is None:
        return PositionSuggestion(type=SuggestionType.none)

    return PositionSuggestion(
        type=SuggestionType.suggestion,
        zone=RedZoneResponse.model_validate(best),
        distance_km=round(best_distance, 3),
    )
