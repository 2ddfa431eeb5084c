from datetime import datetime, timezone

import services.positioning as positioning
from models import RedZone
from schemas import SuggestionType
from services.positioning import count_nearby_zones, suggest_position

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)

# Driver on the equator; 0.009 degrees of longitude is roughly 1 km there
DRIVER = (0.0, 0.0)


def _zone(zone_id: int, km_east: float, risk_score: int) -> RedZone:
    return RedZone(
        id=zone_id,
        center_lat=0.0,
        center_lon=km_east * 0.0089932,
        radius=300.0,
        risk_score=risk_score,
        updated_at=NOW,
    )


def test_highest_risk_zone_in_range_wins() -> None:
    zones = [_zone(1, 1, 3), _zone(2, 3, 7), _zone(3, 10, 20)]

    suggestion = suggest_position(*DRIVER, zones)

    assert suggestion.type == SuggestionType.suggestion
    assert suggestion.zone.id == 2
    assert suggestion.distance_km == 3.0


def test_tie_goes_to_later_zone() -> None:
    zones = [_zone(1, 1, 5), _zone(2, 2, 5)]

    assert suggest_position(*DRIVER, zones).zone.id == 2


def test_no_zone_in_range() -> None:
    suggestion = suggest_position(*DRIVER, [_zone(1, 12, 30)])

    assert suggestion.type == SuggestionType.none
    assert suggestion.zone is None
    assert suggestion.distance_km is None


def test_range_is_inclusive(monkeypatch) -> None:
    monkeypatch.setattr(positioning, "haversine_km", lambda *args: 5.0)

    assert suggest_position(*DRIVER, [_zone(1, 5, 4)]).type == SuggestionType.suggestion
    assert count_nearby_zones(*DRIVER, [_zone(1, 5, 4)]) == 1


def test_count_nearby_zones() -> None:
    zones = [_zone(1, 1, 3), _zone(2, 4.5, 7), _zone(3, 6, 20)]

    assert count_nearby_zones(*DRIVER, zones) == 2
    assert count_nearby_zones(*DRIVER, zones, max_distance_km=10) == 3
    assert count_nearby_zones(*DRIVER, []) == 0
