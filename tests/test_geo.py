import pytest

from services.geo import haversine_km, haversine_m


def test_same_point_is_zero() -> None:
    assert haversine_m(19.076, 72.8777, 19.076, 72.8777) == 0.0


def test_one_degree_of_latitude() -> None:
    # 6,371,000 m * pi / 180
    assert haversine_m(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.93, abs=0.01)


def test_distance_is_symmetric() -> None:
    a = haversine_m(19.0760, 72.8777, 19.1197, 72.8468)
    b = haversine_m(19.1197, 72.8468, 19.0760, 72.8777)
    assert a == pytest.approx(b)


def test_km_variant_matches_meters() -> None:
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(haversine_m(0.0, 0.0, 0.0, 1.0) / 1000)


def test_antipodal_points_do_not_fail() -> None:
    assert haversine_m(0.0, 0.0, 0.0, 180.0) == pytest.approx(20_015_086.8, abs=1.0)

