import math

import pytest

from gpxstats.geo.location import LocationMatcher
from gpxstats.geo.position import Position, distance_3d, distance_between, gradient


def test_position_defaults_elevation_to_zero():
    assert Position(1.0, 2.0).elevation == 0.0


def test_distance_between_one_millidegree_at_equator():
    d = distance_between(Position(0.0, 0.0), Position(0.0, 0.001))
    assert d == pytest.approx(111.195, abs=0.01)


def test_distance_between_ignores_elevation():
    a = Position(0.0, 0.0, 0.0)
    b = Position(0.0, 0.001, 500.0)
    assert distance_between(a, b) == distance_between(Position(0.0, 0.0), Position(0.0, 0.001))


def test_distance_3d_is_hypotenuse():
    a = Position(0.0, 0.0, 0.0)
    b = Position(0.0, 0.001, 100.0)
    h = distance_between(a, b)
    assert distance_3d(a, b) == pytest.approx(math.sqrt(h * h + 100.0 ** 2))


def test_gradient_signed_degrees():
    a = Position(0.0, 0.0, 0.0)
    h = distance_between(a, Position(0.0, 0.001))
    up = Position(0.0, 0.001, h)
    assert gradient(a, up) == pytest.approx(45.0)
    assert gradient(up, Position(0.0, 0.0, 0.0)) == pytest.approx(-45.0)


def test_gradient_of_coincident_points_is_zero():
    p = Position(1.0, 1.0, 5.0)
    assert gradient(p, p) == 0.0


def test_equality_and_same_location_are_distinct():
    matcher = LocationMatcher(5.0)
    a = Position(0.0, 0.0)
    b = Position(0.0, 0.00001)  # ~1.1 m away

    assert a != b
    assert matcher.same_location(a, b)
    assert matcher(a, b)


def test_same_location_is_strict_less_than(monkeypatch):
    import gpxstats.geo.location as location

    monkeypatch.setattr(location, "distance_between", lambda p1, p2: 5.0)
    matcher = LocationMatcher(5.0)
    assert not matcher.same_location(Position(0, 0), Position(0, 1))


def test_zero_granularity_only_merges_coincident_points():
    matcher = LocationMatcher(0.0)
    p = Position(10.0, 20.0, 3.0)
    assert matcher.same_location(p, Position(10.0, 20.0, 3.0))
    assert not matcher.same_location(p, Position(10.0, 20.000001, 3.0))


@pytest.mark.parametrize("granularity", [-1.0, math.nan, math.inf])
def test_negative_or_non_finite_granularity_rejected(granularity):
    with pytest.raises(ValueError):
        LocationMatcher(granularity)
