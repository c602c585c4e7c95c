import pytest

from gpxstats.analyze.route import Route, analyze_route, summarize_route
from gpxstats.errors import (
    EmptySequenceError,
    FrozenModelError,
    NotFoundError,
    PositionIndexError,
)
from gpxstats.formats.gpx import RawFix
from gpxstats.geo.position import Position, distance_between

LOOP_GPX = """<?xml version="1.0"?>
<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">
  <rte>
    <name>Hill Loop</name>
    <rtept lat="0.0" lon="0.0"><ele>100</ele><name>Car park</name></rtept>
    <rtept lat="0.0" lon="0.001"><ele>130</ele><name>Summit</name></rtept>
    <rtept lat="0.0" lon="0.002"><ele>90</ele><name>Ford</name></rtept>
    <rtept lat="0.0" lon="0.001"><ele>130</ele><name>Summit again</name></rtept>
    <rtept lat="0.0" lon="0.00001"><ele>100</ele><name>Back</name></rtept>
  </rte>
</gpx>
"""


@pytest.fixture
def loop():
    return Route.from_string(LOOP_GPX, granularity=5.0)


def test_three_point_route_without_elevation(three_point_route_path):
    route = Route.from_file(three_point_route_path, 5.0)

    assert route.name == "Three Points"
    assert route.num_positions() == 3
    assert route.total_height_gain() == 0
    assert route.net_height_gain() == 0
    assert route.min_elevation() == route.max_elevation() == 0.0
    assert route.total_length() == pytest.approx(2 * 111.19, abs=0.5)


def test_loop_lengths(loop):
    assert loop.num_positions() == 5
    assert loop.total_length() >= loop.net_length() >= 0
    # First and last are ~1 m apart: same place at 5 m granularity.
    assert loop.net_length() == 0.0


def test_loop_heights(loop):
    assert loop.total_height_gain() == pytest.approx(30 + 40)
    assert loop.net_height_gain() == 0.0
    assert loop.min_elevation() == 90
    assert loop.max_elevation() == 130


def test_loop_extrema(loop):
    assert loop.min_latitude() == loop.max_latitude() == 0.0
    assert loop.min_longitude() == 0.0
    assert loop.max_longitude() == 0.002


def test_loop_gradients(loop):
    assert loop.max_gradient() > 0
    assert loop.min_gradient() < 0
    assert loop.steepest_gradient() == pytest.approx(
        max(abs(loop.max_gradient()), abs(loop.min_gradient()))
    )


def test_descending_route_keeps_signed_max_gradient():
    route = Route(
        [RawFix(0.0, 0.0, 50.0), RawFix(0.0, 0.001, 40.0), RawFix(0.0, 0.002, 20.0)],
        granularity=1.0,
    )
    assert route.max_gradient() < 0
    assert route.min_gradient() < route.max_gradient()
    assert route.steepest_gradient() == pytest.approx(-route.min_gradient())


def test_net_length_is_horizontal_distance_between_ends():
    route = Route([RawFix(0.0, 0.0, 0.0), RawFix(0.0, 0.001, 500.0)], 5.0)
    assert route.net_length() == pytest.approx(
        distance_between(Position(0.0, 0.0), Position(0.0, 0.001))
    )
    assert route.total_length() > route.net_length()


def test_single_position_route_degrades_to_zero():
    route = Route([RawFix(45.0, 7.0, 300.0, "Only")], 5.0)

    assert route.total_length() == route.net_length() == 0
    assert route.max_gradient() == route.min_gradient() == route.steepest_gradient() == 0
    assert route.total_height_gain() == route.net_height_gain() == 0


def test_empty_route_statistics_raise():
    route = Route.from_string("<gpx><rte><name>Nothing</name></rte></gpx>", 5.0)

    assert len(route) == 0
    with pytest.raises(EmptySequenceError):
        route.total_length()
    with pytest.raises(EmptySequenceError):
        route.min_latitude()
    with pytest.raises(EmptySequenceError):
        route.steepest_gradient()


def test_find_position_and_name(loop):
    summit = loop.find_position("Summit")
    assert summit == Position(0.0, 0.001, 130.0)
    assert loop.find_name_of(Position(0.0, 0.00100001)) == "Summit"


def test_find_name_of_unknown_position_raises(loop):
    with pytest.raises(NotFoundError):
        loop.find_name_of(Position(10.0, 10.0))


def test_unknown_name_lookup(loop):
    with pytest.raises(NotFoundError):
        loop.find_position("Nonexistent")
    assert loop.times_visited("Nonexistent") == 0


def test_times_visited(loop):
    assert loop.times_visited("Summit") == 2
    assert loop.times_visited("Ford") == 1
    # "Car park" and "Back" are the same place.
    assert loop.times_visited(Position(0.0, 0.0)) == 2


def test_indexing_is_bounds_checked(loop):
    assert loop[0].elevation == 100
    assert loop[-1] == Position(0.0, 0.00001, 100.0)
    with pytest.raises(PositionIndexError):
        loop[5]
    with pytest.raises(IndexError):
        loop[99]


def test_query_errors_leave_route_usable(loop):
    with pytest.raises(NotFoundError):
        loop.find_position("Nowhere")
    assert loop.find_position("Ford").elevation == 90


def test_route_is_immutable(loop):
    with pytest.raises(FrozenModelError):
        loop.granularity = 1.0
    with pytest.raises(AttributeError):
        loop.name = "renamed"
    assert loop.granularity == 5.0
    assert not hasattr(loop, "set_granularity")


def test_unnamed_route():
    route = Route([RawFix(0.0, 0.0)], 5.0)
    assert route.name == "Unnamed Route"


def test_build_report_from_file(three_point_route_path):
    route = Route.from_file(three_point_route_path, 5.0)
    report = route.build_report()

    assert f"Source file '{three_point_route_path}' opened okay." in report
    assert "Route name is: Three Points" in report
    assert report.count("Position added:") == 3
    assert report.rstrip().endswith("3 positions added, 0 ignored.")


def test_summaries(three_point_route_path):
    stats = analyze_route(three_point_route_path, 5.0)
    assert stats["points"] == 3
    assert stats["discarded"] == 0
    assert stats["height_gain_m"] == 0

    empty = summarize_route(Route([], 5.0))
    assert empty == {"name": "Unnamed Route", "points": 0, "discarded": 0}


def test_route_with_unparseable_time_still_builds():
    route = Route.from_string(
        "<gpx><rte><rtept lat='0' lon='0'><time>x</time></rtept></rte></gpx>", 5.0
    )
    assert route.num_positions() == 1
