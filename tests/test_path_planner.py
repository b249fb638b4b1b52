import pytest

from survey_planner.algorithms import CoveragePatternGenerator
from survey_planner.data import (
    Coordinate, HeadingMode, MissionParameters, PatternType, WaypointAction,
)
from survey_planner.utils import geo_utils

from conftest import square_polygon


@pytest.fixture
def generator():
    return CoveragePatternGenerator()


def test_square_produces_five_alternating_lines(generator, square_100m):
    waypoints = generator.generate_parallel_lines(square_100m, altitude=50.0, direction=0.0, spacing=20.0)

    # 1. Five scan lines, two endpoints each
    assert len(waypoints) == 10
    assert generator.last_error == ""

    # 2. Boustrophedon: first line west->east, second east->west
    assert waypoints[0].longitude < waypoints[1].longitude
    assert waypoints[2].longitude > waypoints[3].longitude
    assert waypoints[4].longitude < waypoints[5].longitude

    # 3. Lines step north by the spacing
    assert waypoints[0].latitude < waypoints[2].latitude < waypoints[4].latitude
    assert geo_utils.distance(waypoints[1].coordinate, waypoints[2].coordinate) == pytest.approx(20.0, abs=0.5)


def test_waypoints_carry_altitude_index_and_photo(generator, square_100m):
    waypoints = generator.generate_parallel_lines(square_100m, 50.0, 0.0, 20.0, speed=6.0)

    assert [wp.index for wp in waypoints] == list(range(len(waypoints)))
    for wp in waypoints:
        assert wp.altitude == 50.0
        assert wp.speed == 6.0
        assert wp.actions == (WaypointAction.TAKE_PHOTO,)


def test_direction_90_gives_north_south_lines(generator, square_100m):
    waypoints = generator.generate_parallel_lines(square_100m, 50.0, 90.0, 20.0)

    assert len(waypoints) == 10
    b = geo_utils.bearing(waypoints[0].coordinate, waypoints[1].coordinate)
    assert min(geo_utils.turn_angle(b, 0.0), geo_utils.turn_angle(b, 180.0)) < 1.0


def test_degenerate_inputs_return_empty(generator, square_100m):
    assert generator.generate_parallel_lines([(0.0, 0.0), (0.001, 0.001)], 50.0, 0.0, 20.0) == []
    assert "less than 3" in generator.last_error

    assert generator.generate_parallel_lines(square_100m, 50.0, 0.0, 0.0) == []
    assert "spacing" in generator.last_error

    assert generator.generate_parallel_lines(square_100m, 50.0, 0.0, -5.0) == []


def test_spacing_wider_than_polygon_yields_no_lines(generator, square_100m):
    assert generator.generate_parallel_lines(square_100m, 50.0, 0.0, 500.0) == []


def test_concave_polygon_scan_lines():
    u_shape = [(0, 100), (100, 100), (100, 0), (80, 0), (80, 80), (20, 80), (20, 0), (0, 0)]
    points = CoveragePatternGenerator().generate_parallel_line_points(u_shape, 0.0, 20.0)

    # Four lines cross both arms, the top line spans the full width
    assert len(points) == 4 * 4 + 2

    xs = [round(p[0], 6) for p in points]
    assert xs[:4] == [0.0, 20.0, 80.0, 100.0]
    assert xs[4:8] == [100.0, 80.0, 20.0, 0.0]
    assert points[0][1] == pytest.approx(10.0)
    assert points[-1][1] == pytest.approx(90.0)


def test_grid_is_two_perpendicular_passes(generator, square_100m):
    waypoints = generator.generate_grid(square_100m, 50.0, 20.0)

    assert len(waypoints) == 20
    assert [wp.index for wp in waypoints] == list(range(20))


def test_circular_orbit_faces_centre(generator):
    center = Coordinate(47.0, 8.0)
    waypoints = generator.generate_circular(center, 100.0, 40.0, 8)

    assert len(waypoints) == 8
    for wp in waypoints:
        assert geo_utils.distance(center, wp.coordinate) == pytest.approx(100.0, rel=0.001)
        assert wp.heading_mode == HeadingMode.POINT_OF_INTEREST
        assert wp.speed == CoveragePatternGenerator.CIRCULAR_SPEED
        assert wp.altitude == 40.0
    assert waypoints[0].heading == pytest.approx(180.0)
    assert waypoints[2].heading == pytest.approx(270.0)

    assert generator.generate_circular(center, 100.0, 40.0, 0) == []


def test_optimal_spacing_from_camera():
    spacing = CoveragePatternGenerator.calculate_optimal_spacing(75.0, 65.0, 6.3, 6.72)
    assert spacing == pytest.approx(70.3125 * 0.35)


def test_generate_dispatches_on_pattern(generator, square_100m):
    params = MissionParameters(altitude=50.0, spacing=20.0, use_camera_spacing=False)
    assert len(generator.generate(square_100m, params)) == 10

    params.pattern = PatternType.GRID
    assert len(generator.generate(square_100m, params)) == 20

    params.pattern = PatternType.CIRCULAR
    orbit = generator.generate(square_100m, params)
    assert len(orbit) == CoveragePatternGenerator.CIRCULAR_POINTS


def test_generate_uses_camera_spacing(generator):
    polygon = square_polygon(Coordinate(0.0, 0.0), 300.0)
    params = MissionParameters(altitude=75.0, side_overlap=65.0)
    spacing = CoveragePatternGenerator.calculate_optimal_spacing(
        75.0, 65.0, params.camera.sensor_width_mm, params.camera.focal_length_mm)

    waypoints = generator.generate(polygon, params)
    lines = len(waypoints) // 2
    # Lines at spacing/2, 3*spacing/2, ... up to the far edge
    assert lines == int((300.0 - spacing / 2.0) // spacing) + 1


def test_successful_generate_clears_previous_error(generator, square_100m):
    params = MissionParameters(altitude=50.0, spacing=20.0, use_camera_spacing=False)
    assert generator.generate([(0.0, 0.0), (0.001, 0.001)], params) == []
    assert generator.last_error

    params.pattern = PatternType.CIRCULAR
    assert len(generator.generate(square_100m, params)) == CoveragePatternGenerator.CIRCULAR_POINTS
    assert generator.last_error == ""
