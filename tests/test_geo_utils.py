import numpy as np
import pytest
from shapely.geometry import Polygon

from survey_planner.data import Coordinate
from survey_planner.utils import geo_utils

from conftest import square_polygon


def test_one_degree_of_longitude_on_equator():
    d = geo_utils.distance(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0))
    assert d == pytest.approx(111195.0, rel=0.005)


def random_coordinate(rng):
    return Coordinate(float(rng.uniform(-80.0, 80.0)), float(rng.uniform(-180.0, 180.0)))


@pytest.mark.parametrize("seed", range(5))
def test_distance_is_symmetric(seed):
    rng = np.random.default_rng(seed)
    for _ in range(200):
        a = random_coordinate(rng)
        b = random_coordinate(rng)
        assert geo_utils.distance(a, b) == pytest.approx(geo_utils.distance(b, a), rel=1e-6)
        assert geo_utils.distance(a, a) == 0.0


def test_cardinal_bearings():
    origin = Coordinate(0.0, 0.0)
    assert geo_utils.bearing(origin, Coordinate(1.0, 0.0)) == pytest.approx(0.0)
    assert geo_utils.bearing(origin, Coordinate(0.0, 1.0)) == pytest.approx(90.0)
    assert geo_utils.bearing(origin, Coordinate(-1.0, 0.0)) == pytest.approx(180.0)
    assert geo_utils.bearing(origin, Coordinate(0.0, -1.0)) == pytest.approx(270.0)


def test_bearing_between_identical_points_is_zero():
    p = Coordinate(12.5, -3.25)
    assert geo_utils.bearing(p, p) == 0.0


@pytest.mark.parametrize("seed", range(5))
def test_destination_round_trip(seed):
    rng = np.random.default_rng(seed)
    for _ in range(200):
        origin = random_coordinate(rng)
        # 1 m to 100 km, log-spaced
        d = float(10.0 ** rng.uniform(0.0, 5.0))
        b = float(rng.uniform(0.0, 360.0))

        target = geo_utils.destination(origin, d, b)
        assert geo_utils.distance(origin, target) == pytest.approx(d, rel=0.001)


def test_destination_keeps_bearing_and_altitude():
    origin = Coordinate(47.0, 8.0, 120.0)
    target = geo_utils.destination(origin, 1000.0, 45.0)

    assert geo_utils.distance(origin, target) == pytest.approx(1000.0, rel=0.001)
    assert geo_utils.bearing(origin, target) == pytest.approx(45.0, abs=0.1)
    assert target.altitude == 120.0


def test_destination_wraps_longitude():
    target = geo_utils.destination(Coordinate(0.0, 179.9999), 1000.0, 90.0)
    assert -180.0 <= target.longitude < 180.0
    assert target.longitude < 0.0


def test_angle_helpers():
    assert geo_utils.normalize_angle(-90.0) == 270.0
    assert geo_utils.normalize_angle(360.0) == 0.0
    assert geo_utils.normalize_angle(725.0) == pytest.approx(5.0)
    assert geo_utils.turn_angle(350.0, 10.0) == pytest.approx(20.0)
    assert geo_utils.turn_angle(0.0, 180.0) == pytest.approx(180.0)


def test_local_projection_round_trip():
    origin = Coordinate(47.0, 8.0)
    point = Coordinate(47.001, 8.002)

    x, y = geo_utils.to_local_xy(point, origin)
    assert x > 0 and y > 0

    back = geo_utils.from_local_xy((x, y), origin)
    assert back.latitude == pytest.approx(point.latitude, abs=1e-9)
    assert back.longitude == pytest.approx(point.longitude, abs=1e-9)


def test_from_local_xy_sets_altitude():
    coord = geo_utils.from_local_xy((10.0, 10.0), Coordinate(0.0, 0.0), altitude=55.0)
    assert coord.altitude == 55.0


def test_polygon_vertices_drops_closing_vertex():
    ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)]
    assert geo_utils.polygon_vertices(ring) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
    assert len(geo_utils.polygon_vertices(Polygon(ring))) == 3


def test_centroid_of_degenerate_polygons():
    assert geo_utils.polygon_centroid([]) == Coordinate(0.0, 0.0)
    # Fewer than three vertices: first vertex, as (lon, lat) input
    assert geo_utils.polygon_centroid([(8.0, 47.0), (8.1, 47.1)]) == Coordinate(47.0, 8.0)


def test_centroid_is_vertex_mean():
    c = geo_utils.polygon_centroid([(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)])
    assert c.latitude == pytest.approx(1.0)
    assert c.longitude == pytest.approx(1.0)


def test_polygon_area_in_square_metres():
    square = square_polygon(Coordinate(0.0, 0.0), 100.0)
    assert geo_utils.polygon_area(square) == pytest.approx(10000.0, rel=0.01)

    square = square_polygon(Coordinate(47.0, 8.0), 250.0)
    assert geo_utils.polygon_area(square) == pytest.approx(62500.0, rel=0.01)


def test_polygon_area_of_degenerate_polygon():
    assert geo_utils.polygon_area([(0.0, 0.0), (1.0, 1.0)]) == 0.0
