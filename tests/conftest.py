import matplotlib
matplotlib.use("Agg")

import pytest

from survey_planner.data import Coordinate, Waypoint, BatteryProfile
from survey_planner.utils import geo_utils


def square_polygon(origin, size):
    """(lon, lat) square of the given side in metres, south-west corner at origin."""
    east = geo_utils.destination(origin, size, 90.0)
    north_east = geo_utils.destination(east, size, 0.0)
    north = geo_utils.destination(origin, size, 0.0)
    return [(c.longitude, c.latitude) for c in (origin, east, north_east, north)]


def make_route(coords, speed=10.0):
    return [Waypoint(coordinate=c, index=i, speed=speed) for i, c in enumerate(coords)]


@pytest.fixture
def equator_origin():
    return Coordinate(0.0, 0.0)


@pytest.fixture
def square_100m(equator_origin):
    return square_polygon(equator_origin, 100.0)


@pytest.fixture
def generic_profile():
    # 25 min rated, 20 min usable
    return BatteryProfile(max_flight_time=25.0, safety_margin=0.2)
