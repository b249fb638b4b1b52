import matplotlib.pyplot as plt
import pytest

from survey_planner.algorithms import BatteryPartitioner, CoveragePatternGenerator
from survey_planner.data import BatteryProfile, MissionParameters
from survey_planner.utils.plotting import plot_mission


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.fixture
def route(square_100m):
    params = MissionParameters(altitude=50.0, spacing=10.0, use_camera_spacing=False)
    return CoveragePatternGenerator().generate(square_100m, params)


def test_plot_route_and_polygon(route, square_100m):
    ax = plot_mission(route, polygon=square_100m)

    labels = [line.get_label() for line in ax.get_lines()]
    assert "Survey area" in labels
    assert "Route" in labels
    assert "Start" in labels and "End" in labels


def test_one_line_per_battery(route):
    # Ten minutes per battery at walking pace
    profile = BatteryProfile(max_flight_time=10.0, safety_margin=0.0)
    plan = BatteryPartitioner(profile, speed=2.0).partition(route)
    assert len(plan) > 1

    fig, ax = plt.subplots()
    returned = plot_mission(route, battery_plan=plan, ax=ax)

    assert returned is ax
    labels = [line.get_label() for line in ax.get_lines()]
    assert sum(1 for label in labels if label.startswith("Battery")) == len(plan)
    assert "Home" in labels


def test_empty_route_plots_nothing():
    ax = plot_mission([])
    assert len(ax.get_lines()) == 0
