# examples/01_plan_survey.py
import sys
import os
import logging
import matplotlib.pyplot as plt

# Add 'src' to the path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from survey_planner.controllers import MissionController
from survey_planner.data import Coordinate, DroneDB
from survey_planner.utils import geo_utils
from survey_planner.utils.plotting import plot_mission


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # --- SCENARIO ---
    # Farmland north of Santa Cruz, 600 x 400 m
    HOME = Coordinate(-17.525654, -63.136892)
    east = geo_utils.destination(HOME, 600.0, 90.0)
    north_east = geo_utils.destination(east, 400.0, 0.0)
    north = geo_utils.destination(HOME, 400.0, 0.0)
    field = [(c.longitude, c.latitude) for c in (HOME, east, north_east, north)]

    print(f"Available drones: {', '.join(DroneDB.get_drone_names())}")

    # --- PLANNING ---
    controller = MissionController()
    result = controller.run_mission_planning(
        field, "DJI Mini 3",
        overrides={'altitude': 80.0, 'side_overlap': 70.0, 'flight_time': 20.0},
        home_point=HOME,
    )

    metrics = result['metrics']
    print(f"Waypoints: {metrics['waypoint_count']}")
    print(f"Distance: {metrics['total_distance_km']:.2f} km")
    print(f"Area: {metrics['survey_area_ha']:.1f} ha, GSD {metrics['gsd_cm_px']:.2f} cm/px")
    print(f"Photos: {metrics['photo_count']}")
    print(result['optimization'].summary)
    print(result['battery_plan'].summary())

    for mission in result['battery_plan']:
        print(f"  {mission.notes}")

    # --- VISUALIZATION ---
    ax = plot_mission(result['waypoints'], polygon=field, battery_plan=result['battery_plan'])
    ax.set_title("Survey mission - DJI Mini 3")
    plt.show()


if __name__ == "__main__":
    main()
