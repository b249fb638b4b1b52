import numpy as np
from typing import List, Optional

from ..data.models import Waypoint, MissionParameters
from ..data.drone_db import BatteryProfile, DroneDB
from ..simulation.mission_simulator import MissionSimulator
from ..utils import geo_utils
from ..utils.geo_utils import PolygonLike
from .path_optimizer import FlightPathOptimizer
from .segmentation import BatteryPlan

# Extra shots for turns and line ends
PHOTO_BUFFER = 10


class MissionAnalyzer:
    """
    Analyzes and compares planned missions for summary panels.
    """

    @staticmethod
    def estimate_photo_count(waypoints: List[Waypoint], params: MissionParameters) -> int:
        if not waypoints:
            return 0
        spacing = params.photo_interval_distance()
        if spacing <= 0:
            return len(waypoints)
        distance = FlightPathOptimizer.total_distance(waypoints)
        return int(distance / spacing) + PHOTO_BUFFER

    @staticmethod
    def flight_efficiency(waypoints: List[Waypoint]) -> float:
        """Straight-line start-to-end distance over flown distance, capped at 100%."""
        if len(waypoints) < 2:
            return 100.0
        actual = FlightPathOptimizer.total_distance(waypoints)
        if actual == 0.0:
            return 100.0
        straight = geo_utils.distance(waypoints[0].coordinate, waypoints[-1].coordinate)
        return min(straight / actual * 100.0, 100.0)

    @staticmethod
    def calculate_mission_metrics(waypoints: List[Waypoint], polygon: Optional[PolygonLike],
                                  params: MissionParameters, battery_plan: Optional[BatteryPlan] = None,
                                  profile: Optional[BatteryProfile] = None) -> dict:
        """
        Calculates detailed metrics for the summary:
        - Distances (m, km) and flight time (min)
        - Survey area (ha), photo count and GSD (cm/px)
        - Turn statistics and battery requirements
        """
        simulator = MissionSimulator(profile or DroneDB.get_battery_profile(DroneDB.DEFAULT_DRONE))
        total_dist = FlightPathOptimizer.total_distance(waypoints)

        turn_angles = np.array(FlightPathOptimizer.turn_angles(waypoints))
        avg_turn = float(turn_angles.mean()) if turn_angles.size else 0.0

        altitudes = np.array([wp.altitude for wp in waypoints]) if waypoints else np.zeros(0)

        area_m2 = geo_utils.polygon_area(polygon) if polygon is not None else 0.0

        batteries = len(battery_plan) if battery_plan is not None else None

        return {
            "waypoint_count": len(waypoints),
            "total_distance_m": total_dist,
            "total_distance_km": total_dist / 1000.0,
            "flight_time_min": simulator.estimate_flight_time(waypoints, params.speed),
            "battery_usage_pct": simulator.battery_usage(waypoints, params.speed),
            "batteries_required": batteries,
            "survey_area_ha": area_m2 / 10000.0,
            "photo_count": MissionAnalyzer.estimate_photo_count(waypoints, params),
            "gsd_cm_px": params.ground_sample_distance(),
            "turn_count": FlightPathOptimizer.direction_changes(waypoints),
            "avg_turn_angle": avg_turn,
            "flight_efficiency_pct": MissionAnalyzer.flight_efficiency(waypoints),
            "min_altitude": float(altitudes.min()) if altitudes.size else 0.0,
            "max_altitude": float(altitudes.max()) if altitudes.size else 0.0,
        }

    @staticmethod
    def compare_missions(metrics_a: dict, metrics_b: dict) -> dict:
        """
        Generates comparative metrics (b minus a) and names the shorter plan.
        """
        keys = ("total_distance_m", "flight_time_min", "photo_count", "turn_count")
        diff = {f"{k}_diff": metrics_b[k] - metrics_a[k] for k in keys}

        score_a = sum(1 for k in keys if metrics_a[k] < metrics_b[k])
        score_b = sum(1 for k in keys if metrics_b[k] < metrics_a[k])
        diff["better"] = "a" if score_a > score_b else ("b" if score_b > score_a else "tie")
        return diff
