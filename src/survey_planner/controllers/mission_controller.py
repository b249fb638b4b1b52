import copy
import logging

from shapely.geometry import Polygon

from ..algorithms.analysis import MissionAnalyzer
from ..algorithms.path_optimizer import FlightPathOptimizer
from ..algorithms.path_planner import CoveragePatternGenerator
from ..algorithms.segmentation import BatteryPartitioner
from ..algorithms.strategy import OptimizationConfig
from ..data import DroneDB, MissionParameters, PatternType

logger = logging.getLogger(__name__)


class MissionController:
    """
    Controller responsible for orchestrating the mission planning process.
    Handles polygon validation, drone profile overrides, coverage generation,
    route optimization, and battery partitioning.
    """

    def __init__(self):
        self.last_result = None
        self.generator = CoveragePatternGenerator()

    def run_mission_planning(self, polygon_points, drone_name, overrides=None,
                             home_point=None, optimization_config=None):
        """
        Executes the full mission planning workflow.

        Args:
            polygon_points (list): (lon, lat) tuples for the survey boundary.
            drone_name (str): Name of a drone in DroneDB.
            overrides (dict, optional): Per-run overrides (altitude, speed,
                side_overlap, direction, spacing, pattern, safety_margin,
                flight_time).
            home_point (Coordinate, optional): Launch/landing point. Defaults
                to the first waypoint of the optimized route.
            optimization_config (OptimizationConfig, optional): Reordering
                settings. Defaults to AUTO strategy selection.

        Returns:
            dict: waypoints, optimization, battery_plan, metrics, parameters, profile.
        """
        overrides = overrides or {}

        # 1. Geometry Validation
        if len(polygon_points) < 3:
            raise ValueError("Polygon must have at least 3 points.")

        polygon = Polygon(polygon_points)
        if not polygon.is_valid:
            logger.warning("Survey polygon is not valid (self-intersecting?); "
                           "scan lines may drop unpaired crossings")

        # 2. Drone Profile (Overrides)
        specs = DroneDB.get_specs(drone_name)
        if specs is None:
            raise ValueError(f"Unknown drone: {drone_name}")
        specs = copy.deepcopy(specs)

        if 'flight_time' in overrides:
            specs.battery.max_flight_time = float(overrides['flight_time'])
        if 'safety_margin' in overrides:
            specs.battery.safety_margin = float(overrides['safety_margin'])

        params = self._build_parameters(specs, overrides)

        # 3. Coverage Pattern
        waypoints = self.generator.generate(polygon, params)
        if not waypoints:
            logger.warning("No waypoints generated: %s", self.generator.last_error or "polygon too small")

        # 4. Route Optimization
        config = optimization_config or OptimizationConfig()
        if DroneDB.exceeds_wind_limit(specs, config.wind_speed):
            logger.warning("Wind %.1f m/s exceeds the %s rated limit of %.1f m/s",
                           config.wind_speed, specs.name, float(specs.max_wind_mps.value))
        optimization = FlightPathOptimizer.optimize(waypoints, home_point, config)
        route = optimization.waypoints

        # 5. Battery Partitioning
        partitioner = BatteryPartitioner(specs.battery, home_point=home_point, speed=params.speed)
        battery_plan = partitioner.partition(route)

        # 6. Metrics
        metrics = MissionAnalyzer.calculate_mission_metrics(
            route, polygon, params, battery_plan, specs.battery)

        logger.info("Mission for %s: %d waypoints, %.0f m, %d battery(ies)",
                    specs.name, len(route), metrics['total_distance_m'], len(battery_plan))

        self.last_result = {
            "waypoints": route,
            "optimization": optimization,
            "battery_plan": battery_plan,
            "metrics": metrics,
            "parameters": params,
            "profile": specs.battery,
        }
        return self.last_result

    @staticmethod
    def _build_parameters(specs, overrides):
        params = MissionParameters(camera=copy.deepcopy(specs.camera))

        if specs.cruise_speed_ms is not None:
            params.speed = float(specs.cruise_speed_ms.value)

        for key in ('altitude', 'speed', 'side_overlap', 'front_overlap', 'direction'):
            if key in overrides:
                setattr(params, key, float(overrides[key]))

        # A fixed spacing replaces the camera-derived one
        if 'spacing' in overrides:
            params.spacing = float(overrides['spacing'])
            params.use_camera_spacing = False

        if 'pattern' in overrides:
            pattern = overrides['pattern']
            params.pattern = pattern if isinstance(pattern, PatternType) else PatternType(pattern)

        return params
