import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from ..data.models import Coordinate, Waypoint
from ..utils import geo_utils
from .strategy import (
    OptimizationConfig, OptimizationStrategy, StrategyFactory, IMPROVEMENT_EPSILON,
)

logger = logging.getLogger(__name__)

DEFAULT_SPEED = 10.0        # m/s, used when a route carries no usable speed
TURN_TIME_S = 5.0           # seconds lost per direction change
WIND_AUTO_THRESHOLD = 3.0   # m/s above which AUTO picks the wind-aware strategy
COVERAGE_DECIMALS = 8


@dataclass
class OptimizationResult:
    waypoints: List[Waypoint] = field(default_factory=list)
    original_distance: float = 0.0       # m
    optimized_distance: float = 0.0      # m
    distance_saved: float = 0.0          # m
    time_saved: float = 0.0              # min
    percentage_improvement: float = 0.0  # 0-100
    waypoint_changes: int = 0
    direction_changes: int = 0
    original_direction_changes: int = 0
    iterations: int = 0
    method: str = ""
    summary: str = ""


class FlightPathOptimizer:
    """
    Reorders waypoints to shorten the route and reduce direction changes.
    The set of waypoints never changes, only their order.
    """

    @staticmethod
    def total_distance(waypoints: List[Waypoint]) -> float:
        return sum(geo_utils.distance(a.coordinate, b.coordinate)
                   for a, b in zip(waypoints, waypoints[1:]))

    @staticmethod
    def direction_changes(waypoints: List[Waypoint], turn_threshold: float = 30.0) -> int:
        """Number of consecutive legs whose bearings differ by more than turn_threshold."""
        if len(waypoints) < 3:
            return 0

        bearings = FlightPathOptimizer._bearings(waypoints)
        return sum(1 for b1, b2 in zip(bearings, bearings[1:])
                   if geo_utils.turn_angle(b1, b2) > turn_threshold)

    @staticmethod
    def turn_angles(waypoints: List[Waypoint]) -> List[float]:
        bearings = FlightPathOptimizer._bearings(waypoints)
        return [geo_utils.turn_angle(b1, b2) for b1, b2 in zip(bearings, bearings[1:])]

    @staticmethod
    def is_grid_pattern(waypoints: List[Waypoint]) -> bool:
        """
        Heuristic survey-grid detection: more than 30% of the sampled turns
        are reversals (turns over 150 degrees). Samples at most the first 10 legs.
        """
        if len(waypoints) < 4:
            return False

        bearings = FlightPathOptimizer._bearings(waypoints[:11])
        turns = len(bearings) - 1
        reversals = 0
        for b1, b2 in zip(bearings, bearings[1:]):
            if geo_utils.turn_angle(b1, b2) > 150.0:
                reversals += 1
        return reversals > turns * 0.3

    @staticmethod
    def validate_coverage(original: List[Waypoint], optimized: List[Waypoint]) -> bool:
        """True when both routes visit the same multiset of (lat, lon) positions."""
        if len(original) != len(optimized):
            return False
        return FlightPathOptimizer._coverage_keys(original) == FlightPathOptimizer._coverage_keys(optimized)

    @staticmethod
    def estimate_time_savings(distance_saved: float, speed: float, turns_reduced: int) -> float:
        """Minutes saved from a shorter route and fewer turns."""
        if speed <= 0.0:
            speed = DEFAULT_SPEED
        seconds = distance_saved / speed + turns_reduced * TURN_TIME_S
        return seconds / 60.0

    @staticmethod
    def calculate_optimal_heading(wind_direction: float) -> float:
        """Heading that flies straight into the wind, for the most stable imagery."""
        return geo_utils.normalize_angle(wind_direction + 180.0)

    @staticmethod
    def select_strategy(waypoints: List[Waypoint], config: OptimizationConfig) -> str:
        if config.strategy != OptimizationStrategy.AUTO:
            return config.strategy.value
        if FlightPathOptimizer.is_grid_pattern(waypoints):
            return OptimizationStrategy.GRID_AWARE.value
        if config.optimize_for_wind and config.wind_speed > WIND_AUTO_THRESHOLD:
            return OptimizationStrategy.WIND_AWARE.value
        return "greedy_two_opt"

    @staticmethod
    def optimize_flight_plan(waypoints: List[Waypoint],
                             config: Optional[OptimizationConfig] = None) -> OptimizationResult:
        """Optimizes a plan using its first waypoint as the start point."""
        if not waypoints:
            return OptimizationResult(method="None (empty plan)", summary="No waypoints to optimize")
        return FlightPathOptimizer.optimize(waypoints, waypoints[0].coordinate, config)

    @staticmethod
    def optimize(waypoints: List[Waypoint], start_point: Optional[Coordinate] = None,
                 config: Optional[OptimizationConfig] = None) -> OptimizationResult:
        config = config or OptimizationConfig()
        waypoints = list(waypoints)

        original_distance = FlightPathOptimizer.total_distance(waypoints)
        original_turns = FlightPathOptimizer.direction_changes(waypoints)

        if len(waypoints) < 3:
            return OptimizationResult(
                waypoints=waypoints,
                original_distance=original_distance,
                optimized_distance=original_distance,
                direction_changes=original_turns,
                original_direction_changes=original_turns,
                method="None (too few waypoints)",
                summary="Path too short to optimize",
            )

        # 1. Strategy (AUTO resolves from route shape and wind)
        strategy_name = FlightPathOptimizer.select_strategy(waypoints, config)
        strategy = StrategyFactory.get_strategy(strategy_name)
        outcome = strategy.optimize(waypoints, start_point, config)
        optimized = outcome['route']
        method = outcome['method']

        optimized_distance = FlightPathOptimizer.total_distance(optimized)
        optimized_turns = FlightPathOptimizer.direction_changes(optimized)

        # 2. Keep the input order when the candidate is no better
        if strategy_name != OptimizationStrategy.WIND_AWARE.value:
            longer = optimized_distance > original_distance + IMPROVEMENT_EPSILON
            not_shorter = optimized_distance >= original_distance - IMPROVEMENT_EPSILON
            more_turns = optimized_turns > original_turns
            if longer or (config.minimize_turns and not_shorter and more_turns):
                logger.info("%s did not improve the route; keeping original order", method)
                optimized = waypoints
                optimized_distance = original_distance
                optimized_turns = original_turns
                method = f"{method} (original order kept)"

        # 3. Metrics
        distance_saved = original_distance - optimized_distance
        percentage = (distance_saved / original_distance) * 100.0 if original_distance > 0 else 0.0
        waypoint_changes = sum(
            1 for orig, opt in zip(waypoints, optimized)
            if orig.latitude != opt.latitude or orig.longitude != opt.longitude
        )
        speed = waypoints[0].speed
        if speed <= 0.0:
            logger.warning("Non-positive waypoint speed %.2f; using %.1f m/s", speed, DEFAULT_SPEED)
            speed = DEFAULT_SPEED
        time_saved = FlightPathOptimizer.estimate_time_savings(
            distance_saved, speed, original_turns - optimized_turns)

        summary = (f"Optimized path saves {distance_saved:.0f} m "
                   f"({percentage:.1f}%) and {time_saved:.1f} minutes")
        logger.info("%s: %s", method, summary)

        return OptimizationResult(
            waypoints=optimized,
            original_distance=original_distance,
            optimized_distance=optimized_distance,
            distance_saved=distance_saved,
            time_saved=time_saved,
            percentage_improvement=percentage,
            waypoint_changes=waypoint_changes,
            direction_changes=optimized_turns,
            original_direction_changes=original_turns,
            iterations=outcome['iterations'],
            method=method,
            summary=summary,
        )

    @staticmethod
    def _bearings(waypoints: List[Waypoint]) -> List[float]:
        return [geo_utils.bearing(a.coordinate, b.coordinate)
                for a, b in zip(waypoints, waypoints[1:])]

    @staticmethod
    def _coverage_keys(waypoints: List[Waypoint]) -> Counter:
        return Counter((round(wp.latitude, COVERAGE_DECIMALS), round(wp.longitude, COVERAGE_DECIMALS))
                       for wp in waypoints)
