import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from ..data.models import Coordinate, Waypoint
from ..utils import geo_utils

logger = logging.getLogger(__name__)

# A 2-opt swap must shorten the route by more than this (m) to be applied.
# Keeps float noise from flipping equal-length segments back and forth.
IMPROVEMENT_EPSILON = 1e-7

WIND_PENALTY_SCALE = 10.0


class OptimizationStrategy(Enum):
    AUTO = "auto"
    GREEDY = "greedy"
    TWO_OPT = "two_opt"
    GRID_AWARE = "grid_aware"
    WIND_AWARE = "wind_aware"


@dataclass
class OptimizationConfig:
    preserve_first: bool = True
    preserve_last: bool = False
    minimize_turns: bool = True
    optimize_for_wind: bool = False
    wind_direction: float = 0.0     # degrees the wind blows toward
    wind_speed: float = 0.0         # m/s
    max_iterations: int = 1000      # 2-opt passes
    strategy: OptimizationStrategy = OptimizationStrategy.AUTO


class RouteStrategy(ABC):
    """
    Abstract Base Class for waypoint ordering strategies.
    Every strategy returns a permutation of its input; no waypoint is added
    or removed.
    """
    name = ""

    @abstractmethod
    def optimize(self, waypoints: List[Waypoint], start_point: Optional[Coordinate],
                 config: OptimizationConfig) -> dict:
        """
        Args:
            waypoints: Route to reorder (not modified).
            start_point: Launch location used to pick the first waypoint.
            config: Optimization settings.

        Returns:
            dict: {
                'route': List[Waypoint],  # The reordered route
                'iterations': int,        # 2-opt passes run (0 if none)
                'method': str             # Description of the method used
            }
        """
        pass


def _split_pinned_last(waypoints: List[Waypoint], config: OptimizationConfig):
    if config.preserve_last and len(waypoints) > 1:
        return list(waypoints[:-1]), waypoints[-1]
    return list(waypoints), None


def _greedy_order(waypoints: List[Waypoint], start_point: Optional[Coordinate],
                  config: OptimizationConfig,
                  cost: Callable[[Coordinate, Coordinate], float]) -> List[Waypoint]:
    """Repeatedly appends the cheapest unvisited waypoint from the current position."""
    candidates, last = _split_pinned_last(waypoints, config)
    if not candidates:
        return list(waypoints)

    result = []
    if config.preserve_first or start_point is None:
        result.append(candidates.pop(0))
        position = result[-1].coordinate
    else:
        position = start_point

    while candidates:
        # min() keeps the first of equal-cost candidates
        best_idx = min(range(len(candidates)), key=lambda k: cost(position, candidates[k].coordinate))
        result.append(candidates.pop(best_idx))
        position = result[-1].coordinate

    if last is not None:
        result.append(last)
    return result


def nearest_neighbor(waypoints: List[Waypoint], start_point: Optional[Coordinate],
                     config: OptimizationConfig) -> List[Waypoint]:
    return _greedy_order(waypoints, start_point, config, geo_utils.distance)


def two_opt(waypoints: List[Waypoint], max_iterations: int):
    """
    2-opt local search. The first and last waypoints never move.

    :return: (route, passes run)
    """
    route = list(waypoints)
    n = len(route)
    if n < 4:
        return route, 0

    dist = geo_utils.distance
    improved = True
    iterations = 0

    while improved and iterations < max_iterations:
        improved = False
        iterations += 1

        for i in range(1, n - 2):
            for j in range(i + 1, n - 1):
                a = route[i - 1].coordinate
                b = route[i].coordinate
                c = route[j].coordinate
                d = route[j + 1].coordinate

                current = dist(a, b) + dist(c, d)
                swapped = dist(a, c) + dist(b, d)

                if swapped < current - IMPROVEMENT_EPSILON:
                    route[i:j + 1] = route[i:j + 1][::-1]
                    improved = True

    logger.debug("2-opt finished after %d pass(es)", iterations)
    return route, iterations


def wind_penalty(origin: Coordinate, target: Coordinate, wind_direction: float, wind_speed: float) -> float:
    """
    Positive when the leg heads into the wind, negative with a tailwind.
    wind_direction is where the wind blows toward.
    """
    path_bearing = geo_utils.bearing(origin, target)
    angle = geo_utils.turn_angle(path_bearing, wind_direction + 180.0)
    return math.cos(math.radians(angle)) * wind_speed


def segment_cost(origin: Coordinate, target: Coordinate, config: OptimizationConfig) -> float:
    cost = geo_utils.distance(origin, target)
    if config.optimize_for_wind:
        cost += wind_penalty(origin, target, config.wind_direction, config.wind_speed) * WIND_PENALTY_SCALE
    return cost


class GreedyStrategy(RouteStrategy):
    """Nearest-neighbour construction. O(n^2)."""
    name = "greedy"

    def optimize(self, waypoints, start_point, config):
        return {
            'route': nearest_neighbor(waypoints, start_point, config),
            'iterations': 0,
            'method': "Nearest Neighbor",
        }


class TwoOptStrategy(RouteStrategy):
    """2-opt refinement of the given order."""
    name = "two_opt"

    def optimize(self, waypoints, start_point, config):
        route, iterations = two_opt(waypoints, config.max_iterations)
        return {'route': route, 'iterations': iterations, 'method': "2-opt"}


class NearestNeighborTwoOptStrategy(RouteStrategy):
    """Greedy construction followed by 2-opt. Default for unstructured routes."""
    name = "greedy_two_opt"

    def optimize(self, waypoints, start_point, config):
        route = nearest_neighbor(waypoints, start_point, config)
        route, iterations = two_opt(route, config.max_iterations)
        return {'route': route, 'iterations': iterations, 'method': "Nearest Neighbor + 2-opt"}


class GridAwareStrategy(RouteStrategy):
    """
    Keeps survey line structure by only refining the existing order with
    2-opt. Line order itself is not re-derived.
    """
    name = "grid_aware"

    def optimize(self, waypoints, start_point, config):
        route, iterations = two_opt(waypoints, config.max_iterations)
        return {'route': route, 'iterations': iterations, 'method': "Grid-aware optimization"}


class WindAwareStrategy(RouteStrategy):
    """Greedy construction on distance plus a scaled head/tailwind penalty."""
    name = "wind_aware"

    def optimize(self, waypoints, start_point, config):
        route = _greedy_order(waypoints, start_point, config,
                              lambda a, b: segment_cost(a, b, config))
        return {'route': route, 'iterations': 0, 'method': "Wind-aware optimization"}


class StrategyFactory:
    """
    Factory to create strategies based on name.
    """
    _STRATEGIES = {
        GreedyStrategy.name: GreedyStrategy,
        TwoOptStrategy.name: TwoOptStrategy,
        NearestNeighborTwoOptStrategy.name: NearestNeighborTwoOptStrategy,
        GridAwareStrategy.name: GridAwareStrategy,
        WindAwareStrategy.name: WindAwareStrategy,
    }

    @staticmethod
    def get_strategy(name: Union[str, OptimizationStrategy]) -> RouteStrategy:
        if isinstance(name, OptimizationStrategy):
            name = name.value
        cls = StrategyFactory._STRATEGIES.get(name.lower().replace("-", "_"))
        if cls is None:
            raise ValueError(f"Unknown strategy: {name}")
        return cls()

    @staticmethod
    def get_strategy_names() -> List[str]:
        return list(StrategyFactory._STRATEGIES.keys())
