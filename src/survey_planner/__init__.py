"""Aerial survey mission planning: coverage patterns, route optimization and battery partitioning."""
from .data import (
    Coordinate, Waypoint, HeadingMode, WaypointAction, PatternType, CameraSpec,
    MissionParameters, DroneDB, BatteryProfile,
)
from .algorithms import (
    CoveragePatternGenerator, FlightPathOptimizer, OptimizationConfig, OptimizationStrategy,
    OptimizationResult, BatteryPartitioner, BatteryPlan, SubMission, PartitionOutcome,
    MissionAnalyzer,
)
from .simulation import MissionSimulator
from .controllers import MissionController

__version__ = "0.1.0"
