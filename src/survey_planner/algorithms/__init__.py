from .path_planner import CoveragePatternGenerator
from .strategy import OptimizationConfig, OptimizationStrategy, StrategyFactory
from .path_optimizer import FlightPathOptimizer, OptimizationResult
from .segmentation import BatteryPartitioner, BatteryPlan, SubMission, PartitionOutcome
from .analysis import MissionAnalyzer
