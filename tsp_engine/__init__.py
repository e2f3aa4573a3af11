# tsp_engine
# Tour construction (nearest neighbor, cheapest insertion, random) and 2-opt refinement
# over 2-D points under a planar or spherical metric.

from .distance import DistanceOracle, format_distance, haversine, tour_length
from .errors import InsufficientPoints, TspError
from .model import (Algorithm, CancellationToken, Improvement, ImprovementEvent, Metric, Point,
                    SolveConfig, SolveResult)
from .solver import SolveSession, solve, solve_async
from .two_opt import OptimizationReport, OptimizerState, TwoOptMove, TwoOptOptimizer, two_opt_once

__all__ = [
    "Algorithm", "CancellationToken", "DistanceOracle", "Improvement", "ImprovementEvent",
    "InsufficientPoints", "Metric", "OptimizationReport", "OptimizerState", "Point",
    "SolveConfig", "SolveResult", "SolveSession", "TspError", "TwoOptMove", "TwoOptOptimizer",
    "format_distance", "haversine", "solve", "solve_async", "tour_length", "two_opt_once",
]
