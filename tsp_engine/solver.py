# solver.py
# Construct-then-improve pipeline over one loaded point set.

from __future__ import annotations
import logging
import time
from typing import Any, Optional, Sequence, Tuple

from .construction import algorithm_label, build_tour, clamp_index
from .distance import DistanceOracle, format_distance
from .errors import InsufficientPoints
from .model import CancellationToken, Improvement, SolveConfig, SolveResult, Tour, normalize_points
from .rng import make_rng
from .two_opt import Observer, OptimizationReport, TwoOptOptimizer

logger = logging.getLogger(__name__)


def rotate_to_start(tour: Sequence[int], start: int) -> Tour:
    """Cyclically rotate so `start` sits at position 0, keeping relative order."""
    tour = list(tour)
    pos = tour.index(start)
    return tour[pos:] + tour[:pos]


class SolveSession:
    """Points and distance oracle for one input load.

    Sessions hold no solve state between calls, so several configs (or several
    sessions) can be solved independently.
    """

    def __init__(self, points: Sequence[Any]):
        self.points = normalize_points(points)
        self.oracle = DistanceOracle(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def construct(self, config: SolveConfig) -> Tour:
        n = len(self.points)
        if n < 2:
            raise InsufficientPoints(n)
        start = 0
        if config.fixed_start_index is not None:
            start = clamp_index(config.fixed_start_index, n)
            if start != config.fixed_start_index:
                logger.debug("fixed start %d out of range, clamped to %d", config.fixed_start_index, start)
        rng = make_rng(config.random_seed)
        tour = build_tour(config.algorithm, self.oracle.matrix(config.metric), start, rng)
        if config.fixed_start_index is not None:
            tour = rotate_to_start(tour, start)
        return tour

    def tour_length(self, tour: Sequence[int], config: SolveConfig) -> float:
        return self.oracle.tour_length(tour, config.metric, config.roundtrip)

    def _optimizer(self, config: SolveConfig, max_passes: Optional[int]) -> TwoOptOptimizer:
        return TwoOptOptimizer(self.oracle, config.metric, max_passes=max_passes)

    def _finish(self, config: SolveConfig, tour: Tour, report: Optional[OptimizationReport],
                t0: float) -> SolveResult:
        method = algorithm_label(config.algorithm)
        iterations, cancelled = 0, False
        if report is not None:
            tour = report.tour
            iterations, cancelled = report.iterations, report.cancelled
            if report.improvements:
                method = f"{method} + 2-Opt"
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        length = self.tour_length(tour, config)
        logger.info("%s over %d points: length %s in %.1f ms%s", method, len(tour),
                    format_distance(length, config.metric), elapsed_ms,
                    " (cancelled)" if cancelled else "")
        return SolveResult(
            tour=tour,
            total_length=length,
            method=method,
            elapsed_ms=elapsed_ms,
            metric=config.metric,
            roundtrip=config.roundtrip,
            iterations=iterations,
            cancelled=cancelled,
        )

    def _start(self, config: SolveConfig) -> Tuple[Tour, float]:
        t0 = time.perf_counter()
        return self.construct(config), t0

    def solve(self, config: SolveConfig, observer: Optional[Observer] = None,
              cancel: Optional[CancellationToken] = None, max_passes: Optional[int] = None) -> SolveResult:
        tour, t0 = self._start(config)
        report = None
        if config.improvement is Improvement.TWO_OPT:
            report = self._optimizer(config, max_passes).run(tour, cancel=cancel, observer=observer)
        return self._finish(config, tour, report, t0)

    async def solve_async(self, config: SolveConfig, observer: Optional[Observer] = None,
                          cancel: Optional[CancellationToken] = None,
                          max_passes: Optional[int] = None) -> SolveResult:
        tour, t0 = self._start(config)
        report = None
        if config.improvement is Improvement.TWO_OPT:
            report = await self._optimizer(config, max_passes).run_async(tour, cancel=cancel, observer=observer)
        return self._finish(config, tour, report, t0)


def solve(points: Sequence[Any], config: Optional[SolveConfig] = None, observer: Optional[Observer] = None,
          cancel: Optional[CancellationToken] = None) -> SolveResult:
    return SolveSession(points).solve(config or SolveConfig(), observer=observer, cancel=cancel)


async def solve_async(points: Sequence[Any], config: Optional[SolveConfig] = None,
                      observer: Optional[Observer] = None,
                      cancel: Optional[CancellationToken] = None) -> SolveResult:
    return await SolveSession(points).solve_async(config or SolveConfig(), observer=observer, cancel=cancel)
