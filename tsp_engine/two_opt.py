# two_opt.py
# Best-improvement 2-opt local search with single-step, continuous and asyncio modes.
#
# A move at (i, k), 0 <= i < n-2 and i+2 <= k < n, drops edges (t[i], t[i+1]) and
# (t[k-1], t[k]), adds (t[i], t[k-1]) and (t[i+1], t[k]), and reverses t[i+1..k-1].
# Gains are measured on the open path. t[0] and t[-1] never move, so the closing
# edge of a roundtrip is unchanged by every move.

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence

import numpy as np

from .distance import DistanceOracle, format_distance
from .model import CancellationToken, ImprovementEvent, Metric, Tour

logger = logging.getLogger(__name__)

EPS = 1e-12

Observer = Callable[[ImprovementEvent], None]


class OptimizerState(str, Enum):
    SCANNING = "scanning"
    IDLE = "idle"


@dataclass
class TwoOptMove:
    improved: bool
    tour: Tour
    gain: float = 0.0
    i: int = -1
    k: int = -1


@dataclass
class OptimizationReport:
    tour: Tour
    iterations: int
    improvements: int
    total_gain: float
    cancelled: bool
    state: OptimizerState = OptimizerState.IDLE


def two_opt_once(tour: Sequence[int], D: np.ndarray) -> TwoOptMove:
    """Scan every (i, k) pair and apply the single best move, if it gains more than EPS.

    The returned tour is a new list; on no improvement the input tour comes back as is.
    """
    n = len(tour)
    if n < 3:
        return TwoOptMove(False, tour)
    t = np.asarray(tour, dtype=int)
    I, K = np.triu_indices(n, k=2)
    a, b, c, d = t[I], t[I + 1], t[K - 1], t[K]
    gains = (D[a, b] + D[c, d]) - (D[a, c] + D[b, d])
    # argmax keeps the first (i, k) in scan order among equal gains
    best = int(np.argmax(gains))
    gain = float(gains[best])
    if not gain > EPS:
        return TwoOptMove(False, tour)
    i, k = int(I[best]), int(K[best])
    new_tour = list(tour)
    new_tour[i + 1:k] = new_tour[i + 1:k][::-1]
    return TwoOptMove(True, new_tour, gain, i, k)


class TwoOptRun:
    """One optimization run over one tour.

    ``advance()`` performs at most one pass: it returns an ImprovementEvent when a
    swap was applied and None once the run is idle (converged, cancelled or out of
    passes). Cancellation is polled only before a pass starts.
    """

    def __init__(self, D: np.ndarray, tour: Sequence[int], metric: Metric = Metric.PLANAR,
                 cancel: Optional[CancellationToken] = None, max_passes: Optional[int] = None):
        self.D = D
        self.metric = metric
        self.tour: Tour = list(tour)
        self.cancel = cancel
        self.max_passes = max_passes
        self.iterations = 0
        self.improvements = 0
        self.total_gain = 0.0
        self.cancelled = False
        # fewer than 4 points: every candidate move has zero gain
        self.state = OptimizerState.SCANNING if len(self.tour) >= 4 else OptimizerState.IDLE

    def advance(self) -> Optional[ImprovementEvent]:
        if self.state is OptimizerState.IDLE:
            return None
        if self.cancel is not None and self.cancel.cancelled:
            self.cancelled = True
            self.state = OptimizerState.IDLE
            logger.debug("2-opt cancelled after %d passes", self.iterations)
            return None
        if self.max_passes is not None and self.iterations >= self.max_passes:
            self.state = OptimizerState.IDLE
            logger.debug("2-opt pass budget of %d exhausted", self.max_passes)
            return None

        move = two_opt_once(self.tour, self.D)
        self.iterations += 1
        if not move.improved:
            self.state = OptimizerState.IDLE
            logger.debug("2-opt converged after %d passes", self.iterations)
            return None

        self.tour = move.tour
        self.improvements += 1
        self.total_gain += move.gain
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("2-opt pass %d: reversed [%d..%d], gain %s",
                         self.iterations, move.i + 1, move.k - 1, format_distance(move.gain, self.metric))
        return ImprovementEvent(tour=list(move.tour), gain=move.gain, iteration=self.iterations)

    def report(self) -> OptimizationReport:
        return OptimizationReport(
            tour=list(self.tour),
            iterations=self.iterations,
            improvements=self.improvements,
            total_gain=self.total_gain,
            cancelled=self.cancelled,
            state=self.state,
        )


class TwoOptOptimizer:
    def __init__(self, oracle: DistanceOracle, metric: Metric, max_passes: Optional[int] = None):
        self.oracle = oracle
        self.metric = metric
        self.max_passes = max_passes

    @property
    def D(self) -> np.ndarray:
        return self.oracle.matrix(self.metric)

    def start(self, tour: Sequence[int], cancel: Optional[CancellationToken] = None) -> TwoOptRun:
        return TwoOptRun(self.D, tour, self.metric, cancel=cancel, max_passes=self.max_passes)

    def step(self, tour: Sequence[int]) -> TwoOptMove:
        """Single-step mode: at most one pass."""
        return two_opt_once(tour, self.D)

    def iter_improvements(self, tour: Sequence[int],
                          cancel: Optional[CancellationToken] = None) -> Iterator[ImprovementEvent]:
        run = self.start(tour, cancel)
        while True:
            event = run.advance()
            if event is None:
                return
            yield event

    def run(self, tour: Sequence[int], cancel: Optional[CancellationToken] = None,
            observer: Optional[Observer] = None) -> OptimizationReport:
        """Continuous mode: pass after pass until idle."""
        run = self.start(tour, cancel)
        while True:
            event = run.advance()
            if event is None:
                break
            if observer is not None:
                observer(event)
        return run.report()

    async def run_async(self, tour: Sequence[int], cancel: Optional[CancellationToken] = None,
                        observer: Optional[Observer] = None) -> OptimizationReport:
        """Continuous mode that hands control back to the event loop after every accepted pass."""
        run = self.start(tour, cancel)
        while True:
            event = run.advance()
            if event is None:
                break
            if observer is not None:
                observer(event)
            await asyncio.sleep(0)
        return run.report()
