# distance.py
# Distance metrics and the per-session distance oracle.
# Planar: Euclidean, unitless. Spherical: haversine in meters, x = lon, y = lat (degrees).

from __future__ import annotations
import math
from typing import Dict, Sequence, Tuple

import numpy as np

from .model import Metric, Point

EARTH_RADIUS_M = 6371000.0

XY = Tuple[float, float]


def euclidean(a: XY, b: XY) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two (lat, lon) points in degrees."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _planar_matrix(xy: np.ndarray) -> np.ndarray:
    dx = xy[:, 0][:, None] - xy[:, 0][None, :]
    dy = xy[:, 1][:, None] - xy[:, 1][None, :]
    return np.hypot(dx, dy)


def _haversine_matrix(xy: np.ndarray) -> np.ndarray:
    lon = np.radians(xy[:, 0])
    lat = np.radians(xy[:, 1])
    dphi = lat[None, :] - lat[:, None]
    dlmb = lon[None, :] - lon[:, None]
    h = np.sin(dphi / 2) ** 2 + np.cos(lat)[:, None] * np.cos(lat)[None, :] * np.sin(dlmb / 2) ** 2
    # rounding can push h a hair outside [0, 1] for antipodal points
    h = np.clip(h, 0.0, 1.0)
    return 2 * EARTH_RADIUS_M * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def dist_matrix(points: Sequence[Point], metric: Metric) -> np.ndarray:
    """Full symmetric distance matrix with a zero diagonal."""
    n = len(points)
    if n == 0:
        return np.zeros((0, 0), dtype=float)
    xy = np.array([(p.x, p.y) for p in points], dtype=float)
    if metric is Metric.SPHERICAL:
        D = _haversine_matrix(xy)
    else:
        D = _planar_matrix(xy)
    # mirror the upper triangle so D[i, j] == D[j, i] bit for bit
    upper = np.triu(D, k=1)
    return upper + upper.T


class DistanceOracle:
    """Distance lookups over one immutable point set.

    Matrices are built lazily, once per metric, and marked read-only.
    """

    def __init__(self, points: Sequence[Point]):
        self.points: Tuple[Point, ...] = tuple(points)
        self._matrices: Dict[Metric, np.ndarray] = {}

    def __len__(self) -> int:
        return len(self.points)

    def matrix(self, metric: Metric) -> np.ndarray:
        D = self._matrices.get(metric)
        if D is None:
            D = dist_matrix(self.points, metric)
            D.setflags(write=False)
            self._matrices[metric] = D
        return D

    def distance(self, i: int, j: int, metric: Metric) -> float:
        return float(self.matrix(metric)[i, j])

    def tour_length(self, tour: Sequence[int], metric: Metric, roundtrip: bool = False) -> float:
        return tour_length(tour, self.matrix(metric), roundtrip)


def tour_length(tour: Sequence[int], D: np.ndarray, roundtrip: bool = False) -> float:
    """Sum of consecutive edges, plus last -> first when roundtrip is set."""
    if len(tour) < 2:
        return 0.0
    total = 0.0
    for k in range(len(tour) - 1):
        total += float(D[tour[k], tour[k + 1]])
    if roundtrip:
        total += float(D[tour[-1], tour[0]])
    return total


def format_distance(d: float, metric: Metric) -> str:
    if metric is Metric.SPHERICAL:
        if d >= 1000:
            return f"{d / 1000:.2f} km"
        return f"{d:.1f} m"
    return f"{d:.3f}"

