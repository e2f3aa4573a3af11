# construction.py
# Construction heuristics: each returns an open tour (permutation of 0..n-1, no closing index).
# All strategies read a precomputed distance matrix D and break ties toward the lowest index.

from __future__ import annotations
from typing import List, Optional

import numpy as np

from .model import Algorithm, Tour
from .rng import RandomSource, make_rng

ALGORITHM_LABELS = {
    Algorithm.NEAREST_NEIGHBOR: "Nearest Neighbor",
    Algorithm.CHEAPEST_INSERTION: "Cheapest Insertion",
    Algorithm.RANDOM: "Random",
}


def clamp_index(start: int, n: int) -> int:
    return max(0, min(n - 1, int(start)))


def algorithm_label(algorithm: Algorithm) -> str:
    return ALGORITHM_LABELS[algorithm]


def nearest_neighbor(D: np.ndarray, start: int = 0) -> Tour:
    """Greedy walk from `start` to the closest unvisited point."""
    n = D.shape[0]
    if n == 0:
        return []
    cur = clamp_index(start, n)
    visited = np.zeros(n, dtype=bool)
    visited[cur] = True
    tour = [cur]
    for _ in range(n - 1):
        row = np.where(visited, np.inf, D[cur])
        # argmin returns the first minimum, i.e. the lowest index on ties
        nxt = int(np.argmin(row))
        tour.append(nxt)
        visited[nxt] = True
        cur = nxt
    return tour


def cheapest_insertion(D: np.ndarray, start: int = 0) -> Tour:
    """Grow a cycle from [start, k] by the cheapest (point, position) insertion.

    The cycle is treated as closed when pricing insertions; the returned tour is
    left open. k is the lowest index other than start.
    """
    n = D.shape[0]
    if n < 2:
        return list(range(n))
    s = clamp_index(start, n)
    k = 1 if s == 0 else 0
    tour: List[int] = [s, k]
    remaining = [j for j in range(n) if j != s and j != k]

    while remaining:
        a = np.array(tour)
        b = np.roll(a, -1)
        rem = np.array(remaining)
        # inc[v, p] = D[a_p, v] + D[v, b_p] - D[a_p, b_p]
        inc = D[np.ix_(rem, a)] + D[np.ix_(rem, b)] - D[a, b][None, :]
        # row-major argmin == first (point, position) reaching the minimum
        flat = int(np.argmin(inc))
        v_idx, pos = divmod(flat, len(tour))
        tour.insert(pos + 1, remaining.pop(v_idx))
    return tour


def random_tour(n: int, rng: RandomSource) -> Tour:
    """Fisher-Yates shuffle of 0..n-1, one rng draw per step from i = n-1 down to 1."""
    order = list(range(n))
    for i in range(n - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        order[i], order[j] = order[j], order[i]
    return order


def build_tour(algorithm: Algorithm, D: np.ndarray, start: int = 0, rng: Optional[RandomSource] = None) -> Tour:
    if algorithm is Algorithm.NEAREST_NEIGHBOR:
        return nearest_neighbor(D, start)
    if algorithm is Algorithm.CHEAPEST_INSERTION:
        return cheapest_insertion(D, start)
    if algorithm is Algorithm.RANDOM:
        return random_tour(D.shape[0], rng if rng is not None else make_rng())
    raise ValueError(f"unsupported algorithm: {algorithm}")
