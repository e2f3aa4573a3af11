import random
import unittest

import numpy as np

from tsp_engine.construction import (algorithm_label, build_tour, cheapest_insertion, nearest_neighbor,
                                     random_tour)
from tsp_engine.distance import dist_matrix, tour_length
from tsp_engine.model import Algorithm, Metric, Point
from tsp_engine.rng import LcgRandom, make_rng

SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


def matrix(points):
    return dist_matrix(points, Metric.PLANAR)


def random_matrix(n, seed=0):
    rng = np.random.default_rng(seed)
    return matrix([Point(float(x), float(y)) for x, y in rng.uniform(0, 100, size=(n, 2))])


class TestNearestNeighbor(unittest.TestCase):
    def test_square_from_zero(self):
        D = matrix(SQUARE)
        tour = nearest_neighbor(D, 0)
        self.assertEqual(tour, [0, 1, 2, 3])
        self.assertAlmostEqual(tour_length(tour, D), 30.0)

    def test_ties_go_to_lowest_index(self):
        self.assertEqual(nearest_neighbor(matrix(SQUARE), 2), [2, 1, 0, 3])

    def test_start_is_clamped(self):
        D = matrix(SQUARE)
        self.assertEqual(nearest_neighbor(D, 99), [3, 0, 1, 2])
        self.assertEqual(nearest_neighbor(D, -5), [0, 1, 2, 3])

    def test_coincident_points(self):
        self.assertEqual(nearest_neighbor(matrix([Point(5, 5), Point(5, 5)]), 0), [0, 1])
        same = matrix([Point(1, 1)] * 5)
        self.assertEqual(nearest_neighbor(same, 3), [3, 0, 1, 2, 4])

    def test_single_and_empty(self):
        self.assertEqual(nearest_neighbor(matrix([Point(1, 2)]), 0), [0])
        self.assertEqual(nearest_neighbor(matrix([]), 0), [])

    def test_permutation_and_determinism(self):
        D = random_matrix(40, seed=1)
        for start in (0, 7, 39):
            tour = nearest_neighbor(D, start)
            self.assertEqual(sorted(tour), list(range(40)))
            self.assertEqual(tour[0], start)
            self.assertEqual(tour, nearest_neighbor(D, start))


class TestCheapestInsertion(unittest.TestCase):
    def test_square_from_zero(self):
        D = matrix(SQUARE)
        tour = cheapest_insertion(D, 0)
        self.assertEqual(tour, [0, 3, 2, 1])
        self.assertAlmostEqual(tour_length(tour, D), 30.0)

    def test_tour_starts_at_start(self):
        D = random_matrix(25, seed=2)
        for start in (0, 1, 13, 24):
            tour = cheapest_insertion(D, start)
            self.assertEqual(tour[0], start)
            self.assertEqual(sorted(tour), list(range(25)))

    def test_determinism(self):
        D = random_matrix(30, seed=4)
        self.assertEqual(cheapest_insertion(D, 5), cheapest_insertion(D, 5))

    def test_small_inputs(self):
        self.assertEqual(cheapest_insertion(matrix([]), 0), [])
        self.assertEqual(cheapest_insertion(matrix([Point(0, 0)]), 0), [0])
        self.assertEqual(cheapest_insertion(matrix([Point(0, 0), Point(1, 1)]), 1), [1, 0])

    def test_all_points_coincide(self):
        tour = cheapest_insertion(matrix([Point(2, 2)] * 6), 0)
        self.assertEqual(sorted(tour), list(range(6)))


class TestRandomTour(unittest.TestCase):
    def test_lcg_reference_states(self):
        rng = LcgRandom(0)
        states = []
        for _ in range(4):
            rng.random()
            states.append(rng.state)
        self.assertEqual(states, [1013904223, 1196435762, 3519870697, 2868466484])

    def test_seed_wraps_to_32_bits(self):
        self.assertEqual(LcgRandom(-1).state, 2 ** 32 - 1)
        self.assertEqual(LcgRandom(2 ** 32 + 5).state, 5)

    def test_seeded_shuffle_is_reproducible(self):
        self.assertEqual(random_tour(4, LcgRandom(0)), [2, 1, 3, 0])
        self.assertEqual(random_tour(50, LcgRandom(123)), random_tour(50, LcgRandom(123)))

    def test_permutation(self):
        for rng in (LcgRandom(9), random.Random()):
            tour = random_tour(33, rng)
            self.assertEqual(sorted(tour), list(range(33)))
        self.assertEqual(random_tour(1, LcgRandom(1)), [0])

    def test_make_rng(self):
        self.assertIsInstance(make_rng(7), LcgRandom)
        self.assertIsInstance(make_rng(None), random.Random)
        self.assertIsNot(make_rng(7), make_rng(7))


class TestBuildTour(unittest.TestCase):
    def test_dispatch(self):
        D = matrix(SQUARE)
        self.assertEqual(build_tour(Algorithm.NEAREST_NEIGHBOR, D, 0), [0, 1, 2, 3])
        self.assertEqual(build_tour(Algorithm.CHEAPEST_INSERTION, D, 0), [0, 3, 2, 1])
        self.assertEqual(build_tour(Algorithm.RANDOM, D, 0, LcgRandom(0)), [2, 1, 3, 0])
        self.assertEqual(sorted(build_tour(Algorithm.RANDOM, D)), [0, 1, 2, 3])

    def test_labels(self):
        self.assertEqual(algorithm_label(Algorithm.NEAREST_NEIGHBOR), "Nearest Neighbor")
        self.assertEqual(algorithm_label(Algorithm.CHEAPEST_INSERTION), "Cheapest Insertion")
        self.assertEqual(algorithm_label(Algorithm.RANDOM), "Random")


if __name__ == "__main__":
    unittest.main()
