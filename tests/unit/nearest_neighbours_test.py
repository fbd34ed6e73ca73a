import math
import random
import unittest
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from closest_points.algorithms.kd_tree import KDTree, build
from closest_points.algorithms.nearest_neighbours import (
    CandidateSet,
    search,
    search_radius,
    validate_k,
)
from closest_points.baseline import linear_scan, same_neighbours, sorted_neighbours
from closest_points.data_models import Point
from closest_points.exceptions import InvalidNeighbourCountError, InvalidPointError
from closest_points.point_generation import (
    NUM_OF_NEAREST_NEIGHBOURS,
    generate_random_points,
)


class TestCandidateSet(unittest.TestCase):
    def test_admits_until_full(self):
        candidates = CandidateSet(2)
        self.assertTrue(candidates.admit(0.5, Point(0.5, 0, 0)))
        self.assertFalse(candidates.is_full())
        self.assertTrue(candidates.admit(0.2, Point(0.2, 0, 0)))
        self.assertTrue(candidates.is_full())
        self.assertEqual(candidates.worst_distance(), 0.5)

    def test_replaces_worst_only_if_strictly_closer(self):
        candidates = CandidateSet(2)
        candidates.admit(0.5, Point(0.5, 0, 0))
        candidates.admit(0.2, Point(0.2, 0, 0))
        self.assertFalse(candidates.admit(0.5, Point(0, 0.5, 0)))
        self.assertFalse(candidates.admit(0.7, Point(0.7, 0, 0)))
        self.assertTrue(candidates.admit(0.1, Point(0.1, 0, 0)))
        self.assertEqual(candidates.worst_distance(), 0.2)
        self.assertEqual(
            sorted(n.point for n in candidates.neighbours()),
            [Point(0.1, 0, 0), Point(0.2, 0, 0)],
        )

    def test_first_of_a_tie_survives(self):
        first = Point(0.5, 0, 0)
        second = Point(0, 0.5, 0)
        candidates = CandidateSet(2)
        candidates.admit(0.5, first)
        candidates.admit(0.5, second)
        candidates.admit(0.1, Point(0.1, 0, 0))
        self.assertEqual(
            {n.point for n in candidates.neighbours()}, {first, Point(0.1, 0, 0)}
        )

    def test_empty_worst_distance(self):
        self.assertEqual(CandidateSet(3).worst_distance(), math.inf)

    def test_invalid_k(self):
        for k in (0, -1, 1.5, True, "3", None):
            with self.assertRaises(InvalidNeighbourCountError):
                CandidateSet(k)  # type: ignore


class TestSearch:
    def setup_method(self):
        self.points = [
            Point(0.1, 0.1, 0.1),
            Point(0.2, 0.2, 0.2),
            Point(0.3, 0.3, 0.3),
        ]
        self.tree = KDTree.from_points(self.points)

    def test_closest_of_three(self):
        result = self.tree.query(Point(0.0, 0.0, 0.0), k=1)
        assert len(result) == 1
        assert result[0].point == Point(0.1, 0.1, 0.1)
        assert result[0].distance == pytest.approx(0.1732, abs=1e-4)

    def test_empty_tree(self):
        assert search(None, Point(0.5, 0.5, 0.5), 1) == []
        assert KDTree.from_points([]).query(Point(0.5, 0.5, 0.5), k=10) == []

    def test_single_point(self):
        point = Point(0.2, 0.4, 0.6)
        target = Point(0.9, 0.1, 0.3)
        result = search(build([point]), target, 1)
        assert result == [(pytest.approx(point.distance_to(target)), point)]

    def test_k_larger_than_tree(self):
        result = self.tree.query(Point(0.5, 0.5, 0.5), k=5)
        assert sorted(n.point for n in result) == sorted(self.points)

    def test_result_is_sortable(self):
        result = sorted_neighbours(self.tree.query(Point(1.0, 1.0, 1.0), k=3))
        assert [n.point for n in result] == list(reversed(self.points))

    def test_plain_sequence_target(self):
        result = self.tree.query((0.0, 0.0, 0.0), k=1)
        assert result[0].point == Point(0.1, 0.1, 0.1)

    def test_target_dimension_mismatch(self):
        with pytest.raises(ValueError):
            self.tree.query((0.0, 0.0), k=1)

    def test_invalid_k_rejected(self):
        with pytest.raises(InvalidNeighbourCountError):
            self.tree.query(Point(0, 0, 0), k=0)
        with pytest.raises(ValueError):
            KDTree.from_points([]).query(Point(0, 0, 0), k=-3)

    def test_validate_k(self):
        assert validate_k(4) == 4

    def test_numpy_integer_k(self):
        result = self.tree.query(Point(0.0, 0.0, 0.0), k=np.int64(2))
        assert len(result) == 2
        assert validate_k(np.int32(3)) == 3

    def test_nan_target_rejected(self):
        with pytest.raises(InvalidPointError):
            self.tree.query((math.nan, 0.5, 0.5), k=3)
        with pytest.raises(InvalidPointError):
            search(None, (0.5, 0.5, math.nan), 1)

    def test_idempotent(self):
        points = generate_random_points(1000, seed=3)
        tree = KDTree.from_points(points)
        target = Point(0.4, 0.6, 0.5)
        first = sorted_neighbours(tree.query(target, k=10))
        for _ in range(5):
            assert sorted_neighbours(tree.query(target, k=10)) == first
        assert sorted(tree) == sorted(points)

    def test_duplicate_points_fill_result(self):
        points = [Point(0.5, 0.5, 0.5)] * 4 + [Point(0.9, 0.9, 0.9)]
        tree = KDTree.from_points(points)
        result = tree.query(Point(0.5, 0.5, 0.5), k=4)
        assert [n.distance for n in result] == [0.0] * 4


class TestAgainstLinearScan:
    def test_random_trials(self):
        rng = random.Random(2024)
        for trial in range(100):
            points = generate_random_points(1000, seed=trial)
            tree = KDTree.from_points(points)
            target = Point(rng.random(), rng.random(), rng.random())
            result = tree.query(target, NUM_OF_NEAREST_NEIGHBOURS)
            expected = linear_scan(points, target, NUM_OF_NEAREST_NEIGHBOURS)
            assert len(result) == NUM_OF_NEAREST_NEIGHBOURS
            assert same_neighbours(result, expected), f"trial {trial}"
            assert {n.point for n in result} == {n.point for n in expected}

    @pytest.mark.parametrize("n_points", [1, 2, 10, 20, 50, 300])
    @pytest.mark.parametrize("k", [1, 3, 10, 25])
    def test_sizes(self, n_points, k):
        points = generate_random_points(n_points, seed=n_points * 31 + k)
        root = build(points)
        target = Point(0.25, 0.5, 0.75)
        result = search(root, target, k)
        assert len(result) == min(k, n_points)
        assert same_neighbours(result, linear_scan(points, target, k))

    def test_clustered_points(self):
        # many ties on every axis
        points = [
            Point(x / 4, y / 4, z / 4)
            for x in range(5)
            for y in range(5)
            for z in range(5)
            for _ in range(2)
        ]
        tree = KDTree.from_points(points)
        for target in (Point(0, 0, 0), Point(0.5, 0.5, 0.5), Point(0.3, 0.8, 0.1)):
            for k in (1, 7, 30):
                assert same_neighbours(
                    tree.query(target, k), linear_scan(points, target, k)
                )

    def test_target_on_splitting_planes(self):
        points = generate_random_points(400, seed=11)
        tree = KDTree.from_points(points)
        for point in points[:20]:
            result = tree.query(point, k=5)
            assert same_neighbours(result, linear_scan(points, point, 5))
            assert min(n.distance for n in result) == 0.0


def test_concurrent_queries_share_one_tree():
    points = generate_random_points(2000, seed=5)
    tree = KDTree.from_points(points)
    targets = generate_random_points(50, seed=6)

    def run(target):
        return sorted_neighbours(tree.query(target, k=8))

    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(run, targets))
    for target, result in zip(targets, results):
        assert result == run(target)
        assert same_neighbours(result, linear_scan(points, target, 8))


class TestSearchRadius(unittest.TestCase):
    def setUp(self):
        self.points = generate_random_points(500, seed=17)
        self.tree = KDTree.from_points(self.points)

    def test_matches_linear_scan(self):
        target = Point(0.5, 0.5, 0.5)
        radius = 0.2
        result = self.tree.query_radius(target, radius)
        expected = {p for p in self.points if p.distance_to(target) <= radius}
        self.assertEqual({n.point for n in result}, expected)
        self.assertTrue(all(n.distance <= radius for n in result))

    def test_zero_radius(self):
        target = self.points[42]
        result = self.tree.query_radius(target, 0.0)
        self.assertEqual([n.point for n in result], [target])

    def test_empty_tree(self):
        self.assertEqual(search_radius(None, Point(0, 0, 0), 1.0), [])

    def test_invalid_radius(self):
        with self.assertRaises(ValueError):
            self.tree.query_radius(Point(0, 0, 0), -1.0)
        with self.assertRaises(ValueError):
            self.tree.query_radius(Point(0, 0, 0), math.nan)

    def test_nan_target_rejected(self):
        with self.assertRaises(InvalidPointError):
            self.tree.query_radius((0.5, math.nan, 0.5), 0.1)


if __name__ == "__main__":
    unittest.main()
