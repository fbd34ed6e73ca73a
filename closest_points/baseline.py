"""Brute-force k-nearest-neighbour search, the oracle the kd-tree is checked
against."""

import typing as t

import numpy as np

from closest_points.algorithms.nearest_neighbours import validate_k
from closest_points.data_models import Neighbour, Point


def sorted_neighbours(neighbours: t.Iterable[Neighbour]) -> t.List[Neighbour]:
    return sorted(neighbours, key=lambda n: n.distance)


def linear_scan(
    points: t.Sequence[Point], target: t.Sequence[float], k: int
) -> t.List[Neighbour]:
    """Scores every point against `target` and keeps the k closest, sorted."""
    validate_k(k)
    if len(points) == 0:
        return []
    coordinates = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    query = np.asarray(target, dtype=np.float64).reshape(3)
    distances = np.sqrt(((coordinates - query) ** 2).sum(axis=1))
    order = np.argsort(distances, kind="stable")[:k]
    return [Neighbour(float(distances[i]), points[i]) for i in order]


def same_neighbours(
    a: t.Iterable[Neighbour], b: t.Iterable[Neighbour], abs_tol: float = 1e-12
) -> bool:
    """Whether two results hold the same distances. Points at equal distance
    may stand in for one another."""
    a_distances = sorted(n.distance for n in a)
    b_distances = sorted(n.distance for n in b)
    if len(a_distances) != len(b_distances):
        return False
    return bool(np.allclose(a_distances, b_distances, rtol=0.0, atol=abs_tol))
