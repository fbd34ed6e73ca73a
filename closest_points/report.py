import time
import typing as t

import numpy as np
from pydantic import BaseModel

from closest_points.algorithms.kd_tree import KDTree
from closest_points.baseline import linear_scan, same_neighbours
from closest_points.point_generation import generate_random_points, random_point
from closest_points.utils.utils import KnnLog, KnnLogger


class QueryStats(BaseModel):
    duration: float
    """Time spent in the kd-tree search, in seconds"""

    n_neighbours: int
    """Number of neighbours returned"""

    matches_linear_scan: bool | None = None
    """Whether the result agreed with a brute-force scan, if one was run"""


class BenchmarkReport(BaseModel):
    n_points: int
    k: int
    random_seed: int | None = None
    tree_depth: int = 0
    construction_time: float = 0.0
    """Time spent building the tree, in seconds"""

    queries: t.List[QueryStats] = []

    @property
    def mean_query_time(self) -> float:
        if not self.queries:
            return 0.0
        return float(np.mean([q.duration for q in self.queries]))

    @property
    def all_match(self) -> bool:
        return all(q.matches_linear_scan is not False for q in self.queries)


def benchmark(
    *,
    n_points: int,
    n_queries: int,
    k: int,
    random_seed: int | None = None,
    compare_with_linear_scan: bool = False,
    logger: KnnLogger | None = None,
) -> BenchmarkReport:
    """Times tree construction and `n_queries` random k-nearest-neighbour
    searches over `n_points` uniformly random points."""
    logger = logger if logger is not None else KnnLogger(printout=False)
    rng = np.random.default_rng(random_seed)

    points = generate_random_points(n_points, rng=rng)
    logger.append(KnnLog(f"Generated {n_points} points.", 0))

    start = time.perf_counter()
    tree = KDTree.from_points(points)
    construction_time = time.perf_counter() - start
    logger.append(KnnLog(f"Tree constructed in {construction_time:.6f}s.", 0))

    report = BenchmarkReport(
        n_points=n_points,
        k=k,
        random_seed=random_seed,
        tree_depth=tree.depth(),
        construction_time=construction_time,
    )
    for step in range(1, n_queries + 1):
        target = random_point(rng)
        start = time.perf_counter()
        neighbours = tree.query(target, k)
        duration = time.perf_counter() - start

        matches = None
        if compare_with_linear_scan:
            matches = same_neighbours(neighbours, linear_scan(points, target, k))
            if not matches:
                logger.append(
                    KnnLog(f"Search result for {target} differs from linear scan.", step)
                )
        report.queries.append(
            QueryStats(
                duration=duration,
                n_neighbours=len(neighbours),
                matches_linear_scan=matches,
            )
        )
    logger.append(
        KnnLog(
            f"Ran {n_queries} queries, mean query time {report.mean_query_time:.6f}s.",
            n_queries,
        )
    )
    return report
