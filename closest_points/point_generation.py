import typing as t

import numpy as np

from closest_points.data_models import Point

# Number of neighbours most queries ask for
NUM_OF_NEAREST_NEIGHBOURS = 10


def random_point(rng: np.random.Generator) -> Point:
    x, y, z = rng.random(3)
    return Point(x, y, z)


def generate_random_points(
    n: int, seed: t.Optional[int] = None, rng: t.Optional[np.random.Generator] = None
) -> t.List[Point]:
    """Draws `n` points uniformly from the unit cube."""
    if n < 0:
        raise ValueError(f"Cannot generate a negative number of points: {n}")
    rng = rng if rng is not None else np.random.default_rng(seed)
    coordinates = rng.random((n, 3))
    return [Point(x, y, z) for x, y, z in coordinates.tolist()]
