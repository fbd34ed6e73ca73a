import math
import typing as t
from enum import Enum

from closest_points.exceptions import InvalidPointError


class Axis(Enum):
    X = 0
    Y = 1
    Z = 2

    def next(self) -> "Axis":
        """The axis the children of a node split on."""
        return _NEXT_AXIS[self]


_NEXT_AXIS = {Axis.X: Axis.Y, Axis.Y: Axis.Z, Axis.Z: Axis.X}


def clamp(coordinate: float) -> float:
    return max(0.0, min(1.0, coordinate))


class _PointFields(t.NamedTuple):
    x: float
    y: float
    z: float


class Point(_PointFields):
    """A point of the unit cube.

    Coordinates are clamped to [0, 1] on construction; NaN coordinates are
    rejected with `InvalidPointError`.
    """

    __slots__ = ()

    def __new__(cls, x: float, y: float, z: float):
        coordinates = (float(x), float(y), float(z))
        if any(math.isnan(c) for c in coordinates):
            raise InvalidPointError(coordinates)
        return super().__new__(cls, *(clamp(c) for c in coordinates))

    @classmethod
    def _make(cls, iterable: t.Iterable[float]) -> "Point":
        # _replace goes through _make, keep both behind the clamp and NaN check
        return cls(*iterable)

    def coordinate(self, axis: Axis) -> float:
        return self[axis.value]

    def distance_squared_to(self, other: t.Sequence[float]) -> float:
        return (
            (self[0] - other[0]) ** 2
            + (self[1] - other[1]) ** 2
            + (self[2] - other[2]) ** 2
        )

    def distance_to(self, other: t.Sequence[float]) -> float:
        return math.sqrt(self.distance_squared_to(other))


class Neighbour(t.NamedTuple):
    distance: float
    point: Point
