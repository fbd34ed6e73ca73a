import heapq
import math
import numbers
import typing as t

from closest_points.data_models import Neighbour, Point
from closest_points.exceptions import InvalidNeighbourCountError, InvalidPointError

if t.TYPE_CHECKING:
    from closest_points.algorithms.kd_tree import KDNode


def validate_k(k: t.Any) -> int:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 1:
        raise InvalidNeighbourCountError(k)
    return int(k)


def _target_coordinates(target: t.Sequence[float]) -> t.Tuple[float, float, float]:
    coordinates = tuple(float(c) for c in target)
    if len(coordinates) != 3:
        raise ValueError("Query point dimension does not match tree dimensions")
    if any(math.isnan(c) for c in coordinates):
        raise InvalidPointError(coordinates)
    return coordinates  # type: ignore


class CandidateSet:
    """The k best neighbours found so far, worst one on top.

    Uses a max-heap of (-distance, -admission_order, point) so that the worst
    candidate is peeked in O(1). Among equally distant worst candidates the
    most recently admitted one is evicted first.
    """

    def __init__(self, k: int):
        self.k = validate_k(k)
        self._heap: t.List[t.Tuple[float, int, Point]] = []
        self._admitted = 0

    def __len__(self) -> int:
        return len(self._heap)

    def is_full(self) -> bool:
        return len(self._heap) >= self.k

    def worst_distance(self) -> float:
        if not self._heap:
            return math.inf
        return -self._heap[0][0]

    def admit(self, distance: float, point: Point) -> bool:
        """Insert if not full, otherwise replace the worst if strictly closer."""
        self._admitted += 1
        entry = (-distance, -self._admitted, point)
        if len(self._heap) < self.k:
            heapq.heappush(self._heap, entry)
            return True
        if distance < -self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def neighbours(self) -> t.List[Neighbour]:
        return [Neighbour(-d, point) for d, _, point in self._heap]


# Visit stages of a node on the explicit search stack
_DESCEND = 0
_FAR_SIDE = 1
_ADMIT = 2


def search(
    root: t.Optional["KDNode"], target: t.Sequence[float], k: int
) -> t.List[Neighbour]:
    """Find the k points of the tree rooted at `root` closest to `target`.

    Depth-first, near side first. The far side of a node is skipped once k
    candidates are held and the distance from `target` to the node's
    splitting plane is not below the current worst distance. Each node's own
    point is admitted after its children have been visited.

    The result is unordered; use `sorted` on it if order matters.
    """
    candidates = CandidateSet(k)
    query = _target_coordinates(target)
    if root is None:
        return []

    stack: t.List[t.Tuple["KDNode", int]] = [(root, _DESCEND)]
    while stack:
        node, stage = stack.pop()
        i = node.axis.value
        target_is_right = query[i] >= node.point[i]

        if stage == _DESCEND:
            stack.append((node, _FAR_SIDE))
            near = node.right if target_is_right else node.left
            if near is not None:
                stack.append((near, _DESCEND))

        elif stage == _FAR_SIDE:
            stack.append((node, _ADMIT))
            far = node.left if target_is_right else node.right
            if far is not None:
                axial_distance = abs(node.point[i] - query[i])
                if (
                    not candidates.is_full()
                    or axial_distance < candidates.worst_distance()
                ):
                    stack.append((far, _DESCEND))

        else:
            candidates.admit(node.point.distance_to(query), node.point)

    return candidates.neighbours()


def search_radius(
    root: t.Optional["KDNode"], target: t.Sequence[float], radius: float
) -> t.List[Neighbour]:
    """Every point whose euclidean distance to `target` is <= radius."""
    if math.isnan(radius) or radius < 0:
        raise ValueError(f"radius must be a non-negative number, got {radius}")
    query = _target_coordinates(target)
    result: t.List[Neighbour] = []

    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        i = node.axis.value
        diff = query[i] - node.point[i]
        # Pruning: only the near side can hold points within radius
        if abs(diff) > radius:
            near = node.left if diff < 0 else node.right
            if near is not None:
                stack.append(near)
            continue
        dist = node.point.distance_to(query)
        if dist <= radius:
            result.append(Neighbour(dist, node.point))
        for child in (node.left, node.right):
            if child is not None:
                stack.append(child)
    return result
