from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from closest_points.algorithms.nearest_neighbours import search, search_radius
from closest_points.data_models import Axis, Neighbour, Point


class KDNode:
    def __init__(self, point: Point, axis: Axis):
        self.point = point  # Partition pivot of this subtree
        self.axis = axis
        self.left: Optional["KDNode"] = None
        self.right: Optional["KDNode"] = None

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        return f"KDNode({self.point}, {self.axis.name})"


def select_pivot(points: Sequence[Point], axis: Axis) -> int:
    """Index of the point whose `axis` coordinate is closest to the mean of
    that coordinate over `points`. The first such point wins a tie."""
    i = axis.value
    mean = sum(p[i] for p in points) / len(points)
    best_index = 0
    best_diff = abs(points[0][i] - mean)
    for index in range(1, len(points)):
        diff = abs(points[index][i] - mean)
        if diff < best_diff:
            best_index = index
            best_diff = diff
    return best_index


def partition(
    points: Sequence[Point], axis: Axis
) -> Tuple[Point, List[Point], List[Point]]:
    """Splits `points` into (pivot, lesser, greater_or_equal) along `axis`."""
    pivot_index = select_pivot(points, axis)
    pivot = points[pivot_index]
    value = pivot[axis.value]
    lesser: List[Point] = []
    greater: List[Point] = []
    for index, point in enumerate(points):
        if index == pivot_index:
            continue
        if point[axis.value] < value:
            lesser.append(point)
        else:
            greater.append(point)
    return pivot, lesser, greater


def build(points: Iterable[Point], axis: Axis = Axis.X) -> Optional[KDNode]:
    """Build a kd-tree over `points`, splitting the root on `axis` and cycling
    X -> Y -> Z below it. Returns None for an empty input.

    Work is driven by an explicit stack so that heavily skewed inputs (for
    instance many identical points, which all land on the right) are not
    limited by the interpreter recursion depth.
    """
    root_points = list(points)
    if len(root_points) == 0:
        return None

    # (points, axis, parent, attach_left)
    root: Optional[KDNode] = None
    stack: List[Tuple[List[Point], Axis, Optional[KDNode], bool]] = [
        (root_points, axis, None, False)
    ]
    while stack:
        subset, subset_axis, parent, attach_left = stack.pop()
        if len(subset) == 1:
            node = KDNode(subset[0], subset_axis)
        else:
            pivot, lesser, greater = partition(subset, subset_axis)
            node = KDNode(pivot, subset_axis)
            if greater:
                stack.append((greater, subset_axis.next(), node, False))
            if lesser:
                stack.append((lesser, subset_axis.next(), node, True))

        if parent is None:
            root = node
        elif attach_left:
            parent.left = node
        else:
            parent.right = node
    return root


def iter_nodes(root: Optional[KDNode]) -> Iterator[KDNode]:
    """Pre-order traversal."""
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def tree_depth(root: Optional[KDNode]) -> int:
    if root is None:
        return 0
    depth = 0
    stack = [(root, 1)]
    while stack:
        node, level = stack.pop()
        depth = max(depth, level)
        for child in (node.left, node.right):
            if child is not None:
                stack.append((child, level + 1))
    return depth


class KDTree:
    """A kd-tree over 3D points in the unit cube.

    The tree is built once and never mutated afterwards, so any number of
    queries may run against it, including from several threads.
    """

    def __init__(self, root: Optional[KDNode] = None, size: int = 0):
        self.root = root
        self.size = size

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "KDTree":
        point_list = list(points)
        return cls(build(point_list), len(point_list))

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Point]:
        return (node.point for node in iter_nodes(self.root))

    def is_empty(self) -> bool:
        return self.root is None

    def depth(self) -> int:
        return tree_depth(self.root)

    def query(self, target: Sequence[float], k: int = 1) -> List[Neighbour]:
        """Find the k nearest neighbours of `target`, in no particular order."""
        return search(self.root, target, k)

    def query_radius(self, target: Sequence[float], radius: float) -> List[Neighbour]:
        """All points whose euclidean distance to `target` is <= radius."""
        return search_radius(self.root, target, radius)
