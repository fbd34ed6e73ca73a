from closest_points.algorithms.kd_tree import KDNode, KDTree, build
from closest_points.algorithms.nearest_neighbours import search, search_radius
from closest_points.data_models import Axis, Neighbour, Point
from closest_points.exceptions import InvalidNeighbourCountError, InvalidPointError

__all__ = [
    "Axis",
    "InvalidNeighbourCountError",
    "InvalidPointError",
    "KDNode",
    "KDTree",
    "Neighbour",
    "Point",
    "build",
    "search",
    "search_radius",
]
