from closest_points.algorithms.kd_tree import KDTree
from closest_points.baseline import linear_scan, same_neighbours, sorted_neighbours
from closest_points.point_generation import generate_random_points


points = generate_random_points(100_000, seed=0)
tree = KDTree.from_points(points)
target = generate_random_points(1, seed=1)[0]
neighbours = sorted_neighbours(tree.query(target, k=10))
assert len(neighbours) == 10
assert same_neighbours(neighbours, linear_scan(points, target, 10))
