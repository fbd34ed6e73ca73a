class InvalidPointError(ValueError):
    """Raised when a point is created from a coordinate that has no total order (NaN)."""

    def __init__(self, coordinates: tuple, *args: object):
        super().__init__(f"Point coordinates must not be NaN, got {coordinates}", *args)
        self.coordinates = coordinates


class InvalidNeighbourCountError(ValueError):
    """Raised when a neighbour query asks for anything but a positive integer count."""

    def __init__(self, k: object, *args: object):
        super().__init__(f"k must be a positive integer, got {k!r}", *args)
        self.k = k
