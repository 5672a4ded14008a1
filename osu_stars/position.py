from collections import namedtuple
import math


class Position(namedtuple('Position', 'x y')):
    """A position on the osu! screen.

    Parameters
    ----------
    x : int or float
        The x coordinate in the range.
    y : int or float
        The y coordinate in the range.

    Notes
    -----
    The visible region of the osu! standard playfield is [0, 512] by [0, 384].
    Positions may fall outside of this range for slider curve control points.

    Unlike a plain tuple, ``+`` and ``-`` are element-wise.
    """
    x_max = 512
    y_max = 384

    def __add__(self, other):
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Position(self.x - other.x, self.y - other.y)

    def scale(self, factor):
        """Multiply both coordinates by ``factor``.
        """
        return Position(self.x * factor, self.y * factor)

    def dot(self, other):
        return self.x * other.x + self.y * other.y

    def length(self):
        """The magnitude of this position treated as a vector.
        """
        return math.sqrt(self.x ** 2 + self.y ** 2)

    def normalize(self):
        """The unit vector in the direction of this position.

        Returns
        -------
        unit : Position
            The unit vector. The zero vector is returned unchanged.
        """
        length = self.length()
        if length == 0:
            return Position(0.0, 0.0)
        return Position(self.x / length, self.y / length)


def distance(start, end):
    return math.sqrt((start.x - end.x) ** 2 + (start.y - end.y) ** 2)
