from abc import ABCMeta, abstractmethod
import bisect
import math

import numpy as np
from toolz import sliding_window

from .position import Position, distance


class CurveBuffers:
    """Scratch storage shared by every curve built for one beatmap.

    A :class:`Curve` keeps references into these lists, so a curve is only
    valid until the buffers are handed to the next curve.
    """
    def __init__(self):
        self.vertices = []
        self.cumulative_length = []
        # bezier subdivision scratch
        self.left = []
        self.right = []
        self.midpoints = []

    def clear(self):
        """Empty the buffers without releasing the lists.
        """
        self.vertices.clear()
        self.cumulative_length.clear()


class Curve(metaclass=ABCMeta):
    """A slider path approximated as a polyline indexed by arclength.

    Parameters
    ----------
    points : list[Position]
        The control points, including the slider head.
    req_length : float or None
        The pixel length declared in the beatmap. The path is trimmed or
        extended along its final segment to match this length. ``None`` keeps
        the geometric length.
    buffers : CurveBuffers, optional
        Scratch storage to build the polyline into.
    """
    _kind_dispatch = {}

    # declared lengths past this are treated as malformed
    max_length = 100000

    def __init__(self, points, req_length, buffers=None):
        if buffers is None:
            buffers = CurveBuffers()
        buffers.clear()

        self.points = points
        self.req_length = req_length
        self._vertices = buffers.vertices
        self._cumulative_length = buffers.cumulative_length

        control_points = [Position(float(x), float(y)) for x, y in points]
        if len(set(control_points)) < 2:
            # nothing to trace; collapse onto the first point
            if control_points:
                self._vertices.append(control_points[0])
        else:
            self._approximate(control_points, buffers)

        self._calculate_length()

    @classmethod
    def from_kind_and_points(cls, kind, points, req_length, buffers=None):
        try:
            subcls = cls._kind_dispatch[kind]
        except KeyError:
            raise ValueError(f'unknown curve type: {kind!r}')

        return subcls(points, req_length, buffers)

    @classmethod
    def known_kinds(cls):
        """The curve letters that :meth:`from_kind_and_points` accepts.
        """
        return frozenset(cls._kind_dispatch)

    def __init_subclass__(cls):
        for kind in cls.kinds:
            cls._kind_dispatch[kind] = cls

    @abstractmethod
    def _approximate(self, points, buffers):
        """Append the polyline vertices for ``points`` with
        :meth:`_add_vertex`.
        """
        raise NotImplementedError('_approximate')

    def _add_vertex(self, vertex):
        vertices = self._vertices
        if not vertices or vertices[-1] != vertex:
            vertices.append(vertex)

    def _calculate_length(self):
        vertices = self._vertices
        cumulative_length = self._cumulative_length

        total = 0.0
        cumulative_length.append(total)
        for start, end in sliding_window(2, vertices):
            total += distance(start, end)
            cumulative_length.append(total)

        if self.req_length is None:
            return

        expected = min(max(self.req_length, 0.0), self.max_length)
        if total == expected:
            return

        # the final entry is always wrong once the length is adjusted
        cumulative_length.pop()
        end_ix = len(vertices) - 1

        if total > expected:
            while cumulative_length and cumulative_length[-1] >= expected:
                cumulative_length.pop()
                vertices.pop()
                end_ix -= 1

        if end_ix <= 0:
            cumulative_length.append(0.0)
            return

        direction = (vertices[end_ix] - vertices[end_ix - 1]).normalize()
        vertices[end_ix] = vertices[end_ix - 1] + direction.scale(
            expected - cumulative_length[-1],
        )
        cumulative_length.append(expected)

    def dist(self):
        """The length of the path in osu! pixels.
        """
        return self._cumulative_length[-1]

    def position_at(self, progress):
        """Compute the position of the curve at ``progress``.

        Parameters
        ----------
        progress : float
            The fraction of the curve's length in the range [0, 1]. Values
            outside of the range are clamped.

        Returns
        -------
        position : Position
            The position of the curve.
        """
        vertices = self._vertices
        if not vertices:
            return Position(0.0, 0.0)

        cumulative_length = self._cumulative_length
        d = min(max(progress, 0.0), 1.0) * cumulative_length[-1]

        ix = bisect.bisect_left(cumulative_length, d)
        if ix <= 0:
            return vertices[0]
        if ix >= len(vertices):
            return vertices[-1]

        start = vertices[ix - 1]
        end = vertices[ix]
        start_length = cumulative_length[ix - 1]
        end_length = cumulative_length[ix]
        if abs(end_length - start_length) < 1e-7:
            return start

        weight = (d - start_length) / (end_length - start_length)
        return start + (end - start).scale(weight)

    def __call__(self, t):
        return self.position_at(t)


class Linear(Curve):
    kinds = 'L'

    def _approximate(self, points, buffers):
        for point in points:
            self._add_vertex(point)


class Bezier(Curve):
    """A piecewise bezier path. A repeated control point starts a new
    segment.
    """
    kinds = 'B'

    def _approximate(self, points, buffers):
        for segment in split_at_dupes(points):
            approximate_bezier(segment, self._add_vertex, buffers)


class Perfect(Curve):
    kinds = 'P'

    tolerance = 0.1

    def _approximate(self, points, buffers):
        if len(points) != 3:
            # osu! uses a bezier curve when there are not exactly 3 points
            approximate_bezier(points, self._add_vertex, buffers)
            return

        try:
            center = get_center(*points)
        except ValueError:
            # we cannot use a perfect curve function for collinear points;
            # osu! also falls back to a bezier here
            approximate_bezier(points, self._add_vertex, buffers)
            return

        for vertex in arc_vertices(*points, center, self.tolerance):
            self._add_vertex(vertex)


class Catmull(Curve):
    kinds = 'C'

    detail = 50

    def _approximate(self, points, buffers):
        detail = self.detail
        last = len(points) - 1
        for i in range(last):
            v1 = points[i - 1] if i > 0 else points[i]
            v2 = points[i]
            v3 = points[i + 1]
            v4 = points[i + 2] if i < last - 1 else v3 + v3 - v2

            for c in range(detail):
                self._add_vertex(catmull_point(v1, v2, v3, v4, c / detail))
                self._add_vertex(
                    catmull_point(v1, v2, v3, v4, (c + 1) / detail),
                )


def get_center(a, b, c):
    """Returns the Position of the center of the circle described by the 3
    points

    Parameters
    ----------
    a, b, c : Position
        The three positions.

    Returns
    -------
    center : Position
        The center of the three points.

    Raises
    ------
    ValueError
        Raised when the points are coincident or collinear.
    """
    a, b, c = np.array([a, b, c], dtype=np.float64)

    a_squared = np.sum(np.square(b - c))
    b_squared = np.sum(np.square(a - c))
    c_squared = np.sum(np.square(a - b))

    if np.isclose([a_squared, b_squared, c_squared], 0).any():
        raise ValueError('coincident points')

    s = a_squared * (b_squared + c_squared - a_squared)
    t = b_squared * (a_squared + c_squared - b_squared)
    u = c_squared * (a_squared + b_squared - c_squared)

    sum_ = s + t + u

    if np.isclose(sum_, 0):
        raise ValueError('collinear points')

    return Position(*((s * a + t * b + u * c) / sum_).tolist())


# huge arcs from nearly collinear points are not sampled any finer
max_arc_vertices = 1000


def arc_vertices(a, b, c, center, tolerance):
    """Sample the circular arc from ``a`` through ``b`` to ``c``.

    Parameters
    ----------
    a, b, c : Position
        The points on the arc.
    center : Position
        The center of the circle through the points.
    tolerance : float
        The maximum distance between the arc and the chords approximating
        it.

    Returns
    -------
    vertices : list[Position]
        The sampled points from ``a`` to ``c``.
    """
    a_offset = np.subtract(a, center)
    c_offset = np.subtract(c, center)
    radius = np.hypot(*a_offset)

    theta_start = math.atan2(a_offset[1], a_offset[0])
    theta_end = math.atan2(c_offset[1], c_offset[0])
    while theta_end < theta_start:
        theta_end += 2 * math.pi

    direction = 1
    theta_range = theta_end - theta_start

    # switch direction if b is not on the arc swept counter-clockwise
    a_to_c = np.subtract(c, a)
    ortho_a_to_c = np.array((a_to_c[1], -a_to_c[0]))
    if np.dot(ortho_a_to_c, np.subtract(b, a)) < 0:
        direction = -direction
        theta_range = 2 * math.pi - theta_range

    if 2 * radius <= tolerance:
        amount = 2
    else:
        amount = max(
            2,
            min(
                max_arc_vertices,
                math.ceil(
                    theta_range / (2 * math.acos(1 - tolerance / radius)),
                ),
            ),
        )

    thetas = theta_start + direction * np.linspace(0, theta_range, amount)
    xs = center.x + radius * np.cos(thetas)
    ys = center.y + radius * np.sin(thetas)
    return [Position(x, y) for x, y in zip(xs.tolist(), ys.tolist())]


def catmull_point(v1, v2, v3, v4, t):
    t2 = t * t
    t3 = t * t2
    return Position(*(
        0.5 * (
            2 * p2 +
            (-p1 + p3) * t +
            (2 * p1 - 5 * p2 + 4 * p3 - p4) * t2 +
            (-p1 + 3 * p2 - 3 * p3 + p4) * t3
        )
        for p1, p2, p3, p4 in zip(v1, v2, v3, v4)
    ))


_bezier_tolerance = 0.25


def _bezier_is_flat_enough(points):
    limit = _bezier_tolerance ** 2 * 4
    for prev, current, next_ in sliding_window(3, points):
        deviation = prev - current.scale(2) + next_
        if deviation.dot(deviation) > limit:
            return False
    return True


def _bezier_subdivide(points, left, right, midpoints):
    """Split a bezier curve at t=0.5 with de Casteljau's algorithm.

    ``left`` and ``right`` receive the control points of the two halves.
    """
    count = len(points)
    midpoints[:] = points

    for i in range(count):
        left[i] = midpoints[0]
        right[count - i - 1] = midpoints[count - i - 1]

        for j in range(count - i - 1):
            midpoints[j] = (midpoints[j] + midpoints[j + 1]).scale(0.5)


def _bezier_approximate(points, add_vertex, buffers):
    count = len(points)
    left = buffers.left
    right = buffers.right
    _bezier_subdivide(points, left, right, buffers.midpoints)

    for i in range(count - 1):
        left[count + i] = right[i + 1]

    add_vertex(points[0])
    for i in range(1, count - 1):
        ix = 2 * i
        add_vertex(
            (left[ix - 1] + left[ix].scale(2) + left[ix + 1]).scale(0.25),
        )


def approximate_bezier(points, add_vertex, buffers):
    """Flatten a bezier curve into line segments by adaptive subdivision.

    Parameters
    ----------
    points : list[Position]
        The control points of one bezier segment.
    add_vertex : callable[Position]
        Called with each vertex of the approximation in order.
    buffers : CurveBuffers
        Scratch storage for the subdivision.
    """
    count = len(points)
    if count == 0:
        return

    buffers.left[:] = [None] * (2 * count - 1)
    buffers.right[:] = [None] * count

    to_flatten = [list(points)]
    free_buffers = []
    left_child = [None] * count

    while to_flatten:
        parent = to_flatten.pop()
        if _bezier_is_flat_enough(parent):
            _bezier_approximate(parent, add_vertex, buffers)
            free_buffers.append(parent)
            continue

        if free_buffers:
            right_child = free_buffers.pop()
        else:
            right_child = [None] * count
        _bezier_subdivide(parent, left_child, right_child, buffers.midpoints)

        parent[:] = left_child
        to_flatten.append(right_child)
        to_flatten.append(parent)

    add_vertex(points[-1])


def split_at_dupes(inp):
    out = []
    oldi = 0
    for i in range(1, len(inp)):
        if inp[i] == inp[i - 1]:
            out.append(inp[oldi:i])
            oldi = i
    out.append(inp[oldi:])
    return out
