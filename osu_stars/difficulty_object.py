import math

from .position import distance


class DifficultyHitObject:
    """The transition from one sampled hit object to the next.

    Parameters
    ----------
    base : HitObjectSample
        The object being moved to.
    prev : HitObjectSample
        The object being moved from.
    scaling_factor : float
        The factor that normalizes distances to the circle size.
    clock_rate : float, optional
        Divides the time between the objects. Pass 1 when the sample times
        are already in real time.
    prev_prev : HitObjectSample, optional
        The object before ``prev``. When given, the angle of the transition is
        computed.
    prev_values : tuple[float, float], optional
        The jump distance and strain time of the previous transition.

    Attributes
    ----------
    time : float
        The time of ``base``.
    delta : float
        The time since ``prev`` in milliseconds.
    strain_time : float
        ``delta`` with a floor of 50 milliseconds.
    jump_distance : float
        The scaled distance from where the cursor left ``prev`` to ``base``.
        This is 0 when ``base`` is a spinner.
    travel_distance : float
        The scaled distance the cursor was dragged while following ``prev``.
    angle : float or None
        The angle in radians at ``prev`` between the incoming and outgoing
        movements.
    prev_jump_distance : float or None
        The jump distance of the previous transition.
    prev_strain_time : float or None
        The strain time of the previous transition.
    """
    min_strain_time = 50

    def __init__(self,
                 base,
                 prev,
                 scaling_factor,
                 clock_rate=1.0,
                 prev_prev=None,
                 prev_values=None):
        self.base = base
        self.time = base.time
        self.delta = (base.time - prev.time) / clock_rate
        self.strain_time = max(self.delta, self.min_strain_time)

        if base.is_spinner:
            # spinners do not need to be jumped to
            self.jump_distance = 0.0
        else:
            self.jump_distance = (
                distance(base.position, prev.end_position) * scaling_factor
            )

        self.travel_distance = prev.travel_distance or 0.0

        if prev_prev is None or prev_prev.is_spinner:
            self.angle = None
        else:
            v1 = prev_prev.end_position - prev.position
            v2 = base.position - prev.end_position
            dot = v1.dot(v2)
            det = v1.x * v2.y - v1.y * v2.x
            self.angle = abs(math.atan2(det, dot))

        if prev_values is None:
            self.prev_jump_distance = self.prev_strain_time = None
        else:
            self.prev_jump_distance, self.prev_strain_time = prev_values

    @property
    def is_spinner(self):
        return self.base.is_spinner

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.time:g}ms,'
            f' jump={self.jump_distance:g}, strain_time={self.strain_time:g}>'
        )
