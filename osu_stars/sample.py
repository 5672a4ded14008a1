from collections import namedtuple
import math

from .beatmap import Circle, Slider
from .curve import Curve, CurveBuffers
from .utils import clamp


# the tail of a slider is judged this many milliseconds before its real end
LEGACY_LAST_TICK_OFFSET = 36
BASE_SCORING_DISTANCE = 100


class ScratchBuffers:
    """Storage reused by every slider sampled from one beatmap.

    Attributes
    ----------
    ticks : list[float]
        The tick times of a slider's first span.
    curve : CurveBuffers
        The storage the slider's curve is built into.
    """
    def __init__(self):
        self.ticks = []
        self.curve = CurveBuffers()

    def clear(self):
        self.ticks.clear()
        self.curve.clear()


class ObjectCounts:
    """Running totals collected while sampling a beatmap.
    """
    def __init__(self):
        self.n_circles = 0
        self.n_sliders = 0
        self.n_spinners = 0
        self.max_combo = 0

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: circles={self.n_circles}'
            f' sliders={self.n_sliders} spinners={self.n_spinners}'
            f' max_combo={self.max_combo}>'
        )


class LazyCursor(namedtuple('LazyCursor', 'end_position travel_distance')):
    """Where a player's cursor rests while following a slider.

    Parameters
    ----------
    end_position : Position
        The position of the cursor.
    travel_distance : float
        How far the cursor has been dragged so far.
    """


def move_lazy_cursor(state, target, follow_radius):
    """Drag the cursor towards ``target``.

    The cursor only moves when ``target`` leaves the follow circle around it,
    and then only far enough to bring ``target`` back onto the circle's edge.

    Parameters
    ----------
    state : LazyCursor
        The cursor before the move.
    target : Position
        The position of the slider ball.
    follow_radius : float
        The radius of the follow circle.

    Returns
    -------
    state : LazyCursor
        The cursor after the move.
    """
    diff = target - state.end_position
    dist = diff.length()
    if dist <= follow_radius:
        return state

    dist -= follow_radius
    return LazyCursor(
        state.end_position + diff.normalize().scale(dist),
        state.travel_distance + dist,
    )


class HitObjectSample(namedtuple(
        'HitObjectSample',
        'time position end_position travel_distance')):
    """The parts of a hit object that the strain formulas read.

    Parameters
    ----------
    time : float
        The start time of the object in milliseconds.
    position : Position
        Where the object starts.
    end_position : Position
        Where the cursor is left after the object. For a slider this lags
        behind the slider ball.
    travel_distance : float or None
        How far the cursor is dragged while following a slider, scaled like a
        jump. This is 0 for a circle and None for a spinner.
    """

    @property
    def is_spinner(self):
        return self.travel_distance is None

    @classmethod
    def from_hit_object(cls,
                        hit_object,
                        beatmap,
                        radius,
                        scaling_factor,
                        counts,
                        buffers):
        """Sample a hit object.

        Parameters
        ----------
        hit_object : HitObject
            The object to sample.
        beatmap : Beatmap
            The map that owns ``hit_object``.
        radius : float
            The circle radius in osu! pixels.
        scaling_factor : float
            The factor that normalizes distances to the circle size.
        counts : ObjectCounts
            The running totals to update.
        buffers : ScratchBuffers
            Storage to build the slider's curve and ticks into.

        Returns
        -------
        sample : HitObjectSample
            The sampled object.
        """
        time = hit_object.time.total_seconds() * 1000
        position = hit_object.position

        # circle, slider head or spinner
        counts.max_combo += 1

        if isinstance(hit_object, Circle):
            counts.n_circles += 1
            return cls(time, position, position, 0.0)

        if isinstance(hit_object, Slider):
            counts.n_sliders += 1
            state = _sample_slider(
                hit_object,
                time,
                beatmap,
                radius,
                counts,
                buffers,
            )
            return cls(
                time,
                position,
                state.end_position,
                state.travel_distance * scaling_factor,
            )

        counts.n_spinners += 1
        return cls(time, position, position, None)


def _sample_slider(slider, start_time, beatmap, radius, counts, buffers):
    """Follow a slider's ball through every tick, repeat and the tail.

    Returns the final :class:`LazyCursor`.
    """
    buffers.clear()
    ticks = buffers.ticks

    timing = beatmap.slider_timing_at(slider.time)
    scoring_distance = (
        BASE_SCORING_DISTANCE *
        beatmap.slider_multiplier *
        timing.slider_velocity
    )
    if timing.beat_length > 0:
        velocity = scoring_distance / timing.beat_length
    else:
        # a zero, negative or NaN beat length gives the slider no duration
        velocity = 0.0

    follow_radius = radius * 3

    if not timing.generate_ticks or beatmap.slider_tick_rate <= 0:
        tick_distance = math.inf
    else:
        tick_distance = scoring_distance / beatmap.slider_tick_rate
        if beatmap.format_version < 8:
            tick_distance /= timing.slider_velocity

    curve = Curve.from_kind_and_points(
        slider.curve_type,
        slider.points,
        slider.length,
        buffers.curve,
    )

    span_count = max(slider.repeat, 1)
    repeats = span_count - 1

    if velocity > 0:
        total_duration = span_count * curve.dist() / velocity
    else:
        total_duration = 0.0
    span_duration = total_duration / span_count

    state = LazyCursor(slider.position, 0.0)

    def vertex(state, time):
        counts.max_combo += 1

        if span_duration == 0:
            progress = 0.0
        else:
            progress = (time - start_time) / span_duration

        if progress % 2 >= 1:
            progress = 1 - progress % 1
        else:
            progress %= 1

        return move_lazy_cursor(
            state,
            curve.position_at(progress),
            follow_radius,
        )

    length = min(curve.dist(), Curve.max_length)
    tick_distance = clamp(tick_distance, 0.0, length)
    min_distance_from_end = velocity * 10

    if tick_distance != 0:
        current_distance = tick_distance
        while current_distance < length - min_distance_from_end:
            tick_time = (
                start_time + current_distance / length * span_duration
            )
            state = vertex(state, tick_time)
            ticks.append(tick_time)
            current_distance += tick_distance

        for span_ix in range(1, repeats + 1):
            # repeat arrow
            state = vertex(state, start_time + span_duration * span_ix)

            span_offset = span_ix * span_duration
            if span_ix % 2:
                # reverse span; the ticks are met back to front
                base = 2 * start_time + span_duration
                for tick_time in reversed(ticks):
                    state = vertex(state, span_offset + base - tick_time)
            else:
                for tick_time in ticks:
                    state = vertex(state, span_offset + tick_time)

        ticks.clear()

    final_span_start = start_time + repeats * span_duration
    tail_time = max(
        start_time + total_duration / 2,
        final_span_start + span_duration - LEGACY_LAST_TICK_OFFSET,
    )
    return vertex(state, tail_time)
