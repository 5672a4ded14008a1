from datetime import timedelta

from hypothesis.strategies import (
    composite,
    floats as _floats,
    integers,
    just,
    lists,
    one_of,
    sampled_from,
    timedeltas as _timedeltas,
)

from osu_stars import (
    Beatmap,
    Circle,
    GameMode,
    Position,
    Slider,
    Spinner,
    TimingPoint,
)


def floats(*args, **kwargs):
    # the reader never produces these
    return _floats(*args, allow_nan=False, allow_infinity=False, **kwargs)


def timedeltas(*, reasonable=False):
    if not reasonable:
        return _timedeltas(
            timedelta(milliseconds=-10000),
            timedelta(hours=1),
        )
    return _timedeltas(timedelta(seconds=2), timedelta(seconds=60))


@composite
def positions(draw, *, reasonable=False):
    if reasonable:
        return Position(
            x=draw(integers(0, Position.x_max)),
            y=draw(integers(0, Position.y_max)),
        )
    return Position(
        x=draw(integers(-10000, 10000)),
        y=draw(integers(-10000, 10000)),
    )


@composite
def timing_points(draw, parent=None):
    if parent is None:
        ms_per_beat = draw(floats(50, 2000))
    else:
        ms_per_beat = draw(floats(-1000, -10))

    return TimingPoint(
        offset=draw(timedeltas()),
        ms_per_beat=ms_per_beat,
        parent=parent,
    )


@composite
def circles(draw, *, reasonable=False):
    return Circle(
        position=draw(positions(reasonable=reasonable)),
        time=draw(timedeltas(reasonable=reasonable)),
    )


@composite
def spinners(draw, *, reasonable=False):
    time = draw(timedeltas(reasonable=reasonable))
    return Spinner(
        position=Position(256, 192),
        time=time,
        end_time=time + draw(timedeltas(reasonable=True)),
    )


@composite
def sliders(draw, *, reasonable=False):
    kind = draw(sampled_from(['L', 'P', 'B', 'C']))
    position = draw(positions(reasonable=reasonable))
    points = [position] + draw(
        lists(positions(reasonable=reasonable), min_size=1, max_size=5),
    )
    return Slider(
        position=position,
        time=draw(timedeltas(reasonable=reasonable)),
        curve_type=kind,
        points=points,
        repeat=draw(integers(1, 5)),
        length=draw(floats(0, 500) if reasonable else floats(0, 2000)),
    )


def hit_objects(reasonable=False):
    return one_of(
        circles(reasonable=reasonable),
        sliders(reasonable=reasonable),
        spinners(reasonable=reasonable),
    )


@composite
def beatmaps(draw, *, reasonable=False):
    parent = draw(timing_points())
    points = [parent]
    points.extend(draw(lists(timing_points(parent=parent), max_size=3)))
    points.sort(key=lambda tp: tp.offset)

    hit_objs = draw(lists(
        hit_objects(reasonable=reasonable),
        min_size=20 if reasonable else 0,
        max_size=50,
    ))
    hit_objs.sort(key=lambda hit_object: hit_object.time)

    od = draw(floats(0, 10))
    return Beatmap(
        format_version=draw(integers(3, 14)),
        mode=GameMode.standard,
        title='title',
        artist='artist',
        creator='creator',
        version='version',
        beatmap_id=draw(integers(1, 4000000) | just(None)),
        hp_drain_rate=draw(floats(0, 10)),
        circle_size=draw(floats(0, 10)),
        overall_difficulty=od,
        approach_rate=draw(floats(0, 10) | just(od)),
        slider_multiplier=draw(floats(0.4, 3.6)),
        slider_tick_rate=draw(floats(0.5, 8)),
        timing_points=points,
        hit_objects=hit_objs,
    )
