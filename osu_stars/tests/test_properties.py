import math

from hypothesis import given, settings
from hypothesis.strategies import sampled_from

from osu_stars import Curve, stars
from osu_stars.rules import rule_versions
from osu_stars.strategies import beatmaps, floats, positions, sliders


@given(beatmaps(reasonable=True), sampled_from(list(rule_versions)))
@settings(report_multiple_bugs=False, deadline=None, max_examples=50)
def test_stars_are_finite(beatmap, rules):
    attributes = stars(beatmap, rules=rules)

    assert math.isfinite(attributes.stars)
    assert attributes.stars > 0
    assert attributes.aim_strain >= 0
    assert attributes.speed_strain >= 0
    assert attributes.max_combo >= len(beatmap.hit_objects())


@given(beatmaps())
@settings(report_multiple_bugs=False, deadline=None, max_examples=50)
def test_deterministic(beatmap):
    assert stars(beatmap) == stars(beatmap)


@given(beatmaps(), sampled_from([-5, -1, 0, 1]))
@settings(report_multiple_bugs=False, deadline=None, max_examples=25)
def test_fewer_than_two_objects(beatmap, passed_objects):
    attributes = stars(beatmap, passed_objects=passed_objects)

    assert attributes.stars == 0
    assert attributes.max_combo == 0
    assert attributes.n_circles == 0


@given(sliders())
@settings(report_multiple_bugs=False, deadline=None)
def test_curve_matches_declared_length(slider):
    curve = slider.curve
    if len(set(slider.points)) < 2:
        assert curve.dist() == 0
    else:
        assert curve.dist() == min(slider.length, Curve.max_length)


@given(positions(), positions(), floats(1, 5000))
def test_straight_line_end(start, end, length):
    curve = Curve.from_kind_and_points('L', [start, end], length)

    if start == end:
        assert curve.position_at(1) == start
        return

    expected = math.hypot(end.x - start.x, end.y - start.y)
    ratio = length / expected
    tip = curve.position_at(1)
    assert math.isclose(
        tip.x,
        start.x + (end.x - start.x) * ratio,
        abs_tol=1e-6,
        rel_tol=1e-9,
    )
    assert math.isclose(
        tip.y,
        start.y + (end.y - start.y) * ratio,
        abs_tol=1e-6,
        rel_tol=1e-9,
    )
