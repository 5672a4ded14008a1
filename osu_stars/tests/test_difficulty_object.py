import math

import pytest

from osu_stars.difficulty_object import DifficultyHitObject
from osu_stars.position import Position
from osu_stars.sample import HitObjectSample


def test_jump_starts_from_the_lazy_end():
    prev = HitObjectSample(0, Position(0, 0), Position(100, 0), 50.0)
    base = HitObjectSample(400, Position(100, 30), Position(100, 30), 0.0)

    h = DifficultyHitObject(base, prev, 2.0)
    assert h.time == 400
    assert h.delta == 400
    assert h.strain_time == 400
    assert h.jump_distance == pytest.approx(60)
    assert h.travel_distance == 50
    assert h.angle is None
    assert h.prev_jump_distance is None
    assert h.prev_strain_time is None


def test_clock_rate():
    prev = HitObjectSample(0, Position(0, 0), Position(0, 0), 0.0)
    base = HitObjectSample(150, Position(0, 0), Position(0, 0), 0.0)

    h = DifficultyHitObject(base, prev, 1.0, clock_rate=1.5)
    assert h.time == 150
    assert h.delta == pytest.approx(100)

    fast = DifficultyHitObject(base, prev, 1.0, clock_rate=6)
    assert fast.delta == pytest.approx(25)
    assert fast.strain_time == 50


def test_spinner():
    prev = HitObjectSample(0, Position(0, 0), Position(0, 0), 0.0)
    center = Position(256, 192)
    spinner = HitObjectSample(100, center, center, None)

    h = DifficultyHitObject(spinner, prev, 1.0)
    assert h.is_spinner
    assert h.jump_distance == 0

    after = HitObjectSample(200, Position(0, 0), Position(0, 0), 0.0)
    h = DifficultyHitObject(after, spinner, 1.0, prev_prev=prev)
    assert h.travel_distance == 0
    assert h.jump_distance == pytest.approx(320)


def test_angle():
    prev_prev = HitObjectSample(0, Position(0, 0), Position(0, 0), 0.0)
    prev = HitObjectSample(100, Position(100, 0), Position(100, 0), 0.0)
    base = HitObjectSample(200, Position(0, 0), Position(0, 0), 0.0)

    h = DifficultyHitObject(
        base,
        prev,
        1.0,
        prev_prev=prev_prev,
        prev_values=(30.0, 75.0),
    )
    # straight back
    assert h.angle == pytest.approx(0)
    assert h.prev_jump_distance == 30
    assert h.prev_strain_time == 75

    base = HitObjectSample(200, Position(100, 100), Position(100, 100), 0.0)
    h = DifficultyHitObject(base, prev, 1.0, prev_prev=prev_prev)
    assert h.angle == pytest.approx(math.pi / 2)


def test_no_angle_after_spinner():
    spinner = HitObjectSample(0, Position(0, 0), Position(0, 0), None)
    prev = HitObjectSample(100, Position(100, 0), Position(100, 0), 0.0)
    base = HitObjectSample(200, Position(0, 0), Position(0, 0), 0.0)

    h = DifficultyHitObject(base, prev, 1.0, prev_prev=spinner)
    assert h.angle is None
