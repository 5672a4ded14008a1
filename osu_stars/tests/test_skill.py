import math

import pytest

from osu_stars.difficulty_object import DifficultyHitObject
from osu_stars.position import Position
from osu_stars.rules import january_2021, july_2021
from osu_stars.sample import HitObjectSample
from osu_stars.skill import Skill, SkillKind


def sample(time, x=0, y=0, travel_distance=0.0):
    position = Position(x, y)
    return HitObjectSample(time, position, position, travel_distance)


def transition(time, prev_time, *, position=(0, 0), prev_position=(0, 0),
               travel_distance=0.0, spinner=False):
    prev = sample(prev_time, *prev_position, travel_distance=travel_distance)
    base = sample(time, *position, travel_distance=None if spinner else 0.0)
    return DifficultyHitObject(base, prev, 1.0)


@pytest.mark.parametrize('peaks', [[4, 2, 1], [1, 2, 4], [2, 4, 1]])
def test_weighted_sum(peaks):
    skill = Skill(SkillKind.aim)
    skill.strain_peaks = peaks

    w = Skill.decay_weight
    assert skill.difficulty_value() == pytest.approx(4 + 2 * w + w ** 2)


def test_no_peaks():
    assert Skill(SkillKind.speed).difficulty_value() == 0


def test_no_peak_before_first_object():
    skill = Skill(SkillKind.speed)
    skill.save_current_peak()
    skill.start_new_section_from(400)
    assert skill.strain_peaks == []


def test_strain_decay():
    assert Skill(SkillKind.speed).strain_decay(1000) == pytest.approx(0.3)
    assert Skill(SkillKind.aim).strain_decay(1000) == pytest.approx(0.15)
    assert Skill(SkillKind.aim).strain_decay(0) == 1


def test_section_peaks():
    skill = Skill(SkillKind.speed)
    skill.process(transition(100, 0, position=(100, 0)))

    first_peak = skill.current_section_peak
    strain = skill.current_strain
    assert first_peak == strain

    for boundary in (400, 800, 1200):
        skill.start_new_section_from(boundary)
    assert len(skill.strain_peaks) == 3

    skill.save_current_peak()
    assert skill.strain_peaks == pytest.approx([
        first_peak,
        strain * 0.3 ** 0.3,
        strain * 0.3 ** 0.7,
        strain * 0.3 ** 1.1,
    ])


def test_process_accumulates():
    skill = Skill(SkillKind.aim, january_2021)
    h = transition(100, 0, position=(100, 0))
    skill.process(h)

    expected = (
        0.15 ** 0.1 +
        skill.strain_value_of(h) * Skill.skill_multiplier[SkillKind.aim]
    )
    assert skill.current_strain == pytest.approx(expected)
    assert skill.current_section_peak == pytest.approx(expected)
    assert skill.prev_time == 100


@pytest.mark.parametrize('kind', list(SkillKind))
@pytest.mark.parametrize('rules', ['may_2014', 'january_2021', 'july_2021'])
def test_spinner_has_no_strain(kind, rules):
    skill = Skill(kind, rules, great_hit_window=31.5)
    h = transition(100, 0, position=(300, 0), spinner=True)
    assert skill.strain_value_of(h) == 0


@pytest.mark.parametrize('distance,weight', [
    (200, 2.5),
    (120, 1.6 + 0.9 * 10 / 15),
    (100, 1.2 + 0.4 * 10 / 20),
    (60, 0.95 + 0.25 * 15 / 45),
    (10, 0.95),
])
def test_legacy_speed_spacing(distance, weight):
    skill = Skill(SkillKind.speed, 'may_2014')
    h = transition(100, 0, position=(distance, 0))
    assert skill.strain_value_of(h) == pytest.approx(weight / 100)


def test_legacy_aim():
    skill = Skill(SkillKind.aim, 'may_2014')
    h = transition(200, 0, position=(100, 0))
    assert skill.strain_value_of(h) == pytest.approx(100 ** 0.99 / 200)


def test_legacy_travel_distance():
    h = transition(100, 0, position=(100, 0), travel_distance=20)

    without_travel = Skill(SkillKind.speed, 'may_2014')
    assert without_travel.strain_value_of(h) == pytest.approx(1.4 / 100)

    with_travel = Skill(SkillKind.speed, 'april_2015')
    assert with_travel.strain_value_of(h) == pytest.approx(2.2 / 100)


def test_short_strain_time_is_floored():
    skill = Skill(SkillKind.aim, 'may_2014')
    h = transition(10, 0, position=(100, 0))
    assert h.strain_time == 50
    assert skill.strain_value_of(h) == pytest.approx(100 ** 0.99 / 50)


def test_modern_aim_without_angle():
    skill = Skill(SkillKind.aim, january_2021)
    h = transition(100, 0, position=(100, 0))
    assert skill.strain_value_of(h) == pytest.approx(100 ** 0.99 / 100)


def test_modern_aim_travel_distance():
    skill = Skill(SkillKind.aim, january_2021)
    h = transition(200, 0, position=(100, 0), travel_distance=100)

    jump = travel = 100 ** 0.99
    combined = jump + travel + math.sqrt(jump * travel)
    assert skill.strain_value_of(h) == pytest.approx(combined / 200)


def test_modern_speed_single_spacing():
    skill = Skill(SkillKind.speed, january_2021)
    h = transition(100, 0, position=(200, 0))
    # the distance is capped at 125
    assert skill.strain_value_of(h) == pytest.approx(1.95 / 100)


def test_modern_speed_bonus():
    skill = Skill(SkillKind.speed, january_2021)
    h = transition(50, 0)

    speed_bonus = 1 + (25 / 40) ** 2
    assert skill.strain_value_of(h) == pytest.approx(
        (1 + (speed_bonus - 1) * 0.75) * 0.95 / 50,
    )


def test_speed_hit_window():
    h = transition(50, 0)

    january = Skill(SkillKind.speed, january_2021)
    july = Skill(SkillKind.speed, july_2021, great_hit_window=50)
    assert july.strain_value_of(h) == pytest.approx(
        january.strain_value_of(h) * 0.92,
    )

    wide_gap = transition(200, 0)
    assert july.strain_value_of(wide_gap) == pytest.approx(
        january.strain_value_of(wide_gap),
    )


def _angled(base_position):
    prev_prev = sample(0, 0, 0)
    prev = sample(100, 100, 0)
    base = sample(200, *base_position)
    return DifficultyHitObject(
        base,
        prev,
        1.0,
        prev_prev=prev_prev,
        prev_values=(100.0, 100.0),
    )


def test_speed_angle_bonus():
    skill = Skill(SkillKind.speed, january_2021)

    straight = _angled((200, 0))
    square = _angled((100, 100))
    assert straight.angle == pytest.approx(math.pi)
    assert square.angle == pytest.approx(math.pi / 2)

    # a right angle sits on the edge of the sharp angle bonus
    assert skill.strain_value_of(square) == pytest.approx(
        skill.strain_value_of(straight) * (1 + 1 / 3.57),
    )


def test_aim_angle_bonus():
    skill = Skill(SkillKind.aim, january_2021)

    h = DifficultyHitObject(
        sample(400, 400, 0),
        sample(200, 200, 0),
        1.0,
        prev_prev=sample(0, 0, 0),
        prev_values=(200.0, 200.0),
    )
    assert h.angle == pytest.approx(math.pi)

    angle_bonus = math.sqrt(110 * math.sin(2 * math.pi / 3) ** 2 * 110)
    result = 1.5 * angle_bonus ** 0.99 / 200
    combined = 200 ** 0.99
    assert skill.strain_value_of(h) == pytest.approx(
        max(result + combined / 200, combined / 200),
    )
