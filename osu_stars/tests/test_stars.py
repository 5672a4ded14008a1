import math

import pytest

from osu_stars import (
    DifficultyAttributes,
    LATEST,
    Mod,
    UnknownRuleVersion,
    get_rule_version,
    stars,
)
from osu_stars.rules import rule_versions
from osu_stars.stars import scaling_factor_for


def test_three_circles(three_circles):
    attributes = stars(three_circles)

    assert math.isfinite(attributes.stars)
    assert attributes.stars > 0
    assert attributes.aim_strain >= 0
    assert attributes.speed_strain >= 0
    assert attributes.max_combo == 3
    assert attributes.n_circles == 3
    assert attributes.n_sliders == 0
    assert attributes.n_spinners == 0
    assert attributes.ar == pytest.approx(5)
    assert attributes.od == pytest.approx(5)


def test_star_rating_combines_strains(three_circles):
    attributes = stars(three_circles)

    aim = attributes.aim_strain
    speed = attributes.speed_strain
    expected = aim + speed + abs(aim - speed) / 2
    assert attributes.stars == pytest.approx(expected)


@pytest.mark.parametrize('rules', list(rule_versions))
def test_every_rule_version(three_circles, rules):
    attributes = stars(three_circles, rules=rules)

    assert math.isfinite(attributes.stars)
    assert attributes.stars > 0
    assert attributes.max_combo == 3


@pytest.mark.parametrize('rules', list(rule_versions))
@pytest.mark.parametrize('passed_objects', [-1, 0, 1])
def test_fewer_than_two_objects(three_circles, rules, passed_objects):
    attributes = stars(
        three_circles,
        passed_objects=passed_objects,
        rules=rules,
    )

    assert attributes == DifficultyAttributes(
        ar=attributes.ar,
        od=attributes.od,
    )
    assert attributes.ar == pytest.approx(5)
    assert attributes.od == pytest.approx(5)
    assert attributes.stars == 0
    assert attributes.max_combo == 0


def test_empty_map(make_beatmap):
    attributes = stars(make_beatmap([]))
    assert attributes.stars == 0
    assert attributes.n_circles == 0


def test_deterministic(make_beatmap):
    beatmap = make_beatmap([
        '0,0,0,1,0',
        '200,100,300,2,0,B|250:0|300:100,2,160',
        '256,192,1500,8,0,2500',
        '50,300,3000,1,0',
        '400,300,3200,6,0,P|450:250|500:300,1,120',
        '100,100,3900,1,0',
    ])

    for mods in (0, Mod.double_time, Mod.hard_rock | Mod.hidden):
        first = stars(beatmap, mods)
        second = stars(beatmap, mods)
        assert first == second


def test_object_counts(make_beatmap):
    beatmap = make_beatmap([
        '0,0,0,1,0',
        '200,100,300,2,0,L|300:100,2,100',
        '256,192,1500,8,0,2500',
        '50,300,3000,1,0',
    ])

    attributes = stars(beatmap, rules='january_2021')
    assert attributes.n_circles == 2
    assert attributes.n_sliders == 1
    assert attributes.n_spinners == 1
    # circles and spinner count once, the slider has a repeat and a tail
    assert attributes.max_combo == 2 + 1 + 3


def test_partial_play_counts(three_circles):
    # the newest rules report circles and spinners for the whole map
    latest = stars(three_circles, passed_objects=2)
    assert latest.n_circles == 3
    assert latest.max_combo == 2

    older = stars(three_circles, passed_objects=2, rules='january_2021')
    assert older.n_circles == 2
    assert older.max_combo == 2


def test_double_time_is_harder(three_circles):
    nomod = stars(three_circles)
    double_time = stars(three_circles, Mod.double_time)
    half_time = stars(three_circles, Mod.half_time)

    assert double_time.stars > nomod.stars > half_time.stars
    assert double_time.ar > nomod.ar


def test_legacy_overall_difficulty(make_beatmap):
    beatmap = make_beatmap(
        ['0,0,0,1,0', '100,0,500,1,0'],
        overall_difficulty=8,
    )

    assert stars(beatmap, Mod.double_time, rules='may_2014').od == (
        pytest.approx(9.75)
    )
    # the modern rules derive OD from an 80 ms window
    assert stars(beatmap, Mod.double_time).od == pytest.approx(88 / 9)
    assert stars(beatmap, Mod.double_time, rules='january_2021').od == (
        pytest.approx(88 / 9)
    )


def test_small_circle_bonus():
    assert scaling_factor_for(52) == 1
    assert scaling_factor_for(32) == pytest.approx(52 / 32)
    assert scaling_factor_for(25) == pytest.approx(52 / 25 * 1.1)
    assert scaling_factor_for(29) == pytest.approx(52 / 29 * 1.02)


def test_rules_object(three_circles):
    assert stars(three_circles, rules=LATEST) == stars(three_circles)


def test_unknown_rules(three_circles):
    with pytest.raises(UnknownRuleVersion):
        stars(three_circles, rules='march_2030')

    with pytest.raises(KeyError):
        get_rule_version('march_2030')


def test_rule_versions():
    assert get_rule_version('july_2021') is LATEST
    assert get_rule_version(LATEST) is LATEST

    may = get_rule_version('may_2014')
    april = get_rule_version('april_2015')
    assert not may.travel_in_spacing
    assert april.travel_in_spacing
    assert may._replace(name='april_2015', travel_in_spacing=True) == april


def test_zero_beat_length(make_beatmap):
    beatmap = make_beatmap(
        ['0,0,0,1,0', '0,0,1000,2,0,L|300:0,1,300', '100,100,2000,1,0'],
        timing_points=('0,0,4,2,0,50,1,0',),
    )
    attributes = stars(beatmap)

    assert math.isfinite(attributes.stars)
    assert attributes.n_sliders == 1
