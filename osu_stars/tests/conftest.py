import pytest

from osu_stars import Beatmap


def osu_file(hit_objects,
             *,
             format_version=14,
             mode=0,
             circle_size=4,
             overall_difficulty=8,
             approach_rate=9,
             slider_multiplier=1.4,
             slider_tick_rate=1,
             timing_points=('0,500,4,2,0,50,1,0',)):
    """Render a minimal ``.osu`` file.
    """
    lines = [
        f'osu file format v{format_version}',
        '',
        '[General]',
        f'Mode: {mode}',
        '',
        '[Metadata]',
        'Title:Test',
        'Artist:Tester',
        'Creator:osu_stars',
        'Version:Normal',
        'BeatmapID:1',
        '',
        '[Difficulty]',
        'HPDrainRate:5',
        f'CircleSize:{circle_size}',
        f'OverallDifficulty:{overall_difficulty}',
    ]
    if approach_rate is not None:
        lines.append(f'ApproachRate:{approach_rate}')
    lines.extend([
        f'SliderMultiplier:{slider_multiplier}',
        f'SliderTickRate:{slider_tick_rate}',
        '',
        '[TimingPoints]',
        *timing_points,
        '',
        '[HitObjects]',
        *hit_objects,
    ])
    return '\n'.join(lines) + '\n'


@pytest.fixture
def make_osu_file():
    return osu_file


@pytest.fixture
def make_beatmap():
    def make_beatmap(hit_objects, **kwargs):
        return Beatmap.parse(osu_file(hit_objects, **kwargs))

    return make_beatmap


@pytest.fixture
def three_circles(make_beatmap):
    return make_beatmap(
        [
            '0,0,0,1,0,0:0:0:0:',
            '100,0,500,1,0,0:0:0:0:',
            '100,100,1000,1,0,0:0:0:0:',
        ],
        circle_size=5,
        overall_difficulty=5,
        approach_rate=5,
    )
