from collections import namedtuple
import logging
import math

from .difficulty_object import DifficultyHitObject
from .mod import circle_radius, legacy_od, map_attributes
from .rules import LATEST, get_rule_version
from .sample import HitObjectSample, ObjectCounts, ScratchBuffers
from .skill import Skill, SkillKind


NORMALIZED_RADIUS = 52
# circles smaller than this get a bonus to their jump distances
CIRCLE_SIZE_BUFFER_THRESHOLD = 30


class DifficultyAttributes(namedtuple(
        'DifficultyAttributes',
        [
            'aim_strain',
            'speed_strain',
            'ar',
            'od',
            'n_circles',
            'n_sliders',
            'n_spinners',
            'stars',
            'max_combo',
        ],
        defaults=(0.0, 0.0, 0.0, 0.0, 0, 0, 0, 0.0, 0))):
    """The difficulty of a beatmap.

    Parameters
    ----------
    aim_strain : float
        The aim component of the star rating.
    speed_strain : float
        The speed component of the star rating.
    ar : float
        The mod adjusted approach rate.
    od : float
        The mod adjusted overall difficulty.
    n_circles : int
        The number of circles.
    n_sliders : int
        The number of sliders.
    n_spinners : int
        The number of spinners.
    stars : float
        The star rating.
    max_combo : int
        The highest reachable combo.
    """


def scaling_factor_for(radius):
    """The factor that normalizes distances to a circle of radius 52.

    Parameters
    ----------
    radius : float
        The circle radius in osu! pixels.

    Returns
    -------
    scaling_factor : float
        The distance scaling factor, including a bonus of up to 10% for
        circles smaller than 30 pixels.
    """
    scaling_factor = NORMALIZED_RADIUS / radius
    if radius < CIRCLE_SIZE_BUFFER_THRESHOLD:
        scaling_factor *= 1 + min(
            CIRCLE_SIZE_BUFFER_THRESHOLD - radius,
            5,
        ) / 50
    return scaling_factor


def stars(beatmap, mods=0, passed_objects=None, rules=LATEST):
    """Compute the star rating of a beatmap.

    Parameters
    ----------
    beatmap : Beatmap
        The beatmap to rate.
    mods : int, optional
        The mod mask to rate the map with.
    passed_objects : int, optional
        Only rate this many objects from the start of the map, for example
        when a play failed part way through. Counts below 2, including
        negative counts, rate nothing.
    rules : str or RuleVersion, optional
        Which version of the star rating formulas to use.

    Returns
    -------
    attributes : DifficultyAttributes
        The difficulty attributes. When fewer than two objects are rated only
        ``ar`` and ``od`` are filled in.

    Raises
    ------
    UnknownRuleVersion
        Raised when ``rules`` does not name a known version.
    ValueError
        Raised when a slider has an unknown curve type.
    """
    rules = get_rule_version(rules)
    hit_objects = beatmap.hit_objects()
    if passed_objects is not None:
        # a negative count would slice from the end of the map
        hit_objects = hit_objects[:max(passed_objects, 0)]

    attributes = map_attributes(beatmap, mods)
    clock_rate = attributes.clock_rate
    if rules.legacy_od:
        od = legacy_od(beatmap.overall_difficulty, clock_rate, mods)
    else:
        od = attributes.od

    if len(hit_objects) < 2:
        return DifficultyAttributes(ar=attributes.ar, od=od)

    radius = circle_radius(attributes.cs)
    scaling_factor = scaling_factor_for(radius)

    section_length = rules.section_length
    if rules.scale_section_by_clock_rate:
        section_length *= clock_rate

    if rules.normalize_time_on_creation:
        # sample times are already divided by the clock rate
        difficulty_clock_rate = 1.0
    else:
        difficulty_clock_rate = clock_rate

    counts = ObjectCounts()
    buffers = ScratchBuffers()

    def sample_objects():
        for hit_object in hit_objects:
            sample = HitObjectSample.from_hit_object(
                hit_object,
                beatmap,
                radius,
                scaling_factor,
                counts,
                buffers,
            )
            if rules.normalize_time_on_creation:
                sample = sample._replace(time=sample.time / clock_rate)
            yield sample

    aim = Skill(SkillKind.aim, rules)
    speed = Skill(SkillKind.speed, rules, attributes.great_hit_window)

    samples = sample_objects()
    prev_prev = None
    prev = next(samples)
    prev_values = None

    # the first object has no predecessor so it only anchors the sections
    current_section_end = (
        math.ceil(prev.time / section_length) * section_length
    )
    first = True

    for current in samples:
        h = DifficultyHitObject(
            current,
            prev,
            scaling_factor,
            clock_rate=difficulty_clock_rate,
            prev_prev=prev_prev if rules.angle_bonus else None,
            prev_values=prev_values if rules.angle_bonus else None,
        )

        while h.time > current_section_end:
            if not first:
                aim.start_new_section_from(current_section_end)
                speed.start_new_section_from(current_section_end)
            current_section_end += section_length
        first = False

        aim.process(h)
        speed.process(h)

        prev_prev = prev
        prev_values = h.jump_distance, h.strain_time
        prev = current

    aim.save_current_peak()
    speed.save_current_peak()

    aim_strain = (
        math.sqrt(aim.difficulty_value()) * rules.difficulty_multiplier
    )
    speed_strain = (
        math.sqrt(speed.difficulty_value()) * rules.difficulty_multiplier
    )
    star_rating = (
        aim_strain + speed_strain + abs(aim_strain - speed_strain) / 2
    )

    if rules.map_object_counts:
        n_circles = len(beatmap.hit_objects(sliders=False, spinners=False))
        n_spinners = len(beatmap.hit_objects(circles=False, sliders=False))
    else:
        n_circles = counts.n_circles
        n_spinners = counts.n_spinners

    logging.debug(
        f'rated {len(hit_objects)} objects of {beatmap.display_name!r} with'
        f' {rules.name} rules at {clock_rate}x: aim={aim_strain:.4f}'
        f' speed={speed_strain:.4f} stars={star_rating:.4f}',
    )

    return DifficultyAttributes(
        aim_strain=aim_strain,
        speed_strain=speed_strain,
        ar=attributes.ar,
        od=od,
        n_circles=n_circles,
        n_sliders=counts.n_sliders,
        n_spinners=n_spinners,
        stars=star_rating,
        max_combo=counts.max_combo,
    )
