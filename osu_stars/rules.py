from collections import namedtuple


class UnknownRuleVersion(KeyError):
    """Raised when looking up a rule version that does not exist.
    """


class RuleVersion(namedtuple('RuleVersion', [
        'name',
        'section_length',
        'scale_section_by_clock_rate',
        'normalize_time_on_creation',
        'legacy_od',
        'legacy_spacing',
        'travel_in_spacing',
        'angle_bonus',
        'speed_hit_window',
        'map_object_counts',
        'difficulty_multiplier'])):
    """The constants and formula switches of one historical star calculation.

    Parameters
    ----------
    name : str
        The name the version is registered under.
    section_length : float
        The width of a strain section in milliseconds.
    scale_section_by_clock_rate : bool
        Multiply the section width by the clock rate. Object times stay in
        map time and only the time between objects is divided by the clock
        rate.
    normalize_time_on_creation : bool
        Divide every object time by the clock rate as soon as it is sampled.
    legacy_od : bool
        Report the overall difficulty with :func:`osu_stars.mod.legacy_od`.
    legacy_spacing : bool
        Use the spacing weight ladder for speed and ``distance ** 0.99`` for
        aim instead of the angle aware formulas.
    travel_in_spacing : bool
        Add the previous slider's travel distance to the jump distance in the
        legacy formulas.
    angle_bonus : bool
        Pair objects in triplets so the strain formulas can use the angle
        between jumps.
    speed_hit_window : bool
        Scale the speed strain time by the great hit window.
    map_object_counts : bool
        Report circle and spinner counts for the whole map instead of only the
        sampled objects.
    difficulty_multiplier : float
        Applied to the square root of each skill's weighted peak sum.
    """


may_2014 = RuleVersion(
    name='may_2014',
    section_length=400.0,
    scale_section_by_clock_rate=True,
    normalize_time_on_creation=False,
    legacy_od=True,
    legacy_spacing=True,
    travel_in_spacing=False,
    angle_bonus=False,
    speed_hit_window=False,
    map_object_counts=False,
    difficulty_multiplier=0.0675,
)

april_2015 = may_2014._replace(
    name='april_2015',
    travel_in_spacing=True,
)

january_2021 = RuleVersion(
    name='january_2021',
    section_length=400.0,
    scale_section_by_clock_rate=True,
    normalize_time_on_creation=False,
    legacy_od=False,
    legacy_spacing=False,
    travel_in_spacing=False,
    angle_bonus=True,
    speed_hit_window=False,
    map_object_counts=False,
    difficulty_multiplier=0.0675,
)

july_2021 = january_2021._replace(
    name='july_2021',
    scale_section_by_clock_rate=False,
    normalize_time_on_creation=True,
    speed_hit_window=True,
    map_object_counts=True,
)

LATEST = july_2021

rule_versions = {
    version.name: version
    for version in (may_2014, april_2015, january_2021, july_2021)
}


def get_rule_version(rules):
    """Look up a rule version.

    Parameters
    ----------
    rules : str or RuleVersion
        The name of the version, or a version which is returned unchanged.

    Returns
    -------
    version : RuleVersion
        The rule version.

    Raises
    ------
    UnknownRuleVersion
        Raised when no version is registered under ``rules``.
    """
    if isinstance(rules, RuleVersion):
        return rules

    try:
        return rule_versions[rules]
    except KeyError:
        raise UnknownRuleVersion(
            f'unknown rule version {rules!r}, expected one of'
            f' {", ".join(rule_versions)}',
        )
